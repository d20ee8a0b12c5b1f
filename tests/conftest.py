"""
Test Suite Configuration
"""
from datetime import date
from typing import Any, Dict, List

import pytest

from opsreport.config import ReportingSettings, Settings
from opsreport.reports import Dataset, InMemoryRecordSource, ReportParams


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def reporting_settings() -> ReportingSettings:
    """Reporting thresholds at their defaults"""
    return ReportingSettings()


@pytest.fixture
def trip_rows() -> List[Dict[str, Any]]:
    """Collection trips for January 2024; the last one is hand-entered and incomplete"""
    return [
        {
            "date": "2024-01-05", "collection_number": "C-001", "route_id": "1",
            "route_label": "North", "vehicle_label": "TN01", "driver_label": "Asha",
            "helper_label": "Ravi", "total_weight": 100, "total_bags": 10,
            "start_km": 1000, "end_km": 1050, "status": "completed",
        },
        {
            "date": "2024-01-05", "collection_number": "C-002", "route_id": "2",
            "route_label": "South", "vehicle_label": "TN02", "driver_label": "Bala",
            "helper_label": None, "total_weight": 50.0, "total_bags": 5,
            "start_km": 2000, "end_km": 2025, "status": "completed",
        },
        {
            "date": "2024-01-06", "collection_number": "C-003", "route_id": "1",
            "route_label": "North", "vehicle_label": "TN01", "driver_label": "Asha",
            "helper_label": "Ravi", "total_weight": "150", "total_bags": "15",
            "start_km": 1050, "end_km": 1100, "status": "completed",
        },
        {
            "date": "2024-01-07", "collection_number": "C-004", "route_id": None,
            "route_label": None, "vehicle_label": "TN03", "driver_label": "",
            "helper_label": None, "total_weight": None, "total_bags": None,
            "start_km": None, "end_km": None, "status": "pending",
        },
    ]


@pytest.fixture
def fuel_rows() -> List[Dict[str, Any]]:
    return [
        {"date": "2024-01-05", "vehicle_label": "TN01", "liters": 20, "price_per_liter": 100, "total_amount": 2000},
        {"date": "2024-01-06", "vehicle_label": "TN01", "liters": 10, "price_per_liter": 110, "total_amount": 1100},
        {"date": "2024-01-06", "vehicle_label": "TN02", "liters": 5, "price_per_liter": 104, "total_amount": 520},
    ]


@pytest.fixture
def invoice_rows() -> List[Dict[str, Any]]:
    """Invoices for Q1 2024, aged as of 2024-04-01"""
    return [
        {
            "date": "2024-01-01", "invoice_number": "INV-1", "customer_id": "c1",
            "customer_label": "Acme", "subtotal": 900, "total_amount": 1000,
            "paid_amount": 0, "credit_period_days": 30,
        },
        {
            "date": "2024-03-01", "invoice_number": "INV-2", "customer_id": "c2",
            "customer_label": "Beta", "subtotal": 450, "total_amount": 500,
            "paid_amount": 200, "credit_period_days": 0,
        },
        {
            "date": "2024-03-20", "invoice_number": "INV-3", "customer_id": "c1",
            "customer_label": "Acme", "subtotal": 360, "total_amount": 400,
            "paid_amount": 400, "credit_period_days": 30,
        },
        {
            "date": "2024-03-25", "invoice_number": "INV-4", "customer_id": "c3",
            "customer_label": "Gamma", "subtotal": 225, "total_amount": 250,
            "paid_amount": None, "credit_period_days": 45,
        },
    ]


@pytest.fixture
def payment_rows() -> List[Dict[str, Any]]:
    return [
        {"date": "2024-03-05", "customer_id": "c2", "customer_label": "Beta", "amount": 200},
        {"date": "2024-03-21", "customer_id": "c1", "customer_label": "Acme", "amount": 400},
    ]


@pytest.fixture
def stock_rows() -> List[Dict[str, Any]]:
    """One item in each stock status"""
    return [
        {"code": "RM-1", "name": "Resin", "category": "Raw", "current_quantity": 0, "minimum_quantity": 10, "rate": 50},
        {"code": "RM-2", "name": "Pigment", "category": "Raw", "current_quantity": 5, "minimum_quantity": 10, "rate": 20},
        {"code": "RM-3", "name": "Film", "category": "Raw", "current_quantity": 14, "minimum_quantity": 10, "rate": 10},
        {"code": "FG-1", "name": "Bag", "category": "Finished", "current_quantity": 100, "minimum_quantity": 0, "rate": 2},
    ]


@pytest.fixture
def vehicle_rows() -> List[Dict[str, Any]]:
    """Vehicle documents judged against 2024-01-01"""
    return [
        {"registration": "TN01", "insurance_expiry": "2024-01-15", "fitness_expiry": "2024-03-01"},
        {"registration": "TN02", "insurance_expiry": "2023-12-31", "fitness_expiry": None},
        {"registration": "TN03", "insurance_expiry": date(2024, 6, 30), "fitness_expiry": "2024-02-15"},
    ]


@pytest.fixture
def purchase_rows() -> List[Dict[str, Any]]:
    return [
        {"date": "2024-01-03", "supplier_label": "Polymers Ltd", "total_amount": 5000, "status": "received"},
        {"date": "2024-01-10", "supplier_label": "Inks Co", "total_amount": 1200, "status": "received"},
        {"date": "2024-01-12", "supplier_label": "Polymers Ltd", "total_amount": 3000, "status": "ordered"},
    ]


@pytest.fixture
def production_rows() -> List[Dict[str, Any]]:
    return [
        {
            "date": "2024-01-05", "product_label": "Carry Bag", "shift": "morning",
            "operator_label": "Mani", "quantity_produced": 500, "status": "completed",
        },
        {
            "date": "2024-01-05", "product_label": "Garbage Bag", "shift": "night",
            "operator_label": "Kumar", "quantity_produced": 300, "status": "in_progress",
        },
        {
            "date": "2024-01-06", "product_label": "Carry Bag", "shift": "morning",
            "operator_label": "Mani", "quantity_produced": 200, "status": "Completed",
        },
    ]


@pytest.fixture
def attendance_rows() -> List[Dict[str, Any]]:
    return [
        {"date": "2024-01-05", "employee_label": "Asha", "department": "Collection", "status": "present"},
        {"date": "2024-01-05", "employee_label": "Bala", "department": "Collection", "status": "absent"},
        {"date": "2024-01-05", "employee_label": "Mani", "department": "Production", "status": "half_day"},
        {"date": "2024-01-06", "employee_label": "Kumar", "department": "Production", "status": "leave"},
        {"date": "2024-01-06", "employee_label": "Ravi", "department": None, "status": None},
    ]


@pytest.fixture
def january() -> ReportParams:
    """Report window covering January 2024"""
    return ReportParams(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))


@pytest.fixture
def first_quarter() -> ReportParams:
    """Q1 2024, with aging as of 2024-04-01"""
    return ReportParams(
        start_date=date(2024, 1, 1),
        end_date=date(2024, 3, 31),
        as_of_date=date(2024, 4, 1),
    )


@pytest.fixture
def record_source(
    trip_rows,
    fuel_rows,
    invoice_rows,
    payment_rows,
    stock_rows,
    vehicle_rows,
    purchase_rows,
    production_rows,
    attendance_rows,
) -> InMemoryRecordSource:
    """In-memory source loaded with every sample dataset"""
    return InMemoryRecordSource({
        Dataset.COLLECTION_TRIPS: trip_rows,
        Dataset.FUEL_ENTRIES: fuel_rows,
        Dataset.INVOICES: invoice_rows,
        Dataset.PAYMENTS: payment_rows,
        Dataset.STOCK_ITEMS: stock_rows,
        Dataset.VEHICLE_DOCUMENTS: vehicle_rows,
        Dataset.PURCHASES: purchase_rows,
        Dataset.PRODUCTION_BATCHES: production_rows,
        Dataset.ATTENDANCE: attendance_rows,
    })
