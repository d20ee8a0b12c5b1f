"""
Operations Reporting Engine
Configuration Module
"""
from .settings import MonitoringSettings, ReportingSettings, Settings, get_settings

__all__ = ["MonitoringSettings", "ReportingSettings", "Settings", "get_settings"]
