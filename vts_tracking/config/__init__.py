"""Configuration module."""

from vts_tracking.config.constants import VTS, VTSConstants
from vts_tracking.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "VTS", "VTSConstants"]
