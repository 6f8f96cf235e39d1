# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 17 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the compiler and drivers.
"""

from dbx.config.defaults import (
    CompilerDefaults,
    ConnectionDefaults,
    FreshnessDefaults,
    Defaults,
    get_defaults,
)

__all__ = [
    "CompilerDefaults",
    "ConnectionDefaults",
    "FreshnessDefaults",
    "Defaults",
    "get_defaults",
]
