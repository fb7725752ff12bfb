"""
Configuration for the Auto-Proxy rule engine.

This module provides the engine settings, which the host builds from its own
stored values, and the logging setup used by host applications.
"""

from .engine_settings import EngineSettings
from .logging_setup import setup_logging

__all__ = ['EngineSettings', 'setup_logging']
