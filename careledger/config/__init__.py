"""
Configuration module for the billing core.
"""
from .logging_config import (
    JSONFormatter,
    LoggingConfig,
    configure_logging,
    get_logger,
    reset_logging,
)
from .settings import (
    CareLedgerConfig,
    get_config,
    load_config,
    reload_config
)

__all__ = [
    'CareLedgerConfig',
    'JSONFormatter',
    'LoggingConfig',
    'configure_logging',
    'get_config',
    'get_logger',
    'load_config',
    'reload_config',
    'reset_logging',
]
