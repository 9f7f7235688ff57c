from .config import config
from .db import db, session_scope
from .logging_setup import logger, get_logger
from .exceptions import (
    SeederError, ConfigError, DatabaseError, ValidationError,
    SeedingError, HistoryError, ForecastError, BatchProcessError
)

__version__ = '1.0.0'

__all__ = [
    'config',
    'db',
    'session_scope',
    'logger',
    'get_logger',
    'SeederError',
    'ConfigError',
    'DatabaseError',
    'ValidationError',
    'SeedingError',
    'HistoryError',
    'ForecastError',
    'BatchProcessError'
]
