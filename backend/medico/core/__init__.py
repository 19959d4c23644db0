"""Core module - logging setup and shared exceptions."""

from .exceptions import MedicoError, AIServiceError, ReportAnalysisError, StorageError, NotFoundError
from .logging_config import setup_logging, LoggerAdapter

__all__ = [
    'MedicoError', 'AIServiceError', 'ReportAnalysisError', 'StorageError', 'NotFoundError',
    'setup_logging', 'LoggerAdapter',
]
