"""
Exception hierarchy for the Medico backend.

Every error carries a machine-readable ``code`` and optional ``details`` so
routers can hand them to clients unchanged.
"""

from typing import Optional, Dict, Any


class MedicoError(Exception):
    """Base exception for all Medico errors."""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "MEDICO_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class AIServiceError(MedicoError):
    """The AI request failed or returned something unusable."""

    status_code = 502

    def __init__(
        self,
        message: str,
        task: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="AI_SERVICE_ERROR",
            details={"task": task, **(details or {})}
        )
        self.task = task


class ReportAnalysisError(AIServiceError):
    """A medical report image could not be analyzed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, task="report_analysis", details=details)
        self.code = "REPORT_ANALYSIS_ERROR"


class StorageError(MedicoError):
    """The key-value store rejected a read or write."""

    status_code = 503

    def __init__(self, message: str, key: str = "", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code="STORAGE_ERROR",
            details={"key": key, **(details or {})}
        )
        self.key = key


class NotFoundError(MedicoError):
    """A stored item addressed by id does not exist."""

    status_code = 404

    def __init__(self, message: str, item_id: str = "", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            details={"id": item_id, **(details or {})}
        )
        self.item_id = item_id
