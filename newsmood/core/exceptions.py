"""Exception hierarchy for the news sentiment pipeline."""

from typing import Any, Dict, Optional


class NewsmoodError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context
        }


class NewsAPIError(NewsmoodError):
    """The news API answered with an error envelope or a non-200 status."""

    def __init__(self, code: str, message: str, http_status: Optional[int] = None):
        context = {'code': code, 'http_status': http_status}
        super().__init__(f"News API error [{code}]: {message}", error_code=code, context=context)
        self.code = code
        self.http_status = http_status


class QueryValidationError(NewsmoodError, ValueError):
    """Request parameters rejected before any network call."""

    def __init__(self, message: str, parameter: Optional[str] = None):
        super().__init__(message, context={'parameter': parameter})
        self.parameter = parameter
