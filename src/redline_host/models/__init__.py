"""
Data Models
===========

Pydantic models and result values for the native host.

Models:
    Input:
        - FeedbackRequest: Save request from the extension
        - FeedbackMetadata: Free-form capture metadata

    Output:
        - SaveResponse / ErrorResponse: Wire responses
        - LatestIndex: Record stored in latest.json
        - SaveResult: Outcome of one store call

    Errors:
        - ErrorKind: Machine-readable failure kinds
        - Failure: Failure value passed between components
        - FeedbackError: Exception raised inside a component
"""

from redline_host.models.error_kinds import ErrorKind, Failure, FeedbackError
from redline_host.models.request import FeedbackMetadata, FeedbackRequest
from redline_host.models.response import ErrorResponse, LatestIndex, SaveResponse, SaveResult

__all__ = [
    # Input
    "FeedbackRequest",
    "FeedbackMetadata",
    # Output
    "SaveResponse",
    "ErrorResponse",
    "LatestIndex",
    "SaveResult",
    # Errors
    "ErrorKind",
    "Failure",
    "FeedbackError",
]
