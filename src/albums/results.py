"""Conversion of domain errors into operation results."""

from __future__ import annotations

from core.errors import AlbumsError
from core.logging_config import get_logger
from core.types import OperationResult

_LOGGER = get_logger(__name__)


def failure_result(event: str, error: AlbumsError, **fields: object) -> OperationResult:
    """Log a failed operation and wrap the error into a result.

    Args:
        event: Log event name.
        error: Domain error that stopped the operation.
        fields: Extra structured log fields.

    Returns:
        Failed operation result.
    """
    _LOGGER.error(event, error=str(error), error_type=type(error).__name__, **fields)
    return OperationResult.failure(str(error))
