"""Validation values and validator factories.

Validation functions return ``(warning, error)``; see ``errors`` for the
aggregate type and ``validators`` for validators built from Pydantic models.
"""

from .errors import (
    AnalysisAwareError,
    FieldError,
    MultiError,
    ValidationWarning,
    append_error,
    iter_errors,
)
from .validators import check_resource_name, pydantic_validator

__all__ = [
    "AnalysisAwareError",
    "FieldError",
    "MultiError",
    "ValidationWarning",
    "append_error",
    "iter_errors",
    "check_resource_name",
    "pydantic_validator",
]
