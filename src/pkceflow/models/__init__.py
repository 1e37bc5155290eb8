"""
Models package.

Contains shared Pydantic models used by the HTTP layer.
"""

from pkceflow.models.errors import ProblemDetail, ValidationErrorDetail

__all__ = [
    "ProblemDetail",
    "ValidationErrorDetail",
]
