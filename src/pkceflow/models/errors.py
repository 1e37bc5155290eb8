"""Error response models following RFC 7807 Problem Details."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# RFC status code to section mapping
status_to_section: dict[int, str] = {
    400: "6.5.1",
    404: "6.5.4",
    422: "https://datatracker.ietf.org/doc/html/rfc4918#section-11.2",
    500: "6.6.1",
    502: "6.6.3",
    503: "6.6.4",
    504: "6.6.5",
}


def get_rfc_section_url(status: int) -> str:
    """Get the RFC section URL for a given HTTP status code.

    Args:
        status: The HTTP status code.

    Returns:
        The URL to the corresponding section in the RFC.
    """
    base_url = "https://datatracker.ietf.org/doc/html/rfc7231#section-"
    section = status_to_section.get(status)
    if section is None:
        return f"{base_url}6.6.1"  # Default to 500 Internal Server Error
    if section.startswith("https://"):
        return section
    return f"{base_url}{section}"


class ValidationErrorDetail(BaseModel):
    """Validation error detail for a specific field.

    Attributes:
        type: Error type (e.g., "missing").
        loc: Location of the error in the request (e.g., ["query", "state"]).
        msg: Human-readable error message.
        input: The invalid input value that caused the error.
    """

    type: str = Field(..., description="Error type")
    loc: tuple[str, ...] = Field(..., description="Error location in request")
    msg: str = Field(..., description="Human-readable error message")
    input: Any = Field(None, description="Invalid input value")


class ProblemDetail(BaseModel):
    """Problem Detail response as defined in RFC 7807.

    Attributes:
        type: URI reference to the problem type (auto-generated from status).
        title: Short, human-readable summary of the problem type.
        status: HTTP status code.
        detail: Human-readable explanation specific to this occurrence.
        instance: URI reference identifying the specific occurrence.
        errors: List of validation errors (for 422 responses).
        oauth_error: OAuth error code reported by the provider, if any.

    Example:
        ```python
        problem = ProblemDetail(
            title="Unknown authorization state",
            status=400,
            detail="Unknown or expired authorization state",
            instance="/oauth/callback/github",
        )
        ```
    """

    model_config = ConfigDict(extra="allow")

    type: str | None = Field(
        default=None,
        description="URI reference to the problem type (RFC 7807)",
    )
    title: str = Field(..., description="Short, human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: str | None = Field(default=None, description="Human-readable explanation")
    instance: str | None = Field(
        default=None,
        description="URI reference identifying this occurrence",
        json_schema_extra={"example": "/oauth/callback/github"},
    )
    errors: list[ValidationErrorDetail] | None = Field(
        default=None, description="Validation errors (for 422 responses)"
    )
    oauth_error: str | None = Field(
        default=None,
        description="OAuth error code (RFC 6749 section 5.2)",
        json_schema_extra={"example": "invalid_grant"},
    )

    @model_validator(mode="before")
    @classmethod
    def set_default_type(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Set the default type based on the status if not provided."""
        if "type" not in values or values["type"] is None:
            status = values.get("status", 500)
            values["type"] = get_rfc_section_url(status)
        return values
