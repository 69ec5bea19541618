"""
routewatch/checks/schemas.py

Pydantic schemas for the JSON bodies the target server is expected to return,
and a validator that returns a typed result instead of raising.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError, field_validator


class HealthResponse(BaseModel):
    """GET /api/health"""
    status: Literal["healthy", "warning", "critical"]


class UserCountsResponse(RootModel[list[Any]]):
    """GET /api/organizations/user-counts"""


class LgpdTermsResponse(BaseModel):
    """GET /api/lgpd/terms"""
    version: Literal["1.0"]


class PrivacyPolicyContent(BaseModel):
    title: str

    @field_validator("title")
    @classmethod
    def title_mentions_privacy(cls, value: str) -> str:
        if "PRIVACIDADE" not in value.upper():
            raise ValueError("privacy policy title must mention PRIVACIDADE")
        return value


class LgpdPrivacyPolicyResponse(BaseModel):
    """GET /api/lgpd/privacy-policy"""
    content: PrivacyPolicyContent


class LgpdSuccessResponse(BaseModel):
    """POST /api/lgpd/consent and POST /api/lgpd/request-deletion"""
    success: Literal[True]


class LgpdMyDataResponse(BaseModel):
    """GET /api/lgpd/my-data"""
    model_config = ConfigDict(populate_by_name=True)

    personal_data: dict[str, Any] = Field(alias="personalData")
    lgpd_compliance: dict[str, Any] = Field(alias="lgpdCompliance")

    @field_validator("personal_data", "lgpd_compliance")
    @classmethod
    def not_empty(cls, value: dict[str, Any]) -> dict[str, Any]:
        if not value:
            raise ValueError("must not be empty")
        return value


class ValidationSuccess(BaseModel):
    """The payload matched the schema."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    value: BaseModel

    @property
    def ok(self) -> bool:
        return True


class ValidationFailure(BaseModel):
    """The payload did not match the schema."""
    schema_name: str
    errors: list[str]

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        return f"{self.schema_name}: " + "; ".join(self.errors)


def validate_payload(schema: type[BaseModel], payload: Any) -> ValidationSuccess | ValidationFailure:
    """
    Validate a decoded JSON payload against a schema.

    Args:
        schema: The expected response model.
        payload: Decoded JSON (dict, list, scalar).

    Returns:
        ValidationSuccess with the parsed model, or ValidationFailure with
        one "location: message" string per error.
    """
    try:
        return ValidationSuccess(value=schema.model_validate(payload))
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
            for error in e.errors()
        ]
        return ValidationFailure(schema_name=schema.__name__, errors=errors)
