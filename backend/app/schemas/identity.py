"""Identity Profile Schema - the one resource type whose payload is validated.

Invariants:
    - name and key are non-empty after stripping whitespace
    - "publicKey" is accepted as an alias of "key"
    - Unknown fields are ignored, not rejected

Design Decisions:
    - field_validator for side-effect-free transforms (strip), same as request schemas
"""

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from app.core.errors import InvalidPayloadError


class IdentityProfile(BaseModel):
    """Decoded `data` record of a user/instance resource."""
    name: str = Field(min_length=1)
    key: str = Field(
        min_length=1, validation_alias=AliasChoices("key", "publicKey"),
    )

    @field_validator("name", "key")
    @classmethod
    def strip_value(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("value cannot be empty or whitespace")
        return v


def parse_identity_profile(payload: bytes) -> IdentityProfile:
    """Validate a request body as an identity profile or raise InvalidPayloadError."""
    try:
        return IdentityProfile.model_validate_json(payload)
    except ValidationError as e:
        raise InvalidPayloadError(
            "Identity profile requires non-empty 'name' and 'key'",
            details=_validation_details(e),
        ) from e


def _validation_details(exc: ValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
