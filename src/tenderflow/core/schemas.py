"""
Pydantic request models for service input.

Every service call validates its arguments through one of these models
before a transaction is opened. A failed model raises InvalidArgumentError
(not pydantic's ValidationError), so callers only deal with the TenderFlow
error taxonomy.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from tenderflow.errors import InvalidArgumentError

from .types import (
    DEFAULT_LIMIT,
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    AuthorType,
    BidStatus,
    Decision,
    ServiceType,
    TenderStatus,
)

# Lengths count code points, not bytes
Name = Annotated[str, Field(min_length=1, max_length=NAME_MAX_LENGTH)]
Description = Annotated[str, Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)]
Identifier = Annotated[str, Field(min_length=1, max_length=100)]


def _summarize(error: ValidationError) -> str:
    parts = []
    for it in error.errors(include_url=False):
        loc = ".".join(str(x) for x in it.get("loc") or ()) or "input"
        parts.append(f"{loc}: {it.get('msg') or 'Invalid value'}")
    return "; ".join(parts)


class RequestModel(BaseModel):
    """Immutable input model that fails with InvalidArgumentError."""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="wrap")
    @classmethod
    def _raise_invalid_argument(cls, data: Any, handler: Any) -> Any:
        try:
            return handler(data)
        except ValidationError as e:
            summary = _summarize(e)
            raise InvalidArgumentError(f"Invalid input ({summary})", details=summary) from e


# =============================================================================
# Creation
# =============================================================================


class TenderCreate(RequestModel):
    name: Name
    description: Description
    service_type: ServiceType
    organization_id: Identifier


class Authorship(RequestModel):
    """Who places a bid."""

    author_type: AuthorType
    author_id: Identifier


class BidCreate(Authorship):
    name: Name
    description: Description
    tender_id: Identifier


# =============================================================================
# Patches
# =============================================================================


class _Patch(RequestModel):
    """Partial update where None or an empty string leaves a field unchanged."""

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_unchanged(cls, v: Any) -> Any:
        return None if v == "" else v

    def changes(self) -> dict[str, Any]:
        """Return only the fields that carry a new value."""
        return self.model_dump(mode="json", exclude_none=True)


class TenderPatch(_Patch):
    name: Name | None = None
    description: Description | None = None
    service_type: ServiceType | None = None


class BidPatch(_Patch):
    name: Name | None = None
    description: Description | None = None


# =============================================================================
# Status, rollback and decisions
# =============================================================================


class TenderStatusUpdate(RequestModel):
    status: TenderStatus


class BidStatusUpdate(RequestModel):
    status: BidStatus


class Verdict(RequestModel):
    decision: Decision


class Rollback(RequestModel):
    # strict keeps True/False from passing as 1/0
    version: int = Field(ge=1, strict=True)


# =============================================================================
# Listing
# =============================================================================


class Page(RequestModel):
    """Limit 0 means no cap."""

    limit: int = Field(default=DEFAULT_LIMIT, ge=0)
    offset: int = Field(default=0, ge=0)


class TenderFilter(Page):
    service_types: list[ServiceType] = Field(default_factory=list)
