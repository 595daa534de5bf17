"""Pydantic schemas for user signatures."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SignatureCreate(BaseModel):
    """Create a new signature.

    Blank titles/bodies are rejected by the service so the error can be
    reported per field; only length limits are enforced here.
    """
    title: str = Field(..., max_length=125)
    body: str = Field(..., max_length=50000)
    is_default: bool = False


class SignatureUpdate(BaseModel):
    """Update a signature. Omitted fields are left unchanged."""
    title: str | None = Field(None, max_length=125)
    body: str | None = Field(None, max_length=50000)
    is_default: bool | None = None


class SignatureRead(BaseModel):
    """Signature response schema."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    body: str
    is_default: bool
    display_title: str
    created_at: datetime
    updated_at: datetime


class SignatureListItem(BaseModel):
    """Signature list item (id + display title)."""
    id: int
    display_title: str


class SignatureErrorResponse(BaseModel):
    """Per-field validation errors for signature writes."""
    errors: dict[str, str]
