"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Base model exposing camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CreateLinkRequest(CamelModel):
    """Request to create a short link.

    Both fields are optional at the schema level so the registry can report
    a missing or malformed value as a 400 rather than a validation error.
    """

    target_url: Optional[Any] = Field(None, description="Absolute URL to redirect to")
    code: Optional[Any] = Field(None, description="Optional custom short code (6-8 alphanumeric characters)")

    @field_validator("code")
    @classmethod
    def blank_code_is_omitted(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"targetUrl": "https://example.com/very/long/path/to/resource"},
                {"targetUrl": "https://github.com/user/repo", "code": "myrepo1"},
            ]
        },
    )


class LinkResponse(CamelModel):
    """Full link record."""

    id: str
    code: str
    target_url: str
    clicks: int
    last_clicked_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class CreatedLinkResponse(LinkResponse):
    """Link record returned after creation, with its complete short URL."""

    short_url: str = Field(..., description="The complete short URL")


class DeleteResponse(BaseModel):
    """Delete confirmation."""

    deleted: bool
    code: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    store: str = Field(..., description="Backing store status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")
