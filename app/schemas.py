from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

NO_FIELDS_MESSAGE = "At least one field must be provided to update."


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Payload(CamelModel):
    """
    Base for request bodies.

    Optional fields mean "absent": a field may be omitted but not sent as
    an explicit null, so every field in ``model_fields_set`` carries a value.
    """

    @model_validator(mode="after")
    def _reject_explicit_nulls(self):
        nulls = sorted(name for name in self.model_fields_set if getattr(self, name) is None)
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self


class UpdatePayload(Payload):
    """Partial update body: at least one field must be present."""

    @model_validator(mode="after")
    def _require_one_field(self):
        if not self.model_fields_set:
            raise ValueError(NO_FIELDS_MESSAGE)
        return self


# --- Post ---

class PostCreate(Payload):
    title: str = Field(min_length=1)
    slug: str | None = None
    topic: str | None = None
    language: str | None = None
    status: str | None = None
    target_audience: str | None = None
    main_keyword: str | None = None


class PostUpdate(UpdatePayload):
    title: str | None = Field(None, min_length=1)
    slug: str | None = None
    topic: str | None = None
    language: str | None = None
    status: str | None = None
    target_audience: str | None = None
    main_keyword: str | None = None


class PostResponse(CamelModel):
    id: str
    user_id: str
    title: str
    slug: str | None
    topic: str | None
    language: str | None
    status: str | None
    target_audience: str | None
    main_keyword: str | None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


# --- Post version ---

class PostVersionCreate(Payload):
    version_label: str | None = None
    is_preferred: bool = False
    outline: str | None = None
    content: str = Field(min_length=1)
    reading_time_minutes: float | None = None
    tone: str | None = None


class PostVersionUpdate(UpdatePayload):
    version_label: str | None = None
    is_preferred: bool | None = None
    outline: str | None = None
    content: str | None = Field(None, min_length=1)
    reading_time_minutes: float | None = None
    tone: str | None = None


class PostVersionResponse(CamelModel):
    id: str
    post_id: str
    version_label: str | None
    is_preferred: bool
    outline: str | None
    content: str
    reading_time_minutes: float | None
    tone: str | None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# --- SEO metadata ---

class SeoMetaUpsert(Payload):
    meta_title: str | None = None
    meta_description: str | None = None
    keywords: str | None = None
    og_title: str | None = None
    og_description: str | None = None


class SeoMetaResponse(CamelModel):
    id: str
    post_id: str
    meta_title: str | None
    meta_description: str | None
    keywords: str | None
    og_title: str | None
    og_description: str | None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# --- Envelopes ---

class PostData(BaseModel):
    post: PostResponse


class PostListData(BaseModel):
    items: list[PostResponse]
    total: int


class PostVersionData(BaseModel):
    version: PostVersionResponse


class PostVersionListData(BaseModel):
    items: list[PostVersionResponse]
    total: int


class SeoMetaData(BaseModel):
    seo: SeoMetaResponse | None


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: T


class SuccessResponse(BaseModel):
    success: bool = True
