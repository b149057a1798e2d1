from typing import List, Optional
from datetime import datetime
from pydantic import field_validator
from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from window_catalog.models.validators import as_utc, check_url, reject_null, utc_now
from window_catalog.models.window import WindowRead


class WindowCollectionBase(SQLModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    main_image_url: str
    brand_name: str = Field(min_length=1)


class WindowCollection(WindowCollectionBase, table=True):
    """A branded product line. Deleting it cascades to its windows."""
    __tablename__ = "window_collections"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class WindowCollectionCreate(WindowCollectionBase):
    @field_validator("main_image_url")
    @classmethod
    def validate_main_image_url(cls, v: str) -> str:
        return check_url(v)


class WindowCollectionUpdate(SQLModel):
    """Partial update: only fields present in the payload are applied."""
    id: int
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    main_image_url: Optional[str] = None
    brand_name: Optional[str] = Field(default=None, min_length=1)

    @field_validator("name", "description", "main_image_url", "brand_name", mode="before")
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

    @field_validator("main_image_url")
    @classmethod
    def validate_main_image_url(cls, v: str) -> str:
        return check_url(v)


class WindowCollectionRead(WindowCollectionBase):
    id: int
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, v: datetime) -> datetime:
        return as_utc(v)


class WindowCollectionWithWindows(WindowCollectionRead):
    windows: List[WindowRead] = []
