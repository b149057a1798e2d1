import math
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import field_validator
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlmodel import Field, SQLModel

from window_catalog.models.validators import as_utc, check_url, reject_null, utc_now
from window_catalog.services.coercion import format_price

# numeric(10, 2): eight integer digits, two fractional
MAX_PRICE = Decimal("99999999.99")


def _check_price(v: float) -> float:
    if not math.isfinite(v):
        raise ValueError("Price must be a finite number")
    # Bound before quantizing, Decimal refuses to quantize huge magnitudes
    if v > MAX_PRICE or Decimal(format_price(v)) > MAX_PRICE:
        raise ValueError(f"Price must not exceed {MAX_PRICE}")
    if Decimal(format_price(v)) <= 0:
        raise ValueError("Price must be positive")
    return v


class Window(SQLModel, table=True):
    """Store representation of a window.

    ``price`` holds a fixed-point decimal string and ``gallery_image_urls`` a
    JSON-encoded array; services convert both via ``services.coercion``.
    """
    __tablename__ = "windows"

    id: Optional[int] = Field(default=None, primary_key=True)
    collection_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("window_collections.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    price: str = Field(sa_column=Column(String(16), nullable=False))
    description: str
    main_image_url: str
    gallery_image_urls: str = Field(
        default="[]",
        sa_column=Column(Text, nullable=False, server_default="[]"),
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class WindowCreate(SQLModel):
    collection_id: int
    price: float = Field(gt=0)
    description: str = Field(min_length=1)
    main_image_url: str
    gallery_image_urls: List[str] = Field(default_factory=list)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        return _check_price(v)

    @field_validator("main_image_url")
    @classmethod
    def validate_main_image_url(cls, v: str) -> str:
        return check_url(v)

    @field_validator("gallery_image_urls")
    @classmethod
    def validate_gallery_image_urls(cls, v: List[str]) -> List[str]:
        return [check_url(url) for url in v]


class WindowUpdate(SQLModel):
    """Partial update: only fields present in the payload are applied."""
    id: int
    collection_id: Optional[int] = None
    price: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = Field(default=None, min_length=1)
    main_image_url: Optional[str] = None
    gallery_image_urls: Optional[List[str]] = None

    @field_validator(
        "collection_id", "price", "description", "main_image_url", "gallery_image_urls", mode="before"
    )
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        return _check_price(v)

    @field_validator("main_image_url")
    @classmethod
    def validate_main_image_url(cls, v: str) -> str:
        return check_url(v)

    @field_validator("gallery_image_urls")
    @classmethod
    def validate_gallery_image_urls(cls, v: List[str]) -> List[str]:
        return [check_url(url) for url in v]


class WindowRead(SQLModel):
    id: int
    collection_id: int
    price: float
    description: str
    main_image_url: str
    gallery_image_urls: List[str] = []
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, v: datetime) -> datetime:
        return as_utc(v)
