"""
Batch Data Models

A batch embeds its whole subject → chapter → content tree in one document.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from ..shared_services.models import CamelModel


class ContentType(str, Enum):
    """Kinds of study material a chapter can hold."""

    VIDEO = "video"
    PDF = "pdf"


class ContentItem(CamelModel):
    """
    One piece of study material.

    Items have no identity key; duplicate titles are allowed.
    """

    title: str = Field(..., min_length=1)
    type: ContentType
    url: str = Field(..., min_length=1, description="Locator of the video or PDF")
    duration: Optional[str] = Field(default=None)


class Chapter(CamelModel):
    """Chapter within a subject, identified by its exact name."""

    chapter_name: str
    contents: list[ContentItem] = Field(default_factory=list)


class Subject(CamelModel):
    """Subject within a batch, identified by its exact name."""

    subject_name: str
    chapters: list[Chapter] = Field(default_factory=list)


class Batch(CamelModel):
    """
    Batch (course) owned by one institute.

    Stored as a single document; the revision is bumped on every
    content-tree write and guards against lost updates.
    """

    batch_id: str = Field(..., description="Unique batch identifier")
    institute_id: str = Field(..., description="Owning institute")

    title: str
    teacher: Optional[str] = Field(default=None, description="Owner name")
    price: Optional[float] = Field(default=None, ge=0)
    banner: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None)

    subjects: list[Subject] = Field(default_factory=list)

    revision: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)
