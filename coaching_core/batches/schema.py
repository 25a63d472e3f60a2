"""
Batch API Schemas

Request and response models for batch and study-material endpoints.
"""

from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from ..shared_services.models import CamelModel
from .models import Batch, Subject


class BatchCreateRequest(CamelModel):
    """Request model for creating a batch."""

    institute_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    teacher: Optional[str] = Field(default=None)
    price: Optional[float] = Field(default=None, ge=0)
    banner: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None)
    subjects: list[Subject] = Field(default_factory=list)

    @field_validator("subjects")
    @classmethod
    def validate_unique_names(cls, subjects: list[Subject]) -> list[Subject]:
        """Subject names are unique in a batch, chapter names unique in a subject."""
        subject_names = [s.subject_name for s in subjects]
        duplicates = sorted({n for n in subject_names if subject_names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate subject names: {duplicates}")

        for subject in subjects:
            chapter_names = [c.chapter_name for c in subject.chapters]
            duplicates = sorted({n for n in chapter_names if chapter_names.count(n) > 1})
            if duplicates:
                raise ValueError(
                    f"Duplicate chapter names in subject {subject.subject_name!r}: {duplicates}"
                )

        return subjects

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "instituteId": "inst_3f9a1c2b7d4e",
                "title": "JEE 2027 Foundation",
                "teacher": "R. Sharma",
                "price": 4999,
                "banner": "https://cdn.example.com/jee.png",
                "description": "Physics, Chemistry and Maths",
            }
        }
    )


class AddMaterialRequest(CamelModel):
    """
    Request model for adding one content item to a batch.

    The type is checked by the content tree merge so that an unknown
    kind is reported as invalid input.
    """

    subject_name: str = Field(..., min_length=1)
    chapter_name: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    type: str
    url: str = Field(..., min_length=1)
    duration: Optional[str] = Field(default=None)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "subjectName": "Physics",
                "chapterName": "Kinematics",
                "title": "Lecture 1",
                "type": "video",
                "url": "https://videos.example.com/kin-1",
            }
        }
    )


class BatchCreatedResponse(CamelModel):
    message: str
    batch: Batch


class ContentAddedResponse(CamelModel):
    message: str
    batch: Batch


class MessageResponse(CamelModel):
    message: str
