"""
Content Tree Merge

Inserts one content item into a batch's subject → chapter → content tree,
creating the subject and chapter on demand. Subjects and chapters are
matched by exact name (no trimming, no case folding); content items are
always appended.

The merge works on the in-memory batch only. Persisting the result is the
caller's job (see BatchDBService.add_content).
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from ..shared_services.errors import InvalidInputError, NotFoundError
from .models import Batch, Chapter, ContentItem, ContentType, Subject

ContentInput = Union[ContentItem, Mapping[str, Any]]


def find_subject(batch: Batch, subject_name: str) -> Optional[Subject]:
    """Return the first subject named exactly subject_name, or None."""
    for subject in batch.subjects:
        if subject.subject_name == subject_name:
            return subject
    return None


def find_chapter(subject: Subject, chapter_name: str) -> Optional[Chapter]:
    """Return the first chapter named exactly chapter_name, or None."""
    for chapter in subject.chapters:
        if chapter.chapter_name == chapter_name:
            return chapter
    return None


def build_content_item(item: ContentInput) -> ContentItem:
    """
    Validate a content item.

    Args:
        item: A ContentItem, or a mapping with title, type, url and optional duration

    Returns:
        A new ContentItem

    Raises:
        InvalidInputError: If the type is not video/pdf or a required field is missing
    """
    if isinstance(item, ContentItem):
        data = item.model_dump()
    elif isinstance(item, Mapping):
        data = dict(item)
    else:
        raise InvalidInputError(f"Unsupported content item: {type(item).__name__}")

    content_type = data.get("type")
    allowed = [t.value for t in ContentType]
    if isinstance(content_type, ContentType):
        content_type = content_type.value
    if content_type not in allowed:
        raise InvalidInputError(
            f"Content type must be one of {allowed}, got {content_type!r}",
            content_type=content_type,
        )

    try:
        return ContentItem.model_validate(data)
    except ValidationError as e:
        invalid = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise InvalidInputError(
            f"Invalid content item fields: {', '.join(invalid)}", fields=invalid
        )


def add_content(
    batch: Optional[Batch],
    subject_name: str,
    chapter_name: str,
    item: ContentInput,
) -> Batch:
    """
    Add one content item to a batch's content tree.

    1. Find the subject by exact name, appending a new empty one if absent
    2. Find the chapter within it by exact name, appending a new empty one if absent
    3. Append the item to the chapter's contents

    Input is validated before anything is mutated, so a rejected call
    leaves the tree untouched.

    Args:
        batch: Batch to mutate in place
        subject_name: Subject to add under
        chapter_name: Chapter to add under
        item: Content item (title, type, url, optional duration)

    Returns:
        The same batch, mutated

    Raises:
        NotFoundError: If batch is None
        InvalidInputError: If a name is empty or the item is invalid
    """
    if batch is None:
        raise NotFoundError("Batch not found")
    if not subject_name:
        raise InvalidInputError("subjectName is required")
    if not chapter_name:
        raise InvalidInputError("chapterName is required")

    content_item = build_content_item(item)

    subject = find_subject(batch, subject_name)
    if subject is None:
        subject = Subject(subject_name=subject_name)
        batch.subjects.append(subject)

    chapter = find_chapter(subject, chapter_name)
    if chapter is None:
        chapter = Chapter(chapter_name=chapter_name)
        subject.chapters.append(chapter)

    chapter.contents.append(content_item)
    return batch
