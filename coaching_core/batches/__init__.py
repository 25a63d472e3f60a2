"""
Batches Module

Batch storage and the subject → chapter → content tree merge.
"""

from .content_tree import add_content, find_chapter, find_subject
from .db_service import BatchDBService
from .models import Batch, Chapter, ContentItem, ContentType, Subject

__all__ = [
    "Batch",
    "Subject",
    "Chapter",
    "ContentItem",
    "ContentType",
    "BatchDBService",
    "add_content",
    "find_subject",
    "find_chapter",
]
