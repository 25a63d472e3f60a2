"""Tests for the subject → chapter → content merge."""

from itertools import permutations

import pytest

from coaching_core.batches.content_tree import add_content, find_chapter, find_subject
from coaching_core.batches.models import Batch, ContentItem, ContentType
from coaching_core.shared_services.errors import InvalidInputError, NotFoundError


def make_batch(**overrides) -> Batch:
    data = {"batch_id": "batch_test", "institute_id": "inst_test", "title": "JEE 2027"}
    data.update(overrides)
    return Batch(**data)


def video(title: str, url: str = "https://x/1") -> dict:
    return {"title": title, "type": "video", "url": url}


class TestAddContentToEmptyBatch:
    def test_creates_subject_chapter_and_item(self) -> None:
        batch = make_batch()

        result = add_content(batch, "Chemistry", "Atoms", video("Intro"))

        assert result is batch
        assert len(batch.subjects) == 1
        subject = batch.subjects[0]
        assert subject.subject_name == "Chemistry"
        assert len(subject.chapters) == 1
        chapter = subject.chapters[0]
        assert chapter.chapter_name == "Atoms"
        assert chapter.contents == [
            ContentItem(title="Intro", type=ContentType.VIDEO, url="https://x/1")
        ]

    def test_duration_is_optional(self) -> None:
        batch = make_batch()

        add_content(batch, "Chemistry", "Atoms", {**video("Intro"), "duration": "12:30"})

        assert batch.subjects[0].chapters[0].contents[0].duration == "12:30"


class TestAddContentToExistingNodes:
    def test_same_subject_and_chapter_appends_in_order(self) -> None:
        batch = make_batch()

        add_content(batch, "Physics", "Kinematics", video("Lecture 1"))
        add_content(batch, "Physics", "Kinematics", {"title": "Notes", "type": "pdf", "url": "https://x/2"})

        assert [s.subject_name for s in batch.subjects] == ["Physics"]
        assert [c.chapter_name for c in batch.subjects[0].chapters] == ["Kinematics"]
        contents = batch.subjects[0].chapters[0].contents
        assert [c.title for c in contents] == ["Lecture 1", "Notes"]
        assert [c.type for c in contents] == ["video", "pdf"]

    def test_duplicate_titles_are_kept(self) -> None:
        batch = make_batch()

        add_content(batch, "Physics", "Kinematics", video("Lecture 1"))
        add_content(batch, "Physics", "Kinematics", video("Lecture 1"))

        assert len(batch.subjects[0].chapters[0].contents) == 2

    def test_new_chapter_under_existing_subject(self) -> None:
        batch = make_batch()

        add_content(batch, "Physics", "Kinematics", video("Lecture 1"))
        add_content(batch, "Physics", "Optics", video("Lecture 2"))

        assert len(batch.subjects) == 1
        assert [c.chapter_name for c in batch.subjects[0].chapters] == ["Kinematics", "Optics"]

    def test_existing_tree_from_document_is_extended(self) -> None:
        batch = Batch(
            batchId="batch_doc",
            instituteId="inst_test",
            title="NEET",
            subjects=[
                {
                    "subjectName": "Biology",
                    "chapters": [{"chapterName": "Cells", "contents": [video("Old")]}],
                }
            ],
        )

        add_content(batch, "Biology", "Cells", video("New"))

        assert [c.title for c in batch.subjects[0].chapters[0].contents] == ["Old", "New"]

    def test_accepts_content_item_instances(self) -> None:
        batch = make_batch()
        item = ContentItem(title="Notes", type=ContentType.PDF, url="https://x/n.pdf")

        add_content(batch, "Maths", "Algebra", item)

        stored = batch.subjects[0].chapters[0].contents[0]
        assert stored == item
        assert stored is not item


class TestNameMatching:
    def test_names_are_case_sensitive(self) -> None:
        batch = make_batch()

        add_content(batch, "Physics", "Kinematics", video("a"))
        add_content(batch, "physics", "Kinematics", video("b"))

        assert [s.subject_name for s in batch.subjects] == ["Physics", "physics"]

    def test_names_are_not_trimmed(self) -> None:
        batch = make_batch()

        add_content(batch, "Physics", "Kinematics", video("a"))
        add_content(batch, "Physics", "Kinematics ", video("b"))

        assert [c.chapter_name for c in batch.subjects[0].chapters] == ["Kinematics", "Kinematics "]

    def test_chapter_names_are_scoped_to_their_subject(self) -> None:
        batch = make_batch()

        add_content(batch, "Physics", "Basics", video("a"))
        add_content(batch, "Chemistry", "Basics", video("b"))

        physics = find_subject(batch, "Physics")
        chemistry = find_subject(batch, "Chemistry")
        assert [c.title for c in find_chapter(physics, "Basics").contents] == ["a"]
        assert [c.title for c in find_chapter(chemistry, "Basics").contents] == ["b"]

    def test_one_node_per_distinct_name_regardless_of_order(self) -> None:
        calls = [
            ("Physics", "Kinematics"),
            ("Chemistry", "Atoms"),
            ("Physics", "Optics"),
            ("Physics", "Kinematics"),
            ("Chemistry", "Bonds"),
        ]

        for ordering in permutations(calls):
            batch = make_batch()
            for index, (subject, chapter) in enumerate(ordering):
                add_content(batch, subject, chapter, video(f"item {index}"))

            subject_names = [s.subject_name for s in batch.subjects]
            assert sorted(subject_names) == ["Chemistry", "Physics"]

            pairs = [(s.subject_name, c.chapter_name) for s in batch.subjects for c in s.chapters]
            assert len(pairs) == len(set(pairs)) == len(set(calls))

            total_items = sum(len(c.contents) for s in batch.subjects for c in s.chapters)
            assert total_items == len(calls)


class TestFindHelpers:
    def test_missing_names_return_none(self) -> None:
        batch = make_batch()
        add_content(batch, "Physics", "Kinematics", video("a"))

        assert find_subject(batch, "Biology") is None
        assert find_chapter(batch.subjects[0], "Optics") is None


class TestRejectedInput:
    @pytest.mark.parametrize("kind", ["audio", "VIDEO", "", None])
    def test_unknown_content_type_is_rejected(self, kind) -> None:
        batch = make_batch()

        with pytest.raises(InvalidInputError) as exc_info:
            add_content(batch, "Physics", "Kinematics", {"title": "x", "type": kind, "url": "https://x"})

        assert exc_info.value.category == "invalid_input"
        assert batch.subjects == []

    def test_rejected_item_leaves_existing_tree_untouched(self) -> None:
        batch = make_batch()
        add_content(batch, "Physics", "Kinematics", video("a"))
        before = batch.model_dump()

        with pytest.raises(InvalidInputError):
            add_content(batch, "Chemistry", "Atoms", {"title": "x", "type": "audio", "url": "https://x"})

        assert batch.model_dump() == before

    @pytest.mark.parametrize("missing", ["title", "url"])
    def test_missing_required_field_is_rejected(self, missing) -> None:
        batch = make_batch()
        item = video("Intro")
        del item[missing]

        with pytest.raises(InvalidInputError) as exc_info:
            add_content(batch, "Physics", "Kinematics", item)

        assert missing in exc_info.value.message
        assert batch.subjects == []

    @pytest.mark.parametrize("subject, chapter", [("", "Kinematics"), ("Physics", "")])
    def test_empty_names_are_rejected(self, subject, chapter) -> None:
        batch = make_batch()

        with pytest.raises(InvalidInputError):
            add_content(batch, subject, chapter, video("Intro"))

    def test_missing_batch_is_not_found(self) -> None:
        with pytest.raises(NotFoundError):
            add_content(None, "Physics", "Kinematics", video("Intro"))

    def test_unsupported_item_type_is_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            add_content(make_batch(), "Physics", "Kinematics", ["Intro", "video"])

    def test_invalid_fields_are_named(self) -> None:
        batch = make_batch()

        with pytest.raises(InvalidInputError) as exc_info:
            add_content(batch, "Physics", "Kinematics", {"title": "", "type": "pdf", "url": "https://x"})

        assert exc_info.value.message == "Invalid content item fields: title"
        assert exc_info.value.context["fields"] == ["title"]
