"""Test suite for the resume document store."""

from __future__ import annotations

import time

import pytest

from resume_builder.errors import ResumeValidationError
from resume_builder.models import CANONICAL_SECTION_ORDER, TemplateId
from resume_builder.services.resume_store import (
    COPY_SUFFIX,
    create_resume,
    delete_resume,
    duplicate_resume,
    get_resume,
    list_resumes,
    normalize_fields,
    update_resume,
)
from resume_builder.services.users import get_user

OWNER = "user-owner"
OTHER = "user-other"


@pytest.fixture
def resume(tmp_db):
    return create_resume(
        OWNER,
        {
            "title": "Backend Engineer",
            "fullName": "Ada Lovelace",
            "experience": [
                {
                    "id": "exp-1",
                    "company": "Acme",
                    "position": "Engineer",
                    "startDate": "2020-01",
                    "endDate": "2022-06",
                }
            ],
        },
    )


class TestNormalizeFields:
    def test_maps_camel_and_snake_names(self):
        assert normalize_fields({"fullName": "A", "show_summary": False}) == {
            "full_name": "A",
            "show_summary": False,
        }

    def test_drops_identity_and_unknown_fields(self):
        fields = {"id": "x", "userId": "y", "createdAt": "z", "bogus": 1, "title": "T"}

        assert normalize_fields(fields) == {"title": "T"}


class TestCreateResume:
    def test_create_applies_defaults(self, tmp_db):
        created = create_resume(OWNER, {"title": "My Resume"})

        assert created.id
        assert created.user_id == OWNER
        assert created.template is TemplateId.CLASSIC
        assert created.experience == []
        assert created.show_skills is True
        assert created.section_order == list(CANONICAL_SECTION_ORDER)
        assert created.created_at is not None
        assert created.updated_at is not None

    def test_create_upserts_owner(self, tmp_db):
        create_resume("brand-new-user", {"title": "T"})

        user = get_user("brand-new-user")
        assert user is not None
        assert user["ai_credits"] == 3

    def test_create_ignores_client_identity_fields(self, tmp_db):
        created = create_resume(OWNER, {"title": "T", "id": "forged", "userId": OTHER})

        assert created.id != "forged"
        assert created.user_id == OWNER

    def test_create_without_title_fails(self, tmp_db):
        with pytest.raises(ResumeValidationError):
            create_resume(OWNER, {"fullName": "Nobody"})

        assert list_resumes(OWNER) == []

    def test_create_with_blank_title_fails(self, tmp_db):
        with pytest.raises(ResumeValidationError):
            create_resume(OWNER, {"title": "  "})

    def test_create_with_unknown_template_fails(self, tmp_db):
        with pytest.raises(ResumeValidationError):
            create_resume(OWNER, {"title": "T", "template": "fancy"})

    def test_items_keep_their_ids(self, resume):
        assert resume.experience[0].id == "exp-1"


class TestGetAndList:
    def test_get_round_trips(self, resume):
        loaded = get_resume(resume.id, OWNER)

        assert loaded == resume

    def test_get_other_owner_is_none(self, resume):
        assert get_resume(resume.id, OTHER) is None

    def test_get_missing_is_none(self, tmp_db):
        assert get_resume("does-not-exist", OWNER) is None

    def test_list_is_owner_scoped(self, resume):
        create_resume(OTHER, {"title": "Not mine"})

        assert [r.id for r in list_resumes(OWNER)] == [resume.id]

    def test_list_most_recently_updated_first(self, tmp_db):
        first = create_resume(OWNER, {"title": "First"})
        time.sleep(0.01)
        second = create_resume(OWNER, {"title": "Second"})
        time.sleep(0.01)
        update_resume(first.id, OWNER, {"summary": "touched"})

        assert [r.id for r in list_resumes(OWNER)] == [first.id, second.id]


class TestUpdateResume:
    def test_partial_update_leaves_other_fields(self, resume):
        updated = update_resume(resume.id, OWNER, {"summary": "Builds things."})

        assert updated is not None
        assert updated.summary == "Builds things."
        assert updated.full_name == "Ada Lovelace"
        assert updated.experience == resume.experience

    def test_update_refreshes_updated_at_only(self, resume):
        time.sleep(0.01)
        updated = update_resume(resume.id, OWNER, {"title": "Renamed"})

        assert updated.updated_at > resume.updated_at
        assert updated.created_at == resume.created_at

    def test_update_replaces_section_wholesale(self, resume):
        updated = update_resume(
            resume.id,
            OWNER,
            {"experience": [{"id": "exp-2", "company": "Globex", "position": "Lead"}]},
        )

        assert [e.id for e in updated.experience] == ["exp-2"]

    def test_update_ignores_identity_fields(self, resume):
        updated = update_resume(
            resume.id, OWNER, {"id": "forged", "userId": OTHER, "title": "Still mine"}
        )

        assert updated.id == resume.id
        assert updated.user_id == OWNER
        assert get_resume(resume.id, OWNER).title == "Still mine"

    def test_update_other_owner_is_none(self, resume):
        assert update_resume(resume.id, OTHER, {"title": "Hijack"}) is None
        assert get_resume(resume.id, OWNER).title == "Backend Engineer"

    def test_update_with_blank_title_writes_nothing(self, resume):
        with pytest.raises(ResumeValidationError):
            update_resume(resume.id, OWNER, {"title": "", "summary": "should not land"})

        stored = get_resume(resume.id, OWNER)
        assert stored.title == "Backend Engineer"
        assert stored.summary is None

    def test_update_with_unknown_template_fails(self, resume):
        with pytest.raises(ResumeValidationError):
            update_resume(resume.id, OWNER, {"template": "neon"})

    def test_update_current_clears_end_date(self, resume):
        updated = update_resume(
            resume.id,
            OWNER,
            {"experience": [{"id": "exp-1", "endDate": "2024-01", "current": True}]},
        )

        assert updated.experience[0].end_date is None


class TestDeleteResume:
    def test_delete_removes_resume(self, resume):
        delete_resume(resume.id, OWNER)

        assert get_resume(resume.id, OWNER) is None

    def test_delete_is_idempotent(self, resume):
        delete_resume(resume.id, OWNER)
        delete_resume(resume.id, OWNER)

        assert list_resumes(OWNER) == []

    def test_delete_by_other_owner_does_nothing(self, resume):
        delete_resume(resume.id, OTHER)

        assert get_resume(resume.id, OWNER) is not None


class TestDuplicateResume:
    def test_duplicate_copies_content(self, resume):
        copy = duplicate_resume(resume.id, OWNER)

        assert copy is not None
        assert copy.id != resume.id
        assert copy.title == "Backend Engineer (Copy)"
        assert copy.full_name == resume.full_name
        assert copy.experience == resume.experience
        assert copy.created_at >= resume.created_at
        assert copy.updated_at >= resume.updated_at
        assert copy.created_at == copy.updated_at

    def test_duplicate_is_independent(self, resume):
        copy = duplicate_resume(resume.id, OWNER)

        update_resume(copy.id, OWNER, {"experience": []})

        assert get_resume(resume.id, OWNER).experience == resume.experience

    def test_duplicate_of_long_title_fits(self, tmp_db):
        source = create_resume(OWNER, {"title": "x" * 255})

        copy = duplicate_resume(source.id, OWNER)

        assert len(copy.title) == 255
        assert copy.title.endswith(COPY_SUFFIX)

    def test_duplicate_not_owned_is_none(self, resume):
        assert duplicate_resume(resume.id, OTHER) is None
        assert list_resumes(OTHER) == []
