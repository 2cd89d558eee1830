"""
Tests for Job Role Service.

Tests cover:
- Job role retrieval
- Listing with filters and pagination
- Active roles
- Search term validation and matching
- Create, update and delete
"""
from datetime import timedelta

import pytest

from jobapp.api.services.job_role_service import (
    SEARCH_TERM_MAX_LENGTH,
    JobRoleError,
    JobRoleService,
)
from jobapp.models import JobApplication
from jobapp.utils.dates import utcnow
from jobapp.utils.pagination import PaginationParams
from tests.helpers import MockQuery


class MockJobRole:
    """Mock JobRole model for testing."""

    def __init__(self, id: int, job_role_name: str, status: str = "active"):
        self.id = id
        self.job_role_name = job_role_name
        self.status = status


class TestGetJobRole:
    """Tests for job role retrieval (mocked session)."""

    def test_returns_job_role(self, mock_db):
        """Should return the job role for a known id."""
        mock_db.get.return_value = MockJobRole(1, "Software Engineer")

        result = JobRoleService(mock_db).get_job_role(1)

        assert result.job_role_name == "Software Engineer"

    def test_raises_for_unknown(self, mock_db):
        """Should raise a 404 error for an unknown id."""
        mock_db.get.return_value = None

        with pytest.raises(JobRoleError) as exc_info:
            JobRoleService(mock_db).get_job_role(999)

        assert exc_info.value.status_code == 404
        assert "not found" in str(exc_info.value)


class TestListJobRoles:
    """Tests for listing."""

    def test_returns_page_and_total(self, mock_db):
        """Should return results with the total count."""
        roles = [MockJobRole(1, "Engineer"), MockJobRole(2, "Tester")]
        mock_db.query.return_value = MockQuery(roles, count_value=14)

        results, total = JobRoleService(mock_db).list_job_roles(PaginationParams(page=1, limit=2))

        assert len(results) == 2
        assert total == 14

    def test_filters_and_orders(self, db, job_role_factory):
        """Should filter by each given field, newest first."""
        now = utcnow()
        job_role_factory(job_role_name="A", location="Belfast", created_at=now - timedelta(days=2))
        job_role_factory(job_role_name="B", location="London", created_at=now - timedelta(days=1))
        job_role_factory(job_role_name="C", location="Belfast", created_at=now)

        results, total = JobRoleService(db).list_job_roles(
            PaginationParams(page=1, limit=10),
            location="Belfast",
        )

        assert total == 2
        assert [r.job_role_name for r in results] == ["C", "A"]

    def test_paginates(self, db, job_role_factory):
        for i in range(5):
            job_role_factory(job_role_name=f"Role {i}")

        results, total = JobRoleService(db).list_job_roles(PaginationParams(page=2, limit=2))

        assert total == 5
        assert len(results) == 2

    def test_ignores_empty_filters(self, db, job_role_factory):
        job_role_factory()
        _, total = JobRoleService(db).list_job_roles(
            PaginationParams(page=1, limit=10),
            status=None,
            band="",
        )
        assert total == 1


class TestActiveJobRoles:
    """Tests for list_active_job_roles."""

    def test_excludes_closed_and_past_deadline(self, db, job_role_factory):
        open_role = job_role_factory(job_role_name="Open")
        job_role_factory(job_role_name="Closed", status="closed")
        job_role_factory(job_role_name="Expired", closing_date=utcnow() - timedelta(days=1))

        results = JobRoleService(db).list_active_job_roles()

        assert [r.id for r in results] == [open_role.id]


class TestSearchJobRoles:
    """Tests for search_job_roles."""

    def test_matches_case_insensitively(self, db, job_role_factory):
        job_role_factory(job_role_name="Data Engineer", capability="Data")
        job_role_factory(job_role_name="Designer", capability="Experience Design", description="UX work")

        results, total = JobRoleService(db).search_job_roles("DATA", PaginationParams(1, 10))

        assert total == 1
        assert results[0].job_role_name == "Data Engineer"

    def test_matches_location(self, db, job_role_factory):
        job_role_factory(location="Derry")
        _, total = JobRoleService(db).search_job_roles("derr", PaginationParams(1, 10))
        assert total == 1

    @pytest.mark.parametrize("term", [None, "", "   "])
    def test_requires_term(self, mock_db, term):
        with pytest.raises(JobRoleError):
            JobRoleService(mock_db).search_job_roles(term, PaginationParams(1, 10))

    def test_term_too_long(self, mock_db):
        with pytest.raises(JobRoleError) as exc_info:
            JobRoleService(mock_db).search_job_roles(
                "x" * (SEARCH_TERM_MAX_LENGTH + 1),
                PaginationParams(1, 10),
            )
        assert exc_info.value.status_code == 400


class TestMutations:
    """Tests for create, update and delete."""

    def test_create(self, db):
        job_role = JobRoleService(db).create_job_role({
            "job_role_name": "Analyst",
            "description": "Analyse things",
            "responsibilities": "Reports",
            "job_spec_link": "https://example.com/analyst",
            "location": "Belfast",
            "capability": "Data",
            "band": "Trainee",
            "closing_date": utcnow() + timedelta(days=10),
        })

        assert job_role.id is not None
        assert job_role.status == "active"
        assert job_role.number_of_open_positions == 1

    def test_update_changes_only_given_fields(self, db, job_role_factory):
        job_role = job_role_factory()
        before = job_role.updated_at

        updated = JobRoleService(db).update_job_role(job_role.id, {"band": "Consultant"})

        assert updated.band == "Consultant"
        assert updated.location == "Belfast"
        assert updated.updated_at >= before

    def test_update_without_changes(self, db, job_role_factory):
        job_role = job_role_factory()
        with pytest.raises(JobRoleError):
            JobRoleService(db).update_job_role(job_role.id, {})

    def test_update_unknown(self, db):
        with pytest.raises(JobRoleError) as exc_info:
            JobRoleService(db).update_job_role(999, {"band": "X"})
        assert exc_info.value.status_code == 404

    def test_delete_cascades_to_applications(self, db, job_role_factory, application_factory):
        job_role = job_role_factory()
        application_factory(job_role)

        JobRoleService(db).delete_job_role(job_role.id)

        assert db.query(JobApplication).count() == 0

    def test_applications_for_role(self, db, job_role_factory, application_factory):
        role_a = job_role_factory(job_role_name="A")
        role_b = job_role_factory(job_role_name="B")
        application_factory(role_a)
        application_factory(role_b)

        results = JobRoleService(db).get_applications_for_role(role_a.id)

        assert [a.job_role_id for a in results] == [role_a.id]
