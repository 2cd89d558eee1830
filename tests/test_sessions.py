"""
Tests for server-side sessions.

Tests cover:
- Session creation and resolution
- Destroyed and expired sessions resolving to None
- Idempotent destroy
- Cleanup of expired sessions
"""
from datetime import timedelta

import pytest

from jobapp.auth.cleanup import SessionSweeper, cleanup_expired_sessions
from jobapp.auth.models import UserSession
from jobapp.auth.sessions import SessionManager
from jobapp.models import Role
from jobapp.utils.dates import utcnow


class FakeClock:
    def __init__(self):
        self.now = utcnow()

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(db, clock):
    return SessionManager(db, max_age=timedelta(hours=1), clock=clock)


class TestCreate:
    """Tests for SessionManager.create."""

    def test_returns_token_and_expiry(self, manager, applicant, clock):
        token, expires_at = manager.create(applicant.id, applicant.role)

        assert isinstance(token, str)
        assert len(token) >= 32
        assert expires_at == clock.now + timedelta(hours=1)

    def test_tokens_are_unique(self, manager, applicant):
        tokens = {manager.create(applicant.id, applicant.role)[0] for _ in range(20)}
        assert len(tokens) == 20

    def test_stores_role_and_audit_fields(self, manager, db, admin):
        token, _ = manager.create(admin.id, Role.ADMIN, user_agent="pytest", ip_address="10.0.0.1")

        record = db.get(UserSession, token)
        assert record.role == "Admin"
        assert record.user_agent == "pytest"
        assert record.ip_address == "10.0.0.1"

    def test_token_not_reissued(self, manager, applicant, monkeypatch):
        """Should draw a new token when the generated one is already stored."""
        existing, _ = manager.create(applicant.id, applicant.role)
        tokens = iter([existing, "fresh-token"])
        monkeypatch.setattr("jobapp.auth.sessions.secrets.token_urlsafe", lambda n: next(tokens))

        token, _ = manager.create(applicant.id, applicant.role)
        assert token == "fresh-token"


class TestResolve:
    """Tests for SessionManager.resolve."""

    def test_fresh_session(self, manager, applicant):
        token, expires_at = manager.create(applicant.id, applicant.role)

        context = manager.resolve(token)
        assert context is not None
        assert context.user_id == applicant.id
        assert context.role == Role.APPLICANT
        assert context.expires_at == expires_at
        assert context.is_admin is False

    def test_unknown_token(self, manager):
        assert manager.resolve("no-such-token") is None

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, manager, token):
        assert manager.resolve(token) is None

    def test_after_destroy(self, manager, applicant):
        token, _ = manager.create(applicant.id, applicant.role)
        manager.destroy(token)
        assert manager.resolve(token) is None

    def test_after_expiry(self, manager, applicant, clock):
        """Should treat an expired record exactly like a missing one."""
        token, _ = manager.create(applicant.id, applicant.role)

        clock.advance(hours=1)
        assert manager.resolve(token) is None
        assert manager.resolve(token) == manager.resolve("never-existed")

    def test_just_before_expiry(self, manager, applicant, clock):
        token, _ = manager.create(applicant.id, applicant.role)
        clock.advance(minutes=59)
        assert manager.resolve(token) is not None


class TestDestroy:
    """Tests for SessionManager.destroy."""

    def test_idempotent(self, manager, applicant):
        token, _ = manager.create(applicant.id, applicant.role)
        manager.destroy(token)
        manager.destroy(token)
        manager.destroy(None)

    def test_only_destroys_given_session(self, manager, applicant):
        first, _ = manager.create(applicant.id, applicant.role)
        second, _ = manager.create(applicant.id, applicant.role)

        manager.destroy(first)
        assert manager.resolve(second) is not None

    def test_destroy_all_for_user(self, manager, applicant, admin):
        manager.create(applicant.id, applicant.role)
        manager.create(applicant.id, applicant.role)
        admin_token, _ = manager.create(admin.id, admin.role)

        assert manager.destroy_all_for_user(applicant.id) == 2
        assert manager.resolve(admin_token) is not None


class TestCleanup:
    """Tests for expired session cleanup."""

    def test_removes_only_expired(self, manager, applicant, clock, db):
        old, _ = manager.create(applicant.id, applicant.role)
        clock.advance(minutes=30)
        new, _ = manager.create(applicant.id, applicant.role)
        clock.advance(minutes=31)

        assert manager.cleanup_expired() == 1
        assert db.query(UserSession).filter_by(session_id=old).first() is None
        assert db.query(UserSession).filter_by(session_id=new).first() is not None

    def test_cleanup_with_session_factory(self, session_factory, db, applicant):
        expired = UserSession(
            session_id="expired-token",
            user_id=applicant.id,
            role="Applicant",
            created_at=utcnow() - timedelta(days=2),
            expires_at=utcnow() - timedelta(days=1),
        )
        db.add(expired)
        db.commit()

        assert cleanup_expired_sessions(session_factory) == 1

    def test_sweeper_disabled_with_zero_interval(self, session_factory):
        sweeper = SessionSweeper(session_factory, interval_seconds=0)
        sweeper.start()
        assert sweeper.running is False

    def test_sweeper_start_stop(self, session_factory):
        sweeper = SessionSweeper(session_factory, interval_seconds=3600)
        sweeper.start()
        assert sweeper.running is True
        sweeper.stop()
        assert sweeper.running is False
