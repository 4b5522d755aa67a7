from datetime import timedelta

import pytest
from sqlalchemy.orm import Session

from hostel_api.core.exceptions import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from hostel_api.entities.principal import Role
from hostel_api.entities.session import RevocationReason
from hostel_api.infrastructure.database.session import engine
from hostel_api.infrastructure.security.jwt_provider import JwtProvider
from hostel_api.repositories.refresh_token_repository import RefreshTokenRepository
from hostel_api.repositories.user_repository import UserRepository
from hostel_api.services.refresh_token_service import RefreshTokenService, hash_secret
from hostel_api.services.session_service import INVALID_REFRESH, RefreshRejectedError, SessionService
from hostel_api.services.user_service import INVALID_CREDENTIALS, UserService

from conftest import PASSWORD


def _login(session_service, device, email="ayesha@example.com"):
    return session_service.login(email=email, password=PASSWORD, device=device)


class TestLogin:
    def test_login_returns_access_token_and_refresh_secret(self, session_service, user, device):
        issued = _login(session_service, device)

        claims = JwtProvider().decode(issued.access_token)
        assert claims.subject_id == user.id
        assert claims.role is Role.USER
        assert issued.refresh_token
        assert issued.user.id == user.id

    def test_login_is_case_insensitive_on_email(self, session_service, user, device):
        issued = _login(session_service, device, email="  AYESHA@Example.com ")
        assert issued.user.id == user.id

    def test_wrong_password_and_unknown_email_fail_the_same_way(self, session_service, user, device):
        with pytest.raises(UnauthorizedError) as wrong_password:
            session_service.login(email=user.email, password="not-the-password", device=device)
        with pytest.raises(UnauthorizedError) as unknown_email:
            session_service.login(email="nobody@example.com", password=PASSWORD, device=device)

        assert type(wrong_password.value) is type(unknown_email.value)
        assert str(wrong_password.value) == str(unknown_email.value) == INVALID_CREDENTIALS

    def test_deleted_account_cannot_login(self, session_service, user, device):
        user.is_deleted = True

        with pytest.raises(UnauthorizedError):
            _login(session_service, device)


class TestRegister:
    def test_register_creates_plain_user_with_session(self, session_service, refresh_tokens, device):
        issued = session_service.register(
            full_name="Bilal Ahmed", email="bilal@example.com", password=PASSWORD, device=device
        )

        assert issued.user.role == Role.USER.value
        assert [m.id for m in refresh_tokens.list_active(issued.user.id)] == [issued.session_id]

    def test_register_duplicate_email_conflicts(self, session_service, user, device):
        with pytest.raises(ConflictError):
            session_service.register(
                full_name="Other Person", email="Ayesha@example.com", password=PASSWORD, device=device
            )

    def test_register_short_password_is_validation_error(self, session_service, device):
        with pytest.raises(ValidationError):
            session_service.register(full_name="Short Pw", email="short@example.com", password="abc", device=device)

    def test_concurrent_duplicate_register_is_conflict(self, session_service, user, device, monkeypatch):
        # a checagem prévia não enxerga o cadastro concorrente; o índice único decide
        monkeypatch.setattr(UserRepository, "get_by_email_any", lambda self, email: None)
        email = user.email

        with pytest.raises(ConflictError):
            session_service.register(full_name="Ayesha Twin", email=email, password=PASSWORD, device=device)

    def test_issued_session_carries_store_ttl(self, users, refresh_repo, clock, device):
        tokens = RefreshTokenService(repo=refresh_repo, ttl=timedelta(days=2), clock=clock)
        service = SessionService(jwt_provider=JwtProvider(), refresh_tokens=tokens, users=users)

        issued = service.register(full_name="Short Stay", email="short-stay@example.com", password=PASSWORD, device=device)

        assert issued.refresh_ttl == timedelta(days=2)
        stored = tokens.lookup(issued.refresh_token)
        assert stored.expires_at - stored.created_at == issued.refresh_ttl


class TestRefresh:
    def test_rotation_produces_fresh_secret(self, session_service, user, device):
        issued = _login(session_service, device)

        rotated = session_service.refresh(raw_secret=issued.refresh_token, device=device)

        assert hash_secret(rotated.refresh_token) != hash_secret(issued.refresh_token)
        assert rotated.session_id != issued.session_id
        assert JwtProvider().decode(rotated.access_token).subject_id == user.id

    def test_old_secret_dies_on_rotation(self, session_service, refresh_tokens, user, device):
        issued = _login(session_service, device)
        rotated = session_service.refresh(raw_secret=issued.refresh_token, device=device)

        with pytest.raises(RefreshRejectedError) as exc:
            session_service.refresh(raw_secret=issued.refresh_token, device=device)

        assert exc.value.reason == "reused"
        assert str(exc.value) == INVALID_REFRESH
        old = refresh_tokens.lookup(issued.refresh_token)
        assert old.revoked_reason == RevocationReason.ROTATED.value
        assert old.last_used_at is not None
        # o sucessor continua válido e guarda a linhagem
        new = refresh_tokens.lookup(rotated.refresh_token)
        assert new.is_revoked is False
        assert new.rotated_from_id == old.id

    def test_new_secret_keeps_working(self, session_service, user, device):
        issued = _login(session_service, device)
        second = session_service.refresh(raw_secret=issued.refresh_token, device=device)
        third = session_service.refresh(raw_secret=second.refresh_token, device=device)

        assert third.user.id == user.id

    def test_expired_secret_is_rejected_and_marked_expired(self, session_service, refresh_tokens, user, device, clock):
        issued = _login(session_service, device)
        clock.advance(days=30, seconds=1)

        with pytest.raises(RefreshRejectedError) as exc:
            session_service.refresh(raw_secret=issued.refresh_token, device=device)

        assert exc.value.reason == "expired"
        assert refresh_tokens.lookup(issued.refresh_token).revoked_reason == RevocationReason.EXPIRED.value

    def test_expiry_wins_even_for_revoked_rows(self, session_service, refresh_tokens, user, device, clock):
        issued = _login(session_service, device)
        session_service.logout(raw_secret=issued.refresh_token)
        clock.advance(days=31)

        with pytest.raises(RefreshRejectedError) as exc:
            session_service.refresh(raw_secret=issued.refresh_token, device=device)

        assert exc.value.reason == "expired"
        # revogação é monotônica: o motivo original não é sobrescrito
        assert refresh_tokens.lookup(issued.refresh_token).revoked_reason == RevocationReason.LOGOUT.value

    def test_unknown_and_missing_secrets_are_rejected(self, session_service, device):
        with pytest.raises(RefreshRejectedError) as unknown:
            session_service.refresh(raw_secret="ab" * 64, device=device)
        with pytest.raises(RefreshRejectedError) as missing:
            session_service.refresh(raw_secret="", device=device)

        assert unknown.value.reason == "unknown"
        assert missing.value.reason == "missing"

    def test_refresh_for_deleted_account_is_rejected(self, session_service, refresh_tokens, user, device):
        issued = _login(session_service, device)
        user.is_deleted = True

        with pytest.raises(RefreshRejectedError) as exc:
            session_service.refresh(raw_secret=issued.refresh_token, device=device)

        assert exc.value.reason == "user_inactive"

    def test_refresh_picks_up_current_role(self, session_service, users, user, device):
        issued = _login(session_service, device)
        users.set_role(user_id=user.id, role=Role.ADMIN)

        rotated = session_service.refresh(raw_secret=issued.refresh_token, device=device)

        assert JwtProvider().decode(rotated.access_token).role is Role.ADMIN

    def test_losing_a_rotation_race_fails(self, session_service, refresh_repo, user, device, monkeypatch):
        issued = _login(session_service, device)
        original = refresh_repo.revoke_if_active

        def other_request_wins_first(**kwargs):
            # a requisição concorrente rotaciona a linha entre o lookup e o UPDATE
            assert original(**kwargs) is True
            return original(**kwargs)

        monkeypatch.setattr(refresh_repo, "revoke_if_active", other_request_wins_first)

        with pytest.raises(RefreshRejectedError) as exc:
            session_service.refresh(raw_secret=issued.refresh_token, device=device)

        assert exc.value.reason == "race"

    def test_two_connections_rotating_same_secret(self, session, session_service, user, device, clock):
        issued = _login(session_service, device)
        session.commit()

        other = Session(bind=engine, expire_on_commit=False)
        try:
            other_tokens = RefreshTokenService(repo=RefreshTokenRepository(other), clock=clock)
            other_service = SessionService(
                jwt_provider=JwtProvider(),
                refresh_tokens=other_tokens,
                users=UserService(UserRepository(other), clock=clock),
            )
            # a outra conexão já leu a linha como ativa
            seen_by_other = RefreshTokenRepository(other).get_by_hash(hash_secret(issued.refresh_token))
            assert seen_by_other.is_revoked is False

            winner = session_service.refresh(raw_secret=issued.refresh_token, device=device)
            session.commit()

            assert other_tokens.revoke(seen_by_other, RevocationReason.ROTATED) is False
            with pytest.raises(RefreshRejectedError):
                other_service.refresh(raw_secret=issued.refresh_token, device=device)
            other.rollback()
        finally:
            other.close()

        assert winner.refresh_token != issued.refresh_token


class TestLogout:
    def test_logout_revokes_the_session(self, session_service, refresh_tokens, user, device):
        issued = _login(session_service, device)

        assert session_service.logout(raw_secret=issued.refresh_token) == user.id

        assert refresh_tokens.lookup(issued.refresh_token).revoked_reason == RevocationReason.LOGOUT.value
        with pytest.raises(RefreshRejectedError):
            session_service.refresh(raw_secret=issued.refresh_token, device=device)

    def test_logout_is_idempotent(self, session_service, device):
        assert session_service.logout(raw_secret=None) is None
        assert session_service.logout(raw_secret="ff" * 64) is None

    def test_logout_all_is_total(self, session_service, user, device):
        secrets = [_login(session_service, device).refresh_token for _ in range(3)]

        assert session_service.logout_all(user_id=user.id) == 3

        assert session_service.list_sessions(user_id=user.id) == []
        for raw in secrets:
            with pytest.raises(RefreshRejectedError) as exc:
                session_service.refresh(raw_secret=raw, device=device)
            assert exc.value.reason == "revoked"


class TestSessions:
    def test_list_sessions_hides_secret_material(self, session_service, user, device):
        issued = _login(session_service, device)

        views = session_service.list_sessions(user_id=user.id)

        assert [v.id for v in views] == [issued.session_id]
        fields = vars(views[0])
        assert "token_hash" not in fields
        assert issued.refresh_token not in fields.values()
        assert views[0].user_agent == device.user_agent

    def test_revoke_session_of_other_user_is_not_found(self, session_service, user, admin, device):
        issued = _login(session_service, device)

        with pytest.raises(NotFoundError):
            session_service.revoke_session(user_id=admin.id, session_id=issued.session_id)
        with pytest.raises(NotFoundError):
            session_service.revoke_session(user_id=user.id, session_id=999_999)

    def test_revoke_session_marks_manual_revoke(self, session_service, refresh_tokens, user, device):
        issued = _login(session_service, device)

        session_service.revoke_session(user_id=user.id, session_id=issued.session_id)

        assert refresh_tokens.lookup(issued.refresh_token).revoked_reason == RevocationReason.MANUAL_REVOKE.value

    def test_revoking_an_inactive_session_is_not_found(self, session_service, refresh_tokens, user, device, clock):
        issued = _login(session_service, device)
        session_service.revoke_session(user_id=user.id, session_id=issued.session_id)

        with pytest.raises(NotFoundError):
            session_service.revoke_session(user_id=user.id, session_id=issued.session_id)
        assert refresh_tokens.lookup(issued.refresh_token).revoked_reason == RevocationReason.MANUAL_REVOKE.value

        expiring = _login(session_service, device)
        clock.advance(days=31)
        with pytest.raises(NotFoundError):
            session_service.revoke_session(user_id=user.id, session_id=expiring.session_id)

    def test_end_to_end_flow(self, session_service, user, device):
        issued = _login(session_service, device)
        rotated = session_service.refresh(raw_secret=issued.refresh_token, device=device)

        with pytest.raises(RefreshRejectedError):
            session_service.refresh(raw_secret=issued.refresh_token, device=device)
        assert [v.id for v in session_service.list_sessions(user_id=user.id)] == [rotated.session_id]

        session_service.revoke_session(user_id=user.id, session_id=rotated.session_id)

        assert session_service.list_sessions(user_id=user.id) == []
        with pytest.raises(RefreshRejectedError):
            session_service.refresh(raw_secret=rotated.refresh_token, device=device)
