from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update

from bugtrack_center.config.settings import AppSettings
from bugtrack_center.core.codes import user_identifier
from bugtrack_center.core.errors import (
    AuthenticationError,
    CounterConflictError,
    DuplicateUserError,
    DuplicateVersionError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    SubmissionLimitError,
)
from bugtrack_center.core.types import IssueType, MediaAttachment, MediaType, ReportDraft
from bugtrack_center.data import db, schemas
from bugtrack_center.data.repos import ReportRepository, UserRepository
from bugtrack_center.services.portal import BugTrackPortal


def _set_submission_count(settings: AppSettings, user_id: str, count: int) -> None:
    engine = db.create_db_engine(settings.db_url)
    with engine.begin() as connection:
        connection.execute(
            update(schemas.UserModel).where(schemas.UserModel.id == user_id).values(submission_count=count)
        )
    engine.dispose()


def _draft(description: str = "El juego se cierra al guardar", **kwargs) -> ReportDraft:
    return ReportDraft(version=kwargs.pop("version", "1.2.5"), description=description, **kwargs)


def test_register_assigns_hex_and_persists_session(portal: BugTrackPortal, settings: AppSettings) -> None:
    user = portal.register("  Alex ", "secret")
    assert user.username == "Alex"
    assert user.user_hex == user_identifier("Alex")
    assert user.submission_count == 0
    assert user.is_admin is False

    restored = BugTrackPortal(settings).bootstrap()
    assert restored.current_user == user
    restored.close()


def test_duplicate_registration_rejected(portal: BugTrackPortal) -> None:
    portal.register("alex", "secret")
    with pytest.raises(DuplicateUserError, match="Usuario ya existe"):
        portal.register("alex", "other")


def test_login_checks_password(portal: BugTrackPortal) -> None:
    portal.register("alex", "secret")
    portal.logout()
    assert portal.current_user is None
    with pytest.raises(AuthenticationError, match="Credenciales inválidas"):
        portal.login("alex", "wrong")
    with pytest.raises(AuthenticationError):
        portal.login("nobody", "secret")
    assert portal.login("alex", "secret").username == "alex"


def test_stale_session_is_cleared(settings: AppSettings) -> None:
    settings.session_file.write_text('{"id": "missing-user"}', encoding="utf-8")
    portal = BugTrackPortal(settings).bootstrap()
    assert portal.current_user is None
    assert not settings.session_file.exists()
    portal.close()


def test_submit_assigns_sequential_codes(portal: BugTrackPortal) -> None:
    user = portal.register("alex", "secret")
    assert portal.next_report_code() == f"CI-{user.user_hex}-A"

    first = portal.submit_report(_draft())
    second = portal.submit_report(_draft(issue_type=IssueType.SUGGESTION))

    assert first.report_code == f"CI-{user.user_hex}-A"
    assert second.report_code == f"CI-{user.user_hex}-B"
    assert first.status == "Pendiente"
    assert portal.current_user.submission_count == 2
    assert portal.next_report_code() == f"CI-{user.user_hex}-C"
    assert {report.id for report in portal.reports} == {first.id, second.id}


def test_counter_26_yields_a1_for_alex(portal: BugTrackPortal, settings: AppSettings) -> None:
    user = portal.register("Alex", "secret")
    _set_submission_count(settings, user.id, 26)

    report = portal.submit_report(_draft())

    assert report.report_code == "CI-1F2E3E-A1"
    assert portal.current_user.submission_count == 27


def test_submission_blocked_when_exhausted(portal: BugTrackPortal, settings: AppSettings) -> None:
    user = portal.register("alex", "secret")
    _set_submission_count(settings, user.id, 259)
    last = portal.submit_report(_draft())
    assert last.report_code.endswith("-Z9")
    assert portal.next_report_code() is None

    with pytest.raises(SubmissionLimitError):
        portal.submit_report(_draft())
    assert portal.auth.refresh(user.id).submission_count == 260


def test_submit_validates_version_and_description(portal: BugTrackPortal) -> None:
    portal.register("alex", "secret")
    with pytest.raises(InvalidInputError):
        portal.submit_report(_draft(version="9.9"))
    with pytest.raises(InvalidInputError):
        portal.submit_report(_draft(description="   "))
    assert portal.current_user.submission_count == 0


def test_submit_requires_login(portal: BugTrackPortal) -> None:
    with pytest.raises(PermissionDeniedError):
        portal.submit_report(_draft())


def test_submit_keeps_media(portal: BugTrackPortal) -> None:
    portal.register("alex", "secret")
    media = MediaAttachment(url="https://cdn.example.com/clip.mp4", media_type=MediaType.VIDEO)
    report = portal.submit_report(_draft(media=media))
    assert report.has_media
    assert report.media_type is MediaType.VIDEO
    assert portal.reports[0].media_url == media.url


def test_counter_conflict_is_retried(portal: BugTrackPortal, monkeypatch: pytest.MonkeyPatch) -> None:
    user = portal.register("alex", "secret")
    original = UserRepository.claim_submission_slot
    calls = {"count": 0}

    def flaky(self, user_id, expected_count):
        calls["count"] += 1
        if calls["count"] == 1:
            return False
        return original(self, user_id, expected_count)

    monkeypatch.setattr(UserRepository, "claim_submission_slot", flaky)
    report = portal.submit_report(_draft())

    assert calls["count"] == 2
    assert report.report_code == f"CI-{user.user_hex}-A"
    assert len(portal.reports) == 1


def test_counter_conflict_gives_up(portal: BugTrackPortal, monkeypatch: pytest.MonkeyPatch) -> None:
    user = portal.register("alex", "secret")
    monkeypatch.setattr(UserRepository, "claim_submission_slot", lambda self, user_id, expected_count: False)

    with pytest.raises(CounterConflictError):
        portal.submit_report(_draft())
    assert portal.report_service.list_reports() == []
    assert portal.auth.refresh(user.id).submission_count == 0


def test_claim_slot_is_conditional(portal: BugTrackPortal, settings: AppSettings) -> None:
    user = portal.register("alex", "secret")
    factory = db.create_session_factory(db.create_db_engine(settings.db_url))
    with db.session_scope(factory) as session:
        repo = UserRepository(session)
        assert repo.claim_submission_slot(user.id, expected_count=0) is True
        assert repo.claim_submission_slot(user.id, expected_count=0) is False
    assert portal.auth.refresh(user.id).submission_count == 1


def test_reports_listed_newest_first(portal: BugTrackPortal, settings: AppSettings) -> None:
    portal.register("alex", "secret")
    factory = db.create_session_factory(db.create_db_engine(settings.db_url))
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)
    with db.session_scope(factory) as session:
        user = UserRepository(session).get_by_username("alex")
        repo = ReportRepository(session)
        for offset, code in enumerate(["CI-X-A", "CI-X-B", "CI-X-C"]):
            repo.create(
                user=user,
                version="1.0",
                issue_type=IssueType.BUG if offset != 1 else IssueType.PROPOSAL,
                description=code,
                report_code=code,
                created_at=base + timedelta(minutes=offset),
            )

    portal.reload()
    assert [report.report_code for report in portal.reports] == ["CI-X-C", "CI-X-B", "CI-X-A"]
    assert [r.report_code for r in portal.reports_by_type(IssueType.BUG)] == ["CI-X-C", "CI-X-A"]
    assert len(portal.reports_by_type(None)) == 3


def test_status_update_requires_admin(portal: BugTrackPortal) -> None:
    portal.register("alex", "secret")
    report = portal.submit_report(_draft())
    with pytest.raises(PermissionDeniedError):
        portal.update_report_status(report.id, "En revisión")


def test_first_admin_can_be_set_without_admin_session(portal: BugTrackPortal, settings: AppSettings) -> None:
    portal.register("alex", "secret")
    assert portal.auth.has_admin() is False

    user = portal.set_admin("alex")
    assert user.is_admin is True
    assert portal.current_user is not None and portal.current_user.is_admin is True

    restored = BugTrackPortal(settings).bootstrap()
    assert restored.current_user is not None and restored.current_user.is_admin is True
    restored.close()


def test_set_admin_requires_admin_once_one_exists(admin_portal: BugTrackPortal) -> None:
    admin_portal.register("mallory", "secret")
    with pytest.raises(PermissionDeniedError):
        admin_portal.set_admin("mallory")
    with pytest.raises(PermissionDeniedError):
        admin_portal.set_admin("admin", is_admin=False)

    admin_portal.logout()
    with pytest.raises(PermissionDeniedError):
        admin_portal.set_admin("mallory")

    admin_portal.login("admin", "admin-pass")
    assert admin_portal.set_admin("mallory").is_admin is True
    with pytest.raises(NotFoundError):
        admin_portal.set_admin("nobody")


def test_admin_updates_status(admin_portal: BugTrackPortal) -> None:
    report = admin_portal.submit_report(_draft(issue_type=IssueType.PROPOSAL))

    updated = admin_portal.update_report_status(report.id, "Propuesta Aceptada")

    assert updated.status == "Propuesta Aceptada"
    assert admin_portal.reports[0].status == "Propuesta Aceptada"
    with pytest.raises(InvalidInputError):
        admin_portal.update_report_status(report.id, "Bug Solucionado")
    with pytest.raises(NotFoundError):
        admin_portal.update_report_status("missing", "Pendiente")


def test_versions_management(admin_portal: BugTrackPortal) -> None:
    assert admin_portal.versions[0] == "1.2.5"
    assert admin_portal.versions[-1] == "1.0"

    versions = admin_portal.add_version("1.10")
    assert versions[0] == "1.10"
    with pytest.raises(DuplicateVersionError):
        admin_portal.add_version("1.10")

    assert "1.0" not in admin_portal.remove_version("1.0")
    with pytest.raises(NotFoundError):
        admin_portal.remove_version("1.0")


def test_seed_versions_only_once(portal: BugTrackPortal, settings: AppSettings) -> None:
    assert portal.admin.seed_versions(["3.0"]) == 0
    assert portal.admin.list_versions() == sorted(
        settings.seed_versions, key=lambda v: [int(p) for p in v.split(".")], reverse=True
    )


def test_branding_defaults_and_update(admin_portal: BugTrackPortal, settings: AppSettings) -> None:
    assert admin_portal.branding.emphasis_color == "#6366f1"
    assert admin_portal.branding.logo_url == settings.default_logo_url

    branding = admin_portal.update_branding("https://example.com/logo.png", "#FF0000")
    assert branding.emphasis_color == "#ff0000"

    reloaded = BugTrackPortal(settings).bootstrap()
    assert reloaded.branding == branding
    reloaded.close()

    with pytest.raises(InvalidInputError):
        admin_portal.update_branding("https://example.com/logo.png", "rojo")


def test_non_admin_cannot_manage_portal(portal: BugTrackPortal) -> None:
    portal.register("alex", "secret")
    with pytest.raises(PermissionDeniedError):
        portal.add_version("2.0")
    with pytest.raises(PermissionDeniedError):
        portal.update_branding("https://example.com/logo.png", "#000000")
