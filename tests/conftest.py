from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from bugtrack_center.config.settings import AppSettings
from bugtrack_center.services.portal import BugTrackPortal


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        DB_URL=f"sqlite:///{tmp_path / 'bugtrack.db'}",
        SESSION_FILE=str(tmp_path / "session.json"),
        BCRYPT_ROUNDS=4,
    )


@pytest.fixture
def portal(settings: AppSettings) -> Iterator[BugTrackPortal]:
    instance = BugTrackPortal(settings)
    instance.admin.seed_versions(settings.seed_versions)
    instance.bootstrap()
    yield instance
    instance.close()


@pytest.fixture
def admin_portal(portal: BugTrackPortal) -> BugTrackPortal:
    portal.register("admin", "admin-pass")
    portal.auth.promote("admin")
    portal.login("admin", "admin-pass")
    return portal
