from __future__ import annotations

from typing import Iterable, List

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from ..config.settings import AppSettings
from ..config.validators import validate_emphasis_color, validate_logo_url, validate_version_label
from ..core.errors import DuplicateVersionError, NotFoundError
from ..core.types import PortalBranding
from ..data import db
from ..data.repos import BrandingRepository, GameVersionRepository

logger = structlog.get_logger(__name__)


class PortalAdminService:
    """管理外觀設定與遊戲版本清單。"""

    def __init__(self, session_factory: sessionmaker, settings: AppSettings) -> None:
        self._session_factory = session_factory
        self._settings = settings

    def default_branding(self) -> PortalBranding:
        return PortalBranding(
            logo_url=self._settings.default_logo_url,
            emphasis_color=self._settings.default_emphasis_color,
        )

    def current_branding(self) -> PortalBranding:
        """回傳已儲存的外觀設定，尚未設定時使用預設值。"""

        with db.session_scope(self._session_factory) as session:
            model = BrandingRepository(session).get()
            if model is None:
                return self.default_branding()
            return PortalBranding(logo_url=model.logo_url, emphasis_color=model.emphasis_color)

    def update_branding(self, logo_url: str, emphasis_color: str) -> PortalBranding:
        branding = PortalBranding(
            logo_url=validate_logo_url(logo_url),
            emphasis_color=validate_emphasis_color(emphasis_color),
        )
        with db.session_scope(self._session_factory) as session:
            BrandingRepository(session).upsert(branding)

        logger.info("branding_updated", emphasis_color=branding.emphasis_color)
        return branding

    def list_versions(self) -> List[str]:
        with db.session_scope(self._session_factory) as session:
            return GameVersionRepository(session).list_labels()

    def add_version(self, label: str) -> List[str]:
        version = validate_version_label(label)
        try:
            with db.session_scope(self._session_factory) as session:
                repo = GameVersionRepository(session)
                if repo.exists(version):
                    raise DuplicateVersionError(f"La versión {version} ya existe")
                repo.add(version)
        except IntegrityError as error:
            raise DuplicateVersionError(f"La versión {version} ya existe") from error

        logger.info("version_added", version=version)
        return self.list_versions()

    def remove_version(self, label: str) -> List[str]:
        version = label.strip()
        with db.session_scope(self._session_factory) as session:
            if not GameVersionRepository(session).remove(version):
                raise NotFoundError(f"Versión no encontrada: {version}")

        logger.info("version_removed", version=version)
        return self.list_versions()

    def seed_versions(self, labels: Iterable[str]) -> int:
        """版本表為空時寫入預設版本，回傳新增筆數。"""

        versions = [validate_version_label(label) for label in labels]
        with db.session_scope(self._session_factory) as session:
            repo = GameVersionRepository(session)
            if repo.count() > 0:
                return 0
            for version in dict.fromkeys(versions):
                repo.add(version)

        logger.info("versions_seeded", count=len(set(versions)))
        return len(set(versions))
