from __future__ import annotations

from typing import List, Optional

import structlog

from ..config.settings import AppSettings
from ..core.errors import PermissionDeniedError
from ..core.types import IssueType, PortalBranding, Report, ReportDraft, User
from ..data import db
from .auth import AuthService
from .portal_admin import PortalAdminService
from .report_service import ReportService
from .session_store import SessionStore

logger = structlog.get_logger(__name__)


class BugTrackPortal:
    """入口網站狀態：登入者、回報清單、版本清單與外觀設定。

    狀態只在 ``bootstrap()`` 與明確的登入／登出時與本機 session 檔同步。
    """

    def __init__(self, settings: AppSettings, session_store: Optional[SessionStore] = None) -> None:
        self._settings = settings
        self._engine = db.create_db_engine(settings.db_url)
        db.init_schema(self._engine)
        self._session_factory = db.create_session_factory(self._engine)
        self._session_store = session_store or SessionStore(settings.session_file)

        self.auth = AuthService(self._session_factory, bcrypt_rounds=settings.bcrypt_rounds)
        self.report_service = ReportService(self._session_factory)
        self.admin = PortalAdminService(self._session_factory, settings)

        self.current_user: Optional[User] = None
        self.reports: List[Report] = []
        self.versions: List[str] = []
        self.branding: PortalBranding = self.admin.default_branding()

    def bootstrap(self) -> "BugTrackPortal":
        """載入外觀設定、還原登入狀態並讀取回報與版本。"""

        self.branding = self.admin.current_branding()
        self._restore_session()
        self.reload()
        return self

    def reload(self) -> None:
        self.reports = self.report_service.list_reports()
        self.versions = self.admin.list_versions()

    def close(self) -> None:
        self._engine.dispose()

    def _restore_session(self) -> None:
        user_id = self._session_store.load()
        if user_id is None:
            return
        user = self.auth.refresh(user_id)
        if user is None:
            logger.info("stale_session_cleared", user_id=user_id)
            self._session_store.clear()
            return
        self.current_user = user

    def register(self, username: str, password: str) -> User:
        return self._start_session(self.auth.register(username, password))

    def login(self, username: str, password: str) -> User:
        return self._start_session(self.auth.login(username, password))

    def _start_session(self, user: User) -> User:
        self.current_user = user
        self._session_store.save(user)
        return user

    def logout(self) -> None:
        self.current_user = None
        self._session_store.clear()

    def require_user(self) -> User:
        if self.current_user is None:
            raise PermissionDeniedError("Inicia sesión para continuar")
        return self.current_user

    def require_admin(self) -> User:
        user = self.require_user()
        if not user.is_admin:
            raise PermissionDeniedError("Se requieren permisos de administrador")
        return user

    def next_report_code(self) -> Optional[str]:
        return self.report_service.preview_code(self.require_user())

    def submit_report(self, draft: ReportDraft) -> Report:
        user = self.require_user()
        report = self.report_service.submit(user.id, draft)
        self.current_user = self.auth.refresh(user.id) or user.model_copy(
            update={"submission_count": user.submission_count + 1}
        )
        self._session_store.save(self.current_user)
        self.reports = self.report_service.list_reports()
        return report

    def reports_by_type(self, issue_type: Optional[IssueType] = None) -> List[Report]:
        """依分類篩選已載入的回報，None 代表全部。"""

        if issue_type is None:
            return list(self.reports)
        return [report for report in self.reports if report.type == issue_type]

    def update_report_status(self, report_id: str, status: str) -> Report:
        self.require_admin()
        updated = self.report_service.update_status(report_id, status)
        self.reports = [updated if report.id == report_id else report for report in self.reports]
        return updated

    def update_branding(self, logo_url: str, emphasis_color: str) -> PortalBranding:
        self.require_admin()
        self.branding = self.admin.update_branding(logo_url, emphasis_color)
        return self.branding

    def add_version(self, label: str) -> List[str]:
        self.require_admin()
        self.versions = self.admin.add_version(label)
        return self.versions

    def remove_version(self, label: str) -> List[str]:
        self.require_admin()
        self.versions = self.admin.remove_version(label)
        return self.versions

    def set_admin(self, username: str, is_admin: bool = True) -> User:
        """變更管理員權限；尚無任何管理員時允許建立第一位。"""

        if self.auth.has_admin():
            self.require_admin()
        user = self.auth.promote(username, is_admin=is_admin)
        if self.current_user is not None and self.current_user.id == user.id:
            self._start_session(user)
        return user
