from __future__ import annotations

from typing import List, Optional

import structlog
from sqlalchemy.orm import sessionmaker
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..core.codes import format_report_code, label_for_index, next_report_code
from ..core.errors import (
    CounterConflictError,
    InvalidInputError,
    NotFoundError,
    SubmissionLimitError,
)
from ..core.types import IssueType, Report, ReportDraft, User
from ..data import db
from ..data.repos import GameVersionRepository, ReportRepository, UserRepository
from .status_catalog import status_options

logger = structlog.get_logger(__name__)

SUBMISSION_ATTEMPTS = 3


class ReportService:
    """建立、查詢與分類回報。"""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @staticmethod
    def preview_code(user: User) -> Optional[str]:
        """回傳使用者下一筆回報會取得的編號。"""

        return next_report_code(user.user_hex, user.submission_count)

    @retry(
        retry=retry_if_exception_type(CounterConflictError),
        wait=wait_exponential(multiplier=0.05, max=0.5),
        stop=stop_after_attempt(SUBMISSION_ATTEMPTS),
        reraise=True,
    )
    def submit(self, user_id: str, draft: ReportDraft) -> Report:
        """在單一交易內佔用計數器並寫入回報。"""

        description = draft.description.strip()
        if not description:
            raise InvalidInputError("La descripción es obligatoria")

        with db.session_scope(self._session_factory) as session:
            users = UserRepository(session)
            user = users.get(user_id)
            if user is None:
                raise NotFoundError(f"Usuario no encontrado: {user_id}")
            if not GameVersionRepository(session).exists(draft.version):
                raise InvalidInputError(f"Versión no registrada: {draft.version}")

            count = user.submission_count
            label = label_for_index(count)
            if label is None:
                raise SubmissionLimitError("Ciclo de reportes completado (Z9).")

            if not users.claim_submission_slot(user.id, expected_count=count):
                logger.warning("counter_conflict", user_id=user.id, expected=count)
                raise CounterConflictError(f"El contador de {user.username} cambió durante el envío")

            model = ReportRepository(session).create(
                user=user,
                version=draft.version,
                issue_type=draft.issue_type,
                description=description,
                report_code=format_report_code(user.user_hex, label),
                media=draft.media,
            )
            report = Report.from_model(model)

        logger.info("report_submitted", report_id=report.id, report_code=report.report_code)
        return report

    def list_reports(self, issue_type: Optional[IssueType] = None) -> List[Report]:
        """回傳回報清單，最新的在前。"""

        with db.session_scope(self._session_factory) as session:
            rows = ReportRepository(session).list_recent(issue_type)
            return [Report.from_model(row) for row in rows]

    def update_status(self, report_id: str, status: str) -> Report:
        with db.session_scope(self._session_factory) as session:
            repo = ReportRepository(session)
            model = repo.get(report_id)
            if model is None:
                raise NotFoundError(f"Reporte no encontrado: {report_id}")
            allowed = status_options(IssueType(model.type))
            if status not in allowed:
                raise InvalidInputError(
                    f"Estado no válido para {model.type}: {status!r} (opciones: {', '.join(allowed)})"
                )
            repo.update_status(model, status)
            report = Report.from_model(model)

        logger.info("report_status_updated", report_id=report_id, status=status)
        return report
