from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from ..core.types import DEFAULT_STATUS, IssueType, MediaAttachment, PortalBranding
from ..core.utils import utc_now, version_sort_key
from . import schemas

BRANDING_ROW_ID = 1


class BaseRepository:
    """封裝共同的 Session 行為。"""

    def __init__(self, session: Session) -> None:
        self.session = session


class UserRepository(BaseRepository):
    """使用者資料存取。"""

    def get(self, user_id: str) -> Optional[schemas.UserModel]:
        return self.session.get(schemas.UserModel, user_id)

    def get_by_username(self, username: str) -> Optional[schemas.UserModel]:
        return (
            self.session.query(schemas.UserModel)
            .filter(schemas.UserModel.username == username)
            .one_or_none()
        )

    def create(self, *, username: str, password_hash: str, user_hex: str) -> schemas.UserModel:
        model = schemas.UserModel(
            username=username,
            password_hash=password_hash,
            user_hex=user_hex,
            submission_count=0,
            is_admin=False,
        )
        self.session.add(model)
        self.session.flush()
        return model

    def claim_submission_slot(self, user_id: str, expected_count: int) -> bool:
        """以條件式 UPDATE 將計數器由 expected_count 加一，成功時回傳 True。

        計數已被其他交易修改時不會更新任何資料列。
        """

        result = self.session.execute(
            update(schemas.UserModel)
            .where(schemas.UserModel.id == user_id)
            .where(schemas.UserModel.submission_count == expected_count)
            .values(submission_count=expected_count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def admin_count(self) -> int:
        return (
            self.session.query(schemas.UserModel)
            .filter(schemas.UserModel.is_admin.is_(True))
            .count()
        )

    def set_admin(self, model: schemas.UserModel, is_admin: bool) -> None:
        model.is_admin = is_admin
        self.session.add(model)


class ReportRepository(BaseRepository):
    """回報資料存取。"""

    def create(
        self,
        *,
        user: schemas.UserModel,
        version: str,
        issue_type: IssueType,
        description: str,
        report_code: str,
        media: Optional[MediaAttachment] = None,
        created_at: Optional[datetime] = None,
    ) -> schemas.ReportModel:
        model = schemas.ReportModel(
            user_id=user.id,
            username=user.username,
            version=version,
            type=issue_type.value,
            description=description,
            media_url=media.url if media else None,
            media_type=media.media_type.value if media else None,
            report_code=report_code,
            status=DEFAULT_STATUS,
            created_at=created_at or utc_now(),
        )
        self.session.add(model)
        self.session.flush()
        return model

    def get(self, report_id: str) -> Optional[schemas.ReportModel]:
        return self.session.get(schemas.ReportModel, report_id)

    def list_recent(self, issue_type: Optional[IssueType] = None) -> List[schemas.ReportModel]:
        query = self.session.query(schemas.ReportModel)
        if issue_type is not None:
            query = query.filter(schemas.ReportModel.type == issue_type.value)
        return query.order_by(schemas.ReportModel.created_at.desc()).all()

    def update_status(self, model: schemas.ReportModel, status: str) -> None:
        model.status = status
        self.session.add(model)


class BrandingRepository(BaseRepository):
    """入口網站外觀設定存取。"""

    def get(self) -> Optional[schemas.PortalSettingsModel]:
        return self.session.get(schemas.PortalSettingsModel, BRANDING_ROW_ID)

    def upsert(self, branding: PortalBranding) -> schemas.PortalSettingsModel:
        model = self.get()
        if model is None:
            model = schemas.PortalSettingsModel(id=BRANDING_ROW_ID)
        model.logo_url = branding.logo_url
        model.emphasis_color = branding.emphasis_color
        self.session.add(model)
        return model


class GameVersionRepository(BaseRepository):
    """遊戲版本清單存取。"""

    def list_labels(self) -> List[str]:
        """回傳所有版本，最新版本在前。"""

        labels = [row.version for row in self.session.query(schemas.GameVersionModel).all()]
        return sorted(labels, key=version_sort_key, reverse=True)

    def exists(self, label: str) -> bool:
        return self.session.get(schemas.GameVersionModel, label) is not None

    def count(self) -> int:
        return self.session.query(schemas.GameVersionModel).count()

    def add(self, label: str) -> schemas.GameVersionModel:
        model = schemas.GameVersionModel(version=label)
        self.session.add(model)
        self.session.flush()
        return model

    def remove(self, label: str) -> bool:
        model = self.session.get(schemas.GameVersionModel, label)
        if model is None:
            return False
        self.session.delete(model)
        return True
