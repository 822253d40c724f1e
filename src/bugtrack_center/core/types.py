from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .utils import utc_now

DEFAULT_STATUS = "Pendiente"


class IssueType(str, Enum):
    """回報分類。"""

    BUG = "Bug"
    CRITICAL_ERROR = "Error crítico"
    PROPOSAL = "Propuesta"
    SUGGESTION = "Sugerencia"
    OTHER = "Otros"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class User(BaseModel):
    """登入中的使用者資訊。"""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    user_hex: str
    submission_count: int = Field(0, ge=0)
    is_admin: bool = False

    @classmethod
    def from_model(cls, row: Any) -> "User":
        return cls(
            id=row.id,
            username=row.username,
            user_hex=row.user_hex,
            submission_count=row.submission_count or 0,
            is_admin=bool(row.is_admin),
        )


class MediaAttachment(BaseModel):
    """回報附件（圖片或影片）的位置與類型。"""

    url: str
    media_type: MediaType


class ReportDraft(BaseModel):
    """使用者填寫、尚未送出的回報內容。"""

    version: str
    issue_type: IssueType = IssueType.BUG
    description: str
    media: Optional[MediaAttachment] = None


class Report(BaseModel):
    """已儲存的回報。"""

    id: str
    user_id: str
    username: str
    version: str
    type: IssueType
    description: str
    media_url: Optional[str] = None
    media_type: Optional[MediaType] = None
    report_code: str
    status: str = DEFAULT_STATUS
    created_at: datetime

    @property
    def has_media(self) -> bool:
        return bool(self.media_url)

    @classmethod
    def from_model(cls, row: Any) -> "Report":
        """由資料列重建回報，缺少的狀態與時間補上預設值。"""

        return cls(
            id=row.id,
            user_id=row.user_id,
            username=row.username,
            version=row.version,
            type=IssueType(row.type),
            description=row.description,
            media_url=row.media_url,
            media_type=MediaType(row.media_type) if row.media_type else None,
            report_code=row.report_code,
            status=row.status or DEFAULT_STATUS,
            created_at=row.created_at or utc_now(),
        )


class PortalBranding(BaseModel):
    """入口網站外觀設定。"""

    logo_url: str
    emphasis_color: str
