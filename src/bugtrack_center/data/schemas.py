from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base
from ..core.types import DEFAULT_STATUS
from ..core.utils import new_id, utc_now


class UserModel(Base):
    """使用者資料表。"""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    user_hex: Mapped[str] = mapped_column(String(6), nullable=False)
    submission_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    reports: Mapped[list["ReportModel"]] = relationship(back_populates="user")


class ReportModel(Base):
    """回報資料表。"""

    __tablename__ = "reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    username: Mapped[str] = mapped_column(String(64), nullable=False)
    version: Mapped[str] = mapped_column(String(20), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    media_url: Mapped[str | None] = mapped_column(Text)
    media_type: Mapped[str | None] = mapped_column(String(8))
    report_code: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str | None] = mapped_column(String(64), default=DEFAULT_STATUS)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=utc_now, index=True)

    user: Mapped["UserModel"] = relationship(back_populates="reports")


class PortalSettingsModel(Base):
    """入口網站外觀設定，只使用 id = 1 這一列。"""

    __tablename__ = "portal_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    logo_url: Mapped[str] = mapped_column(Text, nullable=False)
    emphasis_color: Mapped[str] = mapped_column(String(7), nullable=False)


class GameVersionModel(Base):
    __tablename__ = "game_versions"

    version: Mapped[str] = mapped_column(String(20), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
