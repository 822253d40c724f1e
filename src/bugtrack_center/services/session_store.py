from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import structlog

from ..core.types import User

logger = structlog.get_logger(__name__)


class SessionStore:
    """將登入狀態保存在本機 JSON 檔案。

    只在啟動時讀取、登入時寫入、登出時刪除。
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[str]:
        """回傳保存的使用者 ID；檔案損毀時清除並視為未登入。"""

        if not self._path.exists():
            return None
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
            user_id = payload["id"]
        except (json.JSONDecodeError, KeyError, TypeError):
            logger.warning("session_file_corrupt", path=str(self._path))
            self.clear()
            return None
        if not isinstance(user_id, str) or not user_id:
            self.clear()
            return None
        return user_id

    def save(self, user: User) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(user.model_dump_json(), encoding="utf-8")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
