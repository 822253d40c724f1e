from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Tuple, Union
from uuid import uuid4


def utc_now() -> datetime:
    """回傳目前 UTC 時間。"""

    return datetime.now(tz=timezone.utc)


def new_id() -> str:
    """產生資料列使用的 UUID 字串。"""

    return str(uuid4())


def version_sort_key(label: str) -> Tuple[Tuple[int, Union[int, str]], ...]:
    """自然版本排序鍵：數字段以整數比較，其餘以字串比較。"""

    parts = re.split(r"[.\-]", label)
    return tuple((0, int(part)) if part.isdigit() else (1, part) for part in parts)
