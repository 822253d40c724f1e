from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple

from ..core.types import DEFAULT_STATUS, IssueType

IN_REVIEW = "En revisión"

_BUG_STATUSES = (DEFAULT_STATUS, IN_REVIEW, "Error Solucionado", "Bug Solucionado", "No reproducible")

_STATUS_OPTIONS: Dict[IssueType, Tuple[str, ...]] = {
    IssueType.BUG: _BUG_STATUSES,
    IssueType.CRITICAL_ERROR: _BUG_STATUSES,
    IssueType.PROPOSAL: (DEFAULT_STATUS, "Propuesta Aceptada", "Propuesta Rechazada", IN_REVIEW),
    IssueType.SUGGESTION: (DEFAULT_STATUS, "Sugerencia en revisión", "Aceptada", "Rechazada"),
    IssueType.OTHER: (DEFAULT_STATUS, "Comentario Leído", IN_REVIEW),
}


class StatusTone(str, Enum):
    """狀態在介面上的呈現色系。"""

    SUCCESS = "success"
    DANGER = "danger"
    INFO = "info"
    NEUTRAL = "neutral"


def status_options(issue_type: IssueType) -> List[str]:
    """回傳管理員可為此分類設定的狀態。"""

    return list(_STATUS_OPTIONS[issue_type])


def status_tone(status: str) -> StatusTone:
    if any(keyword in status for keyword in ("Solucionado", "Aceptada", "Leído")):
        return StatusTone.SUCCESS
    if "Rechazada" in status:
        return StatusTone.DANGER
    if "revisión" in status:
        return StatusTone.INFO
    return StatusTone.NEUTRAL
