import pytest

from bugtrack_center.core.types import IssueType
from bugtrack_center.services.status_catalog import StatusTone, status_options, status_tone


def test_every_issue_type_starts_pending() -> None:
    for issue_type in IssueType:
        assert status_options(issue_type)[0] == "Pendiente"


def test_bug_and_critical_share_options() -> None:
    assert status_options(IssueType.BUG) == status_options(IssueType.CRITICAL_ERROR)
    assert "No reproducible" in status_options(IssueType.BUG)


def test_proposal_and_suggestion_options() -> None:
    assert status_options(IssueType.PROPOSAL) == [
        "Pendiente",
        "Propuesta Aceptada",
        "Propuesta Rechazada",
        "En revisión",
    ]
    assert "Sugerencia en revisión" in status_options(IssueType.SUGGESTION)
    assert status_options(IssueType.OTHER) == ["Pendiente", "Comentario Leído", "En revisión"]


@pytest.mark.parametrize(
    ("status", "tone"),
    [
        ("Bug Solucionado", StatusTone.SUCCESS),
        ("Propuesta Aceptada", StatusTone.SUCCESS),
        ("Comentario Leído", StatusTone.SUCCESS),
        ("Rechazada", StatusTone.DANGER),
        ("Sugerencia en revisión", StatusTone.INFO),
        ("Pendiente", StatusTone.NEUTRAL),
        ("No reproducible", StatusTone.NEUTRAL),
    ],
)
def test_status_tone(status: str, tone: StatusTone) -> None:
    assert status_tone(status) is tone
