from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, NoReturn

import typer

from ..config.settings import get_settings
from ..core.errors import BugTrackError
from ..services.portal import BugTrackPortal


def exit_with_error(error: BugTrackError) -> NoReturn:
    """輸出錯誤訊息並以代碼 2 結束程式。"""

    typer.echo(f"[ERROR] {error}", err=True)
    raise typer.Exit(code=2)


@contextmanager
def open_portal() -> Iterator[BugTrackPortal]:
    """建立並載入入口網站，將服務層錯誤轉為 CLI 錯誤輸出。"""

    portal = BugTrackPortal(get_settings())
    try:
        yield portal.bootstrap()
    except BugTrackError as error:
        exit_with_error(error)
    finally:
        portal.close()
