from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ..config.settings import get_settings
from ..core.logging import configure_logging
from ..core.types import IssueType, Report, ReportDraft
from ..services.media import attachment_from_path
from ..services.status_catalog import status_options, status_tone
from .guards import open_portal

app = typer.Typer(help="BugTrack Center CLI")
versions_app = typer.Typer(help="管理遊戲版本清單")
branding_app = typer.Typer(help="管理入口網站外觀")
app.add_typer(versions_app, name="versions")
app.add_typer(branding_app, name="branding")


@app.callback()
def main_callback() -> None:
    configure_logging(get_settings().log_level_value)


@app.command("init-db")
def command_init_db() -> None:
    """建立資料表並寫入預設遊戲版本。"""

    settings = get_settings()
    with open_portal() as portal:
        created = portal.admin.seed_versions(settings.seed_versions)
    typer.echo(f"Database ready: {settings.db_url} (versions seeded: {created})")


@app.command("register")
def command_register(
    username: str = typer.Argument(..., help="使用者名稱"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """註冊新帳號並登入。"""

    with open_portal() as portal:
        user = portal.register(username, password)
    typer.echo(f"Registered {user.username} (HEX: {user.user_hex})")


@app.command("login")
def command_login(
    username: str = typer.Argument(..., help="使用者名稱"),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    with open_portal() as portal:
        user = portal.login(username, password)
    typer.echo(f"Logged in as {user.username} (HEX: {user.user_hex})")


@app.command("logout")
def command_logout() -> None:
    with open_portal() as portal:
        portal.logout()
    typer.echo("Logged out.")


@app.command("whoami")
def command_whoami() -> None:
    """顯示目前登入者與下一個回報編號。"""

    with open_portal() as portal:
        user = portal.require_user()
        next_code = portal.next_report_code()
    role = "admin" if user.is_admin else "user"
    typer.echo(f"{user.username} [{role}] HEX: {user.user_hex}")
    typer.echo(f"Reports submitted: {user.submission_count}")
    typer.echo(f"Next code: {next_code or 'Ciclo de reportes completado (Z9).'}")


@app.command("submit")
def command_submit(
    description: str = typer.Option(..., "--description", "-d", help="詳細描述"),
    issue_type: IssueType = typer.Option(IssueType.BUG, "--type", "-t", help="回報分類"),
    version: Optional[str] = typer.Option(None, "--version", "-v", help="遊戲版本，預設為最新版本"),
    media: Optional[Path] = typer.Option(None, "--media", "-m", help="圖片或影片附件"),
) -> None:
    """送出新的回報。"""

    settings = get_settings()
    with open_portal() as portal:
        portal.require_user()
        attachment = attachment_from_path(media, settings.max_video_size_mb) if media else None
        draft = ReportDraft(
            version=version or (portal.versions[0] if portal.versions else ""),
            issue_type=issue_type,
            description=description,
            media=attachment,
        )
        report = portal.submit_report(draft)
    typer.echo(f"Submitted {report.report_code} ({report.id})")


@app.command("list")
def command_list(
    issue_type: Optional[IssueType] = typer.Option(None, "--type", "-t", help="只顯示此分類"),
) -> None:
    """列出回報，最新的在前。"""

    with open_portal() as portal:
        portal.require_user()
        reports = portal.reports_by_type(issue_type)
    if not reports:
        typer.echo("No reports.")
        return
    for report in reports:
        _print_report(report)


@app.command("set-status")
def command_set_status(
    report_id: str = typer.Argument(..., help="回報 ID"),
    status: str = typer.Argument(..., help="新狀態"),
) -> None:
    """更新回報狀態（需管理員）。"""

    with open_portal() as portal:
        report = portal.update_report_status(report_id, status)
    typer.echo(f"{report.report_code}: {report.status}")


@app.command("promote")
def command_promote(
    username: str = typer.Argument(..., help="使用者名稱"),
    revoke: bool = typer.Option(False, help="取消管理員權限"),
) -> None:
    """設定管理員權限；已有管理員時需以管理員身分登入。"""

    with open_portal() as portal:
        user = portal.set_admin(username, is_admin=not revoke)
    typer.echo(f"{user.username}: admin={user.is_admin}")


@versions_app.command("list")
def command_versions_list() -> None:
    with open_portal() as portal:
        versions = portal.versions
    for version in versions:
        typer.echo(version)


@versions_app.command("add")
def command_versions_add(label: str = typer.Argument(..., help="版本名稱")) -> None:
    with open_portal() as portal:
        portal.add_version(label)
    typer.echo(f"Added {label.strip()}")


@versions_app.command("remove")
def command_versions_remove(label: str = typer.Argument(..., help="版本名稱")) -> None:
    with open_portal() as portal:
        portal.remove_version(label)
    typer.echo(f"Removed {label.strip()}")


@branding_app.command("show")
def command_branding_show() -> None:
    with open_portal() as portal:
        branding = portal.branding
    typer.echo(f"Logo: {branding.logo_url}")
    typer.echo(f"Color: {branding.emphasis_color}")


@branding_app.command("set")
def command_branding_set(
    logo_url: Optional[str] = typer.Option(None, "--logo-url", help="Logo 圖片 URL"),
    color: Optional[str] = typer.Option(None, "--color", help="強調色 #RRGGBB"),
) -> None:
    """更新外觀設定，未指定的欄位保留原值。"""

    with open_portal() as portal:
        branding = portal.update_branding(
            logo_url if logo_url is not None else portal.branding.logo_url,
            color if color is not None else portal.branding.emphasis_color,
        )
    typer.echo(f"Logo: {branding.logo_url}")
    typer.echo(f"Color: {branding.emphasis_color}")


def _print_report(report: Report) -> None:
    """輸出單筆回報摘要。"""

    created = report.created_at.strftime("%Y-%m-%d %H:%M")
    tone = status_tone(report.status).value
    typer.echo(
        f"{report.report_code}  [{report.type.value}]  v{report.version}  "
        f"{report.status} ({tone})  {report.username}  {created}"
    )
    typer.echo(f"  id: {report.id}")
    typer.echo(f"  {report.description}")
    if report.has_media:
        typer.echo(f"  media ({report.media_type.value}): {report.media_url}")
    typer.echo(f"  options: {', '.join(status_options(report.type))}")
