from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import typer
import uvicorn

from pathfinder.api.app import create_app
from pathfinder.client.api import ApiClient
from pathfinder.client.editors import new_job
from pathfinder.config import get_settings
from pathfinder.db.codec import record_to_dict
from pathfinder.db.init import init_database
from pathfinder.db.repositories import Repository
from pathfinder.db.session import SessionLocal
from pathfinder.errors import ApiError
from pathfinder.logging_config import configure_logging

app = typer.Typer(help="Pathfinder CLI")
jobs_app = typer.Typer(help="Job tracker commands")

app.add_typer(jobs_app, name="jobs")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


@app.command("init")
def init_cmd() -> None:
    """Create the data directory and database tables."""
    configure_logging()
    tables = init_database()
    typer.echo(json.dumps({"ok": True, "tables": tables}, indent=2))


@app.command("health")
def health(base_url: str | None = typer.Option(None, "--base-url")) -> None:
    """Ping a running server."""
    configure_logging()
    try:
        payload = ApiClient(base_url).health()
    except ApiError as exc:
        typer.echo(json.dumps({"ok": False, "error": str(exc)}, indent=2))
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(payload, indent=2))


@jobs_app.command("list")
def jobs_list() -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        rows = Repository(db).list_jobs()
        typer.echo(
            json.dumps(
                [
                    {"id": row.id, "title": row.title, "company": row.company, "status": row.status}
                    for row in rows
                ],
                indent=2,
            )
        )


@jobs_app.command("add")
def jobs_add(
    title: str = typer.Option(..., "--title"),
    company: str = typer.Option(..., "--company"),
) -> None:
    configure_logging()
    ensure_initialized()
    payload = new_job(title, company)
    if payload is None:
        raise typer.BadParameter("title and company must not be blank")
    with SessionLocal() as db:
        row = Repository(db).create_job(payload.to_record())
        typer.echo(json.dumps(record_to_dict(row), indent=2))


@app.command("export")
def export(output: Path = typer.Option(..., "--output")) -> None:
    """Write every collection and the settings to a JSON file."""
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        payload = Repository(db).export_all()
    payload["exportedAt"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    typer.echo(json.dumps({"ok": True, "output": str(output), "jobs": len(payload["jobs"])}, indent=2))


@app.command("wipe")
def wipe(yes: bool = typer.Option(False, "--yes", help="Confirm deleting all data")) -> None:
    configure_logging()
    if not yes:
        typer.echo("Refusing to delete all data without --yes")
        raise typer.Exit(code=1)
    ensure_initialized()
    with SessionLocal() as db:
        Repository(db).delete_all()
    typer.echo(json.dumps({"ok": True}, indent=2))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)
