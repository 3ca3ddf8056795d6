#!/usr/bin/env python3
"""Command line interface for the Real Estate API.

Usage:
    cd app
    python cli.py server          # Start API server
    python cli.py init-db         # Create database tables
    python cli.py create-admin    # Create an administrator account
    python cli.py dashboard       # Start the admin dashboard
"""

import subprocess
import sys
from pathlib import Path

import typer
import uvicorn

from config import get_settings
from logging_config import setup_logging

SETTINGS = get_settings()

app = typer.Typer(help="Real Estate API CLI")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Real Estate listings API and admin tools."""
    log_level = "DEBUG" if verbose else SETTINGS.log_level
    setup_logging(level=log_level, json_format=SETTINGS.log_format.lower() == "json")


@app.command("server")
def run_server(
    host: str = typer.Option(SETTINGS.app_host, help="Host to bind to"),
    port: int = typer.Option(SETTINGS.app_port, help="Port to bind to"),
    reload: bool = typer.Option(False, help="Enable auto-reload for development"),
) -> None:
    """Start the API server."""
    typer.echo(f"Starting API server on {host}:{port}...")
    uvicorn.run("main:app", host=host, port=port, reload=reload)


@app.command("init-db")
def init_db() -> None:
    """Create every table that does not exist yet."""
    from database.init import Base, engine
    import database.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    typer.secho("✓ Database tables created", fg="green")


@app.command("create-admin")
def create_admin(
    name: str = typer.Option(..., prompt=True),
    email: str = typer.Option(..., prompt=True),
    phone: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Create an administrator account."""
    from pydantic import ValidationError

    from database.init import Base, SessionLocal, engine
    import database.models  # noqa: F401
    from enums.user_role import UserRole
    from schemas.auth_schema import RegisterRequest
    from services.auth_service import create_user, get_user_by_email

    try:
        payload = RegisterRequest(name=name, email=email, phone=phone, password=password)
    except ValidationError as e:
        typer.secho(f"✗ Invalid admin details: {e.errors()[0]['msg']}", fg="red")
        raise typer.Exit(1)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if get_user_by_email(payload.email, db):
            typer.secho(f"✗ A user with email {payload.email} already exists", fg="red")
            raise typer.Exit(1)
        admin = create_user(payload, db, role=UserRole.ADMIN)
        typer.secho(f"✓ Admin {admin.email} created with id {admin.id}", fg="green")
    finally:
        db.close()


@app.command("dashboard")
def run_dashboard(
    port: int = typer.Option(8501, help="Port for Streamlit dashboard"),
) -> None:
    """Start the Streamlit admin dashboard."""
    script = Path(__file__).resolve().parent / "dashboard" / "streamlit_app.py"
    typer.echo(f"Starting Streamlit dashboard on port {port} (API at {SETTINGS.api_base_url})...")
    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        str(script),
        "--server.port", str(port),
        "--server.address", "0.0.0.0",
    ])


if __name__ == "__main__":
    app()
