#!/usr/bin/env -S uv run
# /// script
# dependencies = [
#   "google-api-python-client>=2.100.0",
#   "google-auth>=2.23.0",
#   "google-auth-oauthlib>=1.1.0",
#   "google-auth-httplib2>=0.1.1",
#   "pyyaml>=6.0",
#   "typer>=0.9.0",
#   "rich>=13.0.0",
# ]
# requires-python = ">=3.12"
# ///
"""Google accounts used by the Docs and Slides CLIs.

Layout under ``$GSUITE_CONFIG_DIR`` (default ``~/.agents/gsuite``)::

    credentials.json               OAuth desktop client
    active_account                 email used when --account is not given
    accounts/<email>/token.json    authorized user token

``GSUITE_ACTIVE_ACCOUNT`` takes precedence over ``active_account``.
"""
from __future__ import annotations

import fcntl
import json
import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import typer
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from rich.table import Table

# Import sibling modules
SCRIPT_DIR = Path(__file__).parent
sys.path.insert(0, str(SCRIPT_DIR))
from docs_errors import AuthError, DocsError, NotFound  # noqa: E402
from utils import CONFIG_DIR, console, emit, fail, output_format, stdout_console  # noqa: E402

SCOPES = [
    "openid",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/presentations",
    # trash / permanent delete
    "https://www.googleapis.com/auth/drive",
]

app = typer.Typer(help="Manage the Google accounts used by the Docs and Slides CLIs.")

JsonOpt = Annotated[bool, typer.Option("--json", help="Output as JSON")]


@dataclass(frozen=True)
class AccountStore:
    """Per-account tokens and the active-account pointer under one directory."""

    root: Path

    @property
    def client_file(self) -> Path:
        return self.root / "credentials.json"

    @property
    def accounts_dir(self) -> Path:
        return self.root / "accounts"

    @property
    def active_file(self) -> Path:
        return self.root / "active_account"

    def token_file(self, email: str) -> Path:
        return self.accounts_dir / email / "token.json"

    def emails(self) -> list[str]:
        """Accounts that have a token, sorted."""
        if not self.accounts_dir.is_dir():
            return []
        return sorted(p.parent.name for p in self.accounts_dir.glob("*/token.json"))

    def active(self) -> str | None:
        override = os.environ.get("GSUITE_ACTIVE_ACCOUNT")
        if override:
            return override
        try:
            return self.active_file.read_text().strip() or None
        except FileNotFoundError:
            return None

    def activate(self, email: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self.active_file.write_text(email)

    def forget(self, email: str) -> str | None:
        """Drop an account's token. Returns the account made active instead, if any."""
        if email not in self.emails():
            raise NotFound(f"account '{email}' not found")
        shutil.rmtree(self.accounts_dir / email)
        if self.active() != email:
            return None
        self.active_file.unlink(missing_ok=True)
        remaining = self.emails()
        if remaining:
            self.activate(remaining[0])
            return remaining[0]
        return None


store = AccountStore(CONFIG_DIR)


def save_token(path: Path, creds: Credentials) -> None:
    """Replace token.json atomically via a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile("w", dir=path.parent, suffix=".tmp", delete=False) as tmp:
        tmp.write(creds.to_json())
    try:
        os.replace(tmp.name, path)
    except OSError:
        Path(tmp.name).unlink(missing_ok=True)
        raise


def load_credentials(email: str) -> Credentials:
    """Credentials for ``email``, refreshed and saved back when expired.

    The token file stays locked from read to rewrite.

    Raises:
        AuthError: No token, or it expired and cannot be refreshed.
    """
    path = store.token_file(email)
    if not path.exists():
        raise AuthError(f"no credentials for {email}; run: auth.py add")

    with open(path, "r+") as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX)
        try:
            creds = Credentials.from_authorized_user_info(json.load(f), SCOPES)
            if not creds.expired:
                return creds
            if not creds.refresh_token:
                raise AuthError(f"token for {email} expired and has no refresh token; run: auth.py add")
            try:
                creds.refresh(Request())
            except RefreshError as e:
                raise AuthError(f"token refresh failed for {email}: {e}") from e
            save_token(path, creds)
            return creds
        finally:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)


def get_credentials(account: str | None = None) -> Credentials:
    """Credentials for ``account``, or for the active account when None."""
    email = account or store.active()
    if not email:
        raise AuthError("no account given and no active account; run: auth.py add")
    return load_credentials(email)


@app.command()
def status(json_output: JsonOpt = False) -> None:
    """List authenticated accounts and mark the active one."""
    accounts = store.emails()
    active = store.active()
    result = {
        "accounts": accounts,
        "active": active,
        "config_dir": str(store.root),
        "client_configured": store.client_file.exists(),
    }
    if output_format(json_output) != "text":
        emit(result, json_output)
        return

    if not accounts:
        console.print("[yellow]No accounts yet.[/yellow] Add one with: [cyan]uv run auth.py add[/cyan]")
        if not result["client_configured"]:
            console.print(f"[red]OAuth client missing:[/red] {store.client_file}")
        return

    table = Table(title=f"Accounts ({store.root})")
    table.add_column("Email", style="cyan")
    table.add_column("Active", justify="center")
    for email in accounts:
        table.add_row(email, "[green]✓[/green]" if email == active else "")
    console.print(table)


@app.command()
def add(
    client: Annotated[
        Path | None,
        typer.Option("--credentials", "-c", help="OAuth client JSON (default: credentials.json in the config dir)"),
    ] = None,
    json_output: JsonOpt = False,
) -> None:
    """Authorize an account in the browser and store its token."""
    try:
        client_file = client.expanduser() if client else store.client_file
        if not client_file.exists():
            raise NotFound(f"OAuth client file not found: {client_file}")

        flow = InstalledAppFlow.from_client_secrets_file(str(client_file), SCOPES)
        console.print("[blue]Waiting for browser authorization...[/blue]")
        creds = flow.run_local_server(port=0)

        from googleapiclient.discovery import build
        email = build("oauth2", "v2", credentials=creds).userinfo().get().execute().get("email", "unknown")
        save_token(store.token_file(email), creds)

        activated = store.active() is None
        if activated:
            store.activate(email)
        emit({"status": "added", "email": email, "active": activated}, json_output,
             f"[green]Added:[/green] {email}" + (" (active)" if activated else ""))
    except DocsError as e:
        fail(e, json_output)


@app.command()
def switch(
    email: Annotated[str, typer.Argument(help="Account to make active")],
    json_output: JsonOpt = False,
) -> None:
    """Make another stored account the active one."""
    try:
        if email not in store.emails():
            known = ", ".join(store.emails()) or "none"
            raise NotFound(f"account '{email}' not found (known: {known})")
        store.activate(email)
        emit({"status": "switched", "active": email}, json_output, f"[green]Active account:[/green] {email}")
    except DocsError as e:
        fail(e, json_output)


@app.command()
def remove(
    email: Annotated[str, typer.Argument(help="Account to remove")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Do not ask for confirmation")] = False,
    json_output: JsonOpt = False,
) -> None:
    """Delete an account's stored token."""
    try:
        if not force and email in store.emails() and not typer.confirm(f"Remove {email}?", default=False):
            console.print("[yellow]Aborted[/yellow]")
            raise typer.Exit(0)
        now_active = store.forget(email)
        message = f"[green]Removed:[/green] {email}"
        if now_active:
            message += f"\n[yellow]Active account is now[/yellow] {now_active}"
        emit({"status": "removed", "email": email, "active": store.active()}, json_output, message)
    except DocsError as e:
        fail(e, json_output)


@app.command()
def token(
    email: Annotated[str | None, typer.Argument(help="Account (default: active)")] = None,
) -> None:
    """Print a fresh access token, e.g. for curl."""
    try:
        stdout_console.print(get_credentials(email).token, markup=False, highlight=False)
    except DocsError as e:
        fail(e)


if __name__ == "__main__":
    app()
