"""Content Hub CLI — seed data, create accounts, run the server.

Usage:
    contenthub serve                                   # Run the API with uvicorn
    contenthub seed --admin-email a@b.com              # Wipe + insert sample data
    contenthub create-user a@b.com s3cret "Ada" --role admin
    contenthub users                                   # List accounts

Talks to the database directly (same settings as the API: CONTENTHUB_*).
"""

from __future__ import annotations

import asyncio
import sys

import click
from sqlalchemy import delete

from contenthub import __version__
from contenthub.auth.session import AuthConfig, SessionAuthority
from contenthub.config import settings
from contenthub.db.models import ROLES, Category, Resource, User, slugify
from contenthub.errors import ServiceError
from contenthub.services.user_directory import SqlUserDirectory

SEED_CATEGORIES = [
    ("Sermons", "#ff0000"),
    ("Worship", "#00ff00"),
    ("Books", "#0000ff"),
    ("Movies", "#ffff00"),
]

SEED_RESOURCES = [
    {
        "title": "Sample Sermon",
        "description": "A powerful message about faith",
        "image_url": "https://example.com/sermon.jpg",
        "external_link": "https://example.com/sermon",
        "category": "sermon",
        "featured": True,
    },
    {
        "title": "Worship Experience",
        "description": "A collection of worship songs",
        "image_url": "https://example.com/worship.jpg",
        "external_link": "https://example.com/worship",
        "category": "worship",
        "featured": True,
    },
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _authority(db) -> SessionAuthority:
    return SessionAuthority(SqlUserDirectory(db), AuthConfig.from_settings(settings))


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


async def _with_session(fn):
    """Run fn(session) and dispose the engine afterwards."""
    from contenthub.db.engine import async_session_factory, engine

    try:
        async with async_session_factory() as db:
            return await fn(db)
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="contenthub")
def main():
    """Content Hub — backend administration."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: CONTENTHUB_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: CONTENTHUB_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "contenthub.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command()
@click.option("--admin-email", required=True, help="Email of the admin account to create")
@click.option(
    "--admin-password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password of the admin account",
)
@click.option("--yes", is_flag=True, help="Don't ask before wiping existing data")
def seed(admin_email: str, admin_password: str, yes: bool):
    """Wipe users, categories and resources, then insert sample data."""
    if not yes:
        click.confirm("This deletes ALL users, categories and resources. Continue?", abort=True)
    asyncio.run(_with_session(lambda db: _seed(db, admin_email, admin_password)))
    click.secho("Seed data inserted", fg="green")


async def _seed(db, admin_email: str, admin_password: str) -> None:
    await db.execute(delete(Resource))
    await db.execute(delete(Category))
    await db.execute(delete(User))
    await db.commit()

    authority = _authority(db)
    admin = User(
        email=admin_email,
        name="Admin",
        role="admin",
        password_hash=await authority.hash_password(admin_password),
    )
    db.add(admin)
    await db.flush()

    for name, color in SEED_CATEGORIES:
        db.add(Category(name=name, slug=slugify(name), color=color))
    for fields in SEED_RESOURCES:
        db.add(Resource(author_id=admin.id, **fields))
    await db.commit()


@main.command("create-user")
@click.argument("email")
@click.argument("password")
@click.argument("name")
@click.option("--role", type=click.Choice(ROLES), default="user", show_default=True)
def create_user(email: str, password: str, name: str, role: str):
    """Create an account (e.g. the first admin)."""
    try:
        user = asyncio.run(
            _with_session(lambda db: _create_user(db, email, password, name, role))
        )
    except ServiceError as e:
        click.secho(f"Error: {e.detail}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"Created {user.role} {user.email} ({user.id})", fg="green")


async def _create_user(db, email: str, password: str, name: str, role: str) -> User:
    authority = _authority(db)
    await authority.register(email, password, name)
    directory = authority.directory
    user = await directory.find_by_email(email)
    user.role = role
    # CLI-created accounts start logged out
    user.refresh_token = None
    await directory.save(user)
    return user


@main.command()
def users():
    """List accounts."""
    rows = asyncio.run(_with_session(lambda db: SqlUserDirectory(db).list()))
    _print_table(
        [
            {"id": str(u.id), "email": u.email, "name": u.name, "role": u.role}
            for u in rows
        ],
        [("ID", "id", 36), ("EMAIL", "email", 32), ("NAME", "name", 20), ("ROLE", "role", 6)],
    )


if __name__ == "__main__":
    main()
