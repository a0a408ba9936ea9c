"""CLI tools for Complaint Desk administration."""

import click
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.errors import DomainError
from app.db.base import Base
from app.db.session import create_engine_with_settings, create_session_factory
from app.services import directory_service

import app.db.models  # noqa: F401  (register tables on Base.metadata)


def _bootstrap_superadmin(session_factory, username: str, password: str) -> None:
    db = session_factory()
    try:
        user, created = directory_service.bootstrap_superadmin(db, username, password)
        if created:
            click.echo(f"✓ Created super admin '{user.username}' (enterprise id {user.enterprise_id})")
        else:
            click.echo(f"✓ Super admin '{user.username}' already exists")
    except (DomainError, SQLAlchemyError) as e:
        db.rollback()
        raise click.ClickException(str(e)) from e
    finally:
        db.close()


@click.group()
def cli():
    """Complaint Desk CLI tools."""
    pass


@cli.command()
@click.option("--drop", is_flag=True, help="Drop existing tables first (destroys all data)")
def init_db(drop: bool):
    """
    Create the database schema and bootstrap the super admin.

    The super admin is created from SUPERADMIN_USERNAME / SUPERADMIN_PASSWORD
    in the "SaaS Platform Admin" enterprise when both are set.

    Example:
        complaint-desk init-db
    """
    engine = create_engine_with_settings(settings)
    try:
        if drop:
            click.confirm("Drop complaints, users and enterprises?", abort=True)
            Base.metadata.drop_all(engine)
            click.echo("✓ Dropped existing tables")
        Base.metadata.create_all(engine)
        click.echo("✓ Tables ready: enterprises, users, complaints")

        if settings.SUPERADMIN_USERNAME and settings.SUPERADMIN_PASSWORD:
            _bootstrap_superadmin(
                create_session_factory(engine),
                settings.SUPERADMIN_USERNAME,
                settings.SUPERADMIN_PASSWORD,
            )
        else:
            click.echo(
                "⚠ SUPERADMIN_USERNAME or SUPERADMIN_PASSWORD not set, skipping super admin creation",
                err=True,
            )
    finally:
        engine.dispose()


@cli.command()
@click.option("--username", required=True, help="Super admin username")
@click.option("--password", required=True, prompt=True, hide_input=True, help="Super admin password")
def create_superadmin(username: str, password: str):
    """
    Create a super admin in the platform enterprise.

    Example:
        complaint-desk create-superadmin --username root
    """
    engine = create_engine_with_settings(settings)
    try:
        _bootstrap_superadmin(create_session_factory(engine), username, password)
    finally:
        engine.dispose()


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=3000, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Reload on code changes (dev)")
def serve(host: str, port: int, reload: bool):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("app.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
