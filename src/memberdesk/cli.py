"""Command-line interface for MemberDesk.

This module provides the CLI commands for running and managing the
MemberDesk application.
"""

from typing import NoReturn

import click

from memberdesk import __version__
from memberdesk.core.config import get_settings
from memberdesk.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="MemberDesk")
def cli() -> None:
    """MemberDesk - member login and credential management.

    Settings are read from MEMBERDESK_* environment variables and .env.
    """


@cli.command()
@click.option(
    "--host",
    type=str,
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Enable auto-reload (defaults to on in development)",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool | None) -> None:
    """Start the MemberDesk server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers
    if reload is None:
        reload = settings.is_development

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting MemberDesk server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "memberdesk.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def init_db(force: bool) -> None:
    """Create all database tables.

    Use this only in development. In production, run the Alembic migrations.
    """
    import asyncio

    from memberdesk.infrastructure.persistence.database import (
        get_db_manager,
        init_database,
    )

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize() -> None:
        try:
            await init_database()
            click.echo("Database initialized successfully.")
        finally:
            await get_db_manager().disconnect()

    asyncio.run(initialize())


@cli.command()
@click.argument("member_number")
@click.option(
    "--role",
    type=click.Choice(["admin", "collector", "member"]),
    default="admin",
    show_default=True,
    help="Role to grant",
)
def grant_role(member_number: str, role: str) -> None:
    """Grant a role to the identity linked to MEMBER_NUMBER.

    The member must have logged in at least once so that an identity exists.
    """
    import asyncio

    from memberdesk.domain.services import normalize_member_number
    from memberdesk.infrastructure.persistence.database import get_db_manager
    from memberdesk.infrastructure.persistence.repositories import (
        AuditLogRepository,
        MemberRepository,
        UserRoleRepository,
    )

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    try:
        normalized = normalize_member_number(member_number)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    async def grant() -> None:
        db = get_db_manager()
        try:
            async with db.session() as session:
                member = await MemberRepository(session).get_by_member_number(normalized)
                if member is None:
                    click.echo(f"Error: member {normalized} not found", err=True)
                    raise SystemExit(1)
                if member.auth_user_id is None:
                    click.echo(
                        f"Error: member {normalized} has not logged in yet", err=True
                    )
                    raise SystemExit(1)

                created = await UserRoleRepository(session).assign(member.auth_user_id, role)
                if created:
                    await AuditLogRepository(session).record(
                        operation="create",
                        table_name="user_roles",
                        record_id=member.auth_user_id,
                        new_values={"member_number": normalized, "role": role},
                    )
                await session.commit()
        finally:
            await db.disconnect()

        if created:
            click.echo(f"Granted role '{role}' to {normalized}.")
            logger.info("Role granted via CLI", member_number=normalized, role=role)
        else:
            click.echo(f"{normalized} already has role '{role}'.")

    asyncio.run(grant())


@cli.command()
def info() -> None:
    """Display MemberDesk configuration."""
    settings = get_settings()

    click.echo(f"""
MemberDesk v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}

Identity:
  Backend:      {settings.identity_backend}
  Service URL:  {settings.identity_url}
  Placeholder:  *@{settings.placeholder_email_domain}
  Lockout:      {settings.max_failed_login_attempts} attempts, {settings.lockout_minutes} minutes

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the `memberdesk` command and by `python -m memberdesk`.
    """
    cli()


if __name__ == "__main__":
    main()
