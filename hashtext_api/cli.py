"""
CLI entry point for HashText.

Usage:
    # (Re-)create the tables
    hashtext init-db --drop

    # Register a user and print their token
    hashtext add-user Jane --credit 1000000

    # Run the API
    hashtext serve
"""

from typing import Optional

import structlog
import typer
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .config import get_settings
from .db import HashTextDatabase, mask_url, parse_database_url

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ]
)

app = typer.Typer(
    name="hashtext",
    help="HashText text-to-hash service",
    add_completion=False,
)

DatabaseUrlOption = typer.Option(
    None,
    "--database-url",
    "-d",
    help="SQLAlchemy database URL (defaults to DATABASE_URL)",
)


def _open_database(database_url: Optional[str], create_schema: bool = True) -> HashTextDatabase:
    return HashTextDatabase(database_url or get_settings().database_url, create_schema=create_schema)


@app.command("init-db")
def init_db(
    database_url: Optional[str] = DatabaseUrlOption,
    drop: bool = typer.Option(
        False,
        "--drop",
        help="Drop the user and hash_text tables first (destroys all data)",
    ),
) -> None:
    """
    Create the user and hash_text tables.
    """
    url = parse_database_url(database_url or get_settings().database_url)
    typer.echo(f"{'(Re-)building' if drop else 'Building'} the database at {mask_url(url)}")

    db = _open_database(url, create_schema=False)
    try:
        db.create_schema(drop=drop)
    except SQLAlchemyError as e:
        typer.echo(f"** Error creating schema: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        db.close()

    typer.echo("The hashtext database is ready")


@app.command("add-user")
def add_user(
    name: str = typer.Argument(..., help="Registration name; the token is its SHA-256"),
    credit: int = typer.Option(0, "--credit", "-c", min=0, help="Starting credit"),
    database_url: Optional[str] = DatabaseUrlOption,
) -> None:
    """
    Register a user and print the token for the X-HashText-User-ID header.
    """
    db = _open_database(database_url)
    try:
        user = db.create_user(name, credit=credit)
    except IntegrityError:
        typer.echo(f"** User {name!r} already exists", err=True)
        raise typer.Exit(code=1)
    finally:
        db.close()

    typer.echo(f"Name:   {user.name}")
    typer.echo(f"Credit: {user.credit}")
    typer.echo(f"Token:  {user.user_id}")


@app.command()
def serve() -> None:
    """
    Run the API server (HOST, PORT and DEBUG come from the environment).
    """
    from .main import run

    run()


@app.command()
def version() -> None:
    """Show the HashText version."""
    from hashtext_api import __version__
    typer.echo(f"hashtext v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
