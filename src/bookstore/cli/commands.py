"""Server and development CLI commands."""

import typer
from rich.console import Console
from rich.panel import Panel

console = Console()


def _parse_claims(raw_claims: list[str]) -> dict[str, str]:
    claims = {}
    for item in raw_claims:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Claims must look like key=value, got '{item}'")
        claims[key.strip()] = value.strip()
    return claims


def serve(
    host: str | None = typer.Option(None, help="Host to bind (defaults to app.host)"),
    port: int | None = typer.Option(None, help="Port to bind (defaults to app.port)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """
    🚀 Start the Bookstore API server.
    """
    import uvicorn

    from src.bookstore.runtime.config.config_data import ConfigData
    from src.bookstore.runtime.context import get_config, with_context

    # Only the options given on the command line override the loaded config
    overrides = ConfigData()
    if host is not None:
        overrides.app.host = host
    if port is not None:
        overrides.app.port = port

    with with_context(overrides):
        config = get_config()
        host, port = config.app.host, config.app.port

        console.print(
            Panel.fit(
                f"[bold green]Servidor rodando em http://{host}:{port}[/bold green]",
                border_style="green",
            )
        )

        if reload:
            # Reload needs an import string; the worker reads ./config.yaml itself
            uvicorn.run(
                "src.bookstore.api.http.app:create_app",
                factory=True,
                host=host,
                port=port,
                reload=True,
                access_log=False,
            )
            return

        from src.bookstore.api.http.app import create_app

        uvicorn.run(create_app(config), host=host, port=port, access_log=False)


def init_db_command() -> None:
    """
    🗄️  Create the database tables for the configured database.
    """
    from src.bookstore.runtime.init_db import init_db

    try:
        init_db()
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print("[green]✅ Database initialized[/green]")


def token(
    subject: str = typer.Argument(..., help="Subject (sub) of the token"),
    expires_in: int | None = typer.Option(
        None, "--expires-in", "-e", help="Lifetime in seconds (defaults to jwt.token_lifetime_seconds)"
    ),
    claim: list[str] = typer.Option(
        [], "--claim", help="Extra claim as key=value; may be repeated"
    ),
) -> None:
    """
    🔑 Print a signed bearer token for calling protected routes.
    """
    from src.bookstore.core.errors import BookstoreError
    from src.bookstore.core.services import JwtGeneratorService
    from src.bookstore.runtime.context import get_config

    generator = JwtGeneratorService(get_config().jwt)
    try:
        signed = generator.generate_token(
            subject,
            claims=_parse_claims(claim),
            expires_in_seconds=expires_in,
        )
    except BookstoreError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(code=1) from e

    # Plain print so the token can be piped
    print(signed)
