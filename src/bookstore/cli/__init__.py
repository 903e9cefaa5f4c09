"""Main CLI application module."""

from pathlib import Path

import typer
from dotenv.main import load_dotenv

from .commands import console, init_db_command, serve, token

# Create the main CLI application
app = typer.Typer(
    help="📚 Bookstore API CLI - run the server and manage local data",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def configure(
    config_file: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a config.yaml to use instead of ./config.yaml"
    ),
    env_file: Path | None = typer.Option(
        None, "--env-file", help="Path to a .env file (defaults to ./.env)"
    ),
) -> None:
    """Load the environment and configuration shared by every command."""
    load_dotenv(env_file)

    # Imported here so that .env values are visible to config.yaml substitution
    from src.bookstore.runtime.config.config_template import load_templated_yaml
    from src.bookstore.runtime.context import set_config

    if config_file is not None:
        try:
            set_config(load_templated_yaml(config_file))
        except (FileNotFoundError, ValueError) as e:
            console.print(f"[red]❌ Configuration error: {e}[/red]")
            raise typer.Exit(code=1) from e


app.command(name="serve")(serve)
app.command(name="init-db")(init_db_command)
app.command(name="token")(token)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
