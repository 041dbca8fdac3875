"""readhook CLI bootstrap."""

from __future__ import annotations

import typer

from readhook.config import get_settings
from readhook.framework import ReadHookFramework
from readhook.logging_utils import configure_logging


def create_cli_app() -> typer.Typer:
    app = typer.Typer(name="readhook", help="Hook-first entity read runtime", add_completion=False)
    framework = ReadHookFramework(get_settings())
    framework.load_plugins()
    framework.register_cli_commands(app)

    @app.callback()
    def _configure() -> None:
        configure_logging(profile="cli", level=get_settings().log_level)

    if not app.registered_commands:

        @app.command("help")
        def _help() -> None:
            typer.echo("No CLI command plugins loaded.")

    return app


app = create_cli_app()

if __name__ == "__main__":
    app()
