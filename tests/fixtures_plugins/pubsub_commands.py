from __future__ import annotations

import typer

from switchboard.hookspecs import hookimpl


class PubSubCommands:
    def __init__(self) -> None:
        self.published: list[tuple[str, str]] = []

    @hookimpl
    def register_cli_commands(self, app: typer.Typer) -> None:
        channels = typer.Typer(help="Publish and subscribe to channels.")

        @channels.command("publish")
        def publish(
            channel: str,
            message: str,
            retain: bool = typer.Option(False, "--retain", "-r", help="Keep the last message."),
            priority: int = typer.Option(0, "--priority", hidden=True),
        ) -> None:
            """Publish a message to a channel."""
            self.published.append((channel, message))
            typer.echo(f"published to {channel}")

        @channels.command("list")
        def list_channels() -> None:
            """List active channels."""
            typer.echo("news")

        @app.command("debug", hidden=True)
        def debug() -> None:
            typer.echo("debug output")

        @app.command("fail")
        def fail() -> None:
            """Exit with a non-zero status."""
            raise typer.Exit(3)

        app.add_typer(channels, name="channels")

    @hookimpl
    def provide_command_aliases(self) -> dict[str, str]:
        return {"pub": "channels:publish"}


plugin = PubSubCommands()
