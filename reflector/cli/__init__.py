"""Reflector CLI application - main entry point."""

import typer
from rich.console import Console

from reflector import __version__

app = typer.Typer(
    name="reflector",
    help="Workspace setup and outcome logging for agent self-improvement",
    no_args_is_help=True,
)

console = Console()


@app.command()
def version():
    """Show version information."""
    console.print(f"Reflector {__version__}")


# Register subcommands from separate modules
from .init import init  # noqa: E402
from .log import log_command, outcomes_command, principle_command  # noqa: E402

app.command("init")(init)
app.command("log")(log_command)
app.command("principle")(principle_command)
app.command("outcomes")(outcomes_command)


def main():
    app()


if __name__ == "__main__":
    main()
