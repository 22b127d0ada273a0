"""Thin CLI wrapper for mcpollinations.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from mcpollinations import __version__
from mcpollinations.config import get_settings, print_settings_json
from mcpollinations.launch_config import (
    DEFAULT_CONFIG_PATH,
    default_server_entry,
    parse_tool_selection,
    render_config,
    write_config,
)
from mcpollinations.types import ALL_TOOL_NAMES, AUDIO_VOICES

app = typer.Typer(
    name="mcpollinations",
    help="MCPollinations - Pollinations image, text and audio generation over MCP",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"mcpollinations version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """MCPollinations - Pollinations image, text and audio generation over MCP."""


@app.command()
def serve() -> None:
    """Run the MCP server on stdio."""
    from mcp_server.server import main as run_server

    run_server(get_settings())


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        console.print(print_settings_json(settings))
        return

    player_display = settings.audio_player or "(autodetect)"
    timeout_display = (
        str(settings.http_timeout) if settings.http_timeout else "(no timeout)"
    )
    console.print("[bold]Effective Configuration:[/bold]")
    console.print()
    console.print("[bold]Upstream:[/bold]")
    console.print(f"  Image API:           {settings.image_base_url}")
    console.print(f"  Text API:            {settings.text_base_url}")
    console.print(f"  HTTP timeout:        {timeout_display}")
    console.print()
    console.print("[bold]Image defaults:[/bold]")
    console.print(f"  Output directory:    {settings.output_dir}")
    console.print(f"  Model:               {settings.image_model}")
    console.print(f"  Size:                {settings.image_width}x{settings.image_height}")
    console.print(f"  Enhance:             {settings.image_enhance}")
    console.print(f"  Safe:                {settings.image_safe}")
    console.print(f"  Format:              {settings.image_format}")
    console.print()
    console.print("[bold]Text and audio defaults:[/bold]")
    console.print(f"  Text model:          {settings.text_model}")
    console.print(f"  Voice:               {settings.audio_voice}")
    console.print(f"  Audio player:        {player_display}")
    console.print()
    console.print(f"[bold]Log level:[/bold] {settings.log_level}")


@app.command("generate-config")
def generate_config(
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file path (asked interactively if not given)",
        ),
    ] = None,
) -> None:
    """Interactively generate an MCP launch configuration file."""
    console.print("[bold]MCPollinations MCP Configuration Generator[/bold]")
    console.print(
        "This tool creates an MCP configuration file for the MCPollinations server."
    )
    console.print()

    entry = default_server_entry()

    if not typer.confirm("Use default configuration?", default=True):
        console.print()
        console.print("[bold]Resource Directories:[/bold]")
        console.print(
            "An absolute output path is recommended; some MCP clients start "
            "servers from an unexpected working directory."
        )
        entry.resources.output_dir = typer.prompt(
            "Output directory for saved files",
            default=entry.resources.output_dir,
        )

        console.print()
        image = entry.default_params.image
        if typer.confirm("Customize image generation parameters?", default=False):
            image.model = typer.prompt("Default image model", default=image.model)
            image.width = typer.prompt("Default image width", default=image.width, type=int)
            image.height = typer.prompt(
                "Default image height", default=image.height, type=int
            )
            image.safe = typer.confirm("Enable safe mode for images?", default=False)
            image.enhance = typer.confirm(
                "Enable prompt enhancement using LLM before image generation?",
                default=True,
            )

        text = entry.default_params.text
        if typer.confirm("Customize text generation parameters?", default=False):
            console.print("Use the listTextModels tool to see all models.")
            text.model = typer.prompt("Default text model", default=text.model)

        audio = entry.default_params.audio
        if typer.confirm("Customize audio generation parameters?", default=False):
            console.print(f"Available voices: {', '.join(AUDIO_VOICES)}")
            audio.voice = typer.prompt("Default voice", default=audio.voice)

        console.print()
        console.print("[bold]Tool Restrictions:[/bold]")
        entry.disabled = typer.confirm("Disable the server by default?", default=False)

        if typer.confirm("Customize allowed tools?", default=False):
            for index, tool in enumerate(ALL_TOOL_NAMES, start=1):
                console.print(f"  {index}. {tool}")
            selection = typer.prompt(
                'Enter tool numbers to allow (comma-separated, e.g. "1,2,3") or "all"',
                default="all",
            )
            entry.always_allow = parse_tool_selection(selection)

    if output is None:
        console.print()
        output = Path(
            typer.prompt("Output file path", default=str(DEFAULT_CONFIG_PATH))
        )

    try:
        write_config(entry, output)
    except OSError as e:
        console.print(f"[red]Error saving configuration: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print()
    console.print(f"[green]MCP configuration saved to: {output}[/green]")
    console.print()
    console.print("[bold]Generated configuration:[/bold]")
    console.print_json(render_config(entry))


if __name__ == "__main__":
    app()
