"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from ..ui.capture import capture_screen, encode_image_file
from .providers import get_relay, get_relay_config

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="glance",
    help="Floating terminal overlay that answers questions about your screen",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def _print_trace(level: str, component: str, message: str) -> None:
    console.print(f"[dim]{level.upper():<7} [{component}] {message}[/dim]")


@app.command()
def overlay(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
    hide_on_blur: bool = typer.Option(
        False,
        "--hide-on-blur",
        help="Dismiss the overlay when the terminal loses focus"
    ),
):
    """Launch the overlay (input bar with streaming chat panel)."""
    async def _overlay():
        from ..ui import run_overlay

        relay = get_relay(console)
        await run_overlay(relay, log_level=log_level, hide_on_blur=hide_on_blur)
        console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_overlay())
    except KeyboardInterrupt:
        pass


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Question to ask"),
    screen: bool = typer.Option(
        False,
        "--screen",
        "-s",
        help="Capture the screen and attach it to the question"
    ),
    image: Path | None = typer.Option(
        None,
        "--image",
        "-i",
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="Attach an image file instead of a screen capture"
    ),
    no_stream: bool = typer.Option(
        False,
        "--no-stream",
        help="Wait for the complete answer instead of streaming it"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show request trace"
    ),
):
    """Ask a single question and print the answer."""
    if screen and image is not None:
        console.print("[red]Error: use either --screen or --image, not both[/red]")
        raise typer.Exit(code=1)

    image_data = None
    if image is not None:
        image_data = encode_image_file(image)
    elif screen:
        image_data = capture_screen()
        if image_data is None:
            console.print("[red]Error: Failed to capture screen[/red]")
            raise typer.Exit(code=1)
        console.print("[dim]Screen captured[/dim]")

    async def _ask():
        async with get_relay(console) as relay:
            if verbose:
                relay.set_debug_callback(_print_trace)

            if no_stream:
                with console.status("[dim]Thinking...[/dim]"):
                    answer = await relay.send_message(prompt, image=image_data)
                console.print(Panel(
                    Markdown(answer),
                    title=f"[bold cyan]{relay.model}[/bold cyan]",
                    border_style="cyan"
                ))
                return

            async for chunk in relay.send_message_stream(prompt, image=image_data):
                console.print(chunk, end="", markup=False, highlight=False)
            console.print()

    try:
        asyncio.run(_ask())
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted[/dim]")


@app.command()
def health():
    """Report the relay configuration read from the environment."""
    config = get_relay_config()

    if config.has_credential:
        console.print("[green]+[/green] OpenAI API key: SET")
    else:
        console.print("[yellow]![/yellow] OpenAI API key: NOT SET (demo mode)")

    console.print(f"[green]+[/green] Model: {config.model}")
    console.print(f"[green]+[/green] Base URL: {config.base_url}")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
