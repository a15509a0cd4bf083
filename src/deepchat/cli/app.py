"""Main CLI application using Typer."""
import asyncio
import os
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from ..config import DEFAULT_SNIPPETS_DIR
from ..context import ContextStore
from ..conversation import Conversation, TranscriptStore, assemble_request
from ..logging import setup_logging
from ..prompts import get_system_prompt
from ..snippets import extract_snippets
from .providers import API_KEY_VARS, require_llm, selected_provider
from .session import ChatSession

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="deepchat",
    help="Streaming command-line chat client with code context and snippet extraction",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def _log_level_option() -> str:
    return os.getenv("DEEPCHAT_LOG_LEVEL", "warning")


@app.command()
def chat(
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to use (default: provider default)"
    ),
    transcripts_dir: Path = typer.Option(
        Path("."),
        "--transcripts-dir",
        "-t",
        file_okay=False,
        help="Directory where conversations are saved and loaded"
    ),
    snippets_dir: Path = typer.Option(
        Path(DEFAULT_SNIPPETS_DIR),
        "--snippets-dir",
        "-o",
        file_okay=False,
        help="Directory extracted code snippets are written to"
    ),
    log_level: str = typer.Option(
        _log_level_option(),
        "--log-level",
        "-l",
        help="Log level: debug, info, warning, or error"
    ),
):
    """Interactive chat with streamed replies."""
    setup_logging(log_level)

    async def _chat():
        llm = require_llm(console, model=model)
        session = ChatSession(
            llm=llm,
            console=console,
            system_prompt=get_system_prompt(),
            transcripts=TranscriptStore(transcripts_dir),
            snippets_dir=snippets_dir,
        )
        try:
            await session.run()
        finally:
            await llm.close()

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        console.print("\n[dim]Goodbye![/dim]")


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Question to send"),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to use (default: provider default)"
    ),
    context_dir: Path | None = typer.Option(
        None,
        "--context",
        "-c",
        exists=True,
        file_okay=False,
        dir_okay=True,
        help="Directory of code files to send as context"
    ),
    recursive: bool = typer.Option(
        False,
        "--recursive",
        "-r",
        help="Include subdirectories of the context directory"
    ),
    stream: bool = typer.Option(
        True,
        "--stream/--no-stream",
        help="Print the reply as it arrives, or all at once when complete"
    ),
):
    """Send a single prompt and print the reply."""
    setup_logging(_log_level_option())

    async def _ask():
        llm = require_llm(console, model=model)
        context = ContextStore()
        try:
            if context_dir is not None:
                result = context.load(context_dir, recursive=recursive)
                console.print(f"[dim]Loaded {result.loaded} files, skipped {result.skipped}[/dim]")

            request = assemble_request(Conversation(get_system_prompt()), context, prompt)
            if stream:
                response = await llm.chat_completion_stream(request)
                async for fragment in response:
                    console.print(fragment, end="", markup=False, highlight=False, soft_wrap=True)
                console.print()
            else:
                response = await llm.chat_completion(request)
                console.print(response.content, markup=False, highlight=False, soft_wrap=True)

        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await llm.close()

    asyncio.run(_ask())


@app.command()
def extract(
    transcript: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Saved conversation (.json or .txt)"
    ),
    snippets_dir: Path = typer.Option(
        Path(DEFAULT_SNIPPETS_DIR),
        "--snippets-dir",
        "-o",
        file_okay=False,
        help="Directory extracted code snippets are written to"
    ),
):
    """Extract marked code snippets from a saved conversation."""
    setup_logging(_log_level_option())

    try:
        messages = TranscriptStore(transcript.parent).load(transcript)
        replies = [msg.content for msg in messages if msg.role == "assistant"]
        created = extract_snippets("\n\n".join(replies), snippets_dir)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if not created:
        console.print("[yellow]No marked code snippets found[/yellow]")
        return

    for path in created:
        console.print(f"[green]+[/green] {path}")
    console.print(f"[dim]{len(created)} file(s) written to {snippets_dir}[/dim]")


@app.command()
def health():
    """Check that the selected provider is configured."""
    provider = selected_provider()
    key_var = API_KEY_VARS.get(provider)

    if key_var is None:
        console.print(f"[red]x[/red] Unknown LLM provider: {provider}")
        raise typer.Exit(code=1)

    console.print(f"[green]+[/green] LLM provider: {provider}")
    if os.getenv(key_var):
        console.print(f"[green]+[/green] {key_var}: SET")
    else:
        console.print(f"[red]x[/red] {key_var}: NOT SET")
        raise typer.Exit(code=1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
