"""Interactive chat session.

Owns the conversation, the loaded context and the persistence targets for
one terminal session, and dispatches the typed commands. Turns run strictly
one after another: a new line is only read once the previous reply stream
has ended.
"""

from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path

import httpx
import openai
from rich.console import Console
from rich.table import Table

from ..config import CONTEXT_PREVIEW_PER_LANGUAGE, DEFAULT_SNIPPETS_DIR, RESTORED_PREVIEW_COUNT
from ..context import ContextStore, normalize_extensions
from ..conversation import Conversation, TranscriptStore, assemble_request, select_transcript
from ..llm import LLMProvider
from ..logging import get_logger
from ..snippets import extract_snippets

logger = get_logger("session")

BANNER = """\
        ##   ##  ######   ######  ######
        ##   ##  ##       ##      ##   ##
        ##   ##  ####     ####    ######
        ##   ##  ##       ##      ##
        ######   ######   ######  ##
"""

COMMANDS = (
    ("exit", "Quit application."),
    ("load", "Load a saved conversation."),
    ("save", "Save a conversation."),
    ("clear", "Clear loaded conversation and loaded context."),
    ("savecode", "For code examples extract code to snippet folder."),
    ("loadcontext", "Load a directory of code files as context."),
    ("showcontext", "See currently loaded code files."),
    ("clearcontext", "Remove all loaded code files as context."),
    ("help", "Show this list again."),
)


def _is_yes(answer: str | None) -> bool:
    return (answer or "").strip().lower() in ("y", "yes")


class ChatSession:
    """One interactive session against a model endpoint."""

    def __init__(
        self,
        llm: LLMProvider,
        console: Console,
        system_prompt: str,
        transcripts: TranscriptStore | None = None,
        snippets_dir: str | Path = DEFAULT_SNIPPETS_DIR,
    ):
        self._llm = llm
        self._console = console
        self.conversation = Conversation(system_prompt)
        self.conversation.ensure_system_prompt()
        self.context = ContextStore()
        self.transcripts = transcripts or TranscriptStore()
        self.snippets_dir = Path(snippets_dir)

        self._commands: dict[str, Callable[[], Awaitable[None] | None]] = {
            "save": self.save,
            "write": self.save,
            "load": self.load,
            "clear": self.clear,
            "savecode": self.save_code,
            "loadcontext": self.load_context,
            "showcontext": self.show_context,
            "clearcontext": self.clear_context,
            "help": self.show_help,
        }

    def _ask(self, prompt: str) -> str:
        return self._console.input(prompt)

    async def run(self) -> None:
        """Read and handle lines until the user exits."""
        self.show_help()
        while True:
            try:
                user_input = self._ask("[bold yellow]You:[/bold yellow] ")
                if not await self.handle(user_input):
                    break
            except (KeyboardInterrupt, EOFError):
                self._console.print("\n[dim]Goodbye![/dim]")
                break

    async def handle(self, user_input: str) -> bool:
        """Handle one line of input.

        Returns:
            False when the session should end
        """
        if not user_input.strip():
            return True

        command = user_input.strip().lower()
        if command in ("exit", "quit"):
            if _is_yes(self._ask("Do you want to save the conversation before exiting? (y/n): ")):
                self.save()
            self._console.print("[dim]Goodbye![/dim]")
            return False

        handler = self._commands.get(command)
        if handler is not None:
            result = handler()
            if result is not None:
                await result
            return True

        await self.send(user_input)
        return True

    async def send(self, user_input: str) -> str | None:
        """Run one turn: assemble, stream the reply, record it.

        The user message and the reply are recorded only once the stream has
        ended. A transport failure discards the whole turn.

        Returns:
            The reply text, or None if the turn failed
        """
        request = assemble_request(self.conversation, self.context, user_input)

        self._console.print("[bold green]AI:[/bold green] ", end="")
        try:
            stream = await self._llm.chat_completion_stream(request)
            async for fragment in stream:
                self._console.print(fragment, end="", markup=False, highlight=False, soft_wrap=True)
        except (openai.APIError, httpx.HTTPError) as e:
            self._console.print(f"\n[red]Error: {e}[/red]\n")
            logger.debug("Turn discarded after transport error", exc_info=True)
            return None
        self._console.print()

        reply = stream.text
        self.conversation.append_user(user_input)
        self.conversation.append_assistant(reply)
        if stream.usage:
            logger.debug("Token usage: %s", stream.usage)

        self._console.print()
        return reply

    def show_help(self) -> None:
        self._console.clear()
        self._console.print(BANNER, markup=False, highlight=False)
        self._console.print("Type the following commands:")
        for name, description in COMMANDS:
            self._console.print(f"[bold cyan]{name:<12}[/bold cyan]- {description}")
        self._console.print("=" * 64)
        self._console.print()

    def save(self) -> None:
        """Save the conversation in both transcript forms."""
        if not self.conversation.has_dialogue:
            self._console.print("[yellow]No conversation to save yet.[/yellow]\n")
            return

        name = self._ask("Enter filename to save conversation (without extension): ")
        try:
            plain_path, structured_path = self.transcripts.save(self.conversation.messages, name)
        except OSError as e:
            self._console.print(f"[red]Error saving conversation: {e}[/red]\n")
            return

        self._console.print(
            f"[green]Conversation saved to {plain_path.name} and {structured_path.name}[/green]\n"
        )

    def load(self) -> None:
        """Pick a saved transcript and replace the conversation with it."""
        files = self.transcripts.list_files()
        if not files:
            self._console.print("[yellow]No conversation files found.[/yellow]\n")
            return

        self._console.print("\nAvailable conversation files:")
        for i, path in enumerate(files, 1):
            modified = datetime.fromtimestamp(path.stat().st_mtime)
            self._console.print(f"{i}. {path.name} ({modified:%Y-%m-%d %H:%M})", markup=False)

        selected = select_transcript(files, self._ask("\nEnter file number to load (or 0 to cancel): "))
        if selected is None:
            self._console.print("[dim]Load cancelled.[/dim]\n")
            return

        try:
            messages = self.transcripts.load(selected)
        except (OSError, ValueError) as e:
            self._console.print(f"[red]Error loading conversation: {e}[/red]\n")
            return

        self.conversation.replace_all(messages)
        self._console.print(f"\n[green]Loaded {len(messages)} messages from {selected.name}[/green]")

        recent = messages[-RESTORED_PREVIEW_COUNT:]
        if recent:
            self._console.print("\nLast messages in conversation:")
            for message in recent:
                if message.role == "user":
                    self._console.print(f"You: {message.content}", markup=False)
                elif message.role == "assistant":
                    self._console.print(f"AI: {message.content}", markup=False)
        self._console.print()

    def clear(self) -> None:
        self.conversation.clear()
        self.context.clear()
        self._console.print("[dim]Conversation history and code context cleared.[/dim]\n")

    def save_code(self) -> None:
        """Extract marked snippets from every assistant reply."""
        replies = self.conversation.assistant_messages()
        if not replies:
            self._console.print("[yellow]No assistant messages to scan.[/yellow]\n")
            return

        self._console.print("\n[dim]Scanning conversation for code snippets...[/dim]")
        try:
            created = extract_snippets("\n\n".join(replies), self.snippets_dir)
        except OSError as e:
            self._console.print(f"[red]Error saving code snippets: {e}[/red]\n")
            return

        if not created:
            self._console.print("[yellow]No marked code snippets found.[/yellow]\n")
            return

        for path in created:
            self._console.print(f"[green]+[/green] Creating File = {path.relative_to(self.snippets_dir)}")
        self._console.print(f"[dim]Files are in the '{self.snippets_dir}' folder.[/dim]\n")

    def load_context(self) -> None:
        """Prompt for a directory and load its files as context."""
        directory = self._ask("\nEnter directory path to load code files from: ").strip()
        if not directory:
            self._console.print("[yellow]No directory specified.[/yellow]\n")
            return

        root = Path(directory).expanduser()
        if not root.is_dir():
            self._console.print(f"[red]Directory not found: {root}[/red]\n")
            return

        extensions = normalize_extensions(self._ask(
            "Enter file extensions to include (comma-separated, e.g., .cs,.py,.js) "
            "or press Enter for all code files: "
        ))
        recursive = _is_yes(self._ask("Include subdirectories? (y/n): "))

        try:
            result = self.context.load(root, extensions, recursive=recursive)
        except OSError as e:
            self._console.print(f"[red]Error loading directory: {e}[/red]\n")
            return

        for path in result.failed:
            self._console.print(f"Error loading {path}", style="red", markup=False)
        self._console.print(
            f"\n[green]Loaded {result.loaded} code files into context. "
            f"Skipped {result.skipped} files.[/green]\n"
        )
        if result.loaded:
            self.show_context()

    def show_context(self) -> None:
        """Print the loaded files grouped by language."""
        if not self.context:
            self._console.print("[dim]No code files currently loaded in context.[/dim]\n")
            return

        groups = self.context.groups()
        self._console.print(f"\nCurrently loaded code files ({len(self.context)} total):")
        self._console.print("-" * 50)

        for language, files in groups:
            self._console.print(f"\n[bold cyan]{language}:[/bold cyan]")
            for file in files[:CONTEXT_PREVIEW_PER_LANGUAGE]:
                self._console.print(f"  - {file.relative_path()} ({file.size} chars)", markup=False)
            if len(files) > CONTEXT_PREVIEW_PER_LANGUAGE:
                self._console.print(f"  ... and {len(files) - CONTEXT_PREVIEW_PER_LANGUAGE} more files")

        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Language", style="cyan")
        table.add_column("Files", justify="right")
        for language, files in sorted(groups, key=lambda g: len(g[1]), reverse=True):
            table.add_row(language, str(len(files)))

        self._console.print("\nTotal files by language:")
        self._console.print(table)
        self._console.print()

    def clear_context(self) -> None:
        self.context.clear()
        self._console.print("[dim]Code context cleared.[/dim]\n")
