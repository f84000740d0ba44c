#!/usr/bin/env python3
"""main.py

Interactive CLI for llm-talker.
Chats with an OpenAI-compatible completion API while keeping each request
inside the configured token and message budget.
"""

from __future__ import annotations

# Standard Library
import logging
import sys
from typing import NoReturn

# Third-Party Libraries
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.theme import Theme

# Local Modules
from talker.chat import LLMTalker
from talker.errors import TalkerError
from talker.settings import load_settings

# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

custom_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "user": "bold blue",
        "assistant": "green",
    }
)
console = Console(theme=custom_theme)


def display_help() -> None:
    """Display available commands and usage information."""
    help_text = """
**Available Commands:**

- `/help` - Show this help message
- `/stats` - Show history size and the budget of the next request
- `/raw` - Toggle budget trimming (off sends the full history)
- `/strip` - Remove system messages stored at the start of the history
- `/quit` or `/exit` - Exit
- Any other text - Chat with the model

The system prompt is pinned to every trimmed request. Older messages are
left out of a request once the token or message budget is reached, but
they stay in the stored history.
    """
    console.print(Panel(Markdown(help_text), title="Help", border_style="cyan"))


def display_stats(talker: LLMTalker, require_preprocessing: bool) -> None:
    """Display stored history size and the next request's budget usage.

    Args:
        talker: The LLMTalker instance.
        require_preprocessing: Whether trimming is currently enabled.
    """
    view = talker.transmitted_view(require_preprocessing)
    view_tokens = talker.count_tokens(view)

    stats_text = f"""
**Context Statistics:**

- Stored messages: {talker.get_message_count()}
- Next request: {len(view)}/{talker.max_messages} messages, {view_tokens}/{talker.max_tokens} tokens
- Trimming: {"on" if require_preprocessing else "off"}
- Model: `{talker.model}`
- Endpoint: `{talker.api_url}`
    """
    console.print(Panel(Markdown(stats_text), title="Statistics", border_style="cyan"))


def main() -> NoReturn:
    """Main entry point for the llm-talker CLI."""
    try:
        settings = load_settings()
        talker = LLMTalker.from_settings(settings)
    except TalkerError as exc:
        console.print(f"Failed to initialize: {exc}", style="error")
        console.print("Set LLM_API_KEY (and optionally LLM_MODEL) in .env.", style="info")
        sys.exit(1)

    console.print(f"Model: {talker.model}", style="info")
    console.print(
        f"Budget: {talker.max_messages} messages / {talker.max_tokens} tokens\n",
        style="info",
    )
    console.print(
        "Type [bold]/help[/bold] for commands, or start chatting!\n", style="info"
    )

    require_preprocessing = True

    while True:
        try:
            user_input = Prompt.ask("[bold blue]You[/bold blue]").strip()

            if not user_input:
                continue

            command = user_input.lower()
            if command in ["/quit", "/exit"]:
                console.print("\nGoodbye!\n", style="success")
                sys.exit(0)

            elif command == "/help":
                display_help()
                continue

            elif command == "/stats":
                display_stats(talker, require_preprocessing)
                continue

            elif command == "/raw":
                require_preprocessing = not require_preprocessing
                state = "on" if require_preprocessing else "off"
                console.print(f"Budget trimming {state}.\n", style="success")
                continue

            elif command == "/strip":
                removed = talker.remove_all_system_prompts()
                console.print(f"Removed {removed} system message(s).\n", style="success")
                continue

            console.print()
            with console.status("[bold green]Thinking...", spinner="dots"):
                reply = talker.send_text(user_input, require_preprocessing)

            console.print(
                Panel(
                    Markdown(reply.content),
                    title="[bold green]assistant[/bold green]",
                    border_style="green",
                )
            )
            console.print()

        except KeyboardInterrupt:
            console.print("\n\nInterrupted. Goodbye!\n", style="warning")
            sys.exit(0)

        except TalkerError as exc:
            console.print(f"\nError: {exc}\n", style="error")
            console.print(
                "You can continue chatting or type /quit to exit.\n", style="info"
            )


if __name__ == "__main__":
    main()
