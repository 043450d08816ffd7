"""Interactive shell with prompt_toolkit for user interaction."""

import os
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from cli.commands import dispatch_command
from cli.completer import ShareFolderCompleter
from cli.constants import (
    GREEN,
    HELP_TEXT,
    PROMPT_TEXT,
    RESET,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.parser import ParseError, parse_command
from cli.share_client import ShareFolderClient


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome(client: ShareFolderClient) -> None:
    """Display the shell banner and the host being talked to."""
    print(f"{GREEN}{WELCOME_TITLE}{RESET}")
    print(f"Connected to {client.session.base_url}")
    print(WELCOME_HELP)


def repl_loop(client: ShareFolderClient) -> None:
    """Start interactive shell with prompt_toolkit."""
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=ShareFolderCompleter(), history=history, style=STYLE
    )

    clear_screen()
    show_welcome(client)

    while True:
        try:
            user_input = session.prompt([("class:prompt", PROMPT_TEXT)])

            if not user_input.strip():
                continue

            if user_input.strip() == "exit":
                print("Goodbye!")
                break

            if user_input.strip() == "help":
                print(HELP_TEXT)
                continue

            if user_input.strip() == "clear":
                clear_screen()
                show_welcome(client)
                continue

            cmd_obj = parse_command(user_input)
            result = dispatch_command(cmd_obj, client)
            print(result)

        except ParseError as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break
