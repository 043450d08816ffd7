"""Custom completer for the share-folder shell with local file autocompletion."""

import os
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class ShareFolderCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file path completion for the first argument of 'upload'
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        if tokens[0].lower() != "upload":
            return

        argument_index = len(tokens) - (1 if not is_typing_new_token else 0)
        if argument_index != 1:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        yield from self._complete_local_paths(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_local_paths(self, partial: str) -> Iterable[Completion]:
        """
        Complete local files and directories; directories get a trailing
        separator so completion can continue into them.
        """
        directory, prefix = os.path.split(partial)
        search_dir = os.path.expanduser(directory) if directory else "."

        try:
            names = sorted(os.listdir(search_dir))
        except OSError:
            return

        for name in names:
            if not name.startswith(prefix) or (name.startswith(".") and not prefix.startswith(".")):
                continue
            candidate = os.path.join(directory, name) if directory else name
            if os.path.isdir(os.path.join(search_dir, name)):
                candidate += os.sep
            yield Completion(candidate, start_position=-len(partial))
