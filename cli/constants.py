"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["list", "info", "mkdir", "upload", "download", "delete", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2E8B57 bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[38;2;46;139;87m"
RESET = "\033[0m"

WELCOME_TITLE = "share-folder shell"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "share> "

HELP_TEXT = """Available commands:
  list [path]                         List a remote directory (default: /)
  info [path]                         Show metadata of a remote entry
  mkdir <path>                        Create a remote directory, with parents
  upload <local_path> [remote_path]   Upload a local file (default: /<file name>)
  download <remote_path> [local_path] Download a remote file (default: ./<file name>)
  delete <path>                       Delete a remote file or directory tree
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit shell

Paths are relative to the shared folder; quote paths containing spaces.
Examples:
  list /photos
  mkdir "/photos/summer 2024"
  upload notes.txt /docs/notes.txt
  download /docs/notes.txt copy.txt
  delete /docs"""
