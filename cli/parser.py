"""Command parser for shell input."""

import shlex

from cli.models import (
    CommandRequest,
    DeleteCommand,
    DownloadCommand,
    InfoCommand,
    ListCommand,
    MkdirCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from the shell

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0].lower()
    args = tokens[1:]

    if command_name in ("list", "ls"):
        return _parse_list(args)
    elif command_name == "info":
        return _parse_info(args)
    elif command_name == "mkdir":
        return MkdirCommand(path=_single_path("mkdir", args))
    elif command_name == "upload":
        return _parse_upload(args)
    elif command_name == "download":
        return _parse_download(args)
    elif command_name in ("delete", "rm"):
        return DeleteCommand(path=_single_path("delete", args))
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _single_path(command_name: str, args: list[str]) -> str:
    """Return the one path argument of a command."""
    if len(args) != 1:
        raise ParseError(f"{command_name} requires exactly 1 argument: <path>")
    return args[0]


def _parse_list(args: list[str]) -> ListCommand:
    """Parse 'list [path]' command."""
    if len(args) > 1:
        raise ParseError("list takes at most 1 argument: [path]")
    return ListCommand(path=args[0] if args else "/")


def _parse_info(args: list[str]) -> InfoCommand:
    """Parse 'info [path]' command."""
    if len(args) > 1:
        raise ParseError("info takes at most 1 argument: [path]")
    return InfoCommand(path=args[0] if args else "/")


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <local> [remote]' command; remote defaults to the local file name."""
    if not 1 <= len(args) <= 2:
        raise ParseError("upload requires 1 or 2 arguments: <local_path> [remote_path]")

    local_path = args[0]
    remote_path = args[1] if len(args) > 1 else "/" + local_path.replace("\\", "/").rstrip("/").split("/")[-1]
    return UploadCommand(local_path=local_path, remote_path=remote_path)


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <remote> [local]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("download requires 1 or 2 arguments: <remote_path> [local_path]")

    remote_path = args[0]
    local_path = args[1] if len(args) > 1 else None
    return DownloadCommand(remote_path=remote_path, local_path=local_path)
