"""Command handler functions for CLI operations."""

import os

from common.logging_config import get_logger
from cli.errors import ShareFolderClientError
from cli.models import (
    CommandRequest,
    DeleteCommand,
    DownloadCommand,
    InfoCommand,
    ListCommand,
    MkdirCommand,
    UploadCommand,
)
from cli.share_client import ShareFolderClient
from cli.utils import format_file_size, render_entry, render_listing

logger = get_logger(__name__)


def format_error(error: ShareFolderClientError) -> str:
    return f"Error: {error}"


def handle_list(cmd: ListCommand, client: ShareFolderClient) -> str:
    """
    Handle 'list' command.

    Args:
        cmd: ListCommand with remote path
        client: ShareFolderClient talking to the host

    Returns:
        Listing table, or error message
    """
    logger.info(f"Executing list command: path={cmd.path}")
    try:
        entries = client.list(cmd.path)
    except ShareFolderClientError as e:
        return format_error(e)

    if not entries:
        return "(empty directory)"
    return render_listing(entries)


def handle_info(cmd: InfoCommand, client: ShareFolderClient) -> str:
    try:
        return render_entry(client.info(cmd.path))
    except ShareFolderClientError as e:
        return format_error(e)


def handle_mkdir(cmd: MkdirCommand, client: ShareFolderClient) -> str:
    """
    Handle 'mkdir' command.

    Returns:
        Success or error message
    """
    try:
        client.make_directory(cmd.path)
    except ShareFolderClientError as e:
        return format_error(e)
    return f"Created directory {cmd.path}"


def handle_upload(cmd: UploadCommand, client: ShareFolderClient) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with local and remote path
        client: ShareFolderClient talking to the host

    Returns:
        Success or error message
    """
    logger.info(f"Executing upload command: local={cmd.local_path} remote={cmd.remote_path}")

    if not os.path.isfile(cmd.local_path):
        return f"Error: Not a file: {cmd.local_path}"

    try:
        with open(cmd.local_path, 'rb') as f:
            data = f.read()
    except OSError as e:
        return f"Error: Cannot read {cmd.local_path}: {e.strerror or e}"

    try:
        entry = client.upload(cmd.remote_path, data)
    except ShareFolderClientError as e:
        return format_error(e)
    return f"Uploaded {cmd.local_path} to {cmd.remote_path} ({format_file_size(entry.size)})"


def handle_download(cmd: DownloadCommand, client: ShareFolderClient) -> str:
    """
    Handle 'download' command.

    The file is written to ``local_path``, or into the working directory
    under its remote name. An existing local directory receives the file
    under its remote name.

    Returns:
        Success or error message
    """
    logger.info(f"Executing download command: remote={cmd.remote_path} local={cmd.local_path}")
    try:
        data = client.download(cmd.remote_path)
    except ShareFolderClientError as e:
        return format_error(e)

    remote_name = cmd.remote_path.replace("\\", "/").rstrip("/").split("/")[-1]
    local_path = cmd.local_path or remote_name
    if os.path.isdir(local_path):
        local_path = os.path.join(local_path, remote_name)

    try:
        parent = os.path.dirname(local_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(local_path, 'wb') as f:
            f.write(data)
    except OSError as e:
        return f"Error: Cannot write {local_path}: {e.strerror or e}"

    logger.debug("Download command completed")
    return f"Downloaded {cmd.remote_path} to {local_path} ({format_file_size(len(data))})"


def handle_delete(cmd: DeleteCommand, client: ShareFolderClient) -> str:
    """
    Handle 'delete' command.

    Returns:
        Success or error message
    """
    try:
        entry = client.remove(cmd.path)
    except ShareFolderClientError as e:
        return format_error(e)

    kind = "directory" if entry.is_directory else "file"
    return f"Deleted {kind} {cmd.path}"


def dispatch_command(cmd_obj: CommandRequest, client: ShareFolderClient) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, ListCommand):
        return handle_list(cmd_obj, client)
    elif isinstance(cmd_obj, InfoCommand):
        return handle_info(cmd_obj, client)
    elif isinstance(cmd_obj, MkdirCommand):
        return handle_mkdir(cmd_obj, client)
    elif isinstance(cmd_obj, UploadCommand):
        return handle_upload(cmd_obj, client)
    elif isinstance(cmd_obj, DownloadCommand):
        return handle_download(cmd_obj, client)
    elif isinstance(cmd_obj, DeleteCommand):
        return handle_delete(cmd_obj, client)
    else:
        return f"Unknown command type: {type(cmd_obj)}"
