"""Command line entry point: run a host, or talk to one."""

import argparse
import os
import sys
from typing import Optional

from common.constants import DEFAULT_PORT, DEFAULT_REALM
from common.logging_config import setup_logging
from common.paths import normalize_path
from cli.config import Config
from cli.errors import ShareFolderClientError
from cli.share_client import ShareFolderClient
from cli.utils import render_entry, render_listing
from host.config import SSLSettings, build_settings
from host.exceptions import ConfigurationError

CLIENT_ACTIONS = ("list", "info", "mkdir", "upload", "download", "delete")

EPILOG = """examples:
  share-folder .
  share-folder --cert=/ca/file --key=/key/file
  share-folder /path/to/folder --ips 192.168.0.0/24 192.168.5.0/24
  share-folder --user=alice --password=P@ssword123!
  share-folder --list /path/on/remote
  share-folder --upload /path/on/remote < /path/to/local/file
  share-folder --download /path/on/remote > /path/to/local/file
  share-folder --shell --host 192.168.0.10
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="share-folder",
        description="Share a folder over HTTP, or work with a shared folder remotely.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("path", nargs="?", default=None,
                        help="Folder to share (host mode, default: .) or remote path (client mode, default: /)")
    parser.add_argument("-?", "--help", action="help", help="Show this help screen.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")

    host_group = parser.add_argument_group("host mode")
    host_group.add_argument("--port", type=int, default=None, help=f"The TCP port to use. Default: {DEFAULT_PORT}")
    host_group.add_argument("--bind", default=None, help="Address to listen on. Default: 0.0.0.0")
    host_group.add_argument("--ips", nargs="+", default=[], metavar="CIDR",
                            help="IPs or ranges (CIDR) allowed to connect. Loopback is always allowed.")
    host_group.add_argument("--realm", default=None, help=f"Authentication realm. Default: {DEFAULT_REALM}")
    host_group.add_argument("--read-only", action="store_true", help="Reject create, write and delete requests.")
    host_group.add_argument("--ca", default=None, help="The path to SSL CA for secure HTTP mode.")
    host_group.add_argument("--cert", default=None, help="The path to SSL CERT for secure HTTP mode.")
    host_group.add_argument("--key", default=None, help="The path to SSL KEY for secure HTTP mode.")
    host_group.add_argument("--passphrase", default=None, help="SSL passphrase.")
    host_group.add_argument("-ra", "--reject-unauthorized", action="store_true",
                            help="Require client certificates signed by the CA.")

    auth_group = parser.add_argument_group("credentials (both modes)")
    auth_group.add_argument("-u", "--user", default=None, help="The username for the authentication to use.")
    auth_group.add_argument("-p", "--password", default=None, help="The password for the authentication to use.")

    client_group = parser.add_argument_group("client mode")
    client_group.add_argument("-h", "--host", default=None, help="The address of the host to connect to.")
    client_group.add_argument("--ssl", action="store_true", default=None,
                              help="Use a secure connection when connecting to a host.")
    client_group.add_argument("--config", default=None, help="Client config file. Default: ~/.share-folder/config.json")

    actions = client_group.add_mutually_exclusive_group()
    actions.add_argument("--list", dest="action", action="store_const", const="list", help="List a remote directory.")
    actions.add_argument("--info", dest="action", action="store_const", const="info", help="Show metadata of a remote entry.")
    actions.add_argument("--mkdir", dest="action", action="store_const", const="mkdir", help="Create a remote directory.")
    actions.add_argument("-ul", "--upload", dest="action", action="store_const", const="upload",
                         help="Upload the data from stdin to a remote file.")
    actions.add_argument("-dl", "--download", dest="action", action="store_const", const="download",
                         help="Download a remote file and send it to stdout.")
    actions.add_argument("-del", "--delete", dest="action", action="store_const", const="delete",
                         help="Delete a remote file or folder.")
    actions.add_argument("--shell", dest="action", action="store_const", const="shell",
                         help="Open the interactive shell.")
    return parser


def load_client_config(args: argparse.Namespace) -> Config:
    """
    Read the client config file and apply command line overrides.
    """
    config = Config(args.config) if args.config else Config()
    config.override(
        host=args.host,
        port=args.port,
        ssl=args.ssl,
        user=args.user,
        password=args.password,
    )
    return config


def run_client(args: argparse.Namespace, client: ShareFolderClient) -> int:
    """
    Execute one client action. Data goes to stdout, status lines to stderr.

    Returns:
        Process exit code
    """
    remote_path = normalize_path(args.path)

    try:
        if args.action == "list":
            entries = client.list(remote_path)
            print(f"Result of '{remote_path}':", file=sys.stderr)
            if entries:
                print(render_listing(entries))
            else:
                print("The directory is empty.", file=sys.stderr)
        elif args.action == "info":
            print(render_entry(client.info(remote_path)))
        elif args.action == "mkdir":
            client.make_directory(remote_path)
            print(f"Directory '{remote_path}' has been created.", file=sys.stderr)
        elif args.action == "upload":
            data = sys.stdin.buffer.read()
            client.upload(remote_path, data)
            print(f"File has been uploaded to '{remote_path}'.", file=sys.stderr)
        elif args.action == "download":
            data = client.download(remote_path)
            sys.stdout.buffer.write(data)
            sys.stdout.buffer.flush()
            print(f"File has been downloaded from '{remote_path}'.", file=sys.stderr)
        elif args.action == "delete":
            entry = client.remove(remote_path)
            kind = "Directory" if entry.is_directory else "File"
            print(f"{kind} '{remote_path}' has been removed.", file=sys.stderr)
    except ShareFolderClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def run_host(args: argparse.Namespace) -> int:
    """
    Build the host settings from the arguments and serve until interrupted.
    """
    from host.main import serve

    try:
        settings = build_settings(
            root=args.path or ".",
            host=args.bind or "0.0.0.0",
            port=args.port,
            realm=args.realm,
            read_only=args.read_only,
            allowed_ips=args.ips,
            user=args.user,
            password=args.password,
            ssl=SSLSettings.build(
                ca=args.ca,
                cert=args.cert,
                key=args.key,
                passphrase=args.passphrase,
                reject_unauthorized=args.reject_unauthorized,
            ),
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not os.path.isdir(settings.root):
        print(f"Error: Not a directory: {settings.root}", file=sys.stderr)
        return 2

    print(f"Server now runs on port {settings.port} ...")
    serve(settings)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for CLI."""
    args = build_parser().parse_args(argv)

    log_level = 'DEBUG' if args.debug else os.getenv('LOG_LEVEL')

    if args.action is None:
        logger = setup_logging('host', log_level=log_level)
        logger.debug("Debug logging enabled")
        return run_host(args)

    logger = setup_logging('cli', log_level=log_level or 'WARNING', stream=sys.stderr)
    logger.debug("CLI starting...")

    client = ShareFolderClient(load_client_config(args))
    try:
        if args.action == "shell":
            from cli.repl import repl_loop
            repl_loop(client)
            return 0
        return run_client(args, client)
    finally:
        client.close()
        logger.debug("CLI exiting")


if __name__ == "__main__":
    sys.exit(main())
