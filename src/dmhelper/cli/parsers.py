#!/usr/bin/env python3
"""
Argument parsers for the docker-machine-helper CLI.
"""

import argparse
import sys
from typing import List, Tuple

import structlog

from dmhelper import __version__
from dmhelper.cli.container_commands import cmd_bash, cmd_docker
from dmhelper.cli.machine_commands import (
    cmd_info,
    cmd_init,
    cmd_inspect,
    cmd_rm,
    cmd_status,
    cmd_stop,
    cmd_up,
)
from dmhelper.cli.utils import console
from dmhelper.errors import EXIT_FAILURE, HelperError, ResourceNotFoundError
from dmhelper.logging import QUIET_LEVEL, VERBOSE_LEVEL, configure_logging
from dmhelper.models import DEFAULT_DISK_SIZE_MB, DEFAULT_MEMORY_MB
from dmhelper.output import print_error, print_missing

log = structlog.get_logger(__name__)

# Commands whose arguments are handed to a program inside the machine untouched
PASSTHROUGH_COMMANDS = {
    "bash": "cmd",
    "b": "cmd",
    "docker": "docker_args",
    "d": "docker_args",
}


class HelperArgumentParser(argparse.ArgumentParser):
    """Print the full help and exit with status 1 on unknown commands or arguments."""

    def error(self, message):
        self.print_help(sys.stderr)
        print_error(message)
        sys.exit(EXIT_FAILURE)


def build_parser() -> HelperArgumentParser:
    parser = HelperArgumentParser(
        prog="docker-machine-helper",
        description=(
            "Set up and run docker-machine. "
            "Run without arguments to initialize and ssh into the machine."
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"docker-machine-helper {__version__}"
    )
    parser.add_argument(
        "--config", "-c", help="Path to config file (default: nearest .dmhelper.yaml)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--log-json", action="store_true", help="Log events as JSON")

    # Provision and connect (default)
    parser.set_defaults(func=cmd_up)

    subparsers = parser.add_subparsers(dest="command", metavar="command", help="Commands")

    bash_parser = subparsers.add_parser(
        "bash",
        aliases=["b"],
        help="List containers/images and run given command "
        "('/usr/bin/env bash' by default) on selected one",
        add_help=False,
    )
    bash_parser.add_argument("cmd", nargs=argparse.REMAINDER, help="Command to run")
    bash_parser.set_defaults(func=cmd_bash)

    docker_parser = subparsers.add_parser(
        "docker", aliases=["d"], help="Run docker CLI", add_help=False
    )
    docker_parser.add_argument(
        "docker_args", nargs=argparse.REMAINDER, help="Arguments passed to docker"
    )
    docker_parser.set_defaults(func=cmd_docker)

    info_parser = subparsers.add_parser(
        "info", aliases=["i"], help="Get basic information about the machine"
    )
    info_parser.set_defaults(func=cmd_info)

    inspect_parser = subparsers.add_parser(
        "inspect", help="Inspect information about the machine"
    )
    inspect_parser.set_defaults(func=cmd_inspect)

    rm_parser = subparsers.add_parser("rm", help="Remove the machine")
    rm_parser.set_defaults(func=cmd_rm)

    status_parser = subparsers.add_parser("status", help="Get the status of the machine")
    status_parser.set_defaults(func=cmd_status)

    stop_parser = subparsers.add_parser("stop", help="Stop the machine")
    stop_parser.set_defaults(func=cmd_stop)

    init_parser = subparsers.add_parser(
        "init", help="Write a default .dmhelper.yaml into the current directory"
    )
    init_parser.add_argument(
        "name", nargs="?", default=None, help="Machine name (default: directory name)"
    )
    init_parser.add_argument(
        "--memory", type=int, default=DEFAULT_MEMORY_MB, help="RAM in MB (default: 1024)"
    )
    init_parser.add_argument(
        "--disk-size",
        type=int,
        default=DEFAULT_DISK_SIZE_MB,
        help="Disk size in MB (default: 15360)",
    )
    init_parser.add_argument("--force", "-f", action="store_true", help="Overwrite existing config")
    init_parser.set_defaults(func=cmd_init)

    help_parser = subparsers.add_parser("help", aliases=["h"], help="Show a list of commands")
    help_parser.set_defaults(func=lambda args, p=parser: p.print_help() or 0)

    return parser


def split_passthrough(argv: List[str]) -> Tuple[List[str], List[str]]:
    """Split *argv* after a passthrough command so its arguments are never parsed as options.

    >>> split_passthrough(["-v", "d", "--version"])
    (['-v', 'd'], ['--version'])
    """
    expects_value = False
    for index, arg in enumerate(argv):
        if expects_value:
            expects_value = False
        elif arg in ("-c", "--config"):
            expects_value = True
        elif not arg.startswith("-"):
            if arg in PASSTHROUGH_COMMANDS:
                return argv[: index + 1], argv[index + 1 :]
            break
    return argv, []


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    head, passthrough = split_passthrough(argv)
    args = parser.parse_args(head)
    if args.command in PASSTHROUGH_COMMANDS:
        setattr(args, PASSTHROUGH_COMMANDS[args.command], passthrough)

    configure_logging(
        level=VERBOSE_LEVEL if args.verbose else QUIET_LEVEL,
        json_output=args.log_json,
    )

    try:
        status = args.func(args)
    except ResourceNotFoundError as e:
        print_missing(str(e))
        sys.exit(e.exit_code)
    except HelperError as e:
        print_error(str(e))
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/]")
        sys.exit(EXIT_FAILURE)
    except Exception as e:
        log.debug("unhandled_error", exc_info=True)
        print_error(f"Error: {e}")
        sys.exit(EXIT_FAILURE)

    sys.exit(status or 0)
