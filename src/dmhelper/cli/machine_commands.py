#!/usr/bin/env python3
"""
Machine lifecycle commands for the docker-machine-helper CLI.
"""

from pathlib import Path

from rich.markup import escape
from rich.table import Table

from dmhelper.cli.utils import build_context, console, require_machine
from dmhelper.info import collect_summary
from dmhelper.models import MachineConfig
from dmhelper.output import print_error, print_ok
from dmhelper.paths import CONFIG_FILE_NAME
from dmhelper.state import MachineState

_STATE_STYLES = {"running": "green", "stopped": "red"}


def cmd_up(args) -> int:
    """Create and set up the machine if needed, then SSH into it."""
    ctx = build_context(args)
    return ctx.provisioner.ensure_ready()


def cmd_info(args) -> int:
    """Display machine information (state, IP, memory, shared folders)."""
    ctx = require_machine(args)
    summary = collect_summary(ctx.machine, ctx.hypervisor, ctx.name)

    console.print(f"[bold]Name:[/] [cyan]{escape(summary.name)}[/]")
    style = _STATE_STYLES.get(summary.state)
    state = f"[{style}]{summary.state}[/]" if style else escape(summary.state)
    console.print(f"[bold]State:[/] {state}")

    if summary.running:
        console.print(f"[bold]IP:[/] {summary.ip_address}")
        console.print("[bold]Memory:[/]")
        for line in (summary.memory_usage or "").splitlines():
            console.print(f"    {line}", markup=False)
    else:
        console.print(f"[bold]Memory:[/] {summary.memory}")

    console.print(
        f"[bold]Shared folders:[/] mount dir {escape(summary.mount_dir)}, "
        f"mount prefix {escape(summary.mount_prefix)}"
    )
    table = Table()
    table.add_column("Name", style="cyan")
    table.add_column("Host path", style="cyan")
    table.add_column("Type", style="dim")
    for folder in summary.shared_folders:
        table.add_row(
            escape(folder.name),
            escape(folder.host_path),
            "transient" if folder.transient else "machine",
        )
    console.print(table)
    return 0


def cmd_inspect(args) -> int:
    """Inspect information about the machine."""
    ctx = require_machine(args)
    return ctx.machine.inspect(ctx.name).returncode


def cmd_status(args) -> int:
    """Print the status of the machine."""
    ctx = require_machine(args)
    print(ctx.machine.status(ctx.name))
    return 0


def cmd_stop(args) -> int:
    """Stop the machine."""
    ctx = require_machine(args)
    ctx.provisioner.converge(MachineState.STOPPED)
    return 0


def cmd_rm(args) -> int:
    """Remove the machine."""
    ctx = require_machine(args)
    ctx.provisioner.converge(MachineState.ABSENT)
    return 0


def cmd_init(args) -> int:
    """Write a default configuration into the current directory."""
    base_dir = Path.cwd()
    config_path = base_dir / CONFIG_FILE_NAME

    if config_path.exists() and not args.force:
        print_error(f"Configuration already exists: {config_path}")
        console.print("[dim]Use --force to overwrite[/]")
        return 1

    config = MachineConfig.for_directory(
        base_dir,
        name=args.name or base_dir.name,
        memory_mb=args.memory,
        disk_size_mb=args.disk_size,
    )
    config.save(config_path)

    print_ok(f"Initialized configuration: {config_path}")
    console.print("\n[dim]Next steps:[/]")
    console.print(f"  1. Review the configuration: [cyan]{config_path}[/]")
    console.print("  2. Create the machine and SSH into it: [cyan]docker-machine-helper[/]")
    return 0
