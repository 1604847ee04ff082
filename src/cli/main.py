"""
Main CLI interface for Devbox.

This module provides the ``devbox`` command: one subcommand per environment
operation, each delegating to git, Vagrant or docker-compose inside the VM.
"""

import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional

import click

from .. import __version__
from ..config import AppSettings, get_settings
from ..environment import (
    DevboxError,
    DevEnvironment,
    check_dependencies,
    require_environment_root,
    resolve_stream_editor,
)
from ..logging_utils import LogManager
from ..utils.directories import resolve_log_directory

# Subcommands that never touch the external tools
PREFLIGHT_EXEMPT = {"version", "config", "tools", "history"}


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured logging with correlation IDs."""

    RESERVED = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "stack_info",
        "exc_info",
        "exc_text",
        "correlation_id",
        "execution_id",
    }

    def format(self, record):
        correlation_id = getattr(record, "correlation_id", "unknown")
        execution_id = getattr(record, "execution_id", None)

        log_data = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": correlation_id,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if execution_id:
            log_data["execution_id"] = execution_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in self.RESERVED and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)


def configure_logging(settings: AppSettings, verbose: bool = False) -> Path:
    """Install the console and log file handlers on the root logger."""
    log_dir = resolve_log_directory(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_dir / "devbox.log")
    if settings.log_format == "json":
        file_handler.setFormatter(StructuredFormatter())
    else:
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    # External tools own the terminal; only problems reach the console
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "_devbox", False):
            root_logger.removeHandler(handler)
            handler.close()
    for handler in (console_handler, file_handler):
        handler._devbox = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if verbose else settings.log_level)

    return log_dir


class DevboxGroup(click.Group):
    """Command group that exits 1 with usage text on unknown commands."""

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            click.echo(f"❌ {e.format_message()}", err=True)
            click.echo(ctx.get_help())
            ctx.exit(1)


def _fail(message: str) -> None:
    click.echo(f"❌ {message}", err=True)
    sys.exit(1)


def _run_in_environment(
    ctx: click.Context, operation: Callable[[DevEnvironment, Path], Awaitable[int]]
) -> None:
    """Resolve the environment root, run ``operation`` and exit with its code."""
    settings: AppSettings = ctx.obj["settings"]

    try:
        root = require_environment_root(Path.cwd(), settings.marker_name)
        environment = DevEnvironment(
            settings=settings, stream_editor=ctx.obj.get("stream_editor", "sed")
        )
        exit_code = asyncio.run(operation(environment, root))
    except DevboxError as e:
        _fail(str(e))
    else:
        sys.exit(exit_code)


# CLI Commands


@click.group(cls=DevboxGroup, invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, verbose):
    """Devbox - Local Development Environment Manager"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(1)

    settings = get_settings()
    configure_logging(settings, verbose)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings

    if ctx.invoked_subcommand in PREFLIGHT_EXEMPT:
        return

    try:
        check_dependencies()
        ctx.obj["stream_editor"] = resolve_stream_editor()
    except DevboxError as e:
        _fail(str(e))


@cli.command()
@click.pass_context
def init(ctx):
    """Create a new environment in the current (empty) directory.

    Copies the Vagrantfile and docker-compose.yml templates, installs the
    Vagrant plugins, clones every application repository and switches the
    non-primary images to local builds.
    """
    settings: AppSettings = ctx.obj["settings"]

    async def _init():
        environment = DevEnvironment(
            settings=settings, stream_editor=ctx.obj.get("stream_editor", "sed")
        )
        return await environment.initialize_environment(Path.cwd())

    try:
        exit_code = asyncio.run(_init())
    except DevboxError as e:
        _fail(str(e))
    else:
        if exit_code == 0:
            click.echo("🎉 Environment created! Start it with: devbox boot")
        sys.exit(exit_code)


@cli.command()
@click.pass_context
def boot(ctx):
    """Start the VM (destroys it again if startup fails)."""
    _run_in_environment(ctx, lambda env, root: env.boot(root))


@cli.command()
@click.pass_context
def halt(ctx):
    """Stop the VM."""
    _run_in_environment(ctx, lambda env, root: env.halt(root))


@cli.command()
@click.pass_context
def destroy(ctx):
    """Destroy the VM."""
    _run_in_environment(ctx, lambda env, root: env.destroy(root))


@cli.command()
@click.pass_context
def containers(ctx):
    """List the services defined in the VM."""
    _run_in_environment(ctx, lambda env, root: env.containers(root))


@cli.command()
@click.argument("service", required=False)
@click.pass_context
def rebuild(ctx, service):
    """Build, stop, remove and restart SERVICE inside the VM."""
    if not service:
        _fail("Missing service name. Usage: devbox rebuild <name>")
    _run_in_environment(ctx, lambda env, root: env.rebuild(root, service))


@cli.command()
@click.pass_context
def logs(ctx):
    """Stream the container logs from inside the VM."""
    _run_in_environment(ctx, lambda env, root: env.logs(root))


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run(ctx, command):
    """Execute COMMAND inside the VM.

    Examples:
      devbox run "ls -la"
      devbox run docker ps
    """
    script = " ".join(command)
    if not script.strip():
        _fail("Missing command. Usage: devbox run <cmd>")
    _run_in_environment(ctx, lambda env, root: env.run(root, script))


@cli.command()
@click.pass_context
def ssh(ctx):
    """Open an interactive shell inside the VM."""
    _run_in_environment(ctx, lambda env, root: env.ssh(root))


@cli.command()
@click.pass_context
def tools(ctx):
    """Show status of the external tools."""
    settings: AppSettings = ctx.obj["settings"]

    async def _tools():
        stream_editor = "sed"
        try:
            stream_editor = resolve_stream_editor()
        except DevboxError as e:
            click.echo(f"❌ {e}")
        environment = DevEnvironment(settings=settings, stream_editor=stream_editor)
        return await environment.get_tools_status()

    result: Dict[str, Any] = asyncio.run(_tools())

    click.echo("🔧 Tool Status:")
    click.echo()

    for tool_name, tool_info in result.items():
        if tool_info.get("status") == "available":
            click.echo(f"✅ {tool_name}: {tool_info.get('description', '')}")
            click.echo(f"   Version: {tool_info.get('version', 'Unknown')}")
        else:
            click.echo(f"❌ {tool_name}: {tool_info.get('error', 'Not available')}")
        click.echo()


@cli.command()
@click.option("--lines", "-n", default=20, help="Number of events to show")
@click.pass_context
def history(ctx, lines):
    """Show recent devbox operations."""
    settings: AppSettings = ctx.obj["settings"]
    log_manager = LogManager(settings.log_dir)

    events = asyncio.run(log_manager.read_recent_events(None))
    completed = [e for e in events if e.get("event_type") == "execution_completed"]

    if not completed:
        click.echo("📄 No history found")
        return

    click.echo(f"📄 Recent operations (last {len(completed[-lines:])}):")
    click.echo()
    for event in completed[-lines:]:
        icon = "✅" if event.get("success") else "❌"
        click.echo(
            f"{icon} {event.get('timestamp', '')}  {event.get('operation', '')}"
            f"  exit={event.get('exit_code')}"
            f"  {float(event.get('duration_seconds') or 0):.1f}s"
        )


@cli.command()
@click.pass_context
def config(ctx):
    """Show the effective configuration."""
    settings: AppSettings = ctx.obj["settings"]
    click.echo(json.dumps(settings.get_safe_dict(), indent=2, default=str))


@cli.command()
def version():
    """Show version information."""
    click.echo("Devbox Local Development Environment Manager")
    click.echo(f"Version: {__version__}")


def main(argv: Optional[list] = None) -> None:
    """Console script entry point."""
    cli(args=argv, prog_name="devbox")


if __name__ == "__main__":
    main()
