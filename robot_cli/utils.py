"""Shared utility functions for Robot CLI.

Provides async command execution, JSON I/O, project-name validation,
Rich-based console output and progress reporting, logging setup and a
network reachability probe.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any

import httpx
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

console = Console()

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(verbose: bool = False) -> None:
    """Route ``robot_cli`` loggers through a Rich handler on the shared console.

    Only warnings are shown by default; ``verbose`` enables DEBUG output.
    """
    package_logger = logging.getLogger("robot_cli")
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.handlers.clear()
    package_logger.addHandler(
        RichHandler(console=console, show_path=False, rich_tracebacks=verbose, markup=False)
    )
    package_logger.propagate = False


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int = 120,
) -> tuple[int, str, str]:
    """Run a command asynchronously, capturing its output.

    Args:
        cmd: Executable followed by its arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A missing executable is
        reported as return code ``127``; a timeout as ``-1``.
    """
    cmd_str = " ".join(cmd)

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {cmd_str}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {cmd_str}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Project names
# ---------------------------------------------------------------------------

_RESERVED_NAMES = frozenset(
    ["node_modules", "favicon.ico", "con", "prn", "aux", "nul"]
    + [f"com{i}" for i in range(1, 10)]
    + [f"lpt{i}" for i in range(1, 10)]
)

MAX_PROJECT_NAME_LENGTH = 214


def validate_project_name(name: str | None) -> list[str]:
    """Return the list of problems with ``name``; an empty list means valid.

    The rules follow npm package naming: at most 214 characters, only
    letters, digits, ``-``, ``_``, ``@`` and ``.``, no leading dot or
    underscore, and none of the reserved device/directory names.
    """
    if not name or not name.strip():
        return ["Project name cannot be empty"]

    trimmed = name.strip()
    errors: list[str] = []

    if len(trimmed) > MAX_PROJECT_NAME_LENGTH:
        errors.append(f"Project name is too long (max {MAX_PROJECT_NAME_LENGTH} characters)")
    if re.search(r"\s", trimmed):
        errors.append("Project name cannot contain spaces")
    if not re.fullmatch(r"[A-Za-z0-9\-_@.]+", trimmed):
        errors.append(
            "Project name may only contain letters, digits, '-', '_', '@' and '.'"
        )
    if trimmed[0] in "._":
        errors.append("Project name cannot start with '.' or '_'")
    if trimmed.lower() in _RESERVED_NAMES:
        errors.append(f'"{trimmed}" is a reserved name')

    return errors


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load a JSON file whose top level must be an object.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or not a JSON object
            (``json.JSONDecodeError`` is a ``ValueError``).
    """
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data


def write_json(data: dict[str, Any], path: str | Path) -> None:
    """Write ``data`` as two-space indented JSON with a trailing newline."""
    content = json.dumps(data, indent=2, ensure_ascii=False)
    Path(path).write_text(content + "\n", encoding="utf-8")


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_size(num_bytes: int) -> str:
    """Format a byte count for humans.

    Examples::

        format_size(0)       -> "0 B"
        format_size(1536)    -> "1.5 KB"
        format_size(5242880) -> "5 MB"
    """
    if num_bytes <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    size = float(num_bytes)
    index = 0
    while size >= 1024 and index < len(units) - 1:
        size /= 1024
        index += 1
    text = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[index]}"


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_suggestions(suggestions: tuple[str, ...] | list[str], title: str = "Possible fixes") -> None:
    """Print a numbered list of remediation hints."""
    if not suggestions:
        return
    console.print(f"[blue]{title}:[/blue]")
    for index, hint in enumerate(suggestions, start=1):
        console.print(f"[dim]   {index}. {hint}[/dim]")
    console.print()


def create_progress() -> Progress:
    """Create a Rich progress spinner configured for creation steps.

    Returns:
        A ``Progress`` instance suitable for use as a context manager.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


# ---------------------------------------------------------------------------
# Network probe
# ---------------------------------------------------------------------------


async def check_network(url: str = "https://github.com", timeout: float = 5.0) -> bool:
    """Return ``True`` if a HEAD request to ``url`` answers with a non-error status.

    Used before a ``--no-cache`` run, where nothing can be served locally.
    """
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout), follow_redirects=True
        ) as client:
            response = await client.head(url)
            return response.status_code < 400
    except httpx.HTTPError as exc:
        logger.debug("Network probe to %s failed: %s", url, exc)
        return False
