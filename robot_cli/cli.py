"""Command-line entry point: ``robot [--verbose] <command>``.

Commands::

    robot create [name] [-t KEY] [--no-cache] [--skip-install]
    robot list [-r] [-c CATEGORY]
    robot search KEYWORD
    robot cache [--clear] [--info]
    robot clear-cache

Without a command the banner, a catalog and cache summary and a short
cheat sheet are printed.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import httpx
from rich.panel import Panel
from rich.table import Table

from robot_cli import __version__
from robot_cli.acquisition import AcquisitionPipeline
from robot_cli.catalog import Catalog, TemplateDescriptor, default_catalog
from robot_cli.config import Config
from robot_cli.create import CreateOptions, create_project
from robot_cli.errors import RobotCLIError, UserCancelled
from robot_cli.navigation import Prompter, RichPrompter
from robot_cli.utils import (
    check_network,
    configure_logging,
    console,
    format_size,
    print_error,
    print_success,
    print_suggestions,
    print_warning,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

_OFFLINE_SUGGESTIONS = (
    "Check your network connection",
    "Drop --no-cache to use a cached template",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="robot",
        description="Robot CLI -- create projects from curated starter templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  robot create\n"
            "  robot create my-app -t robot-admin\n"
            "  robot list --recommended\n"
            "  robot search vue\n"
            "  robot cache --info\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    create = subparsers.add_parser("create", help="Create a new project")
    create.add_argument("project_name", nargs="?", default=None, help="Project directory name")
    create.add_argument(
        "--template", "-t",
        default=None,
        help="Template key; skips the selection wizard",
    )
    create.add_argument(
        "--no-cache",
        dest="use_cache",
        action="store_false",
        help="Always download a fresh template",
    )
    create.add_argument(
        "--skip-install",
        action="store_true",
        help="Default the dependency install question to 'no'",
    )

    list_cmd = subparsers.add_parser("list", aliases=["ls"], help="List available templates")
    list_cmd.add_argument(
        "--recommended", "-r",
        action="store_true",
        help="Only show recommended templates",
    )
    list_cmd.add_argument(
        "--category", "-c",
        default=None,
        help="Only show one category (frontend, mobile, backend, desktop)",
    )

    search = subparsers.add_parser("search", help="Search templates by keyword")
    search.add_argument("keyword", help="Text matched against names, descriptions and features")

    cache = subparsers.add_parser("cache", help="Inspect or clear the template cache")
    cache.add_argument("--clear", action="store_true", help="Remove every cached template")
    cache.add_argument("--info", action="store_true", help="Show cached templates and sizes")

    subparsers.add_parser("clear-cache", help="Remove every cached template without asking")

    return parser


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def print_templates(catalog: Catalog, templates: dict[str, TemplateDescriptor]) -> None:
    """Print templates grouped under their category."""
    for heading, group in catalog.group_by_category(templates).items():
        table = Table(title=heading, title_justify="left", show_header=True, header_style="bold cyan")
        table.add_column("Key", style="green", no_wrap=True)
        table.add_column("Template")
        table.add_column("Description")
        table.add_column("Features", style="dim")
        for template in group:
            name = template.display_name
            if not template.is_available:
                name += " [yellow](coming soon)[/yellow]"
            table.add_row(template.key, name, template.description, ", ".join(template.features))
        console.print(table)
        console.print()


def show_banner(catalog: Catalog, config: Config) -> None:
    cached = len(list(config.cache_dir.iterdir())) if config.cache_dir.is_dir() else 0
    console.print(
        Panel(
            f"[bold cyan]Robot CLI[/bold cyan] v{__version__}\n"
            "Create projects from curated starter templates\n\n"
            f"Templates:  {len(catalog)} in {len(catalog.categories())} categories\n"
            f"Cached:     {cached}",
            border_style="cyan",
        )
    )
    console.print("[blue]Commands:[/blue]")
    for usage, summary in (
        ("robot create [name]", "create a project with the selection wizard"),
        ("robot create -t <key>", "create a project from a known template"),
        ("robot list [-r] [-c <category>]", "list templates"),
        ("robot search <keyword>", "search templates"),
        ("robot cache --info | --clear", "inspect or clear the template cache"),
    ):
        console.print(f"[cyan]   {usage:<34}[/cyan] [dim]{summary}[/dim]")
    console.print()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def cmd_create(
    args: argparse.Namespace,
    *,
    config: Config,
    catalog: Catalog,
    prompter: Prompter,
    transport: httpx.AsyncBaseTransport | None = None,
    directory: Path | None = None,
) -> int:
    if not args.use_cache:
        if not await check_network(config.network_probe_url):
            print_error("Network unavailable, cannot download a fresh template.")
            print_suggestions(_OFFLINE_SUGGESTIONS)
            return EXIT_FAILURE

    options = CreateOptions(
        template=args.template,
        use_cache=args.use_cache,
        skip_install=args.skip_install,
        directory=directory or Path.cwd(),
    )
    pipeline = AcquisitionPipeline(config, transport=transport)
    await create_project(
        args.project_name,
        options,
        catalog=catalog,
        prompter=prompter,
        pipeline=pipeline,
    )
    return EXIT_OK


def cmd_list(args: argparse.Namespace, *, catalog: Catalog) -> int:
    if args.recommended:
        templates = catalog.recommended()
        title = "Recommended templates"
    elif args.category:
        category = catalog.category(args.category)
        if category is None:
            print_error(f"Unknown category: {args.category}")
            keys = ", ".join(c.key for c in catalog.categories())
            console.print(f"[dim]Available categories: {keys}[/dim]")
            return EXIT_FAILURE
        templates = {
            t.key: t
            for stack in category.stacks
            for pattern in stack.patterns
            for t in pattern.templates
        }
        title = f"{category.name} templates"
    else:
        templates = catalog.list_all()
        title = "All templates"

    console.print(f"\n[bold]{title}[/bold] ({len(templates)})\n")
    print_templates(catalog, templates)
    console.print("[dim]Use: robot create <name> -t <key>[/dim]")
    return EXIT_OK


def cmd_search(args: argparse.Namespace, *, catalog: Catalog) -> int:
    results = catalog.search(args.keyword)
    if not results:
        print_warning(f'No templates match "{args.keyword}".')
        console.print("[dim]Try a broader keyword, or run: robot list[/dim]")
        return EXIT_OK

    console.print(f'\n[bold]Templates matching "{args.keyword}"[/bold] ({len(results)})\n')
    print_templates(catalog, results)
    return EXIT_OK


async def cmd_cache(args: argparse.Namespace, *, config: Config, prompter: Prompter) -> int:
    pipeline = AcquisitionPipeline(config)

    if args.clear:
        if not prompter.confirm("Remove every cached template?", default=False):
            console.print("[dim]Cache kept.[/dim]")
            return EXIT_OK
        return await cmd_clear_cache(config=config, pipeline=pipeline)

    info = await pipeline.cache.info()
    console.print(f"\n[bold]Template cache[/bold]: {info.path}")
    if not info.exists or not info.entries:
        console.print("[dim]The cache is empty.[/dim]\n")
        return EXIT_OK

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Template", style="green")
    table.add_column("Size", justify="right")
    table.add_column("Updated", style="dim")
    for entry in info.entries:
        table.add_row(entry.name, format_size(entry.size), entry.modified.strftime("%Y-%m-%d %H:%M"))
    console.print(table)
    console.print(f"Total: {len(info.entries)} templates, {format_size(info.total_size)}\n")
    return EXIT_OK


async def cmd_clear_cache(
    *, config: Config, pipeline: AcquisitionPipeline | None = None
) -> int:
    pipeline = pipeline or AcquisitionPipeline(config)
    removed = await pipeline.clear_cache()
    if removed:
        print_success(f"Removed {len(removed)} cached templates.")
    else:
        console.print("[dim]The cache is already empty.[/dim]")
    return EXIT_OK


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def run(
    argv: list[str] | None = None,
    *,
    config: Config | None = None,
    catalog: Catalog | None = None,
    prompter: Prompter | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    directory: Path | None = None,
) -> int:
    """Parse ``argv``, run one command and return the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    config = config or Config.from_env()
    catalog = catalog or default_catalog()
    prompter = prompter or RichPrompter(console)
    logger.debug("Cache directory: %s", config.cache_dir)

    try:
        if args.command == "create":
            config.ensure_directories()
            return await cmd_create(
                args,
                config=config,
                catalog=catalog,
                prompter=prompter,
                transport=transport,
                directory=directory,
            )
        if args.command in ("list", "ls"):
            return cmd_list(args, catalog=catalog)
        if args.command == "search":
            return cmd_search(args, catalog=catalog)
        if args.command == "cache":
            return await cmd_cache(args, config=config, prompter=prompter)
        if args.command == "clear-cache":
            return await cmd_clear_cache(config=config)

        show_banner(catalog, config)
        return EXIT_OK
    except UserCancelled as exc:
        print_warning(str(exc))
        return EXIT_OK
    except RobotCLIError as exc:
        print_error(f"Error: {exc}")
        print_suggestions(exc.suggestions)
        return EXIT_FAILURE


def main(argv: list[str] | None = None) -> None:
    """Console-script entry point for ``robot``."""
    sys.exit(asyncio.run(run(argv)))


if __name__ == "__main__":
    main()
