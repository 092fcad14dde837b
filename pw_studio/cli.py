"""
Command line interface.

Runs the code generator and the Data Page Lister against a site snapshot.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from . import __version__
from .codegen import (
    ConfigError,
    GeneratorError,
    RegistryError,
    TemplateError,
    generate_code,
    get_generator,
    list_supported_languages,
    load_config,
)
from .host import available_templates, template_field_rows
from .lister import DataPageLister, format_cell
from .logging_config import get_logger, setup_logging
from .settings import SettingsManager
from .snapshot import SiteSnapshot, SnapshotError, load_snapshot

logger = get_logger(__name__)

console = Console()
err_console = Console(stderr=True)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="pw-studio",
        description="ProcessWire Studio: template snippets and data page listings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pw-studio --site site.json templates
  pw-studio --site site.json fields blog-post
  pw-studio --site site.json codegen blog-post --fields title,date,images
  pw-studio --site site.json lister 1001 --q coffee --sort date --dir desc
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--site", metavar="FILE", help="Site snapshot JSON file")
    source.add_argument("--url", help="URL to fetch the site snapshot from")

    parser.add_argument(
        "--settings",
        metavar="FILE",
        help="Lister settings JSON file (default: settings stored in the snapshot)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    templates_parser = subparsers.add_parser("templates", help="List available templates")
    templates_parser.set_defaults(func=_handle_templates)

    fields_parser = subparsers.add_parser("fields", help="Show the fields of a template")
    fields_parser.add_argument("template", help="Template id or name")
    fields_parser.set_defaults(func=_handle_fields)

    codegen_parser = subparsers.add_parser(
        "codegen", help="Generate template-file code for selected fields"
    )
    codegen_parser.add_argument("template", help="Template id or name")
    codegen_parser.add_argument(
        "--fields",
        "-f",
        default="",
        help="Comma-separated field names (title is always available)",
    )
    codegen_parser.add_argument(
        "--language",
        "-l",
        default="php",
        help=f"Target language (available: {', '.join(list_supported_languages())})",
    )
    codegen_parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    codegen_parser.add_argument("--config", help="Generator configuration file (JSON)")
    codegen_parser.add_argument(
        "--no-comments",
        action="store_true",
        help="Leave field labels out of the block markers",
    )
    codegen_parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON envelope instead of highlighted code",
    )
    codegen_parser.add_argument(
        "--verbose", action="store_true", help="Show generation result metadata"
    )
    codegen_parser.set_defaults(func=_handle_codegen)

    lister_parser = subparsers.add_parser("lister", help="List the children of a container page")
    lister_parser.add_argument("page_id", type=int, help="Container page id")
    lister_parser.add_argument("--q", default="", help="Search text")
    lister_parser.add_argument("--by", default="", help="Field to search in (default: title)")
    lister_parser.add_argument("--sort", default="", help="Sort field (default: title)")
    lister_parser.add_argument("--dir", default="", help="Sort direction: asc or desc")
    lister_parser.add_argument("--pg", type=int, default=1, help="Page number")
    lister_parser.set_defaults(func=_handle_lister)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        snapshot = _load_site(args)
        return args.func(args, snapshot)
    except FileNotFoundError as e:
        err_console.print(f"[red]✗ {e}[/red]")
        return 1
    except (SnapshotError, ConfigError, RegistryError, GeneratorError, TemplateError, CLIError) as e:
        err_console.print(f"[red]✗ Error:[/red] {e}")
        logger.debug("Command failed", exc_info=True)
        return 1


def _load_site(args: argparse.Namespace) -> SiteSnapshot:
    if not (args.site or args.url):
        raise CLIError("A site snapshot is required (--site FILE or --url URL)")
    return load_snapshot(file_path=args.site, url=args.url)


def _handle_templates(args: argparse.Namespace, snapshot: SiteSnapshot) -> int:
    templates = available_templates(snapshot)

    if not templates:
        console.print("[yellow]No templates found.[/yellow]")
        return 0

    table = Table(title="Templates", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="bold green", no_wrap=True)
    table.add_column("Label")
    table.add_column("Fields", justify="right", style="cyan")

    for template in templates:
        table.add_row(
            str(template.id), template.name, template.display_label, str(len(template.fields))
        )

    console.print(table)
    return 0


def _handle_fields(args: argparse.Namespace, snapshot: SiteSnapshot) -> int:
    rows = template_field_rows(snapshot, args.template)
    template = snapshot.get_template(args.template)

    if template is None:
        err_console.print(f"[red]✗ Template not found:[/red] {args.template}")
        return 1

    if not rows:
        console.print("[yellow]No fields found for this template.[/yellow]")
        return 0

    table = Table(
        title=f"Fields of {template.display_label}", box=box.ROUNDED, title_style="bold cyan"
    )
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="bold green", no_wrap=True)
    table.add_column("Label")
    table.add_column("Type", style="cyan")
    table.add_column("Required", justify="center")

    for row in rows:
        table.add_row(
            str(row["id"]),
            row["name"],
            row["label"],
            row["type"],
            "✓" if row["required"] else "",
        )

    console.print(table)
    return 0


def _handle_codegen(args: argparse.Namespace, snapshot: SiteSnapshot) -> int:
    overrides = {"add_comments": False} if args.no_comments else None
    config = _build_config(args, overrides)

    generator = get_generator(args.language, config, snapshot)
    selected = [name.strip() for name in args.fields.split(",") if name.strip()]
    template = snapshot.get_template(args.template)

    result = generate_code(generator, template, selected)

    if args.json:
        sys.stdout.write(json.dumps(result.to_response(), indent=2, ensure_ascii=False) + "\n")
        return 0 if result.success else 1

    if not result.success:
        err_console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        return 1

    if not result.code:
        console.print(
            "[yellow]Nothing to generate: unknown template or no matching fields selected.[/yellow]"
        )
        return 0

    if args.output:
        output_path = Path(args.output)
        try:
            output_path.write_text(result.code, encoding="utf-8")
        except OSError as e:
            raise CLIError(f"Failed to write to {output_path}: {e}") from e
        console.print(f"[green]✓[/green] Generated code saved to [cyan]{output_path}[/cyan]")
    else:
        console.print(
            Panel(
                Syntax(result.code, generator.language_name, theme="monokai"),
                title=f"{template.name}{generator.file_extension}",
                border_style="green",
            )
        )

    if args.verbose and result.metadata:
        metadata_table = Table(
            title="Generation Metadata", box=box.SIMPLE, header_style="bold cyan"
        )
        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")
        for key, value in result.metadata.items():
            metadata_table.add_row(key.replace("_", " ").title(), str(value))
        console.print(metadata_table)

    if result.warnings:
        err_console.print("[yellow]Warnings:[/yellow]")
        for warning in result.warnings:
            err_console.print(f"  [yellow]•[/yellow] {warning}")

    return 0


def _build_config(args: argparse.Namespace, overrides):
    """Generator config from the optional file plus CLI overrides."""
    if not args.config:
        return overrides

    return load_config(args.language.lower(), custom_config=overrides, config_file=args.config)


def _handle_lister(args: argparse.Namespace, snapshot: SiteSnapshot) -> int:
    settings = SettingsManager().load(args.settings) if args.settings else None
    lister = DataPageLister(snapshot, snapshot, config=snapshot, settings=settings)

    page = snapshot.get_page(args.page_id)
    if page is None:
        err_console.print(f"[red]✗ Page not found:[/red] {args.page_id}")
        return 1

    params = {"q": args.q, "by": args.by, "sort": args.sort, "dir": args.dir, "pg": args.pg}
    overview = lister.overview(page, params)

    if overview is None:
        err_console.print(
            f"[yellow]Page {page.id} ({page.template}) is not a data container "
            f"or has no child templates.[/yellow]"
        )
        return 1

    template_names = ", ".join(t.name for t in overview.child_templates)
    noun = "entry" if overview.total == 1 else "entries"
    console.print(
        f"[bold]{escape(page.title or page.name)}[/bold]  "
        f"[dim]{overview.total} {noun} • Templates: {template_names}[/dim]"
    )

    if overview.show_help:
        console.print(
            f"[dim]Columns: {', '.join(overview.fields) or '-'} • "
            f"Searchable: {', '.join(overview.allowed)}[/dim]"
        )

    if overview.active:
        console.print(
            f"[cyan]Filter:[/cyan] {overview.active.by} contains '{escape(overview.active.q)}'"
        )

    if not overview.items:
        console.print("[yellow]No entries found.[/yellow]")
        return 0

    table = Table(box=box.SIMPLE_HEAVY, header_style="bold cyan")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Title", style="bold")
    for name in overview.fields:
        table.add_column(name)
    if overview.show_view:
        table.add_column("URL", style="blue")

    for item in overview.items:
        cells = [str(item.id), escape(format_cell(item.title))]
        cells.extend(escape(format_cell(item.get(name))) for name in overview.fields)
        if overview.show_view:
            cells.append(item.url)
        table.add_row(*cells)

    console.print(table)

    if overview.pager:
        links = " ".join(
            f"[bold reverse] {p} [/bold reverse]" if p == overview.page_num else str(p)
            for p in overview.pager
        )
        console.print(f"Pages: {links}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
