#!/usr/bin/env python3
"""
Bazaar Setup - trim the Bazaar template down to a single homepage

Usage:
    bazaar-setup bazaar
    bazaar-setup bazaar --home furniture-3
    bazaar-setup bazaar --home fashion-1 --here --force

Or install globally:
    uv tool install --from . bazaar-setup
    bazaar-setup list
"""

import os
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.align import Align
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from typer.core import TyperGroup

from .catalog import CATALOG, LANDING, NamedFolder, validate_selection
from .engine import DEFAULT_OUTPUT_DIRNAME, RUN_STEPS, OutputMode, customize_template
from .errors import CatalogMismatch, SetupError
from .ui import StepTracker, console, select_homepage

__version__ = "1.0.0"

# ASCII Art Banner
BANNER = """
██████╗  █████╗ ███████╗ █████╗  █████╗ ██████╗
██╔══██╗██╔══██╗╚══███╔╝██╔══██╗██╔══██╗██╔══██╗
██████╔╝███████║  ███╔╝ ███████║███████║██████╔╝
██╔══██╗██╔══██║ ███╔╝  ██╔══██║██╔══██║██╔══██╗
██████╔╝██║  ██║███████╗██║  ██║██║  ██║██║  ██║
╚═════╝ ╚═╝  ╚═╝╚══════╝╚═╝  ╚═╝╚═╝  ╚═╝╚═╝  ╚═╝
"""

TAGLINE = "Bazaar template setup - keep one homepage, drop the rest"


class BannerGroup(TyperGroup):
    """Custom group that shows banner before help."""

    def format_help(self, ctx, formatter):
        show_banner()
        super().format_help(ctx, formatter)


app = typer.Typer(
    name="bazaar-setup",
    help="Setup tool for the Bazaar Next.js template",
    add_completion=False,
    invoke_without_command=True,
    cls=BannerGroup,
)


def show_banner():
    """Display the ASCII art banner."""
    banner_lines = BANNER.strip().split('\n')
    colors = ["bright_blue", "blue", "cyan", "bright_cyan", "white", "bright_white"]

    styled_banner = Text()
    for i, line in enumerate(banner_lines):
        color = colors[i % len(colors)]
        styled_banner.append(line + "\n", style=color)

    console.print(Align.center(styled_banner))
    console.print(Align.center(Text(TAGLINE, style="italic bright_yellow")))
    console.print()


def version_callback(value: bool):
    if value:
        console.print(f"bazaar-setup {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", callback=version_callback, is_eager=True, help="Show the version and exit"),
):
    """Show banner when no subcommand is provided."""
    if ctx.invoked_subcommand is None and "--help" not in sys.argv and "-h" not in sys.argv:
        show_banner()
        console.print(Align.center("[dim]Run 'bazaar-setup --help' for usage information[/dim]"))
        console.print()


@app.command()
def bazaar(
    home: str = typer.Option(None, "--home", help="Homepage to keep (see 'bazaar-setup list'); prompts when omitted"),
    here: bool = typer.Option(False, "--here", help="Modify the template directory in place instead of writing a copy"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", envvar="BAZAAR_OUTPUT_DIR", help=f"Directory for the customized copy (default: ./{DEFAULT_OUTPUT_DIRNAME})"),
    template: Optional[Path] = typer.Option(None, "--template", envvar="BAZAAR_TEMPLATE_DIR", help="Template directory (default: current directory)"),
    keep_sections: bool = typer.Option(False, "--keep-sections", help="Keep the section components of the other homepages"),
    force: bool = typer.Option(False, "--force", help="Merge into an existing output directory, or modify in place without confirmation"),
    debug: bool = typer.Option(False, "--debug", help="Show diagnostic output on failure"),
):
    """
    Set up the Bazaar template with a single homepage.

    This command will:
    1. Let you choose the homepage that becomes the root page
    2. Copy the template to a new directory (or work in place with --here)
    3. Remove the sections and routes of every other homepage
    4. Move the chosen homepage to the root route

    Examples:
        bazaar-setup bazaar
        bazaar-setup bazaar --home grocery-4
        bazaar-setup bazaar --home fashion-1 --output ../my-shop
        bazaar-setup bazaar --home medical --keep-sections
        bazaar-setup bazaar --home landing --here --force
    """
    show_banner()

    if here and output:
        console.print("[red]Error:[/red] Cannot specify both --output and --here")
        raise typer.Exit(1)

    template_dir = (template or Path.cwd()).resolve()
    if not template_dir.is_dir():
        console.print(f"[red]Error:[/red] Template directory not found: {template_dir}")
        raise typer.Exit(1)

    mode = OutputMode.IN_PLACE if here else OutputMode.COPY
    output_dir = None if here else (output or template_dir / DEFAULT_OUTPUT_DIRNAME).resolve()

    # Homepage selection
    if home:
        try:
            validate_selection(CATALOG, home)
        except CatalogMismatch as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        selected = home
    elif sys.stdin.isatty():
        selected = select_homepage(CATALOG)
    else:
        console.print("[red]Error:[/red] --home is required when not running interactively")
        raise typer.Exit(1)

    if here and not force:
        console.print(f"[yellow]Warning:[/yellow] {template_dir} will be modified in place and cannot be restored")
        if not typer.confirm("Do you want to continue?"):
            console.print("[yellow]Operation cancelled[/yellow]")
            raise typer.Exit(0)

    if output_dir is not None and output_dir.exists() and not force:
        error_panel = Panel(
            f"Directory '[cyan]{output_dir}[/cyan]' already exists\n"
            "Use [cyan]--force[/cyan] to merge the customized template into it, or choose another --output.",
            title="[red]Directory Conflict[/red]",
            border_style="red",
            padding=(1, 2)
        )
        console.print()
        console.print(error_panel)
        raise typer.Exit(1)

    setup_lines = [
        "[cyan]Bazaar Template Setup[/cyan]",
        "",
        f"{'Homepage':<15} [green]{selected}[/green]",
        f"{'Template':<15} [dim]{template_dir}[/dim]",
        f"{'Mode':<15} [yellow]{mode.value}[/yellow]",
    ]
    if output_dir is not None:
        setup_lines.append(f"{'Output':<15} [dim]{output_dir}[/dim]")
    console.print(Panel("\n".join(setup_lines), border_style="cyan", padding=(1, 2)))

    tracker = StepTracker("Customize Bazaar Template", RUN_STEPS)

    failure = None
    with Live(tracker.render(), console=console, refresh_per_second=8, transient=True) as live:
        tracker.attach_refresh(lambda: live.update(tracker.render()))
        try:
            result = customize_template(
                template_dir,
                selected,
                catalog=CATALOG,
                mode=mode,
                output_dir=output_dir,
                keep_sections=keep_sections,
                force=force,
                tracker=tracker,
            )
            tracker.complete("final", f"{len(result.removed)} paths removed")
        except SetupError as e:
            tracker.error(tracker.running() or "final", str(e))
            failure = e

    console.print(tracker.render())

    if failure is not None:
        console.print(Panel(f"Customization failed: {failure}", title="Failure", border_style="red"))
        console.print("[yellow]The working tree may be partially customized; inspect it before re-running.[/yellow]")
        if debug:
            _env_pairs = [
                ("Python", sys.version.split()[0]),
                ("Platform", sys.platform),
                ("CWD", str(Path.cwd())),
                ("Error", type(failure).__name__),
            ]
            if failure.__cause__ is not None:
                _env_pairs.append(("Cause", repr(failure.__cause__)))
            _label_width = max(len(k) for k, _ in _env_pairs)
            env_lines = [f"{k.ljust(_label_width)} → [bright_black]{v}[/bright_black]" for k, v in _env_pairs]
            console.print(Panel("\n".join(env_lines), title="Debug Environment", border_style="magenta"))
        raise typer.Exit(1)

    console.print("\n[bold green]Template customization complete.[/bold green]")

    steps_lines = []
    if here:
        steps_lines.append("1. You're already in the project directory!")
    else:
        steps_lines.append(f"1. Go to the project folder: [cyan]cd {os.path.relpath(result.root)}[/cyan]")
    steps_lines.append("2. Install dependencies: [cyan]npm install[/cyan] (or yarn / pnpm)")
    steps_lines.append("3. Start the dev server: [cyan]npm run dev[/cyan]")
    if result.promoted is not None:
        steps_lines.append(f"4. Your root page is [cyan]{result.promoted.as_posix()}[/cyan]")

    console.print()
    console.print(Panel("\n".join(steps_lines), title="Next Steps", border_style="cyan", padding=(1, 2)))


@app.command("list")
def list_homepages():
    """List the homepages that can become the root page."""
    table = Table(title="Bazaar Homepages", border_style="cyan")
    table.add_column("Homepage", style="cyan")
    table.add_column("Layout folder")
    table.add_column("Kind")
    table.add_column("Shared with", justify="right")

    for homepage_id, entry in CATALOG.items():
        kind = "named folder" if isinstance(entry.layout, NamedFolder) else "route group"
        shared = len(CATALOG.ids_sharing(entry.layout)) - 1
        table.add_row(homepage_id, entry.layout.folder_name, kind, str(shared))
    table.add_row(LANDING, "-", "default page", "-")

    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
