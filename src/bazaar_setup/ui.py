"""Console helpers shared by the commands: run progress tree and homepage picker."""

from collections.abc import Sequence

import readchar
import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from .catalog import LANDING, Catalog, RouteGroup

console = Console()

_SYMBOLS = {
    "pending": "[green dim]○[/green dim]",
    "running": "[cyan]○[/cyan]",
    "done": "[green]●[/green]",
    "error": "[red]●[/red]",
    "skipped": "[yellow]○[/yellow]",
}


class StepTracker:
    """Status of each step of a customization run, rendered as a tree.

    The steps are fixed when the tracker is created; updating a key that is
    not one of them raises KeyError.
    """

    def __init__(self, title: str, steps: Sequence[tuple[str, str]]):
        self.title = title
        self._labels = dict(steps)
        self._status = {key: "pending" for key in self._labels}
        self._detail = {key: "" for key in self._labels}
        self._refresh_cb = None

    def attach_refresh(self, cb):
        self._refresh_cb = cb

    def start(self, key: str, detail: str = ""):
        self._update(key, "running", detail)

    def complete(self, key: str, detail: str = ""):
        self._update(key, "done", detail)

    def error(self, key: str, detail: str = ""):
        self._update(key, "error", detail)

    def skip(self, key: str, detail: str = ""):
        self._update(key, "skipped", detail)

    def status(self, key: str) -> str | None:
        return self._status.get(key)

    def running(self) -> str | None:
        """Key of the step currently running, if any."""
        return next((key for key, status in self._status.items() if status == "running"), None)

    def _update(self, key: str, status: str, detail: str):
        if key not in self._status:
            raise KeyError(f"Unknown step '{key}'")
        self._status[key] = status
        if detail:
            self._detail[key] = detail
        if self._refresh_cb:
            self._refresh_cb()

    def render(self) -> Tree:
        tree = Tree(f"[cyan]{self.title}[/cyan]", guide_style="grey50")
        for key, label in self._labels.items():
            status = self._status[key]
            detail = self._detail[key].strip()
            if status == "pending":
                text = f"{label} ({detail})" if detail else label
                tree.add(f"{_SYMBOLS[status]} [bright_black]{text}[/bright_black]")
            elif detail:
                tree.add(f"{_SYMBOLS[status]} [white]{label}[/white] [bright_black]({detail})[/bright_black]")
            else:
                tree.add(f"{_SYMBOLS[status]} [white]{label}[/white]")
        return tree


def describe_homepage(catalog: Catalog, homepage_id: str) -> str:
    if homepage_id == LANDING:
        return "default landing page"
    layout = catalog[homepage_id].layout
    if isinstance(layout, RouteGroup):
        return f"route group {layout.folder_name}"
    return f"own folder {layout.folder_name}"


_KEYS = {
    readchar.key.UP: "up",
    readchar.key.DOWN: "down",
    readchar.key.ENTER: "enter",
    readchar.key.ESC: "escape",
}


def get_key() -> str:
    """Read one keypress and name it; other keys are returned as typed."""
    key = readchar.readkey()
    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt
    return _KEYS.get(key, key)


def select_homepage(catalog: Catalog, prompt_text: str = "Set root page:") -> str:
    """Let the user pick a homepage (or the landing page) with the arrow keys."""
    choices = catalog.choices()
    index = 0

    def selection_panel() -> Panel:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan", width=3)
        table.add_column(style="cyan")
        table.add_column(style="dim")
        for i, homepage_id in enumerate(choices):
            table.add_row("▶" if i == index else " ", homepage_id, describe_homepage(catalog, homepage_id))
        table.add_row("", "", "")
        table.add_row("", "[dim]↑/↓ to move, Enter to select, Esc to cancel[/dim]", "")
        return Panel(table, title=f"[bold]{prompt_text}[/bold]", border_style="cyan", padding=(1, 2))

    console.print()
    with Live(selection_panel(), console=console, transient=True, auto_refresh=False) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                key = "escape"
            if key == "enter":
                return choices[index]
            if key == "escape":
                console.print("\n[yellow]Selection cancelled[/yellow]")
                raise typer.Exit(1)
            if key == "up":
                index = (index - 1) % len(choices)
            elif key == "down":
                index = (index + 1) % len(choices)
            live.update(selection_panel(), refresh=True)
