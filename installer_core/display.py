import logging
import time
from contextlib import contextmanager

from rich.box import DOUBLE, ROUNDED
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.text import Text

from installer_core.constants import INSTALL_SCRIPT_VERSION, LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

# Records already shown by the display carry this attribute so the console
# log handler can skip them; the file handler still records them.
DISPLAYED = {"displayed": True}


class StepProgress:

    def __init__(self, progress, task_id):
        self._progress = progress
        self._task_id = task_id

    def start(self, description):
        self._progress.update(self._task_id, description=description)

    def advance(self):
        self._progress.advance(self._task_id)


class Display:
    """Terminal presentation of the installation run."""

    def __init__(self, console=None, pacing=True):
        self.console = console or Console()
        self.pacing = pacing

    def pause(self, seconds):
        if self.pacing and seconds > 0:
            time.sleep(seconds)

    def header(self):
        title = Text.assemble(
            ("FLUENTD AUTO-INSTALL WIZARD\n", "bold cyan"),
            (f"Fluentd / Fluent Bit installer v{INSTALL_SCRIPT_VERSION}", "dim"),
            justify="center",
        )
        self.console.print(Panel(title, box=DOUBLE, border_style="cyan", padding=(1, 4)))

    def box(self, title):
        self.divider()
        self.console.print(Panel.fit(Text(title, style="bold"), box=ROUNDED, border_style="blue"))
        self.divider()

    def divider(self):
        self.console.rule(style="grey50")

    def blank(self):
        self.console.print()

    def success(self, message):
        self.console.print(f"[bold green]✓[/bold green]  {escape(message)}", highlight=False)
        logger.info(message, extra=DISPLAYED)

    def error(self, message):
        self.console.print(f"[bold red]✗  {escape(message)}[/bold red]", highlight=False)
        logger.error(message, extra=DISPLAYED)

    def warning(self, message):
        self.console.print(f"[bold yellow]⚠  {escape(message)}[/bold yellow]", highlight=False)
        logger.warning(message, extra=DISPLAYED)

    def info(self, message):
        self.console.print(f"[bold cyan]ℹ[/bold cyan]  {escape(message)}", highlight=False)
        logger.info(message, extra=DISPLAYED)

    def label(self, text):
        self.console.print(f"[bold cyan]{escape(text)}[/bold cyan]")

    def details(self, lines, indent=2):
        for line in lines:
            self.console.print(" " * indent + line, highlight=False, markup=False)

    @contextmanager
    def progress(self, total, description="Starting"):
        progress = Progress(
            SpinnerColumn(spinner_name="line", style="cyan"),
            TextColumn("[cyan]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            console=self.console,
        )
        with progress:
            task_id = progress.add_task(description, total=total)
            yield StepProgress(progress, task_id)
