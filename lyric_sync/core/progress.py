"""
Progress bar for the lyric-sync startup scan, built on Rich.

Usage:
    from lyric_sync.core.progress import ScanProgressBar

    with ScanProgressBar(total=len(files)) as progress:
        for path in files:
            registered = registry.bulk_load([(path, path.name)])
            progress.update(registered=bool(registered))
"""

from typing import Optional

from rich import get_console
from rich.console import JustifyMethod, OverflowMethod
from rich.progress import (
    BarColumn,
    Progress,
    ProgressColumn,
    Task,
    TaskID,
)
from rich.style import StyleType
from rich.text import Text
from rich.theme import Theme


PROGRESS_THEME = Theme({
    "bar.back": "grey23",
    "bar.complete": "rgb(165,66,129)",
    "bar.finished": "rgb(114,156,31)",
    "bar.pulse": "rgb(165,66,129)",
    "progress.percentage": "white",
})


class SizedTextColumn(ProgressColumn):
    """Text column truncated with an ellipsis past a fixed width."""

    def __init__(
        self,
        text_format: str,
        style: StyleType = "none",
        justify: JustifyMethod = "left",
        overflow: Optional[OverflowMethod] = None,
        width: int = 20,
    ) -> None:
        self.text_format = text_format
        self.justify: JustifyMethod = justify
        self.style = style
        self.overflow: Optional[OverflowMethod] = overflow
        self.width = width
        super().__init__()

    def render(self, task: Task) -> Text:
        text = Text.from_markup(
            self.text_format.format(task=task), style=self.style, justify=self.justify
        )
        text.truncate(max_width=self.width, overflow=self.overflow, pad=True)
        return text


class ScanProgressBar:
    """
    Progress bar for hashing the files already in the upload store.

    Displays:
        Scanning        + 12  = 3          ━━━━━━━━━━━━━━━━━━━━  80%

    where "+" counts newly registered files and "=" counts files whose
    content was already registered (or could not be read).
    """

    def __init__(self, total: int, description: str = "Scanning") -> None:
        self.total = total
        self.description = description
        self.completed = 0
        self.registered = 0
        self.skipped = 0

        self.console = get_console()
        self.console.push_theme(PROGRESS_THEME)

        self.progress = Progress(
            SizedTextColumn("[white]{task.description}", overflow="ellipsis", width=15),
            SizedTextColumn("{task.fields[status]}", width=25, style="white"),
            BarColumn(bar_width=40, finished_style="green"),
            "[progress.percentage]{task.percentage:>3.0f}%",
            console=self.console,
            transient=False,
            refresh_per_second=10,
        )

        self.task_id: Optional[TaskID] = None
        self._started = False

    def __enter__(self) -> "ScanProgressBar":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self) -> None:
        if not self._started:
            self.progress.start()
            self.task_id = self.progress.add_task(
                description=self.description,
                total=self.total,
                status=self._get_status_text(),
            )
            self._started = True

    def stop(self) -> None:
        if self._started:
            self.progress.stop()
            self.console.pop_theme()
            self._started = False

    def _get_status_text(self) -> str:
        return f"[green]+ {self.registered}[/green]  [yellow]= {self.skipped}[/yellow]"

    def update(self, registered: bool) -> None:
        """
        Record one scanned file.

        Args:
            registered: Whether the file produced a new registry record.
        """
        self.completed += 1
        if registered:
            self.registered += 1
        else:
            self.skipped += 1

        if self.task_id is not None:
            self.progress.update(
                self.task_id,
                completed=self.completed,
                status=self._get_status_text(),
            )
