"""
Progress bar handling for spot-ripper using the Rich library.

Usage:
    from spot_ripper.core.progress import DeliveryProgressBar

    with DeliveryProgressBar(total=len(worklist)) as progress:
        for item in worklist:
            outcome = deliver(item)
            progress.update(delivered=..., existing=..., unreachable=...)
"""

from typing import Optional

from rich import get_console
from rich.console import JustifyMethod, OverflowMethod
from rich.progress import BarColumn, Progress, ProgressColumn, Task, TaskID
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
    """
    Text column truncated with an ellipsis once it exceeds a fixed width.
    """

    def __init__(
        self,
        text_format: str,
        style: StyleType = "none",
        justify: JustifyMethod = "left",
        markup: bool = True,
        overflow: Optional[OverflowMethod] = None,
        width: int = 20,
    ) -> None:
        self.text_format = text_format
        self.justify: JustifyMethod = justify
        self.style = style
        self.markup = markup
        self.overflow: Optional[OverflowMethod] = overflow
        self.width = width
        super().__init__()

    def render(self, task: Task) -> Text:
        """Render the column."""
        _text = self.text_format.format(task=task)
        if self.markup:
            text = Text.from_markup(_text, style=self.style, justify=self.justify)
        else:
            text = Text(_text, style=self.style, justify=self.justify)

        text.truncate(max_width=self.width, overflow=self.overflow, pad=True)
        return text


class DeliveryProgressBar:
    """
    Progress bar for the delivery pipeline.

    Displays:
    - Description (e.g., "Delivering")
    - Status: ✓ delivered, ⊘ already on disk, ✗ unreachable metadata
    - Progress bar
    - Percentage

    Example:
        Delivering      ✓ 12  ⊘ 3  ✗ 1         ━━━━━━━━━━━━━━━━━  64%
    """

    def __init__(
        self,
        total: int,
        description: str = "Delivering",
        status_width: int = 35
    ) -> None:
        """
        Initialize the progress bar.

        Args:
            total: Number of work items in the run.
            description: Description to show on the left.
            status_width: Width of the status column.
        """
        self.total = total
        self.description = description
        self.completed = 0
        self.delivered = 0
        self.existing = 0
        self.unreachable = 0

        self.console = get_console()

        self.progress = Progress(
            SizedTextColumn(
                "[white]{task.description}",
                overflow="ellipsis",
                width=15,
            ),
            SizedTextColumn(
                "{task.fields[status]}",
                width=status_width,
                style="white",
            ),
            BarColumn(bar_width=40, finished_style="green"),
            "[progress.percentage]{task.percentage:>3.0f}%",
            console=self.console,
            transient=False,
            refresh_per_second=10,
        )

        self.task_id: Optional[TaskID] = None
        self._started = False

    def __enter__(self) -> "DeliveryProgressBar":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self) -> None:
        """Start the progress bar (can be called manually)."""
        if not self._started:
            self.console.push_theme(PROGRESS_THEME)
            self.progress.start()
            self.task_id = self.progress.add_task(
                description=self.description,
                total=self.total,
                status=self._get_status_text(),
            )
            self._started = True

    def stop(self) -> None:
        """Stop the progress bar and restore the console theme."""
        if self._started:
            self.progress.stop()
            self.console.pop_theme()
            self._started = False

    def _get_status_text(self) -> str:
        parts = [f"[green]✓ {self.delivered}[/green]"]
        if self.existing > 0:
            parts.append(f"[yellow]⊘ {self.existing}[/yellow]")
        if self.unreachable > 0:
            parts.append(f"[red]✗ {self.unreachable}[/red]")
        return "  ".join(parts)

    def update(
        self,
        delivered: bool = False,
        existing: bool = False,
        unreachable: bool = False
    ) -> None:
        """
        Record one finished work item.

        Args:
            delivered: The item's audio was written or handed to the helper.
            existing: The output file was already on disk.
            unreachable: The item's metadata could not be fetched.
        """
        self.completed += 1
        if delivered:
            self.delivered += 1
        elif existing:
            self.existing += 1
        elif unreachable:
            self.unreachable += 1

        if self.task_id is not None:
            self.progress.update(
                self.task_id,
                completed=self.completed,
                status=self._get_status_text(),
            )
