"""Rich console and progress display for directory scans."""

from __future__ import annotations

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

console = Console()


class ScanProgress:
    """Progress bar over the files of a scan, with persistent per-file log lines."""

    def __init__(self, total: int) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
        )
        self._total = total
        self._task_id: int | None = None

    def __enter__(self) -> "ScanProgress":
        self._progress.__enter__()
        self._task_id = self._progress.add_task("[cyan]Scoring components[/]", total=self._total)
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def start_file(self, name: str) -> None:
        if self._task_id is not None:
            self._progress.update(self._task_id, description=f"[cyan]Scoring[/] {name}")

    def finish_file(self, name: str, overall: int) -> None:
        style = "green" if overall >= 80 else "yellow" if overall >= 60 else "red"
        self._progress.console.print(f"  [{style}]{overall:>3}[/] {name}")
        if self._task_id is not None:
            self._progress.advance(self._task_id)

    def fail_file(self, name: str, error: str) -> None:
        self._progress.console.print(f"  [red]✗ {name}: {error}[/]")
        if self._task_id is not None:
            self._progress.advance(self._task_id)
