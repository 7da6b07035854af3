"""
Logging utilities with rich formatting.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Optional, Any

from rich.console import Console
from rich.table import Table
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TimeElapsedColumn,
    MofNCompleteColumn,
)
from rich.panel import Panel


console = Console()


@dataclass
class SearchMetrics:
    """Metrics for one call to SearchEngine.search()."""

    move: int
    iterations: int
    elapsed_sec: float
    expanded: int
    total_iterations: int
    root_visits: int
    move_visits: Optional[int] = None
    move_win_ratio: Optional[float] = None
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()

    @property
    def iterations_per_sec(self) -> float:
        return self.iterations / self.elapsed_sec if self.elapsed_sec > 0 else 0.0


class SearchLogger:
    """
    Search logger with rich output and JSON logging.

    Args:
        log_dir: Directory for log files (None disables the JSON log)
        verbose: Whether to print to console
    """

    def __init__(self, log_dir: Optional[str] = "runs", verbose: bool = True):
        self.verbose = verbose
        self.log_file: Optional[Path] = None

        if log_dir is not None:
            self.log_dir = Path(log_dir)
            self.log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.log_file = self.log_dir / f"search_{timestamp}.jsonl"

        self.history: list[SearchMetrics] = []

    def log_search(self, metrics: SearchMetrics) -> None:
        """Log metrics for one search."""
        self.history.append(metrics)

        if self.log_file is not None:
            with open(self.log_file, "a") as f:
                f.write(json.dumps(asdict(metrics)) + "\n")

        if self.verbose:
            self._print_search(metrics)

    def _print_search(self, m: SearchMetrics) -> None:
        """Print search summary to console."""
        table = Table(title=f"Search -> column {m.move}", show_header=False, box=None)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")

        table.add_row("Iterations", str(m.iterations))
        table.add_row("Time", f"{m.elapsed_sec:.2f}s")
        table.add_row("Iter/sec", f"{m.iterations_per_sec:.0f}")
        table.add_row("Expanded", str(m.expanded))
        table.add_row("Root visits", str(m.root_visits))

        if m.move_visits is not None:
            table.add_row("Move visits", str(m.move_visits))
        if m.move_win_ratio is not None:
            table.add_row("Move win%", f"{m.move_win_ratio*100:.1f}%")

        console.print(table)
        console.print()

    def log_message(self, message: str, style: str = "white") -> None:
        """Log a message."""
        if self.verbose:
            console.print(f"[{style}]{message}[/]")

    def log_info(self, message: str) -> None:
        """Log info message."""
        self.log_message(message, "blue")

    def log_success(self, message: str) -> None:
        """Log success message."""
        self.log_message(message, "green")

    def log_warning(self, message: str) -> None:
        """Log warning message."""
        self.log_message(message, "yellow")

    def log_error(self, message: str) -> None:
        """Log error message."""
        self.log_message(message, "red")


def create_progress() -> Progress:
    """Create a rich progress bar with elapsed time."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_config(config: Any) -> None:
    """Print configuration in a nice format."""
    table = Table(title="Configuration", show_header=True)
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="white")

    def add_dict(d: dict, prefix: str = "") -> None:
        for k, v in d.items():
            key = f"{prefix}{k}" if prefix else k
            if isinstance(v, dict):
                add_dict(v, f"{key}.")
            else:
                table.add_row(key, str(v))

    add_dict(asdict(config))
    console.print(table)


def print_stats(stats: Any, title: str = "Engine") -> None:
    """Print an EngineStats snapshot as a table."""
    table = Table(title=title, show_header=False)
    table.add_column("Stat", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Expanded", str(stats.expanded))
    table.add_row("Iterations", str(stats.total_iterations))
    table.add_row("Games", str(stats.games_played))
    table.add_row("Wins", str(stats.wins))

    console.print(table)


def print_board(board_str: str, title: str = "Board") -> None:
    """Print a game board in a panel."""
    console.print(Panel(board_str, title=title, border_style="blue"))
