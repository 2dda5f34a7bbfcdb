"""
Terminal progress reporting for batch conversions.

Draws a single updating line on a TTY and periodic lines otherwise.
"""

import sys
import time
from dataclasses import dataclass, field
from typing import TextIO


@dataclass
class ProgressStats:
    """Counters for a conversion batch."""

    total: int
    current: int = 0
    embedded: int = 0
    skipped: int = 0
    start_time: float = field(default_factory=time.time)

    @property
    def elapsed(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def eta(self) -> float | None:
        """Estimated seconds remaining, if any progress has been made."""
        if self.current == 0 or self.elapsed == 0:
            return None
        per_item = self.elapsed / self.current
        return (self.total - self.current) * per_item

    @property
    def percent(self) -> float:
        """Completion percentage."""
        if self.total == 0:
            return 100.0
        return (self.current / self.total) * 100


def format_time(seconds: float | None) -> str:
    """Format seconds as human-readable time."""
    if seconds is None:
        return "--:--"

    if seconds < 60:
        return f"{seconds:.0f}s"
    elif seconds < 3600:
        mins = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{mins}m {secs}s"
    else:
        hours = int(seconds // 3600)
        mins = int((seconds % 3600) // 60)
        return f"{hours}h {mins}m"


class ProgressReporter:
    """Reports per-image conversion progress.

    Usage:
        with ProgressReporter(total=len(paths), desc="Converting") as progress:
            for path in paths:
                ok = convert(path)
                progress.update(success=ok, item_name=path.name)
    """

    BAR_WIDTH = 20

    def __init__(
        self,
        total: int,
        desc: str = "Converting",
        output: TextIO | None = None,
    ) -> None:
        self.stats = ProgressStats(total=total)
        self.desc = desc
        self._output = output or sys.stderr
        self._is_tty = self._output.isatty()
        self._last_line_len = 0

    def __enter__(self):
        self.stats.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()

    def update(self, success: bool = True, item_name: str | None = None) -> None:
        """Record one finished image.

        Args:
            success: Whether the image was embedded
            item_name: Optional file name for display
        """
        self.stats.current += 1
        if success:
            self.stats.embedded += 1
        else:
            self.stats.skipped += 1
        self._render(item_name)

    def render_line(self, item_name: str | None = None) -> str:
        """Build the status line for the current state."""
        stats = self.stats
        filled = int(self.BAR_WIDTH * stats.percent / 100)
        bar = "#" * filled + "-" * (self.BAR_WIDTH - filled)

        parts = [
            f"{self.desc}: [{bar}]",
            f"{stats.current}/{stats.total}",
            f"[{format_time(stats.elapsed)}<{format_time(stats.eta)}]",
        ]
        if stats.skipped:
            parts.append(f"{stats.skipped} skipped")
        if item_name:
            name = item_name if len(item_name) <= 25 else "..." + item_name[-22:]
            parts.append(f"| {name}")

        return " ".join(parts)

    def _render(self, item_name: str | None) -> None:
        line = self.render_line(item_name)
        stats = self.stats

        if self._is_tty:
            clear = " " * max(0, self._last_line_len - len(line))
            self._output.write(f"\r{line}{clear}")
            self._last_line_len = len(line)
        elif stats.current == 1 or stats.current == stats.total or stats.current % max(1, stats.total // 10) == 0:
            self._output.write(line + "\n")
        self._output.flush()

    def finish(self) -> None:
        """Print the batch summary."""
        stats = self.stats
        if self._is_tty:
            self._output.write("\n")

        summary = f"{self.desc} complete: {stats.embedded}/{stats.total} pages"
        if stats.skipped:
            summary += f", {stats.skipped} skipped"
        self._output.write(f"{summary} ({format_time(stats.elapsed)})\n")
        self._output.flush()
