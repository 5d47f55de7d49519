"""Progress and metrics reporting for a run."""

from typing import Callable, Optional

from pagesift.core.models import RunProgress, StrategyName

LogSink = Callable[[str], None]


class ProgressReporter:
    """Accumulates the log, counters and elapsed time of one run."""

    def __init__(self, sink: Optional[LogSink] = None) -> None:
        """Initialize the reporter.

        Args:
            sink: Optional callable receiving each log line as it is written.
        """
        self._sink = sink
        self.progress = RunProgress()

    def log(self, line: str) -> None:
        self.progress.log_lines.append(line)
        if self._sink is not None:
            self._sink(line)

    def increment_found(self, count: int = 1) -> None:
        self.progress.found_count += count

    def set_estimated_total(self, total: int) -> None:
        self.progress.estimated_total = total

    def set_active_strategy(self, strategy: Optional[StrategyName]) -> None:
        self.progress.active_strategy = strategy

    def tick(self) -> None:
        """Advance the elapsed-time counter by one second."""
        self.progress.elapsed_seconds += 1

    def reset(self) -> None:
        """Start over with a fresh progress record."""
        self.progress = RunProgress()
