"""Console Notifier - Corpus loading progress on the terminal"""

import sys
import time
from pathlib import Path
from typing import Optional, TextIO

from .models import LoadingStage, ProgressEvent

GREEN, RED, CYAN, DIM = "32", "31", "36", "90"


class ConsoleNotifier:
    """
    Prints one line per stage, redrawing counted stages in place, and a
    closing line with the elapsed time when the load completes or fails.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        show_progress_bar: bool = True,
        use_colors: Optional[bool] = None,
        bar_width: int = 20,
    ):
        self.output = output if output is not None else sys.stderr
        self.show_progress_bar = show_progress_bar
        if use_colors is None:
            use_colors = bool(getattr(self.output, "isatty", lambda: False)())
        self.use_colors = use_colors
        self.bar_width = bar_width
        self._started_at: Optional[float] = None

    def _paint(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"\033[{color}m{text}\033[0m"

    def _write(self, line: str, end: str = "\n") -> None:
        print(line, end=end, file=self.output)
        if end != "\n":
            self.output.flush()

    def _bar(self, event: ProgressEvent) -> str:
        filled = self.bar_width * event.current // event.total
        bar = "█" * filled + "░" * (self.bar_width - filled)
        return self._paint(f"[{bar}] {event.current}/{event.total} {event.percentage:.0f}%", DIM)

    def _elapsed(self) -> str:
        seconds = time.monotonic() - self._started_at if self._started_at is not None else 0.0
        return self._paint(f"({seconds:.1f}s)", DIM)

    def start(self, source: str) -> None:
        self._started_at = time.monotonic()
        self._write(f"\n📚 Loading corpus: {self._paint(Path(source).name, CYAN)}")

    def notify(self, event: ProgressEvent) -> None:
        symbol = event.stage.value

        if event.is_final:
            if event.stage is LoadingStage.ERROR:
                text = self._paint(event.error or event.message, RED)
                symbol = self._paint(symbol, RED)
            else:
                text = event.message
                symbol = self._paint(symbol, GREEN)
            self._write(f"   {symbol} {text} {self._elapsed()}")
            self._started_at = None
            return

        line = f"   {symbol} {event.message}"
        if event.total > 0 and self.show_progress_bar:
            line = f"{line} {self._bar(event)}"

        if event.total > 1:
            # Redraw in place; the last update ends the line
            self._write(f"\r{line}", end="" if event.current < event.total else "\n")
        else:
            self._write(line)
