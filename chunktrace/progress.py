"""
Console progress reporting.

The renderer only emits ``(chunks_done, chunks_total)``; this module
turns those into a text progress bar. Quiet mode is a property of the
reporter, so nothing else needs to know about it.
"""

from __future__ import annotations
import sys
from typing import TextIO, Optional


class ProgressReporter:
    """Prints status messages and a single-line progress bar."""

    def __init__(self, quiet: bool = False, stream: Optional[TextIO] = None, bar_length: int = 40):
        """Create a reporter.

        Args:
            quiet: Suppress everything except ``always`` messages
            stream: Where to write (defaults to stdout)
            bar_length: Width of the bar in characters
        """
        self.quiet = quiet
        self.stream = stream if stream is not None else sys.stdout
        self.bar_length = bar_length
        self._last_pct = -1

    def message(self, text: str) -> None:
        """Print a line unless quiet."""
        if not self.quiet:
            print(text, file=self.stream)

    def always(self, text: str) -> None:
        """Print a line even in quiet mode."""
        print(text, file=self.stream)

    def __call__(self, chunks_done: int, chunks_total: int) -> None:
        if self.quiet or chunks_total <= 0:
            return
        progress = chunks_done / chunks_total
        pct = int(progress * 100)
        if pct <= self._last_pct:
            return
        self._last_pct = pct
        filled = int(self.bar_length * progress)
        bar = '█' * filled + '░' * (self.bar_length - filled)
        print(
            f'\rRendering: [{bar}] {pct}% ({chunks_done}/{chunks_total} chunks)',
            end='', flush=True, file=self.stream
        )

    def finish(self) -> None:
        """End the progress line."""
        if not self.quiet and self._last_pct >= 0:
            print(file=self.stream)
        self._last_pct = -1
