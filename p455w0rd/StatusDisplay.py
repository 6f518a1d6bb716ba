import sys
import time
from typing import Optional, TextIO

from p455w0rd.Models import ProgressContext


def format_eta(seconds: Optional[float]) -> str:
    if seconds is None:
        return "Unknown"
    if seconds > 3600:
        return f"{seconds / 3600:.1f}h"
    if seconds > 60:
        return f"{seconds / 60:.1f}m"
    return f"{seconds:.0f}s"


class StatusDisplay:
    def __init__(
        self,
        progress: ProgressContext,
        output_path: str,
        word_count: int,
        interval: float = 2.0,
        stream: Optional[TextIO] = None,
    ):
        self.progress = progress
        self.output_path = output_path
        self.word_count = word_count
        self.interval = interval
        self.stream = stream or sys.stdout
        self._lines_drawn = 0
        self._last_draw: Optional[float] = None

    def __call__(self, emitted: int, estimated_total: int, combo_size: int) -> None:
        now = time.monotonic()
        if self._last_draw is not None and now - self._last_draw < self.interval:
            return
        self._last_draw = now
        self.draw()

    def render(self) -> str:
        p = self.progress
        status = "Finished" if p.finished else "Running"
        percent = p.percent
        if percent is not None:
            progress_line = f"{p.emitted}/{p.estimated_total} ({percent:.2f}%)"
        else:
            progress_line = f"{p.emitted} passwords (estimate exceeded)"

        lines = [
            "Session..........: p455w0rd",
            f"Status...........: {status}",
            "Mode.............: Password Generator",
            f"Target...........: {self.output_path}",
            f"Time.Elapsed.....: {p.elapsed:.0f}s",
            f"Time.ETA.........: {format_eta(p.eta)}",
            f"Words............: {self.word_count} words",
            f"Current.Combo....: {p.combo_size} word(s)",
            f"Speed............: {p.rate:.0f} P/s",
            f"Progress.........: {progress_line}",
            f"Generated........: {p.emitted} passwords",
            "",
        ]
        return "\n".join(lines)

    def draw(self) -> None:
        block = self.render()
        if self._lines_drawn:
            # Move the cursor back up and clear the previous block
            self.stream.write(f"\x1b[{self._lines_drawn}A\x1b[0J")
        self.stream.write(block + "\n")
        self.stream.flush()
        self._lines_drawn = block.count("\n") + 1
