import os
import sys
import tempfile
from typing import Iterable, Optional, TextIO


# Overwrite mode writes to a temporary file next to `path` and replaces it on a
# clean exit. Append mode writes to `path` directly.
class FileSink:
    def __init__(self, path: str, append: bool = False, verbose: bool = False):
        self.path = path
        self.append = append
        self.verbose = verbose
        self.written = 0
        self._file: Optional[TextIO] = None
        self._temp_path: Optional[str] = None

    def open(self) -> "FileSink":
        if self.append:
            self._file = open(self.path, "a", encoding="utf-8", newline="\n")
        else:
            directory = os.path.dirname(os.path.abspath(self.path))
            self._file = tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                newline="\n",
                dir=directory,
                prefix=f".{os.path.basename(self.path)}.",
                suffix=".tmp",
                delete=False,
            )
            self._temp_path = self._file.name

        if self.verbose:
            target = self._temp_path or self.path
            print(f"[writer] Writing to {target}", file=sys.stderr)
        return self

    def __enter__(self) -> "FileSink":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.abort()

    def __call__(self, candidates: Iterable[str]) -> None:
        self.write(candidates)

    def write(self, candidates: Iterable[str]) -> None:
        if self._file is None:
            raise RuntimeError("Sink is not open.")
        count = 0
        for candidate in candidates:
            self._file.write(candidate)
            self._file.write("\n")
            count += 1
        self.written += count

    def commit(self) -> None:
        if self._file is None:
            return
        self._file.flush()
        os.fsync(self._file.fileno())
        self._file.close()
        self._file = None

        if self._temp_path is not None:
            os.replace(self._temp_path, self.path)
            self._temp_path = None
        if self.verbose:
            print(f"[writer] Committed {self.written} lines to {self.path}", file=sys.stderr)

    def abort(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
        if self._temp_path is not None:
            try:
                os.remove(self._temp_path)
            except FileNotFoundError:
                pass
            if self.verbose:
                print(f"[writer] Discarded {self._temp_path}", file=sys.stderr)
            self._temp_path = None
