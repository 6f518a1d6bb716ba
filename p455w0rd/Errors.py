class P455w0rdError(Exception):
    """Base class for errors that abort a generation run."""


class InvalidInputError(P455w0rdError):
    """Empty word set or inconsistent length window."""


class ResourceExhaustionError(P455w0rdError):
    """Combination size or length window above the hard safety ceiling."""


class SinkError(P455w0rdError):
    """The output collaborator refused a write."""

    def __init__(self, message: str, written: int = 0):
        super().__init__(message)
        self.written = written
