"""Exception types raised or reported by DazzleScan."""

from typing import Optional


class ScanError(OSError):
    """A directory that could not be listed.

    Reported once per failing directory on the error conduit. The scan
    itself keeps going; siblings and ancestors are unaffected.

    Attributes:
        path: Directory whose listing failed
        cause: The underlying exception
    """

    def __init__(self, path: str, cause: BaseException):
        errno = getattr(cause, 'errno', None)
        strerror = getattr(cause, 'strerror', None) or str(cause)
        super().__init__(errno, strerror, path)
        self.path = path
        self.cause = cause
        self.__cause__ = cause

    @property
    def cause_type(self) -> str:
        """Class name of the underlying exception."""
        return type(self.cause).__name__

    def __str__(self) -> str:
        return f"cannot scan '{self.path}': {self.strerror}"

    def __repr__(self) -> str:
        return f"ScanError({self.path!r}, {self.cause!r})"

    def __reduce__(self):
        return (self.__class__, (self.path, self.cause))


class ConduitClosedError(RuntimeError):
    """Raised when writing to, or closing, a conduit that is already closed."""

    def __init__(self, name: Optional[str] = None):
        self.name = name
        message = "conduit is closed" if name is None else f"conduit '{name}' is closed"
        super().__init__(message)
