"""Entry predicates for filtering scan results.

Every predicate takes ``(path, entry)`` where ``entry`` is the
``os.DirEntry`` reported by the listing, and returns a bool. Predicates
are pure and total: when an entry's metadata can no longer be read (the
file vanished, permissions changed mid-scan) they answer False instead of
raising.

Predicates only decide what is reported. They never stop the scan from
descending into a directory.

Example:
    >>> from dazzlescan.sync import scan_sync
    >>> paths, error = scan_sync('/src', predicate=filter_by_extension('py'))
"""

import operator
import os
import stat
from typing import Any, Callable, Optional

from ._common.config import Predicate
from .platform import is_hidden


def _mode(entry: Any) -> Optional[int]:
    """File mode of the entry itself (symlinks are not followed)."""
    try:
        return entry.stat(follow_symlinks=False).st_mode
    except OSError:
        return None


def _mode_filter(test: Callable[[int], bool], doc: str) -> Predicate:
    def predicate(path: str, entry: Any) -> bool:
        mode = _mode(entry)
        return mode is not None and test(mode)
    predicate.__doc__ = doc
    return predicate


def filter_dir(path: str, entry: Any) -> bool:
    """Accept only directory entries."""
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def filter_file(path: str, entry: Any) -> bool:
    """Accept only non-directory entries."""
    try:
        return not entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def filter_hidden(path: str, entry: Any) -> bool:
    """Accept only hidden entries, as decided by ``platform.is_hidden``."""
    return is_hidden(path)


filter_regular = _mode_filter(stat.S_ISREG, "Accept only regular files.")
filter_symlink = _mode_filter(stat.S_ISLNK, "Accept only symbolic links.")
filter_named_pipe = _mode_filter(stat.S_ISFIFO, "Accept only named pipes (FIFOs).")
filter_socket = _mode_filter(stat.S_ISSOCK, "Accept only sockets.")
filter_char_device = _mode_filter(stat.S_ISCHR, "Accept only character devices.")
filter_device = _mode_filter(
    lambda mode: stat.S_ISBLK(mode) or stat.S_ISCHR(mode),
    "Accept block and character devices.",
)


def filter_by_extension(extension: str) -> Predicate:
    """Build a predicate matching files with the given extension.

    The extension may be given with or without its leading dot; ``"py"``
    and ``".py"`` are equivalent. Directories never match, even one named
    ``pkg.py``.

    An empty extension matches files that have none. Extensions are
    split with ``os.path.splitext``, so a leading-dot name such as
    ``.bashrc`` counts as having no extension.

    Args:
        extension: Extension to match (compared case-sensitively)

    Returns:
        Predicate accepting matching files
    """
    wanted = extension if not extension or extension.startswith('.') else '.' + extension

    def predicate(path: str, entry: Any) -> bool:
        if not filter_file(path, entry):
            return False
        return os.path.splitext(entry.name)[1] == wanted

    return predicate


SIZE_OPERATORS = {
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
    '=': operator.eq,
    '==': operator.eq,
    '!=': operator.ne,
}


def filter_by_size(size: int, op: str) -> Predicate:
    """Build a predicate comparing regular file sizes against ``size``.

    Only regular files can match; directories, links and special files are
    rejected whatever their reported size.

    Args:
        size: Threshold in bytes
        op: One of ``<``, ``<=``, ``>``, ``>=``, ``=``, ``==``, ``!=``

    Returns:
        Predicate accepting files where ``file_size <op> size`` holds

    Raises:
        ValueError: If ``op`` is not a known operator
    """
    try:
        compare = SIZE_OPERATORS[op]
    except KeyError:
        raise ValueError(
            f"Unknown size operator: {op!r} (expected one of {', '.join(SIZE_OPERATORS)})"
        ) from None

    def predicate(path: str, entry: Any) -> bool:
        try:
            info = entry.stat(follow_symlinks=False)
        except OSError:
            return False
        return stat.S_ISREG(info.st_mode) and compare(info.st_size, size)

    return predicate


def all_of(*predicates: Predicate) -> Predicate:
    """Accept entries every predicate accepts."""
    def predicate(path: str, entry: Any) -> bool:
        return all(p(path, entry) for p in predicates)
    return predicate


def any_of(*predicates: Predicate) -> Predicate:
    """Accept entries at least one predicate accepts."""
    def predicate(path: str, entry: Any) -> bool:
        return any(p(path, entry) for p in predicates)
    return predicate


def negate(inner: Predicate) -> Predicate:
    """Accept entries ``inner`` rejects."""
    def predicate(path: str, entry: Any) -> bool:
        return not inner(path, entry)
    return predicate
