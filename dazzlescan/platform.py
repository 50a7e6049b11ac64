"""Platform helpers: hidden-file detection and per-application directories.

Hidden detection checks the FILE_ATTRIBUTE_HIDDEN bit on Windows and the
leading character of the name (``.``, ``~`` or ``#``) everywhere else.
Directory lookups follow each platform's native conventions through
platformdirs: XDG on Linux and the BSDs, ``~/Library`` on macOS and
AppData on Windows. macOS therefore does not use ``~/.config`` or
``~/.local/share``.
"""

import os
import stat
import sys
import tempfile
from pathlib import Path
from typing import Union

from platformdirs import PlatformDirs

PathLike = Union[str, os.PathLike]

HIDDEN_PREFIXES = ('.', '~', '#')


def _is_hidden_windows(path: PathLike) -> bool:
    try:
        attributes = os.stat(path, follow_symlinks=False).st_file_attributes
    except (OSError, AttributeError):
        return False
    return bool(attributes & stat.FILE_ATTRIBUTE_HIDDEN)


def _is_hidden_posix(path: PathLike) -> bool:
    name = os.path.basename(os.fspath(path))
    return name.startswith(HIDDEN_PREFIXES)


def is_hidden(path: PathLike) -> bool:
    """Check if the given path is a hidden file or directory.

    Never raises; a path whose attributes cannot be read is not hidden.
    """
    if sys.platform == 'win32':
        return _is_hidden_windows(path)
    return _is_hidden_posix(path)


def _dirs(name: str) -> PlatformDirs:
    return PlatformDirs(appname=name, appauthor=False, roaming=True)


def config_dir(name: str) -> Path:
    """Config directory for application ``name``.

    ``$XDG_CONFIG_HOME/<name>`` (default ``~/.config/<name>``) on Linux,
    ``~/Library/Application Support/<name>`` on macOS and
    ``%AppData%\\<name>`` on Windows.
    """
    return Path(_dirs(name).user_config_dir)


def data_dir(name: str) -> Path:
    """Data directory for application ``name``.

    ``$XDG_DATA_HOME/<name>`` (default ``~/.local/share/<name>``) on Linux,
    ``~/Library/Application Support/<name>`` on macOS and
    ``%LocalAppData%\\<name>`` on Windows.
    """
    return Path(PlatformDirs(appname=name, appauthor=False, roaming=False).user_data_dir)


def cache_dir(name: str) -> Path:
    """Cache directory for application ``name``.

    ``$XDG_CACHE_HOME/<name>`` (default ``~/.cache/<name>``) on Linux,
    ``~/Library/Caches/<name>`` on macOS and
    ``%LocalAppData%\\<name>\\Cache`` on Windows.
    """
    return Path(_dirs(name).user_cache_dir)


def temp_dir(name: str) -> Path:
    """Directory for application ``name`` under the system temp location."""
    return Path(tempfile.gettempdir()) / name
