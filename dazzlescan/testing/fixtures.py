"""Test fixtures for DazzleScan consumers.

These helpers build throwaway directory trees and produce an independent
reference listing to compare scan results against, without going through
the scan engine.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Set, Union

# A layout maps names to sub-layouts (directories), to str/bytes (file
# contents) or to an int (a file of that many bytes).
Layout = Mapping[str, Any]


def build_tree(root: Union[str, os.PathLike], layout: Layout) -> List[Path]:
    """Create files and directories described by ``layout`` under ``root``.

    Example:
        build_tree(tmp, {
            'src': {'main.py': 'print(1)', 'empty': {}},
            'blob.bin': 2048,
        })

    Args:
        root: Existing directory to populate
        layout: Nested mapping describing the tree

    Returns:
        Every path created, parents before children
    """
    created = []
    root = Path(root)
    for name, content in layout.items():
        path = root / name
        if isinstance(content, Mapping):
            path.mkdir()
            created.append(path)
            created.extend(build_tree(path, content))
        elif isinstance(content, bytes):
            path.write_bytes(content)
            created.append(path)
        elif isinstance(content, int):
            path.write_bytes(b'\0' * content)
            created.append(path)
        else:
            path.write_text(str(content))
            created.append(path)
    return created


def build_wide_tree(root: Union[str, os.PathLike], depth: int, fanout: int, files: int = 1) -> int:
    """Create a uniform tree ``depth`` levels deep with ``fanout`` dirs per level.

    Each directory also receives ``files`` small files.

    Returns:
        Number of entries created
    """
    root = Path(root)
    count = 0
    for index in range(files):
        (root / f"file{index}.txt").write_text(str(index))
        count += 1
    if depth == 0:
        return count
    for index in range(fanout):
        child = root / f"dir{index}"
        child.mkdir()
        count += 1 + build_wide_tree(child, depth - 1, fanout, files)
    return count


def reference_listing(root: Union[str, os.PathLike], max_depth: int = -1) -> Set[str]:
    """Every path strictly under ``root``, found with ``os.walk``.

    Mirrors the scan's depth rules: ``max_depth=0`` lists only the
    immediate children, negative means unlimited. Symlinks to directories
    are listed but not followed.

    Returns:
        Set of path strings joined the same way the scanner joins them
    """
    root = os.fspath(root)
    found = set()
    base_depth = root.rstrip(os.sep).count(os.sep)
    for current, dirs, files in os.walk(root, followlinks=False):
        level = current.rstrip(os.sep).count(os.sep) - base_depth
        for name in dirs + files:
            found.add(os.path.join(current, name))
        if 0 <= max_depth <= level:
            dirs[:] = []
    return found


def summarize(paths: List[str]) -> Dict[str, int]:
    """Count files and directories among scan results."""
    dirs = sum(1 for p in paths if os.path.isdir(p) and not os.path.islink(p))
    return {
        'total': len(paths),
        'directories': dirs,
        'files': len(paths) - dirs,
        'unique': len(set(paths)),
    }
