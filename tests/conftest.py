"""Shared fixtures for the DazzleScan test suite."""

import pytest

from dazzlescan.testing import build_tree


SAMPLE_LAYOUT = {
    'docs': {
        'readme.md': '# readme',
        'guide.txt': 'guide',
        'images': {
            'logo.png': 512,
        },
    },
    'src': {
        'main.py': 'print("hi")',
        'util.py': '',
        'pkg.py': {
            '__init__.py': '',
        },
        'deep': {
            'deeper': {
                'deepest': {
                    'bottom.py': 'x = 1',
                },
            },
        },
    },
    'big.bin': 4096,
    'empty.txt': '',
    'hollow': {},
}


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: test takes several seconds")


@pytest.fixture
def sample_tree(tmp_path):
    """A small mixed tree of files and directories.

    Structure:
        root
        ├── docs/ (readme.md, guide.txt, images/logo.png)
        ├── src/ (main.py, util.py, pkg.py/__init__.py, deep/deeper/deepest/bottom.py)
        ├── big.bin (4096 bytes)
        ├── empty.txt
        └── hollow/
    """
    build_tree(tmp_path, SAMPLE_LAYOUT)
    return tmp_path
