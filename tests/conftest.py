import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from geometry import CacheGeometry


@pytest.fixture
def geometry():
    # 8-bit addresses, 4-byte blocks, 4 sets, direct mapped
    return CacheGeometry(8, 4, 4, 1)


@pytest.fixture
def two_way():
    return CacheGeometry(8, 4, 4, 2)
