"""
Pytest fixtures for the records explorer tests.
"""

import pytest

from tests.fakes import FakeClientFactory, FakeCluster


@pytest.fixture
def cluster():
    """Topic `t` with one partition holding offsets 0..2, plus a 3-partition topic `multi`."""
    c = FakeCluster({"t": 1, "multi": 3, "empty": 1})
    for i in range(3):
        c.append("t", 0, key=f"k{i}", value=f"v{i}")
    for p in range(3):
        c.append("multi", p, key=f"m{p}", value=f"p{p}")
    return c


@pytest.fixture
def factory(cluster):
    return FakeClientFactory(cluster)
