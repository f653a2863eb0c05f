"""Shared test fixtures: empty stores and a freshly enumerated store."""

import shutil

import pytest

from hawkbase.data.generator import create_positions
from hawkbase.data.storage import PositionStore


@pytest.fixture
def store(tmp_path):
    """An empty position store in a temporary directory."""
    return PositionStore(tmp_path / "store", prefix="khk")


@pytest.fixture(scope="session")
def _enumerated_dir(tmp_path_factory):
    root = tmp_path_factory.mktemp("enumerated")
    create_positions(PositionStore(root, prefix="khk"))
    return root


@pytest.fixture
def enumerated_store(_enumerated_dir, tmp_path):
    """A private copy of a store holding depth 0 and the initial undecided set.

    Enumeration runs once per session; each test gets its own copy so
    passes can rewrite it freely.
    """
    root = tmp_path / "enumerated"
    shutil.copytree(_enumerated_dir, root)
    return PositionStore(root, prefix="khk")
