"""Pytest fixtures for PyDEA tests."""

from pathlib import Path

import numpy as np
import pytest

from pydea import EntityRecord, Population

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def three_page_population() -> Population:
    """
    Three pages with a single output and no inputs.

    Scores are proportional to the output: 10/30, 20/30 and 30/30.
    """
    return Population.from_vectors([[10.0], [20.0], [30.0]], ids=["p1", "p2", "p3"])


@pytest.fixture
def tied_population() -> Population:
    """
    Four pages where "a" and "b" have identical outputs [5, 5].

    "c" dominates everything, "d" is dominated by everything. With outputs
    on one ray the scores are 1.0 (c), 0.5 (a, b) and 0.1 (d).
    """
    return Population([
        EntityRecord("a", outputs=[5.0, 5.0]),
        EntityRecord("b", outputs=[5.0, 5.0]),
        EntityRecord("c", outputs=[10.0, 10.0]),
        EntityRecord("d", outputs=[1.0, 1.0]),
    ])


@pytest.fixture
def depot_population() -> Population:
    """
    Twenty depots with outputs (issues, receipts, reqs) and inputs
    (stock, wages).
    """
    outputs = [
        [40.0, 55.0, 30.0], [45.0, 50.0, 40.0], [55.0, 45.0, 30.0], [48.0, 20.0, 60.0],
        [28.0, 50.0, 25.0], [48.0, 20.0, 65.0], [80.0, 65.0, 57.0], [25.0, 48.0, 30.0],
        [45.0, 64.0, 42.0], [70.0, 65.0, 48.0], [45.0, 65.0, 40.0], [45.0, 40.0, 44.0],
        [65.0, 25.0, 35.0], [38.0, 18.0, 64.0], [20.0, 50.0, 15.0], [38.0, 20.0, 60.0],
        [68.0, 64.0, 54.0], [25.0, 38.0, 20.0], [45.0, 67.0, 32.0], [57.0, 60.0, 40.0],
    ]
    inputs = [
        [3.0, 5.0], [2.5, 4.5], [4.0, 6.0], [6.0, 7.0], [2.3, 3.5],
        [4.0, 6.5], [7.0, 10.0], [4.4, 6.4], [3.0, 5.0], [5.0, 7.0],
        [5.0, 7.0], [2.0, 4.0], [5.0, 7.0], [4.0, 4.0], [2.0, 3.0],
        [3.0, 6.0], [7.0, 11.0], [4.0, 6.0], [3.0, 4.0], [5.0, 6.0],
    ]
    ids = [f"Depot{i}" for i in range(1, 21)]
    return Population.from_vectors(outputs, inputs, ids=ids)


@pytest.fixture
def random_population() -> Population:
    """Fifteen entities with random positive outputs and inputs."""
    rng = np.random.default_rng(42)
    outputs = rng.uniform(1.0, 100.0, (15, 3))
    inputs = rng.uniform(1.0, 10.0, (15, 2))
    return Population.from_vectors(outputs, inputs)


@pytest.fixture
def socialcounts_path() -> Path:
    """Tab-separated reference dataset of (likes, shares, mentions)."""
    return DATA_DIR / "socialcounts.txt"


@pytest.fixture
def write_dataset(tmp_path):
    """Write a dataset file from raw text and return its path."""

    def _write(text: str, name: str = "dataset.txt") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
