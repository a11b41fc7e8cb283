"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.selection import Point, StudyItem  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fixed_labels():
    """
    Factory for clustering primitives that always return the given labels.

    Each primitive records the arguments it was called with in .calls.
    """
    def _fixed(labels):
        def primitive(points, k, initial_centroids):
            primitive.calls.append({"points": points, "k": k, "seeds": initial_centroids})
            return list(labels)

        primitive.calls = []
        return primitive
    return _fixed


@pytest.fixture
def make_items():
    """Factory for items laid out along the x axis."""
    def _make(count: int) -> list[StudyItem]:
        return [
            StudyItem(index=i, position=Point(float(i), 0.0), label=f"item-{i}")
            for i in range(count)
        ]
    return _make


@pytest.fixture
def answer():
    """Append n answers to an item."""
    def _answer(item: StudyItem, n: int = 1) -> StudyItem:
        for _ in range(n):
            item.record_answer(correct=True)
        return item
    return _answer
