"""
pytest configuration and shared fixtures for geoedit tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from geoedit.config import Settings  # noqa: E402
from tests.samples import feature  # noqa: E402


@pytest.fixture
def settings():
    """Settings with exact ring closing."""
    return Settings(close_ring_tolerance=0.0, initial_mode="view")


@pytest.fixture
def collection():
    """Point, 3-position LineString, triangle Polygon and 2-position LineString."""
    return {
        "type": "FeatureCollection",
        "features": [
            feature({"type": "Point", "coordinates": [0, 0]}, name="well"),
            feature({"type": "LineString", "coordinates": [[0, 0], [1, 0], [2, 0]]}, name="road"),
            feature(
                {"type": "Polygon", "coordinates": [[[0, 0], [4, 0], [0, 4], [0, 0]]]},
                name="field",
            ),
            feature({"type": "LineString", "coordinates": [[5, 5], [6, 6]]}, name="fence"),
        ],
    }


@pytest.fixture
def empty_collection():
    return {"type": "FeatureCollection", "features": []}


@pytest.fixture
def event():
    """Factory for interaction event dicts."""
    def make(kind, coords, picks=None):
        return {"kind": kind, "ground_coords": list(coords), "picks": picks or []}
    return make


@pytest.fixture
def handle_pick():
    """Factory for a pick on an edit handle."""
    def make(feature_index, path, handle_type="existing"):
        return {
            "feature_index": feature_index,
            "handle": {"position_indexes": list(path), "type": handle_type},
        }
    return make
