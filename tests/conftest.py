import os
import pathlib
import sys

import pytest

# Ensure project root is in sys.path
repo_root = pathlib.Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

# Headless rendering for widget tests
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:
    from PySide6.QtWidgets import QApplication
except ImportError:
    QApplication = None


@pytest.fixture(scope="session")
def qapp():
    """
    Ensure QApplication is instantiated only once.
    """
    if QApplication is None:
        yield None
        return

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def square_points():
    """The three-vertex boundary used throughout the editor tests."""
    from src.core.maps import LatLng

    return [LatLng(0.0, 0.0), LatLng(1.0, 0.0), LatLng(1.0, 1.0)]


@pytest.fixture
def recorded_updates():
    """
    Collects every list passed to an on_polygon_updated callback.

    Returns a (callback, calls) pair.
    """
    calls = []

    def callback(points):
        calls.append(list(points))

    return callback, calls
