"""
Application Entry Point.

This module contains the main() function, the editor window and cleanup
logic for the standalone geofence editor. Options come from the
environment (optionally a .env file) and are overridden by command line
arguments. The final boundary is printed as GeoJSON on exit.
"""

import argparse
import json
import sys
from typing import List, Mapping, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Imports after load_dotenv() so configuration sees the .env values
from PySide6.QtCore import Qt  # noqa: E402
from PySide6.QtWidgets import QApplication, QMainWindow, QWidget  # noqa: E402

from src.app.constants import (  # noqa: E402
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
    GEOJSON_INDENT,
    STATUS_EDIT_MODE,
    STATUS_POINT_COUNT,
    STATUS_VIEW_MODE,
    WINDOW_SETTINGS_APP,
    WINDOW_SETTINGS_KEY,
    WINDOW_TITLE,
)
from src.core.editor_config import GeofenceEditorConfig, parse_latlng  # noqa: E402
from src.core.logging_config import (  # noqa: E402
    get_logger,
    setup_logging,
    shutdown_logging,
)
from src.core.maps import LatLng  # noqa: E402
from src.core.overlay import MapEditMode  # noqa: E402
from src.gui.widgets.geofence_map_widget import InteractiveMapGeofence  # noqa: E402

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Creates the command line parser."""
    parser = argparse.ArgumentParser(
        prog="geofence-editor",
        description="Draw a geofence polygon on an interactive map.",
    )
    parser.add_argument(
        "--center", metavar="LAT,LNG", help="Initial camera position."
    )
    parser.add_argument("--zoom", type=float, help="Initial camera zoom.")
    parser.add_argument(
        "--point",
        metavar="LAT,LNG",
        action="append",
        default=[],
        help="Initial polygon vertex; repeat for more vertices.",
    )
    parser.add_argument(
        "--hide-controls",
        action="store_true",
        help="Hide the built-in map buttons.",
    )
    parser.add_argument(
        "--compact-markers",
        action="store_true",
        help="Use small vertex handles sized for mouse input.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser


def build_config(
    args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None
) -> GeofenceEditorConfig:
    """
    Combines environment configuration with command line overrides.

    Args:
        args: Parsed command line arguments.
        environ: Environment mapping; os.environ when None.

    Returns:
        GeofenceEditorConfig: The effective configuration.

    Raises:
        ValueError: If any value is malformed.
    """
    config = GeofenceEditorConfig.from_env(environ)

    center = parse_latlng(args.center, "--center") if args.center else None
    points: Optional[List[LatLng]] = [
        parse_latlng(text, "--point") for text in args.point
    ] or None

    return config.with_overrides(
        initial_position=center,
        initial_zoom=args.zoom,
        initial_points=points,
        show_controls=False if args.hide_controls else None,
        compact_markers=True if args.compact_markers else None,
    )


class GeofenceEditorWindow(QMainWindow):
    """Top-level window hosting a single geofence editor."""

    def __init__(
        self, config: GeofenceEditorConfig, parent: Optional[QWidget] = None
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)

        self.editor = InteractiveMapGeofence(config=config, parent=self)
        self.setCentralWidget(self.editor)

        self.editor.polygon_updated.connect(self._on_polygon_updated)
        self.editor.state.add_listener(lambda state: self._update_status())
        self._update_status()

    def _on_polygon_updated(self, points: List[LatLng]) -> None:
        logger.info(
            f"Polygon updated: {len(points)} vertices "
            f"{[p.as_tuple() for p in points]}"
        )

    def _update_status(self) -> None:
        editing = self.editor.edit_mode is MapEditMode.EDIT
        mode = STATUS_EDIT_MODE if editing else STATUS_VIEW_MODE
        count = STATUS_POINT_COUNT.format(count=len(self.editor.points))
        self.statusBar().showMessage(f"{mode} | {count}")


def main(argv: Optional[List[str]] = None) -> None:
    """Application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(debug_mode=args.debug)

    try:
        config = build_config(args)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        parser.error(str(e))

    try:
        logger.info("Starting Geofence Editor...")

        QApplication.setHighDpiScaleFactorRoundingPolicy(
            Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
        )

        app = QApplication.instance() or QApplication(sys.argv[:1])
        app.setOrganizationName(WINDOW_SETTINGS_KEY)
        app.setApplicationName(WINDOW_SETTINGS_APP)

        window = GeofenceEditorWindow(config)
        window.show()

        logger.info("Entering Event Loop...")
        exit_code = app.exec()

        print(json.dumps(window.editor.polygon().to_geojson(), indent=GEOJSON_INDENT))
        cleanup_app()
        sys.exit(exit_code)
    except Exception:
        logger.exception("CRITICAL: Unhandled exception in main application loop")
        sys.exit(1)


def cleanup_app() -> None:
    """Performs global cleanup operations before exit."""
    logger.info("Shutting down logging.")
    shutdown_logging()
