"""
Geofence Editor Launcher.
Entry point for PyInstaller to ensure correct package resolution.
"""

import os
import sys

# Make the repository root importable when run as a script
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from src.app.entry import main  # noqa: E402

if __name__ == "__main__":
    main()
