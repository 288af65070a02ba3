#!/usr/bin/env python3
"""
Validate the markers GeoJSON file.

Checks every feature for a unique id, a title, valid link/icon URLs, an
ISO updated_at timestamp and a Point geometry inside latitude/longitude
bounds. Prints each violation and exits non-zero if any are found.
Usage:
    python tools/validate_markers.py [docs/data/markers.geojson]
"""
import sys
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from mm.domain.validate import main

if __name__ == "__main__":
    sys.exit(main())
