#!/usr/bin/env python3
# Marker Map – Issue Bot (GitHub issue form → markers.geojson)
#
# HARD RULES (product):
# - One issue event per run. The workflow serializes runs.
# - Labels pick the operation (first match wins):
#   - marker-add    -> new marker (title + latitude + longitude required)
#   - marker-update -> change fields of an existing marker id
#   - marker-delete -> remove a marker id (confirmation checkbox required)
# - NOTHING is written unless the mutation succeeds AND the whole dataset
#   passes validation afterwards.
#
# Files:
# - config.json               (tracked, optional)  paths, labels, reporting toggles
# - docs/data/markers.geojson (tracked)  single source of truth (FeatureCollection, [lng, lat])
# - tools/last_result.json    (generated) {"ok": bool, "message": str}
#
# Environment (set by GitHub Actions):
# - GITHUB_EVENT_PATH, GITHUB_TOKEN, GITHUB_REPOSITORY
#
# Exit code: 0 on success, 1 on any failure. stdout carries exactly one JSON line.

import sys

from mm.core.run import main

if __name__ == "__main__":
    sys.exit(main())
