#!/usr/bin/env python3
"""
Show how an issue body is parsed.
Reads the body from the command line arguments or, if none are given, stdin.
Usage:
    python tools/parse_issue.py "### Title" "Cafe"
    gh issue view 12 --json body -q .body | python tools/parse_issue.py
"""
import json
import sys
from dataclasses import asdict
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from mm.domain.issue_form import parse_issue_form

def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    body = "\n".join(argv) if argv else sys.stdin.read()
    parsed = {k: asdict(v) for k, v in parse_issue_form(body).items()}
    print(json.dumps(parsed, ensure_ascii=False, indent=2))
    return 0

if __name__ == "__main__":
    sys.exit(main())
