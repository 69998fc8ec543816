"""
Configuration for docset, read from environment variables.

    DOCSET_SOURCE_DIR       directory holding the pages (default: md/)
    DOCSET_OUTPUT_DIR       where build artifacts are written (default: output/docset)
    DOCSET_SOURCE_PATTERNS  comma-separated glob patterns (default: *.md,*.mdx)
    DOCSET_PARSE_WORKERS    threads used to parse pages (default: 4)
    DOCSET_SINGLE_CHAIN     require one navigation chain (default: false)
    DOCSET_LOG_LEVEL        logging level for the command-line tools (default: INFO)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Tuple

BASE_DIR = Path(__file__).resolve().parents[1]


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_patterns(name: str, default: str) -> Tuple[str, ...]:
    raw = os.environ.get(name, default)
    return tuple(p.strip() for p in raw.split(",") if p.strip())


SOURCE_DIR = Path(os.environ.get("DOCSET_SOURCE_DIR", str(BASE_DIR / "md")))
OUTPUT_DIR = Path(os.environ.get("DOCSET_OUTPUT_DIR", str(BASE_DIR / "output" / "docset")))
SOURCE_PATTERNS = _env_patterns("DOCSET_SOURCE_PATTERNS", "*.md,*.mdx")
PARSE_WORKERS = int(os.environ.get("DOCSET_PARSE_WORKERS", "4"))
SINGLE_CHAIN = _env_flag("DOCSET_SINGLE_CHAIN")
LOG_LEVEL = os.environ.get("DOCSET_LOG_LEVEL", "INFO").upper()
