from __future__ import annotations

import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "exts"))

project = "numthm sample book"
author = "numthm contributors"
copyright = "2026, numthm contributors"

extensions = [
    "myst_parser",
    "numthm",
    "numthm_lints",
]

source_suffix = {
    ".md": "markdown",
}

master_doc = "index"
exclude_patterns = [
    "_build",
    "SUMMARY.md",
]

nitpicky = True
show_warning_types = True
# environment anchors are raw HTML, invisible to MyST's target lookup
suppress_warnings: list[str] = ["myst.xref_missing"]

html_theme = "alabaster"
html_static_path: list[str] = []

numthm_prefix = True
numthm_custom_environments = [
    ["cor", "Corollary", "**"],
    ["ex", "Example", "*"],
]
numthm_summary_path = "SUMMARY.md"

numthm_lint_root = os.environ.get("NUMTHM_LINT_ROOT", "")
