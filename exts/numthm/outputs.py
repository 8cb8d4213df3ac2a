from __future__ import annotations

from pathlib import Path
from typing import Any

from sphinx.application import Sphinx
from sphinx.environment import BuildEnvironment

from .constants import LABEL_INDEX_FILENAME
from .record_store import LabelIndex, _ensure_env
from .utils import _write_json


def label_index_payload(index: LabelIndex) -> dict[str, Any]:
    records: list[dict[str, Any]] = []
    for entry in sorted(index.entries(), key=lambda item: item.label):
        records.append(
            {
                "label": entry.label,
                "name": entry.name,
                "number": entry.number,
                "title": entry.title,
                "path": entry.path,
                "href": f"{entry.path}#{entry.label}",
            }
        )
    return {
        "schema_version": 1,
        "records": records,
    }


def _emit_label_index(app: Sphinx, env: BuildEnvironment) -> Path | None:
    _ensure_env(env)
    if not app.config.numthm_label_index:
        return None
    out_path = Path(app.outdir) / LABEL_INDEX_FILENAME
    _write_json(out_path, label_index_payload(env.numthm_labels))
    return out_path
