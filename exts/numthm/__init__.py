from __future__ import annotations

from typing import Any

from sphinx.application import Sphinx

from .constants import DEFAULT_SUMMARY
from .events import (
    _on_build_finished,
    _on_builder_inited,
    _on_env_before_read_docs,
    _on_env_merge_info,
    _on_env_purge_doc,
    _on_source_read,
)


def setup(app: Sphinx) -> dict[str, Any]:
    app.add_config_value("numthm_prefix", False, "env", types=[bool])
    app.add_config_value("numthm_custom_environments", [], "env", types=[list])
    app.add_config_value("numthm_summary_path", DEFAULT_SUMMARY, "env", types=[str])
    app.add_config_value("numthm_label_index", True, "html", types=[bool])

    app.connect("builder-inited", _on_builder_inited)
    app.connect("env-before-read-docs", _on_env_before_read_docs)
    app.connect("source-read", _on_source_read)
    app.connect("env-purge-doc", _on_env_purge_doc)
    app.connect("env-merge-info", _on_env_merge_info)
    app.connect("build-finished", _on_build_finished)

    return {
        "version": "0.1",
        "parallel_read_safe": True,
        "parallel_write_safe": True,
        "env_version": 1,
    }
