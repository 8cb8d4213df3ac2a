from __future__ import annotations

from pathlib import Path
from typing import Any

from sphinx.application import Sphinx
from sphinx.environment import BuildEnvironment
from sphinx.errors import ExtensionError
from sphinx.util import logging

from .book import load_book
from .config import NumThmConfig, config_from_mapping
from .errors import NumThmError
from .outputs import _emit_label_index
from .pipeline import transform_book
from .record_store import DiagnosticLog, _ensure_env
from .references import ReferenceResolver
from .registry import build_registry

LOGGER = logging.getLogger(__name__)


def _config_from_app(app: Sphinx) -> NumThmConfig:
    payload: dict[str, Any] = {
        "prefix": app.config.numthm_prefix,
        "custom_environments": [
            list(entry) for entry in app.config.numthm_custom_environments
        ],
        "summary": app.config.numthm_summary_path,
    }
    return config_from_mapping(payload, "conf.py (numthm_*)")


def _on_builder_inited(app: Sphinx) -> None:
    env = app.builder.env
    _ensure_env(env)
    try:
        config = _config_from_app(app)
        registry = build_registry(config.custom_environments)
    except NumThmError as exc:
        raise ExtensionError(str(exc)) from exc
    env.numthm_config = config
    env.numthm_registry = registry


def _on_env_before_read_docs(
    app: Sphinx, env: BuildEnvironment, docnames: list[str]
) -> None:
    _ensure_env(env)
    try:
        book = load_book(Path(app.srcdir), env.numthm_config.summary)
    except NumThmError as exc:
        raise ExtensionError(str(exc)) from exc

    result = transform_book(book, env.numthm_config, env.numthm_registry)
    env.numthm_contents = result.contents
    env.numthm_labels = result.labels
    env.numthm_diagnostics = list(result.diagnostics)
    env.numthm_book_docs = {}

    # Numbers and links may shift anywhere in the book, so every book document
    # is read again.
    for path in result.contents:
        docname = env.path2doc(path)
        if docname is None or docname not in env.found_docs:
            LOGGER.debug("numthm: %s is not a source document, skipped", path)
            continue
        env.numthm_book_docs[docname] = path
        if docname not in docnames:
            docnames.append(docname)


def _on_source_read(app: Sphinx, docname: str, source: list[str]) -> None:
    env = app.builder.env
    _ensure_env(env)
    path = env.numthm_book_docs.get(docname)
    if path is not None:
        source[0] = env.numthm_contents[path]
        return

    log = DiagnosticLog()
    resolver = ReferenceResolver(env.numthm_labels, log)
    source[0] = resolver.resolve_document(source[0], str(env.doc2path(docname, False)))
    if log.records:
        env.numthm_doc_diagnostics[docname] = list(log.records)


def _on_env_purge_doc(app: Sphinx, env: BuildEnvironment, docname: str) -> None:
    _ensure_env(env)
    env.numthm_doc_diagnostics.pop(docname, None)


def _on_env_merge_info(
    app: Sphinx, env: BuildEnvironment, docnames: list[str], other: BuildEnvironment
) -> None:
    _ensure_env(env)
    _ensure_env(other)
    for docname in docnames:
        if docname in other.numthm_doc_diagnostics:
            env.numthm_doc_diagnostics[docname] = other.numthm_doc_diagnostics[docname]


def _on_build_finished(app: Sphinx, exception: Exception | None) -> None:
    if exception is not None:
        return
    out_path = _emit_label_index(app, app.builder.env)
    if out_path is not None:
        LOGGER.info("numthm: wrote label index to %s", out_path)
