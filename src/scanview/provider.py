"""Results provider — the lifecycle surface a host view talks to.

The provider owns the filter state and, on every refresh, rebuilds the
whole tree and diagnostic map from the current results document. Nothing
is updated in place: each rebuild produces a fresh root and a fresh map,
and the diagnostics sink is cleared before the new map is published.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from scanview.diagnostics.projector import DiagnosticEntry, DiagnosticMap, project_first_location
from scanview.filters.state import SCAN_ID_KEY, FilterState, StateStore
from scanview.results.loader import delete_results, load_results
from scanview.results.models import NormalizedResult, normalize
from scanview.tree.grouping import build_tree, grouping_path
from scanview.tree.models import GroupNode

logger = logging.getLogger(__name__)

ResultsLoader = Callable[[], Optional[List[Dict[str, Any]]]]
ContextSetter = Callable[[str, Any], None]


class DiagnosticsSink(Protocol):
    def clear(self) -> None: ...

    def set(self, file_path: str, entries: List[DiagnosticEntry]) -> None: ...


class StatusIndicator(Protocol):
    def show(self, text: str) -> None: ...

    def hide(self) -> None: ...


class MemoryDiagnosticsSink:
    """Sink that keeps the last published diagnostics in a dict."""

    def __init__(self) -> None:
        self.published: Dict[str, List[DiagnosticEntry]] = {}
        self.clear_count = 0

    def clear(self) -> None:
        self.published = {}
        self.clear_count += 1

    def set(self, file_path: str, entries: List[DiagnosticEntry]) -> None:
        self.published[file_path] = list(entries)


def file_loader(path: Path) -> ResultsLoader:
    """Loader reading the results document at *path* on each call."""

    def _load() -> Optional[List[Dict[str, Any]]]:
        return load_results(path)

    return _load


def normalize_all(records: List[Any]) -> List[NormalizedResult]:
    """Normalize raw records, skipping entries that are not objects."""
    results: List[NormalizedResult] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.debug("Skipping result #%d: not an object", index)
            continue
        results.append(normalize(record))
    return results


class ResultsProvider:
    def __init__(
        self,
        store: StateStore,
        loader: ResultsLoader,
        diagnostics_sink: DiagnosticsSink,
        *,
        workspace_root: Optional[str] = None,
        context_setter: Optional[ContextSetter] = None,
        status: Optional[StatusIndicator] = None,
        results_path: Optional[Path] = None,
        defaults: Optional[FilterState] = None,
    ) -> None:
        self.store = store
        self.loader = loader
        self.diagnostics_sink = diagnostics_sink
        self.workspace_root = workspace_root
        self.context_setter = context_setter
        self.status = status
        self.results_path = results_path

        self.filters = FilterState.from_store(store, defaults)
        self.scan_id: str = store.get(SCAN_ID_KEY, "") or ""
        self._root = GroupNode.branch("")
        self._diagnostics = DiagnosticMap()

        self._publish_context()
        self.refresh()

    # ---- public surface ----

    def refresh(self, toggled_filter_key: Optional[str] = None) -> GroupNode:
        """Optionally apply one filter toggle, then rebuild everything."""
        self._show_busy()
        try:
            if toggled_filter_key:
                key, value = self._apply_toggle(toggled_filter_key)
                if self.context_setter is not None:
                    self.context_setter(key, value)
                logger.debug("Filter %s -> %r", key, value)
            self.scan_id = self.store.get(SCAN_ID_KEY, "") or ""
            self._rebuild()
        finally:
            self._hide_busy()
        return self._root

    def clear(self) -> GroupNode:
        """Delete the results document and rebuild the (now empty) tree."""
        if self.results_path is None:
            logger.debug("No results path configured; nothing to delete")
        elif not delete_results(self.results_path):
            logger.debug("No results document at %s to delete", self.results_path)
        return self.refresh()

    def get_root(self) -> GroupNode:
        return self._root

    def get_children(self, node: Optional[GroupNode] = None) -> Optional[List[GroupNode]]:
        if node is None:
            return self._root.children
        return node.children

    @property
    def diagnostics(self) -> DiagnosticMap:
        return self._diagnostics

    # ---- internals ----

    def _rebuild(self) -> None:
        records = self.loader()
        if records is None:
            self.diagnostics_sink.clear()
            self._root = GroupNode.branch("")
            self._diagnostics = DiagnosticMap()
            logger.debug("No results document; tree cleared")
            return

        if not self.workspace_root:
            logger.info("No workspace root; diagnostics will not be produced")

        diagnostics = DiagnosticMap()
        root = build_tree(
            normalize_all(records),
            grouping_path(self.filters.grouping_dimension),
            self.filters.active_severities,
            root_label=self.scan_id,
            on_result=lambda r: project_first_location(r, self.workspace_root, diagnostics),
        )

        self.diagnostics_sink.clear()
        for file_path, entries in diagnostics.items():
            self.diagnostics_sink.set(file_path, entries)

        self._root = root
        self._diagnostics = diagnostics
        logger.debug(
            "Rebuilt tree: %d records, %d groups, %d diagnostics in %d files",
            len(records),
            len(root.children or []),
            diagnostics.total(),
            len(diagnostics),
        )

    def _apply_toggle(self, filter_key: str) -> Tuple[str, Any]:
        """Toggle one filter and persist it; the session state is restored if saving fails."""
        previous = replace(self.filters, active_severities=set(self.filters.active_severities))
        key, value = self.filters.toggle(filter_key)
        try:
            self.store.update(key, value)
        except Exception:
            self.filters = previous
            raise
        return key, value

    def _publish_context(self) -> None:
        if self.context_setter is None:
            return
        for key, value in self.filters.context_items():
            self.context_setter(key, value)

    def _show_busy(self) -> None:
        if self.status is not None:
            self.status.show("Refreshing tree")

    def _hide_busy(self) -> None:
        if self.status is not None:
            self.status.hide()
