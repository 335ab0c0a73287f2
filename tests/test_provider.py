"""Tests for the results provider lifecycle — refresh, clear, queries."""

import json
import logging
from pathlib import Path

import pytest

from scanview.filters.state import (
    HIGH_FILTER,
    LOW_FILTER,
    MEDIUM_FILTER,
    SCAN_ID_KEY,
    FilterError,
    MemoryStateStore,
)
from scanview.provider import MemoryDiagnosticsSink, ResultsProvider, file_loader
from scanview.results.loader import ResultsError
from scanview.results.severity import Severity
from scanview.tree.grouping import GroupDimension


class RecordingStatus:
    def __init__(self):
        self.events = []

    def show(self, text):
        self.events.append(("show", text))

    def hide(self):
        self.events.append(("hide", None))


class TestScenario:
    def test_tree_and_diagnostics(self, make_provider, scenario_records):
        provider, sink = make_provider(scenario_records)
        root = provider.get_root()

        assert [c.label for c in provider.get_children()] == ["sast"]
        high = provider.get_children(root.children[0])
        assert [c.label for c in high] == ["HIGH"]
        assert len(provider.get_children(high[0])) == 2
        assert provider.get_children(provider.get_children(high[0])[0]) is None

        assert list(sink.published) == ["file:///work/a.c"]
        assert len(sink.published["file:///work/a.c"]) == 2

    def test_scan_id_labels_root(self, make_provider, scenario_records):
        provider, _ = make_provider(scenario_records, store=MemoryStateStore({SCAN_ID_KEY: "scan-7"}))
        assert provider.get_root().label == "scan-7"


class TestRefresh:
    def test_idempotent(self, make_provider, mixed_records):
        provider, sink = make_provider(mixed_records)
        tree_before = provider.get_root().to_dict()
        diags_before = provider.diagnostics.to_dict()
        provider.refresh()
        assert provider.get_root().to_dict() == tree_before
        assert provider.diagnostics.to_dict() == diags_before

    def test_rebuild_replaces_tree(self, make_provider, mixed_records):
        provider, _ = make_provider(mixed_records)
        first = provider.get_root()
        second = provider.refresh()
        assert second is not first
        assert second is provider.get_root()

    def test_toggle_persists_and_publishes(self, make_provider, mixed_records):
        store = MemoryStateStore()
        context = {}
        provider, sink = make_provider(
            mixed_records, store=store, context_setter=lambda k, v: context.__setitem__(k, v)
        )
        assert context == {
            "scanview.highFilter": True,
            "scanview.mediumFilter": True,
            "scanview.lowFilter": False,
            "scanview.infoFilter": False,
        }

        provider.refresh(LOW_FILTER)
        assert store.get(LOW_FILTER) is True
        assert context[LOW_FILTER] is True
        shown = {leaf.result.severity for leaf in provider.get_root().iter_leaves()}
        assert Severity.LOW in shown

    def test_toggle_dimension(self, make_provider, mixed_records):
        provider, _ = make_provider(mixed_records)
        provider.refresh("fileName")
        assert provider.filters.grouping_dimension is GroupDimension.FILE_NAME
        sast = provider.get_children()[0]
        assert [c.label for c in sast.children] == ["src/db.c", "src/io.c", "src/api.c"]

    def test_all_filters_off(self, make_provider, mixed_records):
        store = MemoryStateStore({HIGH_FILTER: False, MEDIUM_FILTER: False})
        provider, sink = make_provider(mixed_records, store=store)
        assert provider.get_children() == []
        assert sink.published == {}

    def test_diagnostics_cleared_then_replaced(self, make_provider, mixed_records):
        provider, sink = make_provider(mixed_records)
        clears = sink.clear_count
        provider.refresh(HIGH_FILTER)
        assert sink.clear_count == clears + 1
        assert all(
            entry.severity_code.name == "WARNING"
            for entries in sink.published.values()
            for entry in entries
        )

    def test_no_workspace_root_skips_diagnostics(self, make_provider, scenario_records):
        provider, sink = make_provider(scenario_records, workspace_root=None)
        assert sink.published == {}
        assert len(provider.get_children()) == 1

    def test_busy_indicator(self, make_provider, scenario_records):
        status = RecordingStatus()
        provider, _ = make_provider(scenario_records, status=status)
        provider.refresh()
        assert status.events == [("show", "Refreshing tree"), ("hide", None)] * 2

    def test_non_object_records_skipped(self, make_provider):
        provider, _ = make_provider([None, "junk", {"type": "sast", "severity": "HIGH", "id": "ok"}])
        assert [leaf.label for leaf in provider.get_root().iter_leaves()] == ["ok"]


class TestDocumentLifecycle:
    def _provider(self, path: Path, **kwargs):
        sink = MemoryDiagnosticsSink()
        provider = ResultsProvider(
            MemoryStateStore(),
            file_loader(path),
            sink,
            workspace_root="file:///work",
            results_path=path,
            **kwargs,
        )
        return provider, sink

    def test_missing_document_yields_empty_tree(self, tmp_path: Path):
        provider, sink = self._provider(tmp_path / "ast-results.json")
        assert provider.get_root().label == ""
        assert provider.get_children() == []
        assert sink.clear_count == 1

    def test_clear_deletes_document(self, write_results, scenario_records):
        path = write_results(scenario_records)
        provider, sink = self._provider(path)
        assert sink.published

        root = provider.clear()
        assert not path.exists()
        assert root.children == []
        assert sink.published == {}

    def test_malformed_document_propagates(self, tmp_path: Path):
        path = tmp_path / "ast-results.json"
        path.write_text("{oops")
        with pytest.raises(ResultsError):
            self._provider(path)

    def test_malformed_after_start_hides_busy(self, write_results, scenario_records):
        path = write_results(scenario_records)
        status = RecordingStatus()
        provider, _ = self._provider(path, status=status)
        path.write_text(json.dumps({"results": "nope"}))
        with pytest.raises(ResultsError):
            provider.refresh()
        assert status.events[-1] == ("hide", None)


class FailingStore(MemoryStateStore):
    def update(self, key, value):
        raise OSError("disk full")


class TestToggleSafety:
    def test_type_grouping_rejected(self, make_provider, scenario_records):
        provider, _ = make_provider(scenario_records)
        with pytest.raises(FilterError):
            provider.refresh("type")
        assert provider.filters.grouping_dimension is GroupDimension.SEVERITY
        sast = provider.get_children()[0]
        assert [c.label for c in sast.children] == ["HIGH"]

    def test_failed_save_restores_filters(self, make_provider, scenario_records):
        provider, _ = make_provider(scenario_records, store=FailingStore())
        with pytest.raises(OSError):
            provider.refresh(LOW_FILTER)
        assert provider.filters.active_severities == {Severity.HIGH, Severity.MEDIUM}

    def test_clear_without_results_path_logs(self, make_provider, scenario_records, caplog):
        provider, _ = make_provider(scenario_records)
        with caplog.at_level(logging.DEBUG, logger="scanview.provider"):
            provider.clear()
        assert "nothing to delete" in caplog.text
