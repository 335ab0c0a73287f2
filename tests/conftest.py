"""Shared test fixtures — sample result records and documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from scanview.filters.state import MemoryStateStore
from scanview.provider import MemoryDiagnosticsSink, ResultsProvider


def sast(query: str, severity: str, file_name: str, line: int, column: int = 1, length: int = 1, **extra: Any) -> Dict[str, Any]:
    record = {
        "type": "sast",
        "id": f"id-{query}-{line}",
        "severity": severity,
        "status": extra.pop("status", "NEW"),
        "language": extra.pop("language", "C"),
        "data": {
            "queryName": query,
            "nodes": [
                {"fileName": file_name, "line": line, "column": column, "length": length},
            ],
        },
    }
    record.update(extra)
    return record


@pytest.fixture
def scenario_records() -> List[Dict[str, Any]]:
    """Two HIGH sast findings in a.c and one LOW sca finding."""
    return [
        {"type": "sast", "severity": "HIGH", "id": "r1", "fileName": "a.c", "line": 10, "column": 2, "length": 3},
        {"type": "sast", "severity": "HIGH", "id": "r2", "fileName": "a.c", "line": 20, "column": 1, "length": 1},
        {"type": "sca", "severity": "LOW", "id": "r3", "data": {"packageIdentifier": "lodash-4.17.15"}},
    ]


@pytest.fixture
def mixed_records() -> List[Dict[str, Any]]:
    return [
        sast("SQL_Injection", "HIGH", "src/db.c", 12, 5, 8),
        sast("Buffer_Overflow", "MEDIUM", "src/io.c", 40, 3, 6),
        sast("SQL_Injection", "HIGH", "src/api.c", 7, 1, 4, status="RECURRENT"),
        sast("Unused_Variable", "LOW", "src/io.c", 2, 1, 3),
        sast("Info_Leak", "INFO", "src/log.c", 1, 1, 1),
        {"type": "kics", "severity": "MEDIUM", "id": "k1", "data": {"queryName": "Privileged_Container"}},
        {"type": "sca", "severity": "HIGH", "id": "s1", "data": {"packageIdentifier": "openssl-1.0.1"}},
    ]


@pytest.fixture
def write_results(tmp_path: Path):
    """Write a results document and return its path."""

    def _write(records: List[Dict[str, Any]], name: str = "ast-results.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps({"results": records}), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_provider():
    """Build a provider over an in-memory list of records."""

    def _make(records, *, workspace_root="file:///work", store=None, **kwargs):
        sink = MemoryDiagnosticsSink()
        provider = ResultsProvider(
            store if store is not None else MemoryStateStore(),
            lambda: records,
            sink,
            workspace_root=workspace_root,
            **kwargs,
        )
        return provider, sink

    return _make


@pytest.fixture
def sast_record():
    """Factory for a sast record with a single source node."""
    return sast
