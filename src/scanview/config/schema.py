"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from scanview.filters.state import FilterState
from scanview.results.loader import DEFAULT_RESULTS_FILE
from scanview.results.severity import Severity
from scanview.tree.grouping import GroupDimension

OutputFormat = Literal["terminal", "json"]
OUTPUT_FORMATS = ("terminal", "json")


@dataclass
class ResultsConfig:
    path: str = DEFAULT_RESULTS_FILE


@dataclass
class WorkspaceConfig:
    root: Optional[str] = None  # None = directory containing the config / cwd


@dataclass
class FiltersConfig:
    group_by: str = "severity"  # fileName | severity | status | language
    high: bool = True
    medium: bool = True
    low: bool = False
    info: bool = False

    def to_filter_state(self) -> FilterState:
        flags = {
            Severity.HIGH: self.high,
            Severity.MEDIUM: self.medium,
            Severity.LOW: self.low,
            Severity.INFO: self.info,
        }
        return FilterState(
            grouping_dimension=GroupDimension.parse_selectable(self.group_by),
            active_severities={level for level, on in flags.items() if on},
        )


@dataclass
class StateConfig:
    file: str = ".scanview-state.json"


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class ScanViewConfig:
    version: str = "1.0"
    results: ResultsConfig = field(default_factory=ResultsConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    filters: FiltersConfig = field(default_factory=FiltersConfig)
    state: StateConfig = field(default_factory=StateConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
