"""Result records — severity classification, normalization, loading."""

from scanview.results.loader import ResultsError, delete_results, load_results
from scanview.results.models import NormalizedResult, SourceLocation, normalize
from scanview.results.severity import DiagnosticSeverity, Severity, severity_code

__all__ = [
    "DiagnosticSeverity",
    "NormalizedResult",
    "ResultsError",
    "Severity",
    "SourceLocation",
    "delete_results",
    "load_results",
    "normalize",
    "severity_code",
]
