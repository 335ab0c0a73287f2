"""scanview — grouped tree and editor diagnostics for static-analysis results."""

__version__ = "0.1.0"
