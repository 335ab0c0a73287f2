"""Report renderers for the grouped tree."""
