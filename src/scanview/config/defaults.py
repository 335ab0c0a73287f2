"""Starter .scanview.toml template."""

DEFAULT_TOML = """\
# scanview configuration
version = "1.0"

[results]
path = "ast-results.json"   # results document written by the scan

[workspace]
# root = "/path/to/project" # defaults to the current directory

[filters]
group_by = "severity"       # fileName | severity | status | language
high = true
medium = true
low = false
info = false

[state]
file = ".scanview-state.json"

[output]
format = "terminal"         # terminal | json
show_summary = true
"""
