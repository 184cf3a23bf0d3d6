"""Core services for savectl.

Paths, settings, operation status, placeholders, theming and the sink
interfaces shared by every front end.
"""
