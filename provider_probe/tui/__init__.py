"""Textual TUI for Provider Probe."""
