"""TUI widget definitions."""

from provider_probe.tui.widgets.model_suggest import ModelSuggest
from provider_probe.tui.widgets.provider_table import ProviderTable

__all__ = [
    "ModelSuggest",
    "ProviderTable",
]
