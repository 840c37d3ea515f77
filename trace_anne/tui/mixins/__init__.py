"""Mixins for the TUI application."""

from trace_anne.tui.mixins.dual_pane import DualPaneMixin
from trace_anne.tui.mixins.vim_navigation import VimNavigationMixin

__all__ = [
    "DualPaneMixin",
    "VimNavigationMixin",
]
