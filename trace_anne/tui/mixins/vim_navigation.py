"""
Vim Navigation Mixin for global vim-style keybindings.

Provides j/k/g/G navigation that works across all screens by delegating
to the currently focused widget: DataTables move their cursor, scrollable
panes scroll.

Note: h/l bindings for panel switching are defined in DualPaneMixin.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.binding import Binding
from textual.containers import ScrollableContainer
from textual.widgets import DataTable

if TYPE_CHECKING:
    from textual.widget import Widget


class VimNavigationMixin:
    """Mixin providing global vim-style navigation keybindings.

    - j/k: Move cursor (DataTable) or scroll (pane) down/up
    - g: Jump to first row / top of pane
    - G: Jump to last row / bottom of pane

    Usage:
        class MyScreen(VimNavigationMixin, Screen):
            BINDINGS = VimNavigationMixin.VIM_BINDINGS + [...]

        # For dual-pane screens (DualPaneMixin MUST come first for h/l to work):
        class MyDualScreen(DualPaneMixin, VimNavigationMixin, Screen):
            BINDINGS = DualPaneMixin.DUAL_PANE_BINDINGS + [...]
    """

    VIM_BINDINGS = [
        Binding("j", "vim_down", "Down", show=False),
        Binding("k", "vim_up", "Up", show=False),
        Binding("g", "vim_top", "Top", show=False),
        Binding("G", "vim_bottom", "Bottom", show=False),
    ]

    def _get_navigable_widget(self) -> Widget | None:
        """Return the focused widget if it is a DataTable or scrollable pane."""
        focused = self.focused
        if isinstance(focused, (DataTable, ScrollableContainer)):
            return focused
        return None

    def action_vim_down(self) -> None:
        """Move cursor down (vim j key)."""
        widget = self._get_navigable_widget()
        if isinstance(widget, DataTable):
            widget.action_cursor_down()
        elif isinstance(widget, ScrollableContainer):
            widget.scroll_down()

    def action_vim_up(self) -> None:
        """Move cursor up (vim k key)."""
        widget = self._get_navigable_widget()
        if isinstance(widget, DataTable):
            widget.action_cursor_up()
        elif isinstance(widget, ScrollableContainer):
            widget.scroll_up()

    def action_vim_top(self) -> None:
        """Jump to first item (vim g)."""
        widget = self._get_navigable_widget()
        if isinstance(widget, DataTable):
            if widget.row_count > 0:
                widget.move_cursor(row=0)
        elif isinstance(widget, ScrollableContainer):
            widget.scroll_home()

    def action_vim_bottom(self) -> None:
        """Jump to last item (vim G)."""
        widget = self._get_navigable_widget()
        if isinstance(widget, DataTable):
            if widget.row_count > 0:
                widget.move_cursor(row=widget.row_count - 1)
        elif isinstance(widget, ScrollableContainer):
            widget.scroll_end()
