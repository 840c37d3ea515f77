"""
Dual Pane Mixin for left/right panel switching functionality.

Provides consistent panel switching behavior for the annotation screen:
- action_switch_panel(): Toggle between left and right panels
- action_vim_left(): Switch focus to left panel (vim h key)
- action_vim_right(): Switch focus to right panel (vim l key)
- action_show_field_detail(): Open the active panel's field in a modal
- _update_panel_styles(): Update active/inactive CSS classes on panels

Subclasses implement _focus_active_widget() and _field_modal().
"""

from __future__ import annotations

from textual.binding import Binding
from textual.screen import ModalScreen


class DualPaneMixin:
    """Mixin for screens with left/right panel switching.

    IMPORTANT: This mixin MUST come before VimNavigationMixin in the
    inheritance order so that h/l keys switch panels instead of doing nothing.

    Class Attributes:
        DUAL_PANE_BINDINGS: All bindings for dual-pane screens (includes
            vim j/k/g/G navigation plus panel switching).
    """

    DUAL_PANE_BINDINGS = [
        # Vim navigation (j/k/g/G from VimNavigationMixin)
        Binding("j", "vim_down", "Down", show=False),
        Binding("k", "vim_up", "Up", show=False),
        Binding("g", "vim_top", "Top", show=False),
        Binding("G", "vim_bottom", "Bottom", show=False),
        # Panel switching
        Binding("h", "vim_left", "Left Panel", show=False),
        Binding("l", "vim_right", "Right Panel", show=False),
        Binding("tab", "switch_panel", "Switch Panel", show=True),
        # Common actions
        Binding("escape", "go_back", "Back", show=True),
        Binding("b", "go_back", "Back", show=False),
        Binding("q", "quit", "Quit", show=False),
        Binding("m", "show_field_detail", "View Field", show=True),
    ]

    _active_panel: str = "left"
    """Currently active panel identifier ('left' or 'right')."""

    @property
    def is_left_active(self) -> bool:
        return self._active_panel == "left"

    @property
    def is_right_active(self) -> bool:
        return self._active_panel == "right"

    def action_switch_panel(self) -> None:
        """Toggle between left and right panels."""
        self._active_panel = "right" if self._active_panel == "left" else "left"
        self._update_panel_styles()
        self._focus_active_widget()

    def action_vim_left(self) -> None:
        """Switch to left panel (vim h key)."""
        if self._active_panel != "left":
            self._active_panel = "left"
            self._update_panel_styles()
        self._focus_active_widget()

    def action_vim_right(self) -> None:
        """Switch to right panel (vim l key)."""
        if self._active_panel != "right":
            self._active_panel = "right"
            self._update_panel_styles()
        self._focus_active_widget()

    def action_go_back(self) -> None:
        """Pop the screen. Subclasses may override for extra steps."""
        self.app.pop_screen()

    def action_quit(self) -> None:
        """Exit the application."""
        self.app.exit()

    def action_show_field_detail(self) -> None:
        """Show the active panel's field in full in a modal."""
        self.app.push_screen(self._field_modal())

    def _update_panel_styles(self) -> None:
        """Update active/inactive CSS classes on #left-panel and #right-panel."""
        try:
            left = self.query_one("#left-panel")
            right = self.query_one("#right-panel")
        except Exception:
            return

        for panel, is_active in [(left, self.is_left_active), (right, self.is_right_active)]:
            if is_active:
                panel.remove_class("inactive")
                panel.add_class("active")
            else:
                panel.remove_class("active")
                panel.add_class("inactive")

    def _focus_active_widget(self) -> None:
        """Focus the appropriate widget in the active panel."""
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement _focus_active_widget()"
        )

    def _field_modal(self) -> ModalScreen:
        """Build the modal that shows the active panel's field."""
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement _field_modal()"
        )
