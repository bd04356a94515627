"""Overlay visibility controller.

Hides who owns the "is the overlay visible" flag. The state value lives in
one controller and is handed to collaborators by reference; transitions are
announced through the event channel, once per actual change.
"""

from collections.abc import Callable
from dataclasses import dataclass

from .events import OverlayEvent, OverlayHidden, OverlayShown


@dataclass
class OverlayState:
    """Visibility of the overlay."""

    visible: bool = False


class OverlayController:
    """Owns the overlay state and emits show/hide events.

    Example:
        controller = OverlayController(on_event=app.handle_overlay_event)
        controller.toggle()  # emits OverlayShown
        controller.toggle()  # emits OverlayHidden
    """

    def __init__(
        self,
        state: OverlayState | None = None,
        on_event: Callable[[OverlayEvent], None] | None = None,
    ) -> None:
        self.state = state if state is not None else OverlayState()
        self._on_event = on_event

    def set_listener(self, on_event: Callable[[OverlayEvent], None] | None) -> None:
        self._on_event = on_event

    @property
    def visible(self) -> bool:
        return self.state.visible

    def _emit(self, event: OverlayEvent) -> None:
        if self._on_event is not None:
            self._on_event(event)

    def show(self) -> bool:
        """Make the overlay visible. Returns True if it changed."""
        if self.state.visible:
            return False
        self.state.visible = True
        self._emit(OverlayShown())
        return True

    def hide(self) -> bool:
        """Dismiss the overlay. Returns True if it changed."""
        if not self.state.visible:
            return False
        self.state.visible = False
        self._emit(OverlayHidden())
        return True

    def toggle(self) -> bool:
        """Flip visibility. Returns the new visibility."""
        if self.state.visible:
            self.hide()
        else:
            self.show()
        return self.state.visible
