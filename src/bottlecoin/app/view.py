"""
Loading / content view state.

The page has two elements the pipeline toggles, ``loader`` and ``content``,
plus an ``error`` element for failed runs.  ``LoadingView`` is the state
machine; ``UiSignals`` is whatever actually shows and hides elements.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

LOADER = "loader"
CONTENT = "content"
ERROR = "error"


class UiSignals(Protocol):
    def show(self, name: str) -> None:
        ...

    def hide(self, name: str) -> None:
        ...


@dataclass
class RecordingSignals:
    """Keeps element visibility in memory and records every toggle."""
    visible: dict[str, bool] = field(default_factory=dict)
    history: list[tuple[str, str]] = field(default_factory=list)

    def show(self, name: str) -> None:
        self.visible[name] = True
        self.history.append(("show", name))

    def hide(self, name: str) -> None:
        self.visible[name] = False
        self.history.append(("hide", name))

    def is_visible(self, name: str) -> bool:
        return self.visible.get(name, False)


class ViewState(enum.Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class LoadingView:
    def __init__(self, signals: UiSignals) -> None:
        self.signals = signals
        self.state = ViewState.LOADING
        self.error: Optional[BaseException] = None
        self.ready_count = 0
        self._apply(show=(LOADER,), hide=(CONTENT, ERROR))

    def _apply(self, show: tuple[str, ...], hide: tuple[str, ...]) -> None:
        for name in hide:
            self.signals.hide(name)
        for name in show:
            self.signals.show(name)

    def enter_loading(self) -> None:
        self.state = ViewState.LOADING
        self.error = None
        self._apply(show=(LOADER,), hide=(CONTENT, ERROR))

    def enter_ready(self) -> None:
        self.state = ViewState.READY
        self.ready_count += 1
        self._apply(show=(CONTENT,), hide=(LOADER, ERROR))

    def enter_error(self, error: BaseException) -> None:
        logger.debug("view entering error state: %s", error)
        self.state = ViewState.ERROR
        self.error = error
        self._apply(show=(ERROR,), hide=(LOADER, CONTENT))


__all__ = [
    "CONTENT",
    "ERROR",
    "LOADER",
    "LoadingView",
    "RecordingSignals",
    "UiSignals",
    "ViewState",
]
