"""Structured runtime state for editor tabs and user settings."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from jsonsmith.core import constants as app_constants


def new_tab_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass(slots=True)
class DocumentTab:
    """One open document; the text is the only persisted state."""

    id: str = field(default_factory=new_tab_id)
    name: str = app_constants.UNTITLED_TAB_NAME
    content: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "content": self.content}


@dataclass(slots=True)
class UserSettings:
    indent_width: int = app_constants.DEFAULT_INDENT_WIDTH
    theme: str = app_constants.THEME_DARK
    font_size: int = app_constants.FONT_SIZE_DEFAULT
    live_feedback_delay_ms: int = app_constants.LIVE_FEEDBACK_DELAY_MS_DEFAULT

    def to_dict(self) -> dict[str, Any]:
        return {
            "indent_width": self.indent_width,
            "theme": self.theme,
            "font_size": self.font_size,
            "live_feedback_delay_ms": self.live_feedback_delay_ms,
        }


@dataclass(slots=True)
class EditorSession:
    """Ordered tabs plus the active one; never empty."""

    tabs: list[DocumentTab] = field(default_factory=lambda: [DocumentTab()])
    active_id: str = ""

    def __post_init__(self) -> None:
        if not self.tabs:
            self.tabs.append(DocumentTab())
        if self.find(self.active_id) is None:
            self.active_id = self.tabs[0].id

    def find(self, tab_id: str) -> Optional[DocumentTab]:
        for tab in self.tabs:
            if tab.id == tab_id:
                return tab
        return None

    def index_of(self, tab_id: str) -> int:
        for idx, tab in enumerate(self.tabs):
            if tab.id == tab_id:
                return idx
        return -1

    @property
    def active_tab(self) -> DocumentTab:
        return self.find(self.active_id) or self.tabs[0]

    def activate(self, tab_id: str) -> DocumentTab:
        tab = self.find(tab_id)
        if tab is not None:
            self.active_id = tab.id
        return self.active_tab

    def add_tab(self, name: str = "", content: str = "") -> DocumentTab:
        tab = DocumentTab(name=str(name or "").strip() or self._next_untitled_name(), content=content)
        self.tabs.append(tab)
        self.active_id = tab.id
        return tab

    def close_tab(self, tab_id: str) -> DocumentTab:
        """Close a tab and return the new active one; the last tab is cleared."""
        idx = self.index_of(tab_id)
        if idx < 0:
            return self.active_tab
        if len(self.tabs) == 1:
            only = self.tabs[0]
            only.name = app_constants.UNTITLED_TAB_NAME
            only.content = ""
            self.active_id = only.id
            return only
        closing_active = self.tabs[idx].id == self.active_id
        del self.tabs[idx]
        if closing_active:
            self.active_id = self.tabs[min(idx, len(self.tabs) - 1)].id
        return self.active_tab

    def rename_tab(self, tab_id: str, name: str) -> bool:
        tab = self.find(tab_id)
        clean = str(name or "").strip()
        if tab is None or not clean:
            return False
        tab.name = clean
        return True

    def update_content(self, tab_id: str, content: str) -> None:
        tab = self.find(tab_id)
        if tab is not None:
            tab.content = str(content or "")

    def _next_untitled_name(self) -> str:
        names = {tab.name for tab in self.tabs}
        base = app_constants.UNTITLED_TAB_NAME
        if base not in names:
            return base
        counter = 2
        while f"{base} {counter}" in names:
            counter += 1
        return f"{base} {counter}"

    def to_dict(self) -> dict[str, Any]:
        return {"tabs": [tab.to_dict() for tab in self.tabs], "active_id": self.active_id}
