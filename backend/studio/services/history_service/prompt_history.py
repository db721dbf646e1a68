"""Bounded, de-duplicated prompt history navigable like a shell history."""

from typing import List

from studio.models.generate import PromptHistoryView

MAX_PROMPT_HISTORY = 50


class PromptHistoryController:
    """Remembers submitted prompts, most recent first, and a browsing cursor.

    Cursor -1 means the box shows what the user is typing (``pending_text``).
    Cursor k shows ``entries[k]``; moving older walks towards the end of the list.
    Resubmitting a prompt moves it to the front instead of duplicating it.
    """

    def __init__(self, max_entries: int = MAX_PROMPT_HISTORY) -> None:
        self.max_entries = max_entries
        self.entries: List[str] = []
        self.cursor: int = -1
        self.pending_text: str = ""

    @property
    def display(self) -> str:
        """The text the prompt box currently shows."""
        if self.cursor > -1:
            return self.entries[self.cursor]
        return self.pending_text

    def submit(self, text: str) -> None:
        """Record a successfully submitted prompt."""
        trimmed = (text or "").strip()
        if not trimmed:
            return
        entries = [entry for entry in self.entries if entry != trimmed]
        self.entries = [trimmed, *entries][: self.max_entries]
        self.cursor = -1
        self.pending_text = trimmed

    def on_live_edit(self, text: str) -> None:
        """Track typed text; typing stops history browsing."""
        self.pending_text = text
        self.cursor = -1

    def navigate_older(self) -> str:
        if self.entries and self.cursor < len(self.entries) - 1:
            self.cursor += 1
        return self.display

    def navigate_newer(self) -> str:
        if self.cursor > -1:
            self.cursor -= 1
        return self.display

    def snapshot(self) -> PromptHistoryView:
        return PromptHistoryView(
            entries=list(self.entries),
            cursor=self.cursor,
            pending_text=self.pending_text,
            display=self.display,
        )
