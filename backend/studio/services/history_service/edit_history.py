"""Linear undo/redo history of edit results for one studio session."""

from typing import List

from studio.handlers.error_handler import ValidationError
from studio.models.edit_image import EditHistoryView
from studio.models.image import DataUrl
from studio.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

# Cursor -1: the unedited source image, which is not stored in the entries.
ORIGINAL_IMAGE = "original"


class EditHistoryController:
    """Owns the ordered edit results and the cursor pointing at the one on display.

    Committing after an undo discards the abandoned redo branch.
    Undo, redo and jumps only move the cursor; entries change on commit or reset.
    """

    def __init__(self) -> None:
        self.entries: List[DataUrl] = []
        self.cursor: int = -1

    def reset(self) -> None:
        """Forget every edit; called when a new source image is uploaded."""
        self.entries = []
        self.cursor = -1

    def commit(self, data_url: DataUrl) -> None:
        """Append an edit result after the cursor, truncating any redo branch."""
        dropped = len(self.entries) - (self.cursor + 1)
        if dropped:
            logger.info(f"Discarding {dropped} redo entries")
        self.entries = self.entries[: self.cursor + 1] + [data_url]
        self.cursor = len(self.entries) - 1

    @property
    def can_undo(self) -> bool:
        return self.cursor > -1

    @property
    def can_redo(self) -> bool:
        return self.cursor < len(self.entries) - 1

    def undo(self) -> None:
        if self.can_undo:
            self.cursor -= 1

    def redo(self) -> None:
        if self.can_redo:
            self.cursor += 1

    def jump_to(self, index: int) -> None:
        """Point the cursor at ``index``; -1 selects the original image."""
        if not -1 <= index <= len(self.entries) - 1:
            raise ValidationError(
                f"History index {index} is out of range [-1, {len(self.entries) - 1}]."
            )
        self.cursor = index

    def current(self) -> DataUrl:
        """The displayed edit result, or ORIGINAL_IMAGE at cursor -1."""
        if self.cursor > -1:
            return self.entries[self.cursor]
        return ORIGINAL_IMAGE

    def snapshot(self) -> EditHistoryView:
        return EditHistoryView(
            entries=list(self.entries),
            cursor=self.cursor,
            can_undo=self.can_undo,
            can_redo=self.can_redo,
            viewing_original=self.cursor == -1,
        )
