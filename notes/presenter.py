"""Note list state: loading, rendering rows, delete and refresh."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from notes.errors import StoreError
from notes.form import FormResult, NoteFormController
from notes.models import Note
from notes.store import RecordStore

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No notes yet"

# Soft card colors: every channel between 180 and 230
_COLOR_MIN = 180
_COLOR_MAX = 230


class ListState(str, Enum):
    """What the list screen should currently show."""

    PENDING = "pending"
    LOADED = "loaded"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class NoteRow:
    """A note as displayed in the list."""

    note: Note
    color: tuple[int, int, int]

    @property
    def date_label(self) -> str:
        return self.note.date


def random_dim_color(rng: random.Random | None = None) -> tuple[int, int, int]:
    """Random light RGB color. Cosmetic only, never persisted."""
    rng = rng or random
    return (
        rng.randint(_COLOR_MIN, _COLOR_MAX),
        rng.randint(_COLOR_MIN, _COLOR_MAX),
        rng.randint(_COLOR_MIN, _COLOR_MAX),
    )


class ListPresenter:
    """Loads notes from the store and dispatches list actions back to it."""

    def __init__(self, store: RecordStore, rng: random.Random | None = None) -> None:
        self._store = store
        self._rng = rng
        self.state = ListState.PENDING
        self.rows: list[NoteRow] = []
        self.error: Optional[str] = None

    @property
    def message(self) -> Optional[str]:
        """Placeholder text for the empty and error states."""
        if self.state is ListState.EMPTY:
            return EMPTY_MESSAGE
        if self.state is ListState.ERROR:
            return self.error
        return None

    async def refresh(self) -> None:
        """Reload every note from the store."""
        self.state = ListState.PENDING
        self.error = None
        try:
            notes = await self._store.query_all()
        except StoreError as e:
            logger.warning("Failed to load notes: %s", e)
            self.rows = []
            self.error = str(e)
            self.state = ListState.ERROR
            return

        self.rows = [NoteRow(note=n, color=random_dim_color(self._rng)) for n in notes]
        self.state = ListState.LOADED if self.rows else ListState.EMPTY
        logger.info("Loaded %d notes", len(self.rows))

    async def delete(self, note_id: int) -> None:
        """Delete a note, then reload the list."""
        try:
            await self._store.delete(note_id)
        except StoreError as e:
            logger.warning("Failed to delete note %s: %s", note_id, e)
            self.error = str(e)
            self.state = ListState.ERROR
            return
        await self.refresh()

    def add_form(self) -> NoteFormController:
        """Form for a new note."""
        return NoteFormController(self._store)

    def edit_form(self, row: NoteRow) -> NoteFormController:
        """Form pre-filled with the row's note."""
        return NoteFormController(self._store, row.note)

    async def on_form_closed(self, result: FormResult) -> None:
        """Reload only if the form saved something."""
        if result.changed:
            await self.refresh()
