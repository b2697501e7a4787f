"""Add/edit form logic for a single note.

The controller holds the two text fields, validates them and routes the
write to the record store. Rendering is left to whichever UI drives it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from notes.models import Note, NoteDraft, now_timestamp
from notes.store import RecordStore

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "Title & description required"
MISSING_MESSAGE = "Note no longer exists"


@dataclass
class FormResult:
    """Outcome of closing the form.

    ``changed`` tells the list whether it needs to reload.
    """

    changed: bool
    note: Optional[Note] = None
    message: Optional[str] = None


class NoteFormController:
    """Validates and saves a new note, or edits an existing one."""

    def __init__(self, store: RecordStore, note: Optional[Note] = None) -> None:
        self._store = store
        self._id = note.id if note is not None else None
        self.draft = NoteDraft(
            title=note.title if note is not None else "",
            description=note.description if note is not None else "",
        )

    @property
    def id(self) -> Optional[int]:
        return self._id

    @property
    def is_editing(self) -> bool:
        """Whether the form edits a stored note rather than adding one."""
        return self._id is not None

    @property
    def screen_title(self) -> str:
        return "Edit Note" if self.is_editing else "Add Note"

    @property
    def action_label(self) -> str:
        return "Update Note" if self.is_editing else "Add Note"

    @property
    def title(self) -> str:
        return self.draft.title

    @title.setter
    def title(self, value: str) -> None:
        self.draft.title = value

    @property
    def description(self) -> str:
        return self.draft.description

    @description.setter
    def description(self, value: str) -> None:
        self.draft.description = value

    def validate(self) -> Optional[str]:
        """Return a user-facing message if the form cannot be saved."""
        if not self.draft.is_complete:
            return REQUIRED_MESSAGE
        return None

    async def submit(self) -> FormResult:
        """Validate and write the note.

        Nothing is written when validation fails. Store errors propagate
        to the caller.
        """
        message = self.validate()
        if message:
            logger.info("Note form rejected: %s", message)
            return FormResult(changed=False, message=message)

        note = Note(
            id=self._id,
            title=self.draft.title,
            description=self.draft.description,
            time=now_timestamp(),
        )
        saved = await self._store.save(note)
        if saved is None:
            # Deleted elsewhere; the list still needs to drop the stale row
            logger.info("Note %s vanished before update", self._id)
            return FormResult(changed=True, message=MISSING_MESSAGE)
        self._id = saved.id
        return FormResult(changed=True, note=saved)

    def cancel(self) -> FormResult:
        """Leave the form without saving."""
        return FormResult(changed=False)
