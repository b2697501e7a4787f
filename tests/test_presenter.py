"""Unit tests for notes.presenter — note list state."""

from __future__ import annotations

import random
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from notes.errors import ReadError, WriteError
from notes.form import FormResult
from notes.models import Note, now_timestamp
from notes.presenter import EMPTY_MESSAGE, ListPresenter, ListState, random_dim_color
from notes.store import RecordStore


@pytest_asyncio.fixture()
async def store(tmp_path: Path):
    s = RecordStore(db_path=tmp_path / "notes.db")
    yield s
    await s.close()


class TestRandomColor:
    def test_channels_in_range(self):
        rng = random.Random(0)
        for _ in range(100):
            color = random_dim_color(rng)
            assert len(color) == 3
            assert all(180 <= c <= 230 for c in color)


class TestRefresh:
    def test_initially_pending(self):
        presenter = ListPresenter(AsyncMock(spec=RecordStore))
        assert presenter.state is ListState.PENDING
        assert presenter.rows == []

    @pytest.mark.asyncio
    async def test_empty(self, store: RecordStore):
        presenter = ListPresenter(store)
        await presenter.refresh()
        assert presenter.state is ListState.EMPTY
        assert presenter.message == EMPTY_MESSAGE

    @pytest.mark.asyncio
    async def test_loaded_rows_newest_first(self, store: RecordStore):
        await store.insert("A", "a", "2024-03-01T10:00:00+00:00")
        await store.insert("B", "b", "2024-03-02T10:00:00+00:00")

        presenter = ListPresenter(store, rng=random.Random(1))
        await presenter.refresh()

        assert presenter.state is ListState.LOADED
        assert presenter.message is None
        assert [r.note.title for r in presenter.rows] == ["B", "A"]
        assert presenter.rows[0].date_label == "2024-03-02"

    @pytest.mark.asyncio
    async def test_read_error_sets_error_state(self):
        store = AsyncMock(spec=RecordStore)
        store.query_all.side_effect = ReadError("no such table")

        presenter = ListPresenter(store)
        await presenter.refresh()

        assert presenter.state is ListState.ERROR
        assert presenter.message == "no such table"
        assert presenter.rows == []


class TestActions:
    @pytest.mark.asyncio
    async def test_delete_then_refresh(self, store: RecordStore):
        keep = await store.insert("Keep", "k", now_timestamp())
        gone = await store.insert("Gone", "g", now_timestamp())
        presenter = ListPresenter(store)
        await presenter.refresh()

        await presenter.delete(gone)

        assert [r.note.id for r in presenter.rows] == [keep]

    @pytest.mark.asyncio
    async def test_delete_last_note_empties_list(self, store: RecordStore):
        note_id = await store.insert("Only", "o", now_timestamp())
        presenter = ListPresenter(store)
        await presenter.refresh()

        await presenter.delete(note_id)

        assert presenter.state is ListState.EMPTY

    @pytest.mark.asyncio
    async def test_delete_error_sets_error_state(self):
        store = AsyncMock(spec=RecordStore)
        store.delete.side_effect = WriteError("locked")

        presenter = ListPresenter(store)
        await presenter.delete(1)

        assert presenter.state is ListState.ERROR
        store.query_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_form_changed_triggers_refresh(self):
        store = AsyncMock(spec=RecordStore)
        store.query_all.return_value = []
        presenter = ListPresenter(store)

        await presenter.on_form_closed(FormResult(changed=True))

        store.query_all.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_form_unchanged_skips_refresh(self):
        store = AsyncMock(spec=RecordStore)
        presenter = ListPresenter(store)

        await presenter.on_form_closed(FormResult(changed=False))

        store.query_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_add_then_edit_round_trip(self, store: RecordStore):
        presenter = ListPresenter(store)

        form = presenter.add_form()
        form.title = "Milk"
        form.description = "Buy 2%"
        await presenter.on_form_closed(await form.submit())
        assert [r.note.title for r in presenter.rows] == ["Milk"]

        edit = presenter.edit_form(presenter.rows[0])
        assert edit.is_editing
        edit.description = "Buy whole"
        await presenter.on_form_closed(await edit.submit())

        [row] = presenter.rows
        assert row.note == Note(
            id=1, title="Milk", description="Buy whole", time=row.note.time
        )
