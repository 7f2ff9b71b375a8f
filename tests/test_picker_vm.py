"""Tests for the prior-text picker view-model."""

from __future__ import annotations

from pathlib import Path

import pytest

from app.viewmodels.picker_vm import HistoryPickerVM
from app.viewmodels.session_vm import PhotoSessionVM
from core.models import HISTORY_PLACEHOLDER


@pytest.fixture
def loaded(session: PhotoSessionVM, photo_dir: Path) -> PhotoSessionVM:
    session.load_folder(str(photo_dir))
    for text in ("Harbor", "Old bridge", "Market square"):
        session.edit_draft(text)
        session.save()
    return session


def test_initial_list_has_only_placeholder(session: PhotoSessionVM):
    picker = HistoryPickerVM(session)

    assert picker.items == [HISTORY_PLACEHOLDER]
    assert picker.selected is HISTORY_PLACEHOLDER


def test_save_refreshes_list_and_resets_selection(loaded: PhotoSessionVM):
    picker = HistoryPickerVM(loaded)
    picker.select("Harbor")

    loaded.edit_draft("Lighthouse")
    loaded.save()

    assert picker.items == [
        HISTORY_PLACEHOLDER,
        "Lighthouse",
        "Market square",
        "Old bridge",
        "Harbor",
    ]
    assert picker.selected is HISTORY_PLACEHOLDER


def test_filter_change_resets_selection(loaded: PhotoSessionVM):
    picker = HistoryPickerVM(loaded)
    picker.select("Harbor")

    picker.set_filter("BRIDGE")

    assert picker.items == [HISTORY_PLACEHOLDER, "Old bridge"]
    assert picker.selected is HISTORY_PLACEHOLDER


def test_selecting_entry_copies_into_draft(loaded: PhotoSessionVM):
    picker = HistoryPickerVM(loaded)

    assert picker.select("Harbor") is True

    assert loaded.draft_text == "Harbor"
    assert loaded.dirty is (loaded.saved_text != "Harbor")


def test_selecting_placeholder_is_noop(loaded: PhotoSessionVM):
    picker = HistoryPickerVM(loaded)
    draft = loaded.draft_text

    assert picker.select(HISTORY_PLACEHOLDER) is False
    assert picker.select_index(0) is False
    assert loaded.draft_text == draft


def test_reselecting_same_value_does_not_fire_again(loaded: PhotoSessionVM):
    picker = HistoryPickerVM(loaded)
    picker.select("Harbor")
    loaded.edit_draft("typed over")

    assert picker.select("Harbor") is False
    assert loaded.draft_text == "typed over"


def test_pick_after_filter_needs_new_selection(loaded: PhotoSessionVM):
    picker = HistoryPickerVM(loaded)
    picker.select("Harbor")
    loaded.edit_draft("typed over")
    picker.set_filter("")

    assert picker.select("Harbor") is True
    assert loaded.draft_text == "Harbor"


def test_select_unknown_value_raises(loaded: PhotoSessionVM):
    picker = HistoryPickerVM(loaded)
    picker.set_filter("market")

    with pytest.raises(ValueError):
        picker.select("Harbor")


def test_select_index(loaded: PhotoSessionVM):
    picker = HistoryPickerVM(loaded)

    assert picker.select_index(2) is True
    assert loaded.draft_text == "Old bridge"
