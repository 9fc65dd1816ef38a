"""
Session orchestration for Jotter.

Sequences a save into a durable write followed by a fresh read and render:
write, clear input and draft, reload, render. The displayed list is only ever
built from what the store returns, never from an optimistic local insert.

Failures during a save or a sort change are reported through ``notify`` and
the log, and never clear the user's typed text. Opening a session (start,
login) lets ReadFailed reach the caller instead.
"""

import logging
from datetime import timedelta
from enum import Enum
from typing import Any, Callable

from jotter.config import load_config
from jotter.db import NoteStore
from jotter.debounce import Debouncer
from jotter.errors import ReadFailed, WriteFailed
from jotter.models import DEFAULT_DIRECTIVE, SortDirective
from jotter.state import DraftCache, KeyValueStore, LoginGate, SortPreferenceStore
from jotter.surfacing import DisplayList, render_notes, sort_notes

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Add note to save!"


class SaveOutcome(str, Enum):
    """Result of a save action."""

    SAVED = "saved"
    EMPTY_INPUT = "empty_input"
    FAILED = "failed"


class InputField:
    """The single text input the user types notes into."""

    def __init__(self, value: str = ""):
        self.value = value

    def clear(self) -> None:
        self.value = ""


def log_notice(message: str) -> None:
    """Default notifier: user-visible notices go to the log."""
    logger.warning(message)


class NoteSession:
    """Coordinates the note store, the sort-and-render pipeline and widget state."""

    def __init__(
        self,
        store: NoteStore | None = None,
        kv: KeyValueStore | None = None,
        config: dict[str, Any] | None = None,
        notify: Callable[[str], None] = log_notice,
    ):
        self.config = config or load_config()
        self.store = store or NoteStore()
        kv = kv or KeyValueStore()

        ttl = timedelta(days=self.config["session"]["login_ttl_days"])
        self.login_gate = LoginGate(kv, ttl=ttl)
        self.drafts = DraftCache(kv)
        self.sort_preference = SortPreferenceStore(kv)

        self.input = InputField()
        self.display = DisplayList()
        # A stored value outside SortDirective is kept and sorts nothing
        self.directive: SortDirective | str = DEFAULT_DIRECTIVE
        self.visible = False
        self.last_saved_id: int | None = None
        self.notify = notify

        self._draft_saver = Debouncer(
            self.save_draft, float(self.config["drafts"]["debounce_seconds"])
        )

    async def start(self) -> bool:
        """
        Open the store and restore the widget if the login flag is set.

        StorageUnavailable propagates: without a database there is no session.
        ReadFailed propagates too, so callers never show an unread list as
        empty. Returns whether the note list is visible.
        """
        await self.store.open()

        if not self.login_gate.is_logged_in():
            self.visible = False
            return False

        self.visible = True
        if draft := self.drafts.get():
            self.input.value = draft
        self.directive = self.sort_preference.get()
        await self.refresh()
        return True

    async def login(self) -> None:
        """Set the login flag and show the list. Raises ReadFailed."""
        self.login_gate.login()
        self.visible = True
        await self.refresh()

    async def logout(self) -> None:
        """Clear the login flag, the input, the draft and the sort preference."""
        self.login_gate.logout()
        self._draft_saver.cancel()
        self.input.clear()
        self.drafts.clear()
        self.sort_preference.clear()
        self.directive = DEFAULT_DIRECTIVE
        self.visible = False

    async def save(self, raw_input: str | None = None) -> SaveOutcome:
        """
        Save a note.

        Uses the input field's value when ``raw_input`` is None. Blank input
        is rejected before reaching storage. On a failed write the input,
        the draft and the display are left exactly as they were.
        """
        text = self.input.value if raw_input is None else raw_input
        content = text.strip()

        if not content:
            self.notify(EMPTY_INPUT_MESSAGE)
            return SaveOutcome.EMPTY_INPUT

        try:
            note_id = await self.store.create(content)
        except WriteFailed as e:
            logger.error("Save failed: %s", e)
            self.notify(f"Could not save note: {e}")
            return SaveOutcome.FAILED

        logger.info("Saved note %d", note_id)
        self.last_saved_id = note_id

        self.input.clear()
        # A pending draft write would bring back the text just saved
        self._draft_saver.cancel()
        self.drafts.clear()

        await self._reload()
        return SaveOutcome.SAVED

    async def change_sort(self, directive: SortDirective) -> None:
        """Persist the chosen directive and re-render with it."""
        self.directive = SortDirective(directive)
        self.sort_preference.set(self.directive)
        await self._reload()

    async def refresh(self, directive: SortDirective | str | None = None) -> DisplayList:
        """Read every note, sort it and render it. Raises ReadFailed."""
        notes = await self.store.list_all()
        ordered = sort_notes(notes, self.directive if directive is None else directive)
        return render_notes(ordered, self.display)

    def on_input(self, text: str) -> None:
        """Record typed text and schedule a debounced draft save."""
        self.input.value = text
        self._draft_saver()

    def save_draft(self) -> None:
        """Write the current input to the draft cache (empty input removes it)."""
        self.drafts.save(self.input.value)

    def flush_draft(self) -> None:
        """Write a pending draft immediately instead of waiting out the delay."""
        if self._draft_saver.pending:
            self._draft_saver.cancel()
            self.save_draft()

    def close(self) -> None:
        """Cancel pending draft writes and release the store."""
        self._draft_saver.cancel()
        self.store.close()

    async def _reload(self) -> bool:
        """Refresh, reporting a read failure instead of raising it."""
        try:
            await self.refresh()
        except ReadFailed as e:
            logger.error("Refresh failed: %s", e)
            self.notify(f"Could not load notes: {e}")
            return False
        return True
