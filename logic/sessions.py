import logging
import time
from collections import OrderedDict
from typing import Callable
from uuid import UUID, uuid4
from config import settings
from logic.form import ProjectForm

logger = logging.getLogger(__name__)


class FormSessionEntry:
    def __init__(self, form: ProjectForm, scope: str, last_seen: float):
        self.form = form
        self.scope = scope
        self.last_seen = last_seen


class FormSessionRegistry:
    """Open form sessions, least recently used first.

    Sessions go away when abandoned, when idle longer than ``idle_seconds``,
    when the registry grows past ``max_sessions``, and right after a dismissed
    form has been handed out one last time.
    """

    def __init__(self, idle_seconds: float | None = None, max_sessions: int | None = None, clock: Callable[[], float] = time.monotonic):
        self.idle_seconds = settings.form_idle_seconds if idle_seconds is None else idle_seconds
        self.max_sessions = settings.max_form_sessions if max_sessions is None else max_sessions
        self.clock = clock
        self.entries: OrderedDict[UUID, FormSessionEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, form_id: UUID) -> bool:
        return form_id in self.entries

    def add(self, form: ProjectForm, scope: str) -> UUID:
        self.evict_idle()
        form_id = uuid4()
        self.entries[form_id] = FormSessionEntry(form, scope, self.clock())
        while len(self.entries) > self.max_sessions:
            oldest_id = next(iter(self.entries))
            logger.info("Form session limit reached, evicting %s", oldest_id)
            self.remove(oldest_id)
        return form_id

    def get(self, form_id: UUID, scope: str | None) -> ProjectForm | None:
        self.evict_idle()
        entry = self.entries.get(form_id)
        if entry is None or entry.scope != scope: #forms are only visible to the browser or client that opened them
            return None
        if entry.form.next_view is not None: #dismissed, this is the last time the form is handed out
            del self.entries[form_id]
            return entry.form
        entry.last_seen = self.clock()
        self.entries.move_to_end(form_id)
        return entry.form

    def remove(self, form_id: UUID) -> ProjectForm | None:
        entry = self.entries.pop(form_id, None)
        if entry is None:
            return None
        entry.form.autosaver.flush() #keep the last edits for the next visit
        entry.form.scheduler.cancel_all()
        return entry.form

    def evict_idle(self):
        cutoff = self.clock() - self.idle_seconds
        while self.entries:
            form_id, entry = next(iter(self.entries.items()))
            if entry.last_seen > cutoff:
                break
            logger.info("Evicting idle form session %s", form_id)
            self.remove(form_id)
