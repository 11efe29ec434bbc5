import logging
from pydantic import ValidationError
from config import settings
from constants import AUTOSAVE_TASK
from logic.draft import Draft
from logic.scheduler import Scheduler

logger = logging.getLogger(__name__)


class DraftAutoSaver:
    """Debounced, best-effort persistence of the draft to a draft store.

    A store failure is logged and never reaches the form.
    """

    def __init__(self, store, scheduler: Scheduler, key: str | None = None, delay: float | None = None):
        self.store = store
        self.scheduler = scheduler
        self.key = key or settings.draft_store_key
        self.delay = settings.autosave_delay_seconds if delay is None else delay

    def load(self) -> Draft | None:
        try:
            saved_draft = self.store.get(self.key)
        except Exception as e:
            logger.warning("Could not read saved draft %s: %s", self.key, e)
            return None
        if saved_draft is None:
            return None
        try:
            return Draft.model_validate(saved_draft)
        except ValidationError as e: #stored value from an older or corrupted save
            logger.warning("Ignoring unreadable saved draft %s: %s", self.key, e)
            return None

    def schedule(self, draft: Draft):
        snapshot = draft.model_copy(deep=True) #each change restarts the timer so the last snapshot is the latest draft
        self.scheduler.schedule(AUTOSAVE_TASK, self.delay, lambda: self.save(snapshot), blocking=True)

    def save(self, draft: Draft) -> bool:
        try:
            self.store.set(self.key, draft.model_dump(mode="json"))
        except Exception as e:
            logger.warning("Auto-save of draft %s failed: %s", self.key, e)
            return False
        logger.debug("Draft %s saved", self.key)
        return True

    def flush(self) -> bool: #save a pending change right away
        return self.scheduler.run_now(AUTOSAVE_TASK)

    def cancel(self):
        self.scheduler.cancel(AUTOSAVE_TASK)

    def clear(self):
        self.cancel()
        self.scheduler.call_blocking(self.remove) #queued behind any save already handed to the writer

    def remove(self):
        try:
            self.store.remove(self.key)
        except Exception as e:
            logger.warning("Could not remove saved draft %s: %s", self.key, e)
