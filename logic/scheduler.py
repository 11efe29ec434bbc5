"""Cancellable timed tasks, one active handle per purpose.

Scheduling a task for a purpose that already has one pending cancels the old
one first, which is what makes a debounce: the last schedule wins.

Tasks marked ``blocking`` do I/O (draft store writes). The asyncio scheduler
runs them on a single writer thread so they never stall the event loop and
always land in the order they were dispatched.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

logger = logging.getLogger(__name__)

blocking_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="draft-writer") #one writer keeps saves and removals ordered


class ScheduledTask:
    def __init__(self, purpose: str, due_at: float, callback: Callable[[], None], blocking: bool = False):
        self.purpose = purpose
        self.due_at = due_at
        self.callback = callback
        self.blocking = blocking
        self.cancelled = False
        self.fired = False
        self.handle = None #set by schedulers that arm a real timer

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self):
        self.cancelled = True
        if self.handle is not None:
            self.handle.cancel()

    def run(self):
        if not self.pending:
            return
        self.fired = True
        self.callback()


class Scheduler(ABC):
    def __init__(self):
        self.tasks: dict[str, ScheduledTask] = {}

    @abstractmethod
    def now(self) -> float:
        ...

    @abstractmethod
    def _arm(self, task: ScheduledTask, delay: float):
        ...

    def schedule(self, purpose: str, delay: float, callback: Callable[[], None], blocking: bool = False) -> ScheduledTask:
        self.cancel(purpose)
        task = ScheduledTask(purpose, self.now() + delay, callback, blocking)
        self.tasks[purpose] = task
        self._arm(task, delay)
        return task

    def call_blocking(self, callback: Callable[[], None]): #run I/O now, off the loop where the scheduler has one
        callback()

    def cancel(self, purpose: str):
        task = self.tasks.pop(purpose, None)
        if task is not None and task.pending:
            task.cancel()

    def cancel_all(self):
        for purpose in list(self.tasks):
            self.cancel(purpose)

    def pending(self, purpose: str) -> ScheduledTask | None:
        task = self.tasks.get(purpose)
        if task is not None and task.pending:
            return task
        return None

    def run_now(self, purpose: str) -> bool: #fires a pending task early, returns False if nothing was pending
        task = self.pending(purpose)
        if task is None:
            return False
        if task.handle is not None:
            task.handle.cancel()
        self._fire(task)
        return True

    def _fire(self, task: ScheduledTask):
        if self.tasks.get(task.purpose) is task:
            del self.tasks[task.purpose]
        self._run(task)

    def _run(self, task: ScheduledTask):
        task.run()


class VirtualScheduler(Scheduler):
    """Scheduler on a manual clock; time only moves when advance() is called.

    Blocking tasks run inline, which keeps tests deterministic.
    """

    def __init__(self, start: float = 0.0):
        super().__init__()
        self.clock = start

    def now(self) -> float:
        return self.clock

    def _arm(self, task: ScheduledTask, delay: float):
        pass

    def advance(self, seconds: float):
        target = self.clock + seconds
        while True:
            due_tasks = [task for task in self.tasks.values() if task.pending and task.due_at <= target]
            if not due_tasks:
                break
            task = min(due_tasks, key=lambda t: t.due_at) #fire in due order, callbacks may schedule more tasks
            self.clock = task.due_at
            self._fire(task)
        self.clock = target


class AsyncioScheduler(Scheduler):
    def __init__(self, loop: asyncio.AbstractEventLoop | None = None, executor: ThreadPoolExecutor | None = None):
        super().__init__()
        self.loop = loop
        self.executor = executor or blocking_executor

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        try:
            self.loop = asyncio.get_running_loop()
        except RuntimeError: #called outside a coroutine, fall back to the last loop seen
            if self.loop is None:
                raise
        return self.loop

    def now(self) -> float:
        return self._get_loop().time()

    def _arm(self, task: ScheduledTask, delay: float):
        task.handle = self._get_loop().call_later(delay, self._fire_logged, task)

    def _run(self, task: ScheduledTask):
        if not task.blocking:
            task.run()
            return
        if not task.pending:
            return
        task.fired = True
        self.call_blocking(task.callback, task.purpose)

    def call_blocking(self, callback: Callable[[], None], purpose: str = "blocking call"):
        future = self.executor.submit(callback)
        future.add_done_callback(lambda done: self._log_failure(done, purpose))
        return future

    def _log_failure(self, future: Future, purpose: str):
        exc = future.exception()
        if exc is not None:
            logger.error("Scheduled task %s failed: %s", purpose, exc, exc_info=exc)

    def _fire_logged(self, task: ScheduledTask):
        try:
            self._fire(task)
        except Exception:
            logger.exception("Scheduled task %s failed", task.purpose) #a timer callback has no caller to propagate to
