import asyncio
import threading
import pytest
from logic.autosave import DraftAutoSaver
from logic.draft import Draft
from logic.draft_store import MemoryDraftStore
from logic.scheduler import AsyncioScheduler, Scheduler, VirtualScheduler


def test_task_fires_once_when_due():
    scheduler = VirtualScheduler()
    fired = []
    scheduler.schedule("ping", 2.0, lambda: fired.append(scheduler.now()))

    scheduler.advance(1.5)
    assert fired == []
    scheduler.advance(0.5)
    assert fired == [2.0]
    scheduler.advance(10)
    assert fired == [2.0]
    assert scheduler.pending("ping") is None


def test_rescheduling_a_purpose_replaces_the_previous_task():
    scheduler = VirtualScheduler()
    fired = []
    scheduler.schedule("save", 1.0, lambda: fired.append("first"))
    scheduler.advance(0.5)
    scheduler.schedule("save", 1.0, lambda: fired.append("second"))

    scheduler.advance(0.75) #the first task would have fired here
    assert fired == []
    scheduler.advance(0.25)
    assert fired == ["second"]


def test_purposes_are_independent():
    scheduler = VirtualScheduler()
    fired = []
    scheduler.schedule("a", 1.0, lambda: fired.append("a"))
    scheduler.schedule("b", 0.5, lambda: fired.append("b"))
    scheduler.cancel("a")

    scheduler.advance(2)
    assert fired == ["b"]


def test_tasks_fire_in_due_order():
    scheduler = VirtualScheduler()
    fired = []
    scheduler.schedule("late", 3.0, lambda: fired.append("late"))
    scheduler.schedule("early", 1.0, lambda: fired.append("early"))

    scheduler.advance(5)
    assert fired == ["early", "late"]


def test_run_now_and_cancel_all():
    scheduler = VirtualScheduler()
    fired = []
    scheduler.schedule("save", 1.0, lambda: fired.append("save"))
    scheduler.schedule("dismiss", 3.5, lambda: fired.append("dismiss"))

    assert scheduler.run_now("save")
    assert not scheduler.run_now("save") #nothing left pending
    scheduler.cancel_all()
    scheduler.advance(10)
    assert fired == ["save"]


@pytest.mark.asyncio
async def test_asyncio_scheduler_debounces_on_the_running_loop():
    scheduler = AsyncioScheduler()
    fired = []
    scheduler.schedule("save", 0.05, lambda: fired.append("first"))
    scheduler.schedule("save", 0.05, lambda: fired.append("second"))

    await asyncio.sleep(0.15)
    assert fired == ["second"]


@pytest.mark.asyncio
async def test_asyncio_scheduler_logs_failing_callbacks(caplog):
    scheduler = AsyncioScheduler()

    def explode():
        raise RuntimeError("boom")

    scheduler.schedule("save", 0.01, explode)
    await asyncio.sleep(0.05)
    assert "Scheduled task save failed" in caplog.text


def test_scheduler_base_is_abstract():
    with pytest.raises(TypeError):
        Scheduler()


def test_virtual_scheduler_runs_blocking_work_inline():
    scheduler = VirtualScheduler()
    fired = []
    scheduler.schedule("save", 1.0, lambda: fired.append("save"), blocking=True)
    scheduler.call_blocking(lambda: fired.append("now"))
    assert fired == ["now"]
    scheduler.advance(1)
    assert fired == ["now", "save"]


@pytest.mark.asyncio
async def test_asyncio_scheduler_runs_blocking_tasks_on_the_writer_thread():
    scheduler = AsyncioScheduler()
    loop_thread = threading.get_ident()
    writer_threads = []
    scheduler.schedule("save", 0.01, lambda: writer_threads.append(threading.get_ident()), blocking=True)

    await asyncio.sleep(0.1)
    assert len(writer_threads) == 1
    assert writer_threads[0] != loop_thread


@pytest.mark.asyncio
async def test_asyncio_autosave_flush_then_clear_leaves_no_draft():
    scheduler = AsyncioScheduler()
    store = MemoryDraftStore()
    autosaver = DraftAutoSaver(store, scheduler, key="clientPortalForm", delay=10)

    autosaver.schedule(Draft(company_name="EcoTech"))
    assert autosaver.flush() #save handed to the writer
    autosaver.clear() #queued behind the save
    await asyncio.get_running_loop().run_in_executor(scheduler.executor, lambda: None) #wait for the writer to drain
    assert store.get("clientPortalForm") is None
