import os
import tempfile

#point the app at a throwaway SQLite file before main/config are imported by any test module
TEST_DB_DIR = tempfile.mkdtemp(prefix="dph-portal-tests-")
os.environ["DPH_DATABASE_URL"] = f"sqlite:///{os.path.join(TEST_DB_DIR, 'test_database.db')}"

import asyncio
from datetime import datetime
from uuid import uuid4
import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine
from database.models import ProjectRead
from errors import GatewayError
from logic.autosave import DraftAutoSaver
from logic.draft_store import MemoryDraftStore
from logic.form import ProjectForm
from logic.notifications import LoggingNotificationSink
from logic.scheduler import VirtualScheduler

VALID_DESCRIPTION = "We need a dashboard that tracks energy use, waste and carbon emissions for all of our offices."

schedulers = [] #one per form opened through the app, advanced by hand instead of waiting on real timers


def virtual_scheduler():
    scheduler = VirtualScheduler()
    schedulers.append(scheduler)
    return scheduler


class CountingDraftStore(MemoryDraftStore):
    def __init__(self):
        super().__init__()
        self.writes = 0

    def set(self, key, value):
        self.writes += 1
        super().set(key, value)


class FakeGateway:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.created = []
        self.release: asyncio.Event | None = None #set to hold create() open until the test releases it

    async def create(self, record):
        self.created.append(record)
        if self.release is not None:
            await self.release.wait()
        await asyncio.sleep(0)
        if self.fail:
            raise GatewayError("Network request failed")
        now = datetime.now()
        return ProjectRead(id=uuid4(), admin_notes=None, created_at=now, updated_at=now, **record.model_dump())


@pytest.fixture
def engine():
    test_engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def scheduler():
    return VirtualScheduler()


@pytest.fixture
def draft_store():
    return CountingDraftStore()


@pytest.fixture
def notifications():
    return LoggingNotificationSink()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def form(gateway, draft_store, scheduler, notifications):
    autosaver = DraftAutoSaver(draft_store, scheduler, key="clientPortalForm", delay=1.0)
    return ProjectForm(gateway, autosaver, scheduler, notifications, dismiss_delay=3.5)


def fill_valid_draft(form: ProjectForm, walk_steps: bool = True):
    form.update_fields({
        "company_name": "EcoTech Solutions",
        "contact_email": "sarah@ecotech.com",
        "contact_phone": "0917 123 4567",
    })
    if walk_steps:
        assert form.next_step()
    form.update_fields({"project_type": "Sustainability Dashboard", "description": VALID_DESCRIPTION})
    if walk_steps:
        assert form.next_step()
    form.update_fields({"timeline": "3-4 months", "budget_range": "₱150,000 - ₱300,000"})
    if walk_steps:
        assert form.next_step()
