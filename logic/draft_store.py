from datetime import datetime
from sqlalchemy.engine import Engine
from sqlmodel import Session
from database.models import DraftRecord


class MemoryDraftStore: #key-value store held in process memory
    def __init__(self):
        self.values: dict[str, dict] = {}

    def get(self, key: str) -> dict | None:
        return self.values.get(key)

    def set(self, key: str, value: dict):
        self.values[key] = value

    def remove(self, key: str):
        self.values.pop(key, None)


class SqlDraftStore: #key-value store persisted in dph_drafts, scoped to one browser or client
    def __init__(self, engine: Engine, scope: str):
        self.engine = engine
        self.scope = scope

    def get(self, key: str) -> dict | None:
        with Session(self.engine) as session:
            record = session.get(DraftRecord, (self.scope, key))
            return record.value if record else None

    def set(self, key: str, value: dict):
        with Session(self.engine) as session:
            record = session.get(DraftRecord, (self.scope, key))
            if record:
                record.value = value
                record.updated_at = datetime.now()
            else:
                record = DraftRecord(scope=self.scope, key=key, value=value)
            session.add(record)
            session.commit()

    def remove(self, key: str):
        with Session(self.engine) as session:
            record = session.get(DraftRecord, (self.scope, key))
            if record:
                session.delete(record)
                session.commit()
