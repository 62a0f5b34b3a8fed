# tests/conftest.py
import asyncio
import copy
import os
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

# Set environment variables for testing
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/shift_tracker_test")
os.environ["SHIFTS_COLLECTION"] = "shifts"

import shift_tracker.db as db_module
from shift_tracker.services.shift_service import ShiftService
from main import app


# In-memory stand-in for the parts of a motor database the service touches
class FakeChangeStream:
    def __init__(self, collection):
        self.collection = collection
        self.queue = asyncio.Queue()

    async def __aenter__(self):
        if self.collection.watch_errors:
            raise self.collection.watch_errors.pop(0)
        self.collection.streams.append(self)
        return self

    async def __aexit__(self, *exc_info):
        self.collection.streams.remove(self)
        return False

    def __aiter__(self):
        return self

    async def __anext__(self):
        return await self.queue.get()


class FakeCursor:
    def __init__(self, documents):
        self.documents = documents

    async def to_list(self, length):
        return self.documents


class FakeCollection:
    def __init__(self, name, database=None):
        self.name = name
        self.documents = {}
        self.streams = []
        self.failures = {}
        self.watch_errors = []
        self.database = database
        self.read_sessions = []

    def _check(self, operation):
        if operation in self.failures:
            raise self.failures[operation]

    def _notify(self, operation_type, key):
        for stream in list(self.streams):
            stream.queue.put_nowait({"operationType": operation_type, "documentKey": {"_id": key}})

    async def find_one(self, filter):
        self._check("find_one")
        document = self.documents.get(filter["_id"])
        return copy.deepcopy(document) if document is not None else None

    def find(self, filter=None, session=None):
        self._check("find")
        self.read_sessions.append(session)
        return FakeCursor([copy.deepcopy(d) for d in self.documents.values()])

    async def find_one_and_update(self, filter, update, upsert=False, return_document=None):
        self._check("find_one_and_update")
        key = filter["_id"]
        existing = self.documents.get(key)
        if existing is None:
            if not upsert:
                return None
            document = {"_id": key, **update.get("$setOnInsert", {})}
            operation_type = "insert"
        else:
            document = dict(existing)
            operation_type = "update"
        document.update(update.get("$set", {}))
        for field in update.get("$unset", {}):
            document.pop(field, None)
        self.documents[key] = document
        self._notify(operation_type, key)
        return copy.deepcopy(document)

    async def delete_one(self, filter):
        self._check("delete_one")
        removed = self.documents.pop(filter["_id"], None)
        if removed is not None:
            self._notify("delete", filter["_id"])
        return SimpleNamespace(deleted_count=1 if removed is not None else 0)

    def watch(self):
        return FakeChangeStream(self)


class FakeSession:
    def __init__(self, snapshot):
        self.snapshot = snapshot
        self.ended = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.ended = True
        return False


class FakeClient:
    def __init__(self):
        self.sessions = []

    async def start_session(self, snapshot=False):
        session = FakeSession(snapshot)
        self.sessions.append(session)
        return session


class FakeDatabase:
    def __init__(self):
        self.collections = {}
        self.ping_error = None
        self.client = FakeClient()

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name, self)
        return self.collections[name]

    async def command(self, name):
        if self.ping_error:
            raise self.ping_error
        return {"ok": 1}


class TickingClock:
    """Hands out strictly increasing timestamps."""

    def __init__(self):
        self.ticks = 0

    def __call__(self):
        self.ticks += 1
        return f"2025-01-01T00:00:{self.ticks:02d}.000000Z"


async def wait_until(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


@pytest.fixture
def fake_db():
    return FakeDatabase()

@pytest.fixture
def clock():
    return TickingClock()

@pytest.fixture
def service(fake_db, clock):
    return ShiftService(fake_db, clock=clock)

@pytest.fixture
def client(fake_db, monkeypatch):
    monkeypatch.setattr(db_module, "db", fake_db)
    with TestClient(app) as c:
        yield c
