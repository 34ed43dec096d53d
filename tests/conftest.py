"""Shared fixtures for the calendar test suite."""
from datetime import datetime

import pytest

from calm_calendar.config.settings import RemoteSettings
from calm_calendar.data import MemoryCacheStorage, MirrorDispatcher, RemoteEventStore, SyncController
from calm_calendar.data.repositories import EventRepository

REMOTE_BASE = "http://calendar.test/api"
EVENTS_URL = f"{REMOTE_BASE}/events"
FIXED_NOW = datetime(2024, 3, 1, 8, 30)


@pytest.fixture
def storage():
    return MemoryCacheStorage()


@pytest.fixture
def sync():
    return SyncController(clock=lambda: FIXED_NOW)


@pytest.fixture
def remote():
    store = RemoteEventStore(RemoteSettings(base_url=REMOTE_BASE, timeout=1.0))
    yield store
    store.close()


@pytest.fixture
def repository(storage, sync, remote):
    repo = EventRepository(
        storage=storage,
        sync=sync,
        remote=remote,
        dispatcher=MirrorDispatcher(),
        clock=lambda: FIXED_NOW,
    )
    yield repo
    repo.close()


@pytest.fixture
def standup_draft():
    return {
        "title": "Standup",
        "start": "2024-03-06T09:00",
        "end": "2024-03-06T09:30",
        "type": "meeting",
    }
