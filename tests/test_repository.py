"""Unit tests for EventRepository persistence and remote mirroring."""
import json
from datetime import datetime

import orjson
import pytest
import responses
from requests.exceptions import ConnectionError as RequestsConnectionError

from calm_calendar.data import MemoryCacheStorage, SyncController
from calm_calendar.data.repositories import DEFAULT_CACHE_KEY, EventRepository
from calm_calendar.domain import EventType, NotFoundError, SyncState, ValidationError

from conftest import EVENTS_URL, FIXED_NOW


def _cached(storage):
    blob = storage.get(DEFAULT_CACHE_KEY)
    return orjson.loads(blob) if blob else None


def _remote_record(event_id, title, start):
    return {
        "id": event_id,
        "title": title,
        "description": "",
        "start": start,
        "end": None,
        "location": "",
        "type": "task",
        "createdAt": "2024-02-01T10:00:00",
    }


class TestLoadAll:
    """Test cases for reloading the collection."""

    @responses.activate
    def test_success_replaces_cache_and_goes_online(self, repository, storage, sync):
        sync.record_failure("earlier outage")
        responses.add(
            responses.GET,
            EVENTS_URL,
            json=[_remote_record("r-1", "Planning", "2024-03-05T10:00:00")],
            status=200,
        )

        events = repository.load_all()

        assert [event.id for event in events] == ["r-1"]
        assert events[0].type is EventType.TASK
        assert sync.is_online()
        assert [record["id"] for record in _cached(storage)] == ["r-1"]

    @responses.activate
    def test_server_error_falls_back_to_cache(self, repository, storage, sync):
        repository.create({"title": "Local only", "start": "2024-03-06T09:00"})
        repository.flush(timeout=5)
        responses.add(responses.GET, EVENTS_URL, body="Server Error", status=503)

        events = repository.load_all()

        assert [event.title for event in events] == ["Local only"]
        assert sync.state is SyncState.OFFLINE
        assert "503" in sync.last_reason

    @responses.activate
    def test_network_failure_with_empty_cache(self, repository, sync):
        responses.add(responses.GET, EVENTS_URL, body=RequestsConnectionError("refused"))

        assert repository.load_all() == []
        assert not sync.is_online()

    @responses.activate
    def test_malformed_body_goes_offline(self, repository, sync):
        responses.add(responses.GET, EVENTS_URL, json={"events": []}, status=200)

        assert repository.load_all() == []
        assert not sync.is_online()

    @responses.activate
    def test_unreadable_record_goes_offline(self, repository, sync):
        responses.add(responses.GET, EVENTS_URL, json=[{"id": "x", "title": "Bad", "start": "whenever"}], status=200)

        repository.load_all()

        assert not sync.is_online()

    @responses.activate
    def test_duplicate_ids_keep_first(self, repository):
        responses.add(
            responses.GET,
            EVENTS_URL,
            json=[
                _remote_record("dup", "First", "2024-03-05T10:00:00"),
                _remote_record("dup", "Second", "2024-03-06T10:00:00"),
            ],
            status=200,
        )

        events = repository.load_all()

        assert [event.title for event in events] == ["First"]

    @responses.activate
    def test_legacy_records_are_normalized(self, repository):
        responses.add(
            responses.GET,
            EVENTS_URL,
            json=[{"_id": "legacy", "name": "Old", "category": "reminder", "datetime": "2024-03-05T07:00:00"}],
            status=200,
        )

        (event,) = repository.load_all()

        assert event.id == "legacy"
        assert event.title == "Old"
        assert event.type is EventType.REMINDER
        assert event.created_at == datetime(2024, 3, 5, 7, 0)

    def test_without_remote_reads_cache(self, storage):
        storage.set(DEFAULT_CACHE_KEY, orjson.dumps([_remote_record("c-1", "Cached", "2024-03-05T10:00:00")]))
        sync = SyncController()
        repository = EventRepository(storage=storage, sync=sync)

        assert [event.id for event in repository.load_all()] == ["c-1"]
        assert not sync.is_online()
        repository.close()

    def test_corrupt_cache_starts_empty(self):
        storage = MemoryCacheStorage({DEFAULT_CACHE_KEY: b"{not json"})
        repository = EventRepository(storage=storage, sync=SyncController())

        assert repository.list_events() == []
        repository.close()


class TestCreate:
    """Test cases for creating events."""

    @responses.activate
    def test_round_trip_with_remote_unreachable(self, repository, standup_draft):
        created = repository.create(standup_draft)
        repository.flush(timeout=5)

        events = repository.load_all()

        assert created in events
        assert created.id
        assert created.created_at == FIXED_NOW
        assert created.title == "Standup"
        assert created.start == datetime(2024, 3, 6, 9, 0)
        assert created.end == datetime(2024, 3, 6, 9, 30)

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_empty_title_rejected_without_persisting(self, repository, storage, title):
        with pytest.raises(ValidationError):
            repository.create({"title": title, "start": "2024-03-06T09:00"})

        assert storage.get(DEFAULT_CACHE_KEY) is None
        assert repository.list_events() == []

    def test_missing_start_rejected(self, repository):
        with pytest.raises(ValidationError):
            repository.create({"title": "No time"})

    def test_title_is_trimmed(self, repository, sync):
        sync.record_failure("offline for test")

        assert repository.create({"title": "  Lunch  ", "start": "2024-03-06T12:00"}).title == "Lunch"

    def test_ids_are_unique(self, repository, sync):
        sync.record_failure("offline for test")
        ids = {repository.create({"title": f"e{index}", "start": "2024-03-06T12:00"}).id for index in range(20)}

        assert len(ids) == 20

    @responses.activate
    def test_online_create_mirrors_post(self, repository, sync, standup_draft):
        responses.add(responses.POST, EVENTS_URL, json={"id": "server-side", "title": "Echo"}, status=201)

        created = repository.create(standup_draft)
        repository.flush(timeout=5)

        assert len(responses.calls) == 1
        body = json.loads(responses.calls[0].request.body)
        assert body["title"] == "Standup"
        assert body["id"] == created.id
        assert body["start"] == "2024-03-06T09:00:00"
        assert sync.is_online()
        # the echo never overwrites local state
        assert repository.get(created.id).title == "Standup"

    @responses.activate
    def test_mirror_failure_keeps_local_create(self, repository, storage, sync, standup_draft):
        responses.add(responses.POST, EVENTS_URL, body="nope", status=500)

        created = repository.create(standup_draft)
        repository.flush(timeout=5)

        assert sync.state is SyncState.OFFLINE
        assert [record["id"] for record in _cached(storage)] == [created.id]

    @responses.activate
    def test_failed_load_then_create_stays_local(self, repository, storage, sync, standup_draft):
        responses.add(responses.GET, EVENTS_URL, body=RequestsConnectionError("refused"))
        repository.load_all()

        created = repository.create(standup_draft)
        repository.flush(timeout=5)

        assert [call.request.method for call in responses.calls] == ["GET"]
        assert sync.state is SyncState.OFFLINE
        assert _cached(storage)[0]["id"] == created.id


class TestUpdate:
    """Test cases for updating events."""

    def test_unknown_id(self, repository):
        with pytest.raises(NotFoundError):
            repository.update("missing", {"title": "x"})

    def test_merges_patch(self, repository, storage, sync, standup_draft):
        sync.record_failure("offline for test")
        created = repository.create(standup_draft)

        updated = repository.update(created.id, {"location": "Room 4", "type": "personal"})

        assert updated.location == "Room 4"
        assert updated.type is EventType.PERSONAL
        assert updated.title == "Standup"
        assert updated.start == created.start
        assert _cached(storage)[0]["location"] == "Room 4"

    def test_identity_fields_are_immutable(self, repository, sync, standup_draft):
        sync.record_failure("offline for test")
        created = repository.create(standup_draft)

        updated = repository.update(created.id, {"id": "hijack", "createdAt": "2000-01-01T00:00", "title": "Renamed"})

        assert updated.id == created.id
        assert updated.created_at == created.created_at
        assert updated.title == "Renamed"

    def test_empty_title_rejected_without_mutation(self, repository, storage, sync, standup_draft):
        sync.record_failure("offline for test")
        created = repository.create(standup_draft)
        before = storage.get(DEFAULT_CACHE_KEY)

        with pytest.raises(ValidationError):
            repository.update(created.id, {"title": "  "})

        assert repository.get(created.id).title == "Standup"
        assert storage.get(DEFAULT_CACHE_KEY) == before

    @pytest.mark.parametrize("cleared", ["", None])
    def test_cleared_start_rejected_without_mutation(self, repository, storage, sync, standup_draft, cleared):
        sync.record_failure("offline for test")
        created = repository.create(standup_draft)
        before = storage.get(DEFAULT_CACHE_KEY)

        with pytest.raises(ValidationError):
            repository.update(created.id, {"start": cleared})

        assert repository.get(created.id).start == datetime(2024, 3, 6, 9, 0)
        assert storage.get(DEFAULT_CACHE_KEY) == before

    def test_date_only_form_patch_keeps_times(self, repository, sync, standup_draft):
        sync.record_failure("offline for test")
        created = repository.create(standup_draft)

        updated = repository.update(created.id, {"date": "2024-03-10"})

        assert updated.start == datetime(2024, 3, 10, 9, 0)
        assert updated.end == datetime(2024, 3, 10, 9, 30)

    def test_start_time_patch_keeps_day_and_end(self, repository, sync, standup_draft):
        sync.record_failure("offline for test")
        created = repository.create(standup_draft)

        updated = repository.update(created.id, {"startTime": "08:45"})

        assert updated.start == datetime(2024, 3, 6, 8, 45)
        assert updated.end == datetime(2024, 3, 6, 9, 30)

    @responses.activate
    def test_online_update_mirrors_put(self, repository, standup_draft):
        responses.add(responses.POST, EVENTS_URL, status=201)
        created = repository.create(standup_draft)
        responses.add(responses.PUT, f"{EVENTS_URL}/{created.id}", json={}, status=200)

        repository.update(created.id, {"title": "Daily sync"})
        repository.flush(timeout=5)

        assert [call.request.method for call in responses.calls] == ["POST", "PUT"]
        assert json.loads(responses.calls[1].request.body)["title"] == "Daily sync"

    @responses.activate
    def test_remote_not_found_degrades_to_offline(self, repository, sync, standup_draft):
        responses.add(responses.POST, EVENTS_URL, status=201)
        created = repository.create(standup_draft)
        responses.add(responses.PUT, f"{EVENTS_URL}/{created.id}", status=404)

        repository.update(created.id, {"title": "Daily sync"})
        repository.flush(timeout=5)

        assert not sync.is_online()
        assert repository.get(created.id).title == "Daily sync"


class TestDelete:
    """Test cases for deleting events."""

    def test_second_delete_fails(self, repository, storage, sync, standup_draft):
        sync.record_failure("offline for test")
        keep = repository.create({"title": "Keep", "start": "2024-03-07T09:00"})
        created = repository.create(standup_draft)

        repository.delete(created.id)
        with pytest.raises(NotFoundError):
            repository.delete(created.id)

        assert [event.id for event in repository.list_events()] == [keep.id]
        assert [record["id"] for record in _cached(storage)] == [keep.id]

    @responses.activate
    def test_online_delete_mirrors(self, repository, standup_draft):
        responses.add(responses.POST, EVENTS_URL, status=201)
        created = repository.create(standup_draft)
        responses.add(responses.DELETE, f"{EVENTS_URL}/{created.id}", status=204)

        repository.delete(created.id)
        repository.flush(timeout=5)

        assert responses.calls[-1].request.method == "DELETE"

    @responses.activate
    def test_queued_mirrors_skipped_once_offline(self, repository, sync, standup_draft):
        responses.add(responses.POST, EVENTS_URL, status=500)

        created = repository.create(standup_draft)
        repository.flush(timeout=5)
        repository.delete(created.id)
        repository.flush(timeout=5)

        assert [call.request.method for call in responses.calls] == ["POST"]
        assert not sync.is_online()
