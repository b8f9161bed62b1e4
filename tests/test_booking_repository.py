import asyncio
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from pymongo.errors import DuplicateKeyError

from venuedesk.core.database import mongodb
from venuedesk.modules.bookings.repository import BookingRepository


class FakeLockCollection:
    def __init__(self, docs=None):
        self.docs = {d["_id"]: dict(d) for d in docs or []}

    async def insert_one(self, doc):
        if doc["_id"] in self.docs:
            raise DuplicateKeyError("E11000 duplicate key error")
        self.docs[doc["_id"]] = dict(doc)

    async def find_one_and_update(self, query, update):
        doc = self.docs.get(query["_id"])
        if doc is None or not doc["expires_at"] < query["expires_at"]["$lt"]:
            return None
        before = dict(doc)
        doc.update(update["$set"])
        return before

    async def delete_many(self, query):
        for key in query["_id"]["$in"]:
            if key in self.docs and self.docs[key]["owner"] == query["owner"]:
                del self.docs[key]


def _use_locks(monkeypatch, docs=None):
    locks = FakeLockCollection(docs)
    monkeypatch.setattr(mongodb, "db", SimpleNamespace(venue_locks=locks))
    return locks


def test_expired_lock_is_taken_over(monkeypatch):
    stale = datetime.now(timezone.utc) - timedelta(seconds=5)
    locks = _use_locks(monkeypatch, [{"_id": "Grand Hall|2025-02-14", "owner": "crashed", "expires_at": stale}])

    acquired = asyncio.run(BookingRepository().acquire_venue_locks(["Grand Hall|2025-02-14"], "me"))

    assert acquired is True
    assert locks.docs["Grand Hall|2025-02-14"]["owner"] == "me"
    assert locks.docs["Grand Hall|2025-02-14"]["expires_at"] > datetime.now(timezone.utc)


def test_live_lock_blocks_and_releases_partial_set(monkeypatch):
    live = datetime.now(timezone.utc) + timedelta(seconds=30)
    locks = _use_locks(monkeypatch, [{"_id": "Lawn|2025-02-14", "owner": "other", "expires_at": live}])

    acquired = asyncio.run(BookingRepository().acquire_venue_locks(
        ["Lawn|2025-02-14", "Grand Hall|2025-02-14"], "me",
    ))

    assert acquired is False
    assert list(locks.docs) == ["Lawn|2025-02-14"]
    assert locks.docs["Lawn|2025-02-14"]["owner"] == "other"
