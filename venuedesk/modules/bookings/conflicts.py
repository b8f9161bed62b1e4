"""
Venue/time conflict detection.

Sessions occupy ``[start_time, end_time)`` on one venue and calendar date.
Times are zero-padded 24h ``HH:MM`` strings, so plain string comparison
orders them correctly. Bookings made before sessions existed carry a single
``hall``/``event_date`` and, when no times were recorded, hold the whole day.

Stored sessions missing a start or end time are skipped.

Everything here is pure: the caller fetches the bookings.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from pydantic import BaseModel, Field, computed_field

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

FULL_DAY_START = "00:00"
FULL_DAY_END = "23:59"


class ConflictQuery(BaseModel):
    venue: str
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)
    exclude_booking_id: Optional[str] = None

class Conflict(BaseModel):
    conflicting_booking: Dict[str, Any]
    conflicting_session: Optional[Dict[str, Any]] = None
    message: str

class ConflictReport(BaseModel):
    conflicts: List[Conflict] = []

    @computed_field
    @property
    def has_conflicts(self) -> bool:
        return len(self.conflicts) > 0


def date_part(value: Any) -> Optional[str]:
    """``YYYY-MM-DD`` of an ISO string, datetime or date; None when absent."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.split("T")[0]
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).split("T")[0]


def overlaps(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    return start_a < end_b and end_a > start_b


def _as_dict(record: Any) -> Dict[str, Any]:
    if isinstance(record, dict):
        return record
    return record.model_dump()


def find_conflicts(candidate: ConflictQuery, all_bookings: Iterable[Any]) -> List[Conflict]:
    conflicts: List[Conflict] = []
    # A zero-length window occupies nothing
    if candidate.start_time == candidate.end_time:
        return conflicts

    for record in all_bookings:
        booking = _as_dict(record)
        if candidate.exclude_booking_id and booking.get("id") == candidate.exclude_booking_id:
            continue

        sessions = booking.get("sessions") or []
        if sessions:
            for raw_session in sessions:
                session = _as_dict(raw_session)
                if session.get("venue") != candidate.venue:
                    continue
                if date_part(session.get("session_date")) != candidate.date:
                    continue

                session_start = session.get("start_time")
                session_end = session.get("end_time")
                # Sessions saved without both times hold no window
                if not (session_start and isinstance(session_start, str)
                        and session_end and isinstance(session_end, str)):
                    continue
                if overlaps(candidate.start_time, candidate.end_time, session_start, session_end):
                    conflicts.append(Conflict(
                        conflicting_booking=booking,
                        conflicting_session=session,
                        message=(
                            f"Conflicts with {booking.get('client_name')} - "
                            f"{session.get('session_name')} ({session_start}-{session_end})"
                        ),
                    ))
        else:
            if booking.get("hall") != candidate.venue:
                continue
            if date_part(booking.get("event_date")) != candidate.date:
                continue

            legacy_start = booking.get("event_start_time") or FULL_DAY_START
            legacy_end = booking.get("event_end_time") or FULL_DAY_END
            if overlaps(candidate.start_time, candidate.end_time, legacy_start, legacy_end):
                conflicts.append(Conflict(
                    conflicting_booking=booking,
                    conflicting_session=None,
                    message=(
                        f"Conflicts with existing booking {booking.get('client_name')} - "
                        f"{booking.get('event_type')}"
                    ),
                ))

    return conflicts


def check_conflicts(candidate: ConflictQuery, all_bookings: Iterable[Any]) -> ConflictReport:
    return ConflictReport(conflicts=find_conflicts(candidate, all_bookings))
