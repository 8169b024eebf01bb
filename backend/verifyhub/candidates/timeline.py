"""
Employment timeline - merges employment, response, document and call events
"""
import enum
from typing import Any, Dict, Iterable, List

from verifyhub.core.timeutils import ensure_utc


class TimelineEventType(str, enum.Enum):
    EMPLOYMENT_ADDED = "EMPLOYMENT_ADDED"
    VERIFICATION_SUBMITTED = "VERIFICATION_SUBMITTED"
    DOCUMENT_UPLOADED = "DOCUMENT_UPLOADED"
    CALL_LOGGED = "CALL_LOGGED"


def _kind_label(document_type: Any) -> str:
    value = getattr(document_type, "value", document_type)
    return str(value).replace("_", " ")


def _event(timestamp, event_type: TimelineEventType, employment, message: str, **extra) -> Dict[str, Any]:
    event = {
        "timestamp": ensure_utc(timestamp),
        "type": event_type,
        "employment_id": employment.id,
        "company": employment.previous_company_name,
        "message": message,
    }
    event.update(extra)
    return event


def employment_events(employment) -> List[Dict[str, Any]]:
    """Events of a single employment in emission order"""
    events = [
        _event(
            employment.created_at,
            TimelineEventType.EMPLOYMENT_ADDED,
            employment,
            f"Employment at {employment.previous_company_name} added",
        )
    ]

    response = employment.response
    if response is not None:
        events.append(
            _event(
                response.submitted_at,
                TimelineEventType.VERIFICATION_SUBMITTED,
                employment,
                "Verification submitted by previous employer",
            )
        )
        for doc in response.documents:
            events.append(
                _event(
                    doc.uploaded_at,
                    TimelineEventType.DOCUMENT_UPLOADED,
                    employment,
                    f"{_kind_label(doc.document_type)} uploaded",
                    document_type=getattr(doc.document_type, "value", doc.document_type),
                    file_url=doc.file_url,
                )
            )

    for call in employment.calling_logs:
        events.append(
            _event(
                call.call_time,
                TimelineEventType.CALL_LOGGED,
                employment,
                f"Manual HR call logged: {call.outcome}",
            )
        )

    return events


def build_timeline(employments: Iterable) -> List[Dict[str, Any]]:
    """
    Chronological event sequence for a candidate.

    sorted() is stable, so events sharing a timestamp keep their emission
    order (employment order, then added/submitted/documents/calls).
    """
    events: List[Dict[str, Any]] = []
    for employment in employments:
        events.extend(employment_events(employment))
    return sorted(events, key=lambda e: e["timestamp"])
