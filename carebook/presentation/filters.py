import datetime as dt
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from carebook.domain.models import Appointment, MedicalRecord, Patient

T = TypeVar("T")

FILTER_ALL = "all"
FILTER_TODAY = "today"


def _contains(value: str | None, needle: str) -> bool:
    return value is not None and needle in value.lower()


def search_records(
    records: Sequence[T],
    query: str,
    fields: Callable[[T], Iterable[str | None]],
) -> list[T]:
    """Keep records where any of ``fields(record)`` contains ``query``, ignoring case.

    An empty query keeps everything. ``None`` fields never match.
    """
    if not query:
        return list(records)
    needle = query.lower()
    return [r for r in records if any(_contains(v, needle) for v in fields(r))]


def _patient_fields(patient: Patient) -> tuple[str | None, ...]:
    return (patient.full_name, patient.email, patient.phone)


def _medical_record_fields(record: MedicalRecord) -> tuple[str | None, ...]:
    return (
        record.patient.full_name if record.patient else None,
        record.diagnosis,
        record.symptoms,
        record.doctor.full_name if record.doctor else None,
    )


def search_patients(patients: Sequence[Patient], query: str) -> list[Patient]:
    """Match on full name, email, and phone."""
    return search_records(patients, query, _patient_fields)


def search_medical_records(records: Sequence[MedicalRecord], query: str) -> list[MedicalRecord]:
    """Match on patient name, diagnosis, symptoms, and doctor name."""
    return search_records(records, query, _medical_record_fields)


def filter_appointments(
    appointments: Sequence[Appointment],
    selector: str,
    today: dt.date | None = None,
) -> list[Appointment]:
    """Apply the appointment list selector.

    ``all`` keeps everything, ``today`` keeps appointments dated today
    (local clock), and any other value must equal the status exactly.
    """
    if selector == FILTER_ALL:
        return list(appointments)
    if selector == FILTER_TODAY:
        today_iso = (today or dt.date.today()).isoformat()
        return [
            a
            for a in appointments
            if a.appointment_date is not None and a.appointment_date.isoformat() == today_iso
        ]
    return [a for a in appointments if a.status == selector]
