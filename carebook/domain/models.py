import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AppointmentStatus(str, Enum):
    """Known appointment states. Stored values outside this set are kept as-is."""

    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    NO_SHOW = "No Show"


def _lenient_date(value: Any) -> Any:
    """Turn empty or malformed ISO date strings into ``None``."""
    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value) if value else None
        except ValueError:
            return None
    return value


def _lenient_time(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return dt.time.fromisoformat(value) if value else None
        except ValueError:
            return None
    return value


def _join_name(first: str | None, last: str | None) -> str | None:
    if not first and not last:
        return None
    return f"{first or ''} {last or ''}".strip()


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Patient(_Record):
    """A patient row from the ``patients`` table."""

    id: int
    first_name: str | None = None
    last_name: str | None = None
    date_of_birth: dt.date | None = None
    gender: str | None = None
    phone: str | None = None
    email: str | None = None
    blood_type: str | None = None
    allergies: str | None = None

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _parse_dob(cls, value: Any) -> Any:
        return _lenient_date(value)

    @property
    def full_name(self) -> str | None:
        return _join_name(self.first_name, self.last_name)


class Doctor(_Record):
    """A doctor row from the ``doctors`` table."""

    id: int
    first_name: str | None = None
    last_name: str | None = None
    specialization: str | None = None

    @property
    def full_name(self) -> str | None:
        return _join_name(self.first_name, self.last_name)

    @property
    def display_name(self) -> str:
        return f"Dr. {self.full_name or ''}".strip()


class PatientSummary(_Record):
    """The patient columns embedded in a joined appointment or record row."""

    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    date_of_birth: dt.date | None = None

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _parse_dob(cls, value: Any) -> Any:
        return _lenient_date(value)

    @property
    def full_name(self) -> str | None:
        return _join_name(self.first_name, self.last_name)


class DoctorSummary(_Record):
    """The doctor columns embedded in a joined appointment or record row."""

    first_name: str | None = None
    last_name: str | None = None
    specialization: str | None = None

    @property
    def full_name(self) -> str | None:
        return _join_name(self.first_name, self.last_name)

    @property
    def display_name(self) -> str:
        return f"Dr. {self.full_name or ''}".strip()


class Appointment(_Record):
    """An appointment row, optionally joined with its patient and doctor."""

    id: int
    patient_id: int | None = None
    doctor_id: int | None = None
    appointment_date: dt.date | None = None
    appointment_time: dt.time | None = None
    status: str | None = None
    reason: str | None = None
    notes: str | None = None
    patient: PatientSummary | None = Field(default=None, alias="patients")
    doctor: DoctorSummary | None = Field(default=None, alias="doctors")

    @field_validator("appointment_date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Any:
        return _lenient_date(value)

    @field_validator("appointment_time", mode="before")
    @classmethod
    def _parse_time(cls, value: Any) -> Any:
        return _lenient_time(value)


class MedicalRecord(_Record):
    """A medical record row, optionally joined with its patient and doctor."""

    id: int
    patient_id: int | None = None
    doctor_id: int | None = None
    visit_date: dt.date | None = None
    diagnosis: str | None = None
    symptoms: str | None = None
    treatment: str | None = None
    medications: str | None = None
    notes: str | None = None
    follow_up_date: dt.date | None = None
    patient: PatientSummary | None = Field(default=None, alias="patients")
    doctor: DoctorSummary | None = Field(default=None, alias="doctors")

    @field_validator("visit_date", "follow_up_date", mode="before")
    @classmethod
    def _parse_dates(cls, value: Any) -> Any:
        return _lenient_date(value)


class PatientRequest(BaseModel):
    """A request to register a patient."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    date_of_birth: dt.date
    gender: str = ""
    phone: str = ""
    email: str = ""
    blood_type: str = ""
    allergies: str = ""


class AppointmentRequest(BaseModel):
    """A request to schedule an appointment."""

    model_config = ConfigDict(frozen=True)

    patient_id: int
    doctor_id: int
    appointment_date: dt.date
    appointment_time: dt.time
    reason: str = ""
    notes: str = ""
    status: AppointmentStatus = AppointmentStatus.SCHEDULED


class MedicalRecordRequest(BaseModel):
    """A request to file a medical record."""

    model_config = ConfigDict(frozen=True)

    patient_id: int
    doctor_id: int
    visit_date: dt.date
    diagnosis: str = ""
    symptoms: str = ""
    treatment: str = ""
    medications: str = ""
    notes: str = ""
    follow_up_date: dt.date | None = None

    @field_validator("follow_up_date", mode="before")
    @classmethod
    def _blank_follow_up_is_null(cls, value: Any) -> Any:
        return value or None
