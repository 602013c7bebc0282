import asyncio
import datetime as dt
from typing import Any

from loguru import logger

from carebook.domain.exceptions import StoreError
from carebook.domain.models import Appointment, AppointmentStatus, Doctor, MedicalRecord, Patient
from carebook.pages.fetching import keep_on_failure
from carebook.pages.routes import HOME_SECTIONS, Route
from carebook.presentation.datetime_helpers import date_to_us_short, time_to_24h
from carebook.presentation.derive import calculate_age, status_badge
from carebook.presentation.filters import (
    FILTER_ALL,
    FILTER_TODAY,
    filter_appointments,
    search_medical_records,
    search_patients,
)
from carebook.store.ports import AbstractRecordService

APPOINTMENT_FILTERS: list[tuple[str, str]] = [
    (FILTER_ALL, "All Appointments"),
    (FILTER_TODAY, "Today"),
    (AppointmentStatus.SCHEDULED.value, "Scheduled"),
    (AppointmentStatus.COMPLETED.value, "Completed"),
]


class HomePage:
    """Landing page with navigation sections and live totals."""

    def __init__(self, service: AbstractRecordService, today: dt.date | None = None) -> None:
        self._service = service
        self._today = today
        self.patients: list[Patient] = []
        self.doctors: list[Doctor] = []
        self.appointments: list[Appointment] = []
        self.records: list[MedicalRecord] = []

    async def load(self) -> None:
        patients, doctors, appointments, records = await asyncio.gather(
            self._service.list_patients(),
            self._service.list_doctors(),
            self._service.list_appointments(),
            self._service.list_medical_records(),
            return_exceptions=True,
        )
        self.patients = keep_on_failure("patients", patients, self.patients)
        self.doctors = keep_on_failure("doctors", doctors, self.doctors)
        self.appointments = keep_on_failure("appointments", appointments, self.appointments)
        self.records = keep_on_failure("medical records", records, self.records)

    @property
    def stats(self) -> dict[str, int]:
        todays = filter_appointments(self.appointments, FILTER_TODAY, self._today)
        return {
            "total_patients": len(self.patients),
            "todays_appointments": len(todays),
            "todays_completed": _count_status(todays, AppointmentStatus.COMPLETED),
            "todays_pending": _count_status(todays, AppointmentStatus.SCHEDULED),
            "medical_records": len(self.records),
            "active_doctors": len(self.doctors),
        }

    def render(self) -> dict[str, Any]:
        return {
            "title": "Hospital Information System",
            "stats": self.stats,
            "sections": [
                {
                    "title": title,
                    "description": description,
                    "links": [
                        {"label": primary[0], "href": primary[1].value},
                        {"label": secondary[0], "href": secondary[1].value},
                    ],
                }
                for title, description, primary, secondary in HOME_SECTIONS
            ],
        }


def _count_status(appointments: list[Appointment], status: AppointmentStatus) -> int:
    return sum(1 for a in appointments if a.status == status.value)


class PatientListPage:
    """``/patients``: searchable patient cards with derived age."""

    def __init__(self, service: AbstractRecordService) -> None:
        self._service = service
        self.patients: list[Patient] = []
        self.search_term: str = ""
        self.loading: bool = True

    async def load(self) -> None:
        try:
            self.patients = await self._service.list_patients()
        except StoreError as exc:
            logger.warning("Error fetching patients: {}", exc)
        finally:
            self.loading = False

    def visible(self) -> list[Patient]:
        return search_patients(self.patients, self.search_term)

    def render(self, today: dt.date | None = None) -> dict[str, Any]:
        if self.loading:
            return {"loading": True, "message": "Loading patients..."}

        rows = [_patient_row(p, today) for p in self.visible()]
        result: dict[str, Any] = {
            "loading": False,
            "rows": rows,
            "new_href": Route.NEW_PATIENT.value,
        }
        if not rows:
            result["empty_message"] = (
                "Try adjusting your search terms"
                if self.search_term
                else "Get started by adding your first patient"
            )
        return result


def _patient_row(patient: Patient, today: dt.date | None) -> dict[str, Any]:
    return {
        "id": patient.id,
        "name": patient.full_name or "",
        "age": calculate_age(patient.date_of_birth, today) if patient.date_of_birth else None,
        "gender": patient.gender or "",
        "phone": patient.phone or "",
        "email": patient.email or "",
        "blood_type": patient.blood_type or "",
        "allergies": patient.allergies or "",
        "schedule_href": Route.NEW_APPOINTMENT.with_patient(patient.id),
        "new_record_href": Route.NEW_MEDICAL_RECORD.with_patient(patient.id),
    }


class AppointmentListPage:
    """``/appointments``: appointments filtered by the all/today/status selector."""

    def __init__(self, service: AbstractRecordService) -> None:
        self._service = service
        self.appointments: list[Appointment] = []
        self.filter: str = FILTER_ALL
        self.loading: bool = True

    async def load(self) -> None:
        try:
            self.appointments = await self._service.list_appointments()
        except StoreError as exc:
            logger.warning("Error fetching appointments: {}", exc)
        finally:
            self.loading = False

    def visible(self, today: dt.date | None = None) -> list[Appointment]:
        return filter_appointments(self.appointments, self.filter, today)

    def render(self, today: dt.date | None = None) -> dict[str, Any]:
        if self.loading:
            return {"loading": True, "message": "Loading appointments..."}

        rows = [_appointment_row(a) for a in self.visible(today)]
        result: dict[str, Any] = {
            "loading": False,
            "filters": [
                {"value": value, "label": label, "active": value == self.filter}
                for value, label in APPOINTMENT_FILTERS
            ],
            "rows": rows,
            "new_href": Route.NEW_APPOINTMENT.value,
        }
        if not rows:
            result["empty_message"] = self._empty_message()
        return result

    def _empty_message(self) -> str:
        if self.filter == FILTER_ALL:
            return "Get started by scheduling your first appointment"
        label = "today's" if self.filter == FILTER_TODAY else self.filter.lower()
        return f"No {label} appointments found"


def _appointment_row(appointment: Appointment) -> dict[str, Any]:
    badge = status_badge(appointment.status)
    patient = appointment.patient
    doctor = appointment.doctor
    if patient is None or doctor is None:
        logger.warning("Appointment {} is missing its patient or doctor join", appointment.id)
    return {
        "id": appointment.id,
        "patient_name": (patient.full_name if patient else None) or "",
        "patient_phone": (patient.phone if patient else None) or "",
        "doctor_name": doctor.display_name if doctor else "",
        "date": date_to_us_short(appointment.appointment_date),
        "time": time_to_24h(appointment.appointment_time),
        "status": appointment.status or "",
        "badge": badge.value,
        "badge_class": badge.css_class,
        "reason": appointment.reason or "",
        "notes": appointment.notes or "",
        "can_complete": appointment.status == AppointmentStatus.SCHEDULED.value,
    }


class MedicalRecordListPage:
    """``/medical-records``: searchable visit history."""

    def __init__(self, service: AbstractRecordService) -> None:
        self._service = service
        self.records: list[MedicalRecord] = []
        self.search_term: str = ""
        self.loading: bool = True

    async def load(self) -> None:
        try:
            self.records = await self._service.list_medical_records()
        except StoreError as exc:
            logger.warning("Error fetching medical records: {}", exc)
        finally:
            self.loading = False

    def visible(self) -> list[MedicalRecord]:
        return search_medical_records(self.records, self.search_term)

    def render(self) -> dict[str, Any]:
        if self.loading:
            return {"loading": True, "message": "Loading medical records..."}

        rows = [_medical_record_row(r) for r in self.visible()]
        result: dict[str, Any] = {
            "loading": False,
            "rows": rows,
            "new_href": Route.NEW_MEDICAL_RECORD.value,
        }
        if not rows:
            result["empty_message"] = (
                "Try adjusting your search terms"
                if self.search_term
                else "Get started by adding your first medical record"
            )
        return result


def _medical_record_row(record: MedicalRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "patient_name": (record.patient.full_name if record.patient else None) or "",
        "doctor_name": record.doctor.display_name if record.doctor else "",
        "specialization": (record.doctor.specialization if record.doctor else None) or "",
        "visit_date": date_to_us_short(record.visit_date),
        "diagnosis": record.diagnosis or "",
        "symptoms": record.symptoms or "",
        "treatment": record.treatment or "",
        "medications": record.medications or "",
        "notes": record.notes or "",
        "follow_up_date": date_to_us_short(record.follow_up_date),
    }
