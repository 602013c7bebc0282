import asyncio
import datetime as dt
from abc import ABC, abstractmethod
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

from carebook.domain.exceptions import MissingFieldsError, StoreError
from carebook.domain.models import (
    AppointmentRequest,
    Doctor,
    MedicalRecordRequest,
    Patient,
    PatientRequest,
)
from carebook.pages.fetching import keep_on_failure
from carebook.pages.routes import Route
from carebook.presentation.datetime_helpers import today_iso
from carebook.presentation.derive import calculate_age
from carebook.store.ports import AbstractRecordService


class RecordForm(ABC):
    """Shared form state: field values, required-field check, serialized submit.

    ``loading`` is set for the whole of a submission; a second ``submit``
    while it is set is ignored rather than queued.
    """

    fields: tuple[str, ...] = ()
    required: tuple[str, ...] = ()
    record_name: str = "record"
    error_notice: str = "Error saving record. Please try again."
    success_route: Route = Route.HOME

    def __init__(self, service: AbstractRecordService, **initial: str) -> None:
        self._service = service
        self.data: dict[str, str] = {name: "" for name in self.fields}
        self.data.update({k: v for k, v in initial.items() if k in self.data})
        self.loading: bool = False
        self.notice: str | None = None

    def set_field(self, name: str, value: str) -> None:
        if name not in self.data:
            raise KeyError(f"Unknown field '{name}' on {type(self).__name__}")
        self.data[name] = value

    def missing_fields(self) -> list[str]:
        return [name for name in self.required if not self.data.get(name, "").strip()]

    @abstractmethod
    async def _create(self) -> BaseModel:
        """Build the request from ``data`` and insert it."""

    async def submit(self) -> dict[str, Any]:
        if self.loading:
            logger.debug("Ignoring duplicate {} submission", self.record_name)
            return {"success": False, "ignored": True}

        self.loading = True
        self.notice = None
        try:
            missing = self.missing_fields()
            if missing:
                raise MissingFieldsError(missing)
            record = await self._create()
        except MissingFieldsError as exc:
            self.notice = str(exc)
            return {"success": False, "error": True, "message": self.notice, "missing": exc.fields}
        except (StoreError, ValidationError) as exc:
            logger.error("Error creating {}: {}", self.record_name, exc)
            self.notice = self.error_notice
            return {"success": False, "error": True, "message": self.notice}
        except Exception:
            logger.exception("Unexpected error creating {}", self.record_name)
            self.notice = self.error_notice
            return {"success": False, "error": True, "message": self.notice}
        finally:
            self.loading = False

        return {
            "success": True,
            "id": getattr(record, "id", None),
            "redirect": self.success_route.value,
        }


class NewPatientForm(RecordForm):
    """``/patients/new``"""

    fields = (
        "first_name",
        "last_name",
        "date_of_birth",
        "gender",
        "phone",
        "email",
        "blood_type",
        "allergies",
    )
    required = ("first_name", "last_name", "date_of_birth")
    record_name = "patient"
    error_notice = "Error registering patient. Please try again."
    success_route = Route.PATIENTS

    async def _create(self) -> BaseModel:
        return await self._service.create_patient(PatientRequest(**self.data))

    def render(self) -> dict[str, Any]:
        return {
            "data": dict(self.data),
            "loading": self.loading,
            "notice": self.notice,
            "submit_label": "Saving..." if self.loading else "Register Patient",
            "cancel_href": Route.PATIENTS.value,
        }


class _PatientDoctorForm(RecordForm):
    """A form with patient and doctor selectors, loaded independently."""

    def __init__(
        self,
        service: AbstractRecordService,
        preselected_patient: str | None = None,
        today: dt.date | None = None,
        **initial: str,
    ) -> None:
        super().__init__(service, **initial)
        self._today = today
        if preselected_patient:
            self.data["patient_id"] = preselected_patient
        self.patients: list[Patient] = []
        self.doctors: list[Doctor] = []

    async def load_options(self) -> None:
        patients, doctors = await asyncio.gather(
            self._service.list_patient_options(),
            self._service.list_doctors(),
            return_exceptions=True,
        )
        self.patients = keep_on_failure("patients", patients, self.patients)
        self.doctors = keep_on_failure("doctors", doctors, self.doctors)

    def _patient_label(self, patient: Patient) -> str:
        return patient.full_name or ""

    def options(self) -> dict[str, list[dict[str, str]]]:
        return {
            "patients": [
                {"value": str(p.id), "label": self._patient_label(p)} for p in self.patients
            ],
            "doctors": [
                {"value": str(d.id), "label": f"{d.display_name} - {d.specialization or ''}"}
                for d in self.doctors
            ],
        }


class NewAppointmentForm(_PatientDoctorForm):
    """``/appointments/new``"""

    fields = ("patient_id", "doctor_id", "appointment_date", "appointment_time", "reason", "notes")
    required = ("patient_id", "doctor_id", "appointment_date", "appointment_time")
    record_name = "appointment"
    error_notice = "Error scheduling appointment. Please try again."
    success_route = Route.APPOINTMENTS

    async def _create(self) -> BaseModel:
        return await self._service.create_appointment(AppointmentRequest(**self.data))

    def render(self) -> dict[str, Any]:
        return {
            **self.options(),
            "data": dict(self.data),
            "min_date": today_iso(self._today),
            "loading": self.loading,
            "notice": self.notice,
            "submit_label": "Scheduling..." if self.loading else "Schedule Appointment",
            "cancel_href": Route.APPOINTMENTS.value,
        }


class NewMedicalRecordForm(_PatientDoctorForm):
    """``/medical-records/new``: visit date defaults to today, follow-up is optional."""

    fields = (
        "patient_id",
        "doctor_id",
        "visit_date",
        "diagnosis",
        "symptoms",
        "treatment",
        "medications",
        "notes",
        "follow_up_date",
    )
    required = ("patient_id", "doctor_id", "visit_date")
    record_name = "medical record"
    error_notice = "Error creating medical record. Please try again."
    success_route = Route.MEDICAL_RECORDS

    def __init__(
        self,
        service: AbstractRecordService,
        preselected_patient: str | None = None,
        today: dt.date | None = None,
        **initial: str,
    ) -> None:
        super().__init__(service, preselected_patient, today, **initial)
        if not self.data["visit_date"]:
            self.data["visit_date"] = today_iso(today)

    def _patient_label(self, patient: Patient) -> str:
        name = patient.full_name or ""
        if patient.date_of_birth is None:
            return name
        return f"{name} (Age: {calculate_age(patient.date_of_birth, self._today)})"

    async def _create(self) -> BaseModel:
        return await self._service.create_medical_record(MedicalRecordRequest(**self.data))

    def render(self) -> dict[str, Any]:
        return {
            **self.options(),
            "data": dict(self.data),
            "min_follow_up_date": today_iso(self._today),
            "loading": self.loading,
            "notice": self.notice,
            "submit_label": "Saving..." if self.loading else "Save Medical Record",
            "cancel_href": Route.MEDICAL_RECORDS.value,
        }
