from collections.abc import Sequence
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from carebook.domain.exceptions import RecordCreationError, StoreError, StoreUnavailableError
from carebook.domain.models import (
    Appointment,
    AppointmentRequest,
    Doctor,
    MedicalRecord,
    MedicalRecordRequest,
    Patient,
    PatientRequest,
)
from carebook.store.adapters.query_helpers import select_with_joins
from carebook.store.ports import AbstractRecordService, Order, StoreClientProtocol

ModelT = TypeVar("ModelT", bound=BaseModel)

PATIENTS = "patients"
DOCTORS = "doctors"
APPOINTMENTS = "appointments"
MEDICAL_RECORDS = "medical_records"

_DOCTOR_COLUMNS = ("first_name", "last_name", "specialization")

_APPOINTMENT_SELECT = select_with_joins(
    "*",
    {PATIENTS: ("first_name", "last_name", "phone"), DOCTORS: _DOCTOR_COLUMNS},
)
_MEDICAL_RECORD_SELECT = select_with_joins(
    "*",
    {PATIENTS: ("first_name", "last_name", "date_of_birth"), DOCTORS: _DOCTOR_COLUMNS},
)


class RecordService(AbstractRecordService):
    """Record service that reads and writes tables through a StoreClientProtocol.

    Reads raise ``StoreError`` when the table cannot be read and skip rows
    that fail validation. Inserts raise ``RecordCreationError`` or
    ``StoreUnavailableError``.
    """

    def __init__(self, client: StoreClientProtocol) -> None:
        self._client = client

    async def _fetch(
        self,
        table: str,
        model: type[ModelT],
        columns: str = "*",
        order: Sequence[Order] = (),
    ) -> list[ModelT]:
        try:
            rows = await self._client.select(table, columns, order)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(f"Select on '{table}' failed: {exc}") from exc

        records: list[ModelT] = []
        for row in rows:
            try:
                records.append(model.model_validate(row))
            except ValidationError as exc:
                logger.warning("Skipping malformed {} row {}: {}", table, row.get("id"), exc)

        logger.info("Fetched {} row(s) from {}", len(records), table)
        return records

    async def _insert(self, table: str, row: dict[str, Any], model: type[ModelT]) -> ModelT:
        logger.info("Inserting into {}", table)

        try:
            stored = await self._client.insert(table, row)
            record = model.model_validate(stored)
        except (RecordCreationError, StoreUnavailableError):
            raise
        except Exception as exc:
            raise RecordCreationError(reason=str(exc), table=table) from exc

        logger.info("Created {} row: id={}", table, getattr(record, "id", None))
        return record

    async def list_patients(self) -> list[Patient]:
        return await self._fetch(PATIENTS, Patient, order=[Order("created_at", ascending=False)])

    async def list_patient_options(self) -> list[Patient]:
        return await self._fetch(
            PATIENTS, Patient, "id,first_name,last_name,date_of_birth", [Order("last_name")]
        )

    async def list_doctors(self) -> list[Doctor]:
        return await self._fetch(
            DOCTORS, Doctor, "id,first_name,last_name,specialization", [Order("last_name")]
        )

    async def list_appointments(self) -> list[Appointment]:
        return await self._fetch(
            APPOINTMENTS,
            Appointment,
            _APPOINTMENT_SELECT,
            [Order("appointment_date"), Order("appointment_time")],
        )

    async def list_medical_records(self) -> list[MedicalRecord]:
        return await self._fetch(
            MEDICAL_RECORDS,
            MedicalRecord,
            _MEDICAL_RECORD_SELECT,
            [Order("visit_date", ascending=False)],
        )

    async def create_patient(self, request: PatientRequest) -> Patient:
        return await self._insert(PATIENTS, request.model_dump(mode="json"), Patient)

    async def create_appointment(self, request: AppointmentRequest) -> Appointment:
        return await self._insert(APPOINTMENTS, request.model_dump(mode="json"), Appointment)

    async def create_medical_record(self, request: MedicalRecordRequest) -> MedicalRecord:
        return await self._insert(MEDICAL_RECORDS, request.model_dump(mode="json"), MedicalRecord)

    async def health_check(self) -> bool:
        return await self._client.health_check()

    async def close(self) -> None:
        await self._client.close()
