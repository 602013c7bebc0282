from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, NamedTuple, Protocol

from carebook.domain.models import (
    Appointment,
    AppointmentRequest,
    Doctor,
    MedicalRecord,
    MedicalRecordRequest,
    Patient,
    PatientRequest,
)


class Order(NamedTuple):
    """One ``ORDER BY`` term of a table read."""

    column: str
    ascending: bool = True


class AbstractRecordService(ABC):
    """Abstract base class for the hospital record operations used by the pages."""

    @abstractmethod
    async def list_patients(self) -> list[Patient]:
        """Fetch every patient, newest first.

        Returns:
            All patients.

        Raises:
            StoreError: If the table cannot be read.
        """

    @abstractmethod
    async def list_patient_options(self) -> list[Patient]:
        """Fetch the patient columns needed for a form selector, ordered by last name."""

    @abstractmethod
    async def list_doctors(self) -> list[Doctor]:
        """Fetch every doctor, ordered by last name."""

    @abstractmethod
    async def list_appointments(self) -> list[Appointment]:
        """Fetch every appointment with its patient and doctor, soonest first."""

    @abstractmethod
    async def list_medical_records(self) -> list[MedicalRecord]:
        """Fetch every medical record with its patient and doctor, latest visit first."""

    @abstractmethod
    async def create_patient(self, request: PatientRequest) -> Patient:
        """Insert a patient.

        Raises:
            RecordCreationError: If the row cannot be inserted.
            StoreUnavailableError: If the store is unreachable.
        """

    @abstractmethod
    async def create_appointment(self, request: AppointmentRequest) -> Appointment:
        """Insert an appointment.

        Raises:
            RecordCreationError: If the row cannot be inserted.
            StoreUnavailableError: If the store is unreachable.
        """

    @abstractmethod
    async def create_medical_record(self, request: MedicalRecordRequest) -> MedicalRecord:
        """Insert a medical record.

        Raises:
            RecordCreationError: If the row cannot be inserted.
            StoreUnavailableError: If the store is unreachable.
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable and responding."""

    @abstractmethod
    async def close(self) -> None:
        """Release resources held by this service."""


class StoreClientProtocol(Protocol):
    """Low-level table interface of the hosted database."""

    async def select(
        self, table: str, columns: str = "*", order: Sequence[Order] = ()
    ) -> list[dict[str, Any]]:
        """Read a whole table, ordered by ``order``."""
        ...

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored."""
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...

    async def close(self) -> None:
        """Release resources."""
        ...
