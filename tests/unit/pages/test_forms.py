"""Unit tests for the creation forms."""

import asyncio
import datetime as dt

import pytest

from carebook.domain.exceptions import RecordCreationError, StoreUnavailableError
from carebook.pages.forms import (
    NewAppointmentForm,
    NewMedicalRecordForm,
    NewPatientForm,
    RecordForm,
)
from carebook.store.adapters.fake import FakeStoreClient
from carebook.store.service import RecordService

# Fixtures (fake_client, service, today) provided by tests/conftest.py


@pytest.fixture
def with_options(fake_client: FakeStoreClient) -> FakeStoreClient:
    fake_client.tables["patients"] = [
        {"id": 2, "first_name": "Bob", "last_name": "Stone", "date_of_birth": "1980-01-01"},
        {"id": 1, "first_name": "Ann", "last_name": "Lee", "date_of_birth": "1990-06-16"},
    ]
    fake_client.tables["doctors"] = [
        {"id": 1, "first_name": "Gregory", "last_name": "House", "specialization": "Diagnostics"},
    ]
    return fake_client


def _fill_appointment(form: NewAppointmentForm) -> None:
    form.set_field("patient_id", "1")
    form.set_field("doctor_id", "1")
    form.set_field("appointment_date", "2026-07-01")
    form.set_field("appointment_time", "14:30")


class TestNewAppointmentForm:
    @pytest.mark.asyncio
    async def test_loads_both_selectors(
        self, service: RecordService, with_options: FakeStoreClient, today: dt.date
    ) -> None:
        form = NewAppointmentForm(service, today=today)
        await form.load_options()

        result = form.render()

        assert result["patients"] == [
            {"value": "1", "label": "Ann Lee"},
            {"value": "2", "label": "Bob Stone"},
        ]
        assert result["doctors"] == [{"value": "1", "label": "Dr. Gregory House - Diagnostics"}]
        assert result["min_date"] == "2026-06-15"

    @pytest.mark.asyncio
    async def test_one_failed_selector_leaves_the_other(
        self, service: RecordService, with_options: FakeStoreClient
    ) -> None:
        with_options.select_errors["patients"] = StoreUnavailableError("down")
        form = NewAppointmentForm(service)
        await form.load_options()

        assert form.patients == []
        assert len(form.doctors) == 1

    @pytest.mark.asyncio
    async def test_failed_reload_keeps_prior_options(
        self, service: RecordService, with_options: FakeStoreClient
    ) -> None:
        form = NewAppointmentForm(service)
        await form.load_options()

        with_options.select_errors["doctors"] = StoreUnavailableError("down")
        with_options.tables["patients"].append({"id": 3, "first_name": "Cy", "last_name": "Ng"})
        await form.load_options()

        assert [d.id for d in form.doctors] == [1]
        assert len(form.patients) == 3

    def test_preselected_patient(self, service: RecordService) -> None:
        form = NewAppointmentForm(service, preselected_patient="7")

        assert form.data["patient_id"] == "7"

    @pytest.mark.asyncio
    async def test_submit_creates_and_redirects(
        self, service: RecordService, fake_client: FakeStoreClient
    ) -> None:
        form = NewAppointmentForm(service)
        _fill_appointment(form)
        form.set_field("reason", "Follow-up")

        result = await form.submit()

        assert result == {"success": True, "id": 1, "redirect": "/appointments"}
        table, row = fake_client.inserted[0]
        assert table == "appointments"
        assert row["patient_id"] == 1
        assert row["appointment_time"] == "14:30:00"
        assert row["reason"] == "Follow-up"
        assert row["status"] == "Scheduled"
        assert form.loading is False

    @pytest.mark.asyncio
    async def test_missing_required_fields(
        self, service: RecordService, fake_client: FakeStoreClient
    ) -> None:
        form = NewAppointmentForm(service)
        form.set_field("patient_id", "1")

        result = await form.submit()

        assert result["success"] is False
        assert result["missing"] == ["doctor_id", "appointment_date", "appointment_time"]
        assert fake_client.inserted == []

    @pytest.mark.asyncio
    async def test_store_failure_sets_notice(
        self, service: RecordService, fake_client: FakeStoreClient
    ) -> None:
        fake_client.insert_error = RecordCreationError(reason="violates foreign key")
        form = NewAppointmentForm(service)
        _fill_appointment(form)

        result = await form.submit()

        assert result["error"] is True
        assert form.notice == "Error scheduling appointment. Please try again."
        assert form.loading is False

    @pytest.mark.asyncio
    async def test_non_numeric_id_sets_notice(
        self, service: RecordService, fake_client: FakeStoreClient
    ) -> None:
        form = NewAppointmentForm(service)
        _fill_appointment(form)
        form.set_field("doctor_id", "abc")

        result = await form.submit()

        assert result["error"] is True
        assert form.notice == "Error scheduling appointment. Please try again."
        assert fake_client.inserted == []

    @pytest.mark.asyncio
    async def test_duplicate_submit_is_ignored(
        self, service: RecordService, fake_client: FakeStoreClient
    ) -> None:
        form = NewAppointmentForm(service)
        _fill_appointment(form)

        first, second = await asyncio.gather(form.submit(), form.submit())

        assert first["success"] is True
        assert second == {"success": False, "ignored": True}
        assert len(fake_client.inserted) == 1

    def test_submit_label_while_loading(self, service: RecordService) -> None:
        form = NewAppointmentForm(service)
        form.loading = True

        assert form.render()["submit_label"] == "Scheduling..."

    def test_unknown_field_rejected(self, service: RecordService) -> None:
        form = NewAppointmentForm(service)

        with pytest.raises(KeyError):
            form.set_field("diagnosis", "x")


class TestNewMedicalRecordForm:
    def test_visit_date_defaults_to_today(self, service: RecordService, today: dt.date) -> None:
        form = NewMedicalRecordForm(service, today=today)

        assert form.data["visit_date"] == "2026-06-15"
        assert form.render()["min_follow_up_date"] == "2026-06-15"

    @pytest.mark.asyncio
    async def test_patient_labels_include_age(
        self, service: RecordService, with_options: FakeStoreClient, today: dt.date
    ) -> None:
        form = NewMedicalRecordForm(service, today=today)
        await form.load_options()

        labels = [p["label"] for p in form.render()["patients"]]

        assert labels == ["Ann Lee (Age: 35)", "Bob Stone (Age: 46)"]

    @pytest.mark.asyncio
    async def test_blank_follow_up_is_sent_as_null(
        self, service: RecordService, fake_client: FakeStoreClient, today: dt.date
    ) -> None:
        form = NewMedicalRecordForm(service, preselected_patient="1", today=today)
        form.set_field("doctor_id", "1")
        form.set_field("diagnosis", "Migraine")

        result = await form.submit()

        assert result["redirect"] == "/medical-records"
        _, row = fake_client.inserted[0]
        assert row["patient_id"] == 1
        assert row["visit_date"] == "2026-06-15"
        assert row["follow_up_date"] is None
        assert row["diagnosis"] == "Migraine"

    @pytest.mark.asyncio
    async def test_past_follow_up_is_not_rejected(
        self, service: RecordService, fake_client: FakeStoreClient, today: dt.date
    ) -> None:
        form = NewMedicalRecordForm(service, preselected_patient="1", today=today)
        form.set_field("doctor_id", "1")
        form.set_field("follow_up_date", "2020-01-01")

        result = await form.submit()

        assert result["success"] is True
        assert fake_client.inserted[0][1]["follow_up_date"] == "2020-01-01"

    @pytest.mark.asyncio
    async def test_store_unavailable_sets_notice(
        self, service: RecordService, fake_client: FakeStoreClient, today: dt.date
    ) -> None:
        fake_client.insert_error = StoreUnavailableError("down")
        form = NewMedicalRecordForm(service, preselected_patient="1", today=today)
        form.set_field("doctor_id", "1")

        result = await form.submit()

        assert result["success"] is False
        assert form.notice == "Error creating medical record. Please try again."


class TestNewPatientForm:
    @pytest.mark.asyncio
    async def test_registers_patient(
        self, service: RecordService, fake_client: FakeStoreClient
    ) -> None:
        form = NewPatientForm(service, first_name="Ann", last_name="Lee")
        form.set_field("date_of_birth", "1990-06-16")
        form.set_field("blood_type", "O+")

        result = await form.submit()

        assert result == {"success": True, "id": 1, "redirect": "/patients"}
        _, row = fake_client.inserted[0]
        assert row["blood_type"] == "O+"
        assert row["date_of_birth"] == "1990-06-16"

    @pytest.mark.asyncio
    async def test_whitespace_counts_as_missing(
        self, service: RecordService, fake_client: FakeStoreClient
    ) -> None:
        form = NewPatientForm(service, first_name="  ", last_name="Lee", date_of_birth="1990-01-01")

        result = await form.submit()

        assert result["missing"] == ["first_name"]
        assert form.notice == "Missing required fields: first_name"


class TestRecordForm:
    def test_base_form_is_abstract(self, service: RecordService) -> None:
        with pytest.raises(TypeError, match="abstract"):
            RecordForm(service)  # type: ignore[abstract]
