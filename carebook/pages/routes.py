from enum import Enum


class Route(Enum):
    HOME = "/"
    PATIENTS = "/patients"
    NEW_PATIENT = "/patients/new"
    APPOINTMENTS = "/appointments"
    NEW_APPOINTMENT = "/appointments/new"
    MEDICAL_RECORDS = "/medical-records"
    NEW_MEDICAL_RECORD = "/medical-records/new"

    def with_patient(self, patient_id: int | str) -> str:
        """Link to a form with the patient preselected, e.g. ``/appointments/new?patient=3``."""
        return f"{self.value}?patient={patient_id}"


# (title, description, primary action, secondary action)
HOME_SECTIONS: list[tuple[str, str, tuple[str, Route], tuple[str, Route]]] = [
    (
        "Patient Management",
        "Register new patients and manage existing patient records",
        ("Register New Patient", Route.NEW_PATIENT),
        ("View All Patients", Route.PATIENTS),
    ),
    (
        "Appointments",
        "Schedule and manage patient appointments",
        ("Schedule Appointment", Route.NEW_APPOINTMENT),
        ("View Appointments", Route.APPOINTMENTS),
    ),
    (
        "Medical Records",
        "Access and update patient medical history",
        ("Add Medical Record", Route.NEW_MEDICAL_RECORD),
        ("View Records", Route.MEDICAL_RECORDS),
    ),
]
