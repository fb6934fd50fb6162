"""
Appointment status state machine.

    pending  -> accepted | rejected | cancelled
    accepted -> completed | cancelled

``rejected``, ``completed`` and ``cancelled`` are terminal. Doctors drive
accept/reject/complete on their own appointments, patients may only cancel
their own, admins may drive any valid transition.
"""
from typing import Dict, FrozenSet

from ..core.security import UserRole
from ..models.appointment import AppointmentStatus
from .errors import InvalidStatusTransition, NotAuthorized

TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({
        AppointmentStatus.ACCEPTED,
        AppointmentStatus.REJECTED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.ACCEPTED: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.REJECTED: frozenset(),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}

DOCTOR_TARGETS = frozenset({
    AppointmentStatus.ACCEPTED,
    AppointmentStatus.REJECTED,
    AppointmentStatus.COMPLETED,
})
PATIENT_TARGETS = frozenset({AppointmentStatus.CANCELLED})


def is_terminal(status: AppointmentStatus) -> bool:
    return not TRANSITIONS[AppointmentStatus(status)]


def check_transition(current: AppointmentStatus, target: AppointmentStatus) -> None:
    current, target = AppointmentStatus(current), AppointmentStatus(target)
    if target not in TRANSITIONS[current]:
        raise InvalidStatusTransition(
            f"Appointment cannot move from '{current.value}' to '{target.value}'"
        )


def authorize_transition(appointment, target: AppointmentStatus, actor) -> None:
    """Raise ``NotAuthorized`` unless ``actor`` may drive ``target`` on ``appointment``."""
    target = AppointmentStatus(target)
    role = UserRole(actor.role)

    if role == UserRole.ADMIN:
        return
    if role == UserRole.DOCTOR and appointment.doctor_id == actor.id and target in DOCTOR_TARGETS:
        return
    if role == UserRole.PATIENT and appointment.patient_id == actor.id and target in PATIENT_TARGETS:
        return

    raise NotAuthorized()
