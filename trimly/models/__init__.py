from trimly.models.barbershop import Barbershop
from trimly.models.barber import Barber
from trimly.models.service import Service
from trimly.models.appointment import Appointment, AppointmentStatus, PaymentMethod, PaymentStatus

__all__ = [
    "Barbershop",
    "Barber",
    "Service",
    "Appointment",
    "AppointmentStatus",
    "PaymentMethod",
    "PaymentStatus",
]
