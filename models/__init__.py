from .accounts import User
from .catalog import Service
from .bookings import Booking
from .payments import Payment, PaymentService
from .feedback import Rating, Review
