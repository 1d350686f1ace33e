import logging
import math
import random
import string
import time
from numbers import Number
from database.db import db
from models import Booking, Payment, PaymentService, Service, User
from models.payments import PAYMENT_METHODS
from utils.errors import InvalidInput, NotFound

logger = logging.getLogger(__name__)

CARD_NUMBER_LENGTH = 14
MOBILE_NUMBER_LENGTH = 11
_TXN_ALPHABET = string.ascii_uppercase + string.digits


def generate_transaction_id():
    """``TXN`` + epoch milliseconds + 9 random base-36 characters.

    Uniqueness is probabilistic; the unique index on ``transaction_id`` is the
    only guard and a collision is not retried.
    """
    suffix = "".join(random.choices(_TXN_ALPHABET, k=9))
    return f"TXN{int(time.time() * 1000)}{suffix}"


def pending_total(customer_id):
    bookings = Booking.query.filter_by(customer_id=customer_id, payment_status="pending") \
        .order_by(Booking.created_at.desc(), Booking.id.desc()).all()
    services = [
        {
            "serviceId": b.service_id,
            "serviceName": b.service_name,
            "servicePrice": b.total_amount,
            "bookingId": b.id,
            "vendorId": b.vendor_id,
            "vendorName": b.vendor_name
        }
        for b in bookings
    ]
    return {
        "totalDue": sum(b.total_amount for b in bookings),
        "services": services,
        "count": len(services)
    }


def _is_number(value):
    return isinstance(value, Number) and not isinstance(value, bool) and math.isfinite(value)


def _validate_instrument(method, card_number, mobile_number):
    if method == "bank":
        digits, expected, label = card_number, CARD_NUMBER_LENGTH, "Card number"
    else:
        digits, expected, label = mobile_number, MOBILE_NUMBER_LENGTH, "Mobile number"
    if not isinstance(digits, str) or not digits.isdigit() or len(digits) != expected:
        raise InvalidInput(f"{label} must be {expected} digits")
    return digits


def _parse_services(services):
    if not isinstance(services, list) or not services:
        raise InvalidInput("At least one service is required")
    items = []
    for entry in services:
        if not isinstance(entry, dict) or not entry.get("serviceId") or not entry.get("bookingId"):
            raise InvalidInput("Each service needs a serviceId and a bookingId")
        try:
            items.append({
                "service_id": int(entry["serviceId"]),
                "booking_id": int(entry["bookingId"]),
                "service_name": entry.get("serviceName") or "",
                "service_price": int(entry.get("servicePrice") or 0)
            })
        except (TypeError, ValueError):
            raise InvalidInput("Invalid service entry")
    return items


def process_payment(user_id, payment_method, payment_provider, amount, required_amount,
                    services, card_number=None, mobile_number=None):
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    if payment_method not in PAYMENT_METHODS:
        raise InvalidInput("Payment method must be mobile_banking or bank")
    if not payment_provider:
        raise InvalidInput("Payment provider is required")
    if not _is_number(amount) or not _is_number(required_amount):
        raise InvalidInput("Amount and required amount must be numbers")
    digits = _validate_instrument(payment_method, card_number, mobile_number)
    items = _parse_services(services)

    bookings = {}
    for item in items:
        booking = db.session.get(Booking, item["booking_id"])
        if not booking or booking.customer_id != user.id:
            raise NotFound(f"Booking {item['booking_id']} not found")
        if booking.service_id != item["service_id"]:
            raise InvalidInput(f"Booking {booking.id} is not for service {item['service_id']}")
        bookings[item["booking_id"]] = booking
        if not item["service_name"]:
            item["service_name"] = booking.service_name
        if not item["service_price"]:
            item["service_price"] = booking.total_amount

    # strict equality: no tolerance, no partial payment, no overpayment
    payment_status = "successful" if amount == required_amount else "unsuccessful"

    payment = Payment(
        user_id=user.id,
        customer_name=user.name,
        customer_email=user.email,
        customer_phone=user.number,
        payment_method=payment_method,
        payment_provider=payment_provider,
        amount=amount,
        required_amount=required_amount,
        payment_status=payment_status,
        transaction_id=generate_transaction_id()
    )
    if payment_method == "bank":
        payment.card_number = digits
    else:
        payment.mobile_number = digits
    payment.services = [PaymentService(**item) for item in items]
    db.session.add(payment)

    if payment_status == "successful":
        for item in items:
            booking = bookings[item["booking_id"]]
            booking.payment_status = "paid"
            booking.status = "confirmed"
            Service.query.filter_by(id=item["service_id"]).update(
                {"availability": "Yes"}, synchronize_session=False)

    db.session.commit()
    logger.info("Payment %s for user %s: %s (amount=%s required=%s, %d services)",
                payment.transaction_id, user.id, payment_status, amount, required_amount, len(items))
    return payment


def payment_history(user_id):
    return Payment.query.filter_by(user_id=user_id) \
        .order_by(Payment.created_at.desc(), Payment.id.desc()).all()
