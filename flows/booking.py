"""Booking creation and the availability flag it flips.

A booking snapshots the customer, vendor and service at creation time, so
later edits to a listing never change what the customer agreed to pay.
"""
import logging
from datetime import datetime
from sqlalchemy import func
from database.db import db
from models import Booking, Service, User
from models.bookings import ACTIVE_STATUSES, BOOKING_STATUSES, PAYMENT_STATUSES
from utils.errors import InvalidInput, InvalidState, NotFound

logger = logging.getLogger(__name__)


def _parse_event_date(value):
    if not value:
        return None
    try:
        return datetime.strptime(value[:10], "%Y-%m-%d")
    except (TypeError, ValueError):
        raise InvalidInput("Invalid event date format. Use YYYY-MM-DD.")


def create_booking(customer_id, service_id, event_date=None, special_requirements=None):
    if not customer_id or not service_id:
        raise InvalidInput("Customer ID and Service ID are required")

    customer = db.session.get(User, customer_id)
    if not customer:
        raise NotFound("Customer not found")
    service = db.session.get(Service, service_id)
    if not service:
        raise NotFound("Service not found")
    vendor = db.session.get(User, service.vendor_id)
    if not vendor:
        raise NotFound("Vendor not found")
    if not service.is_available:
        raise InvalidState("Service is not available for booking")

    booking = Booking(
        customer_id=customer.id,
        customer_name=customer.name,
        customer_email=customer.email,
        customer_phone=customer.number,
        vendor_id=vendor.id,
        vendor_name=service.vendor_name,
        vendor_email=vendor.email,
        service_id=service.id,
        service_name=service.organization_name,
        service_category=service.category,
        service_price=service.price,
        service_description=service.description,
        event_date=_parse_event_date(event_date),
        total_amount=service.price,
        special_requirements=special_requirements or ""
    )
    db.session.add(booking)

    # Only one request can move the flag from Yes to No.
    flipped = Service.query.filter_by(id=service.id, availability="Yes").update(
        {"availability": "No"}, synchronize_session=False)
    if flipped != 1:
        raise InvalidState("Service is not available for booking")

    db.session.commit()
    logger.info("Booking %s created: customer=%s service=%s amount=%s",
                booking.id, customer.id, service.id, booking.total_amount)
    return booking


def list_bookings(customer_id=None, vendor_id=None):
    query = Booking.query
    if customer_id is not None:
        query = query.filter_by(customer_id=customer_id)
    if vendor_id is not None:
        query = query.filter_by(vendor_id=vendor_id)
    return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()


def get_booking(booking_id):
    booking = db.session.get(Booking, booking_id)
    if not booking:
        raise NotFound("Booking not found")
    return booking


def update_status(booking_id, status):
    if not status:
        raise InvalidInput("Status is required")
    if status not in BOOKING_STATUSES:
        raise InvalidInput(f"Invalid status: {status}")
    booking = get_booking(booking_id)
    booking.status = status
    db.session.commit()
    return booking


def update_payment_status(booking_id, payment_status):
    if not payment_status:
        raise InvalidInput("Payment status is required")
    if payment_status not in PAYMENT_STATUSES:
        raise InvalidInput(f"Invalid payment status: {payment_status}")
    booking = get_booking(booking_id)
    booking.payment_status = payment_status
    db.session.commit()
    return booking


def vendor_summary(vendor_id):
    def total_for(payment_status):
        return db.session.query(func.coalesce(func.sum(Booking.total_amount), 0)).filter(
            Booking.vendor_id == vendor_id, Booking.payment_status == payment_status).scalar()

    active = Booking.query.filter(Booking.vendor_id == vendor_id,
                                  Booking.status.in_(ACTIVE_STATUSES)).count()
    return {
        "vendorId": vendor_id,
        "totalBookings": Booking.query.filter_by(vendor_id=vendor_id).count(),
        "activeBookings": active,
        "totalEarnings": int(total_for("paid")),
        "pendingPayments": int(total_for("pending"))
    }
