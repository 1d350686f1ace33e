from flask import Blueprint, jsonify, g
from flows import booking as booking_flow
from utils.auth import capability_required, ensure_self_or_admin, token_required
from utils.errors import Forbidden, register_error_handlers
from utils.params import json_body, parse_id
from utils.roles import BOOK_SERVICES, MANAGE_ACCOUNTS, MANAGE_BOOKINGS, can, is_admin

bookings_bp = Blueprint('bookings', __name__)
register_error_handlers(bookings_bp, key="msg")


def _ensure_party(booking):
    user = g.current_user
    if user.id not in (booking.customer_id, booking.vendor_id) and not is_admin(user):
        raise Forbidden("Not allowed to access this booking")


def _ensure_manager(booking):
    user = g.current_user
    if not can(user, MANAGE_BOOKINGS):
        raise Forbidden("Not allowed for this account type")
    if user.id != booking.vendor_id and not is_admin(user):
        raise Forbidden("Not allowed to manage this booking")


@bookings_bp.route('', methods=['GET'])
@bookings_bp.route('/', methods=['GET'])
@capability_required(MANAGE_ACCOUNTS)
def get_all_bookings():
    return jsonify([b.to_dict() for b in booking_flow.list_bookings()])


@bookings_bp.route('', methods=['POST'])
@bookings_bp.route('/', methods=['POST'])
@capability_required(BOOK_SERVICES)
def create_booking():
    data = json_body()
    customer_id = parse_id(data.get('customerId'), "customer ID") or g.current_user.id
    ensure_self_or_admin(customer_id)

    booking = booking_flow.create_booking(
        customer_id=customer_id,
        service_id=parse_id(data.get('serviceId'), "service ID"),
        event_date=data.get('eventDate'),
        special_requirements=data.get('specialRequirements')
    )
    return jsonify({"msg": "Booking created successfully", "booking": booking.to_dict()}), 201


@bookings_bp.route('/customer/<int:customer_id>', methods=['GET'])
@token_required
def get_customer_bookings(customer_id):
    ensure_self_or_admin(customer_id)
    return jsonify([b.to_dict() for b in booking_flow.list_bookings(customer_id=customer_id)])


@bookings_bp.route('/vendor/<int:vendor_id>', methods=['GET'])
@token_required
def get_vendor_bookings(vendor_id):
    ensure_self_or_admin(vendor_id)
    return jsonify([b.to_dict() for b in booking_flow.list_bookings(vendor_id=vendor_id)])


@bookings_bp.route('/vendor/<int:vendor_id>/summary', methods=['GET'])
@token_required
def get_vendor_summary(vendor_id):
    ensure_self_or_admin(vendor_id)
    return jsonify(booking_flow.vendor_summary(vendor_id))


@bookings_bp.route('/<int:booking_id>', methods=['GET'])
@token_required
def get_booking(booking_id):
    booking = booking_flow.get_booking(booking_id)
    _ensure_party(booking)
    return jsonify(booking.to_dict())


@bookings_bp.route('/<int:booking_id>/status', methods=['PUT'])
@token_required
def update_booking_status(booking_id):
    data = json_body()
    _ensure_manager(booking_flow.get_booking(booking_id))
    booking = booking_flow.update_status(booking_id, data.get('status'))
    return jsonify({"msg": "Booking status updated successfully", "booking": booking.to_dict()})


@bookings_bp.route('/<int:booking_id>/payment', methods=['PUT'])
@token_required
def update_payment_status(booking_id):
    data = json_body()
    _ensure_manager(booking_flow.get_booking(booking_id))
    booking = booking_flow.update_payment_status(booking_id, data.get('paymentStatus'))
    return jsonify({"msg": "Payment status updated successfully", "booking": booking.to_dict()})
