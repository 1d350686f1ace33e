from flask import Blueprint, jsonify, g
from flows import feedback
from utils.auth import capability_required, ensure_self_or_admin, token_required
from utils.errors import register_error_handlers
from utils.params import json_body, parse_id
from utils.roles import GIVE_FEEDBACK

ratings_bp = Blueprint('ratings', __name__)
register_error_handlers(ratings_bp, key="message")


@ratings_bp.route('/submit', methods=['POST'])
@capability_required(GIVE_FEEDBACK)
def submit_rating():
    data = json_body()
    customer_id = parse_id(data.get('customerId'), "customer ID") or g.current_user.id
    ensure_self_or_admin(customer_id)

    rating, created = feedback.submit_rating(
        customer_id=customer_id,
        service_id=parse_id(data.get('serviceId'), "service ID"),
        vendor_id=parse_id(data.get('vendorId'), "vendor ID"),
        rating=data.get('rating')
    )
    return jsonify({
        "success": True,
        "message": "Rating submitted successfully" if created else "Rating updated successfully",
        "rating": rating.to_dict()
    })


@ratings_bp.route('/vendor/<int:vendor_id>', methods=['GET'])
def get_vendor_rating(vendor_id):
    return jsonify(feedback.vendor_aggregate(vendor_id))


@ratings_bp.route('/vendor/<int:vendor_id>/all', methods=['GET'])
def get_all_vendor_ratings(vendor_id):
    return jsonify([r.to_dict() for r in feedback.vendor_ratings(vendor_id)])


@ratings_bp.route('/customer/<int:customer_id>', methods=['GET'])
@token_required
def get_customer_ratings(customer_id):
    ensure_self_or_admin(customer_id)
    return jsonify([r.to_dict() for r in feedback.customer_ratings(customer_id)])
