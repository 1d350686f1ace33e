from flask import Blueprint, jsonify, g
from flows import feedback
from utils.auth import capability_required, ensure_self_or_admin, token_required
from utils.errors import register_error_handlers
from utils.params import json_body, parse_id
from utils.roles import GIVE_FEEDBACK

reviews_bp = Blueprint('reviews', __name__)
register_error_handlers(reviews_bp, key="message")


@reviews_bp.route('/submit', methods=['POST'])
@capability_required(GIVE_FEEDBACK)
def submit_review():
    data = json_body()
    customer_id = parse_id(data.get('customerId'), "customer ID") or g.current_user.id
    ensure_self_or_admin(customer_id)

    review = feedback.submit_review(
        customer_id=customer_id,
        service_id=parse_id(data.get('serviceId'), "service ID"),
        vendor_id=parse_id(data.get('vendorId'), "vendor ID"),
        comment=data.get('comment')
    )
    return jsonify({
        "success": True,
        "message": "Review submitted successfully",
        "review": review.to_dict()
    }), 201


@reviews_bp.route('/vendor/<int:vendor_id>', methods=['GET'])
def get_vendor_reviews(vendor_id):
    return jsonify([r.to_dict() for r in feedback.vendor_reviews(vendor_id)])


@reviews_bp.route('/customer/<int:customer_id>', methods=['GET'])
@token_required
def get_customer_reviews(customer_id):
    ensure_self_or_admin(customer_id)
    return jsonify([r.to_dict() for r in feedback.customer_reviews(customer_id)])
