from flask import Blueprint, jsonify, g
from flows import payment as payment_flow
from utils.auth import capability_required, ensure_self_or_admin, token_required
from utils.errors import register_error_handlers
from utils.params import json_body, parse_id
from utils.roles import MAKE_PAYMENTS

payments_bp = Blueprint('payments', __name__)
register_error_handlers(payments_bp, key="message")


@payments_bp.route('/pending/<int:user_id>', methods=['GET'])
@token_required
def get_pending_payments(user_id):
    ensure_self_or_admin(user_id)
    pending = payment_flow.pending_total(user_id)
    if not pending["services"]:
        pending["message"] = "No pending payments found"
    return jsonify(pending)


@payments_bp.route('/process', methods=['POST'])
@capability_required(MAKE_PAYMENTS)
def process_payment():
    data = json_body()
    user_id = parse_id(data.get('userId'), "user ID") or g.current_user.id
    ensure_self_or_admin(user_id)

    payment = payment_flow.process_payment(
        user_id=user_id,
        payment_method=data.get('paymentMethod'),
        payment_provider=data.get('paymentProvider'),
        card_number=data.get('cardNumber'),
        mobile_number=data.get('mobileNumber'),
        amount=data.get('amount'),
        required_amount=data.get('requiredAmount'),
        services=data.get('services')
    )
    success = payment.payment_status == "successful"
    return jsonify({
        "success": success,
        "paymentStatus": payment.payment_status,
        "transactionId": payment.transaction_id,
        "message": "Your Payment is Successful!!!" if success
        else "Payment unsuccessful - Amount does not match required amount"
    })


@payments_bp.route('/history/<int:user_id>', methods=['GET'])
@token_required
def get_payment_history(user_id):
    ensure_self_or_admin(user_id)
    return jsonify([p.to_dict() for p in payment_flow.payment_history(user_id)])
