from flask import Blueprint, jsonify, request, g
from flows import accounts
from utils.auth import capability_required, generate_token, token_required
from utils.errors import register_error_handlers
from utils.params import json_body
from utils.roles import MANAGE_ACCOUNTS, capabilities_for

users_bp = Blueprint('users', __name__)
register_error_handlers(users_bp, key="msg")


@users_bp.route('/signup', methods=['POST'])
def signup():
    data = json_body()
    user = accounts.register_user(
        name=data.get('name'),
        email=data.get('email'),
        password=data.get('password'),
        number=data.get('number'),
        address=data.get('address'),
        role=data.get('role')
    )
    return jsonify({"msg": "User registered successfully", "user": user.to_dict()}), 201


@users_bp.route('/login', methods=['POST'])
def login():
    data = json_body()
    user = accounts.authenticate(data.get('email'), data.get('password'))
    return jsonify({
        "user": user.to_dict(),
        "token": generate_token(user),
        "capabilities": sorted(capabilities_for(user.role))
    }), 200


@users_bp.route('/session', methods=['GET'])
@token_required
def get_session_info():
    user = g.current_user
    return jsonify({
        "logged_in": True,
        "user": user.to_dict(),
        "capabilities": sorted(capabilities_for(user.role))
    })


@users_bp.route('', methods=['GET'])
@users_bp.route('/', methods=['GET'])
@capability_required(MANAGE_ACCOUNTS)
def get_users():
    users = accounts.list_users(role=request.args.get('role'))
    return jsonify([u.to_dict() for u in users])


@users_bp.route('/<int:user_id>', methods=['DELETE'])
@capability_required(MANAGE_ACCOUNTS)
def delete_user(user_id):
    deleted = accounts.delete_user(user_id)
    return jsonify({"msg": "User deleted successfully", "deleted": deleted}), 200


@users_bp.route('/cleanup-orphaned', methods=['POST'])
@capability_required(MANAGE_ACCOUNTS)
def cleanup_orphaned():
    deleted = accounts.cleanup_orphaned()
    return jsonify({"msg": "Cleanup completed successfully", "deleted": deleted}), 200
