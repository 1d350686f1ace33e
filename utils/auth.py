import jwt
from datetime import datetime, timedelta
from functools import wraps
from flask import current_app, g, request
from database.db import db
from models.accounts import User
from utils.errors import Forbidden, Unauthorized
from utils.roles import can, is_admin


def generate_token(user, expires_in=None):
    if expires_in is None:
        expires_in = current_app.config.get("TOKEN_EXPIRES_IN", 3600)
    payload = {
        "user_id": user.id,
        "role": user.role,
        "exp": datetime.utcnow() + timedelta(seconds=expires_in),
        "iat": datetime.utcnow()
    }

    token = jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")
    return token


def decode_token(token):
    try:
        payload = jwt.decode(token, current_app.config["SECRET_KEY"], algorithms=["HS256"])
        return payload  # Returns dict with user_id, role, etc.
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def _bearer_token():
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def token_required(view):
    """Load the account named by the bearer token into ``g.current_user``."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if not token:
            raise Unauthorized("Missing authorization token")
        payload = decode_token(token)
        if not payload:
            raise Unauthorized("Invalid or expired token")
        user = db.session.get(User, payload.get("user_id"))
        if not user:
            raise Unauthorized("Account no longer exists")
        g.current_user = user
        return view(*args, **kwargs)
    return wrapper


def capability_required(capability):
    def decorator(view):
        @wraps(view)
        @token_required
        def wrapper(*args, **kwargs):
            if not can(g.current_user, capability):
                raise Forbidden("Not allowed for this account type")
            return view(*args, **kwargs)
        return wrapper
    return decorator


def ensure_self_or_admin(user_id):
    user = g.current_user
    if user.id != user_id and not is_admin(user):
        raise Forbidden("Not allowed to access another account")
