import logging
from database.db import db
from models import Booking, Payment, PaymentService, Rating, Review, Service, User
from utils.errors import InvalidInput, NotFound
from utils.roles import SIGNUP_ROLES

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def register_user(name, email, password, number, address, role=None):
    fields = [name, email, password, number, address]
    if not all(isinstance(f, str) and f.strip() for f in fields):
        raise InvalidInput("Name, email, password, number and address are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    role = role or "customer"
    if role not in SIGNUP_ROLES:
        raise InvalidInput(f"Invalid role: {role}")

    email = email.strip().lower()
    if User.query.filter_by(email=email).first():
        raise InvalidInput("User already exists")

    user = User(name=name.strip(), email=email, number=number.strip(),
                address=address.strip(), role=role)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    logger.info("Registered %s account %s", role, user.email)
    return user


def authenticate(email, password):
    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        raise InvalidInput("Invalid credentials")
    user = User.query.filter_by(email=email.strip().lower()).first()
    if not user or not user.check_password(password):
        raise InvalidInput("Invalid credentials")
    return user


def list_users(role=None):
    query = User.query
    if role:
        query = query.filter_by(role=role)
    return query.order_by(User.created_at.desc(), User.id.desc()).all()


def _delete_payments(payments):
    for payment in payments:
        db.session.delete(payment)
    return len(payments)


def purge_vendor_data(user):
    service_ids = [s.id for s in Service.query.filter_by(vendor_id=user.id).all()]
    counts = {"payments": 0}
    if service_ids:
        payments = Payment.query.join(PaymentService).filter(
            PaymentService.service_id.in_(service_ids)).distinct().all()
        counts["payments"] = _delete_payments(payments)
        db.session.flush()
    # bookings and feedback reference the services, so they go first
    counts["bookings"] = Booking.query.filter_by(vendor_id=user.id).delete(synchronize_session=False)
    counts["reviews"] = Review.query.filter_by(vendor_id=user.id).delete(synchronize_session=False)
    counts["ratings"] = Rating.query.filter_by(vendor_id=user.id).delete(synchronize_session=False)
    counts["services"] = Service.query.filter_by(vendor_id=user.id).delete(synchronize_session=False)
    return counts


def purge_customer_data(user):
    counts = {
        "payments": _delete_payments(Payment.query.filter_by(user_id=user.id).all())
    }
    db.session.flush()
    counts["bookings"] = Booking.query.filter_by(customer_id=user.id).delete(synchronize_session=False)
    counts["reviews"] = Review.query.filter_by(customer_id=user.id).delete(synchronize_session=False)
    counts["ratings"] = Rating.query.filter_by(customer_id=user.id).delete(synchronize_session=False)
    return counts


ACCOUNT_CLEANUP = {
    "vendor": purge_vendor_data,
    "customer": purge_customer_data,
}


def delete_user(user_id):
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    cleanup = ACCOUNT_CLEANUP.get(user.role)
    if cleanup is None:
        raise InvalidInput("Cannot delete admin accounts")

    role, name = user.role, user.name
    counts = cleanup(user)
    db.session.delete(user)
    db.session.commit()
    logger.info("Deleted %s %s (id=%s) with related data %s", role, name, user_id, counts)
    return counts


def cleanup_orphaned():
    """Remove rows whose vendor, customer or service no longer exists."""
    user_ids = {uid for (uid,) in db.session.query(User.id).all()}

    services = Service.query.all()
    orphaned_services = [s for s in services if s.vendor_id not in user_ids]
    service_ids = {s.id for s in services if s.vendor_id in user_ids}

    def is_orphan(row):
        return (row.vendor_id not in user_ids or row.customer_id not in user_ids
                or row.service_id not in service_ids)

    orphaned_bookings = [b for b in Booking.query.all() if is_orphan(b)]
    orphaned_reviews = [r for r in Review.query.all() if is_orphan(r)]
    orphaned_ratings = [r for r in Rating.query.all() if is_orphan(r)]

    for row in orphaned_bookings + orphaned_reviews + orphaned_ratings:
        db.session.delete(row)
    db.session.flush()
    for service in orphaned_services:
        db.session.delete(service)
    db.session.commit()

    deleted = {
        "services": len(orphaned_services),
        "bookings": len(orphaned_bookings),
        "reviews": len(orphaned_reviews),
        "ratings": len(orphaned_ratings)
    }
    logger.info("Cleanup completed: %s", deleted)
    return deleted
