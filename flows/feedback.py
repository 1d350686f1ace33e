"""Ratings and reviews per (customer, service).

A second rating for the same pair replaces the first; a second review is
refused. Both behaviours are kept as the marketplace has always had them.
"""
import logging
from datetime import datetime
from database.db import db
from models import Rating, Review, Service, User
from utils.errors import InvalidInput, NotFound

logger = logging.getLogger(__name__)


def _lookup_parties(customer_id, vendor_id, service_id):
    if not all([customer_id, vendor_id, service_id]):
        raise InvalidInput("Customer ID, vendor ID and service ID are required")
    customer = db.session.get(User, customer_id)
    if not customer:
        raise NotFound("Customer not found")
    service = db.session.get(Service, service_id)
    if not service:
        raise NotFound("Service not found")
    vendor = db.session.get(User, vendor_id)
    if not vendor:
        raise NotFound("Vendor not found")
    if service.vendor_id != vendor.id:
        raise InvalidInput("Service does not belong to this vendor")
    return customer, vendor, service


def submit_rating(customer_id, service_id, vendor_id, rating):
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidInput("Rating must be a whole number")
    customer, vendor, service = _lookup_parties(customer_id, vendor_id, service_id)

    existing = Rating.query.filter_by(customer_id=customer.id, service_id=service.id).first()
    if existing:
        existing.rating = rating
        existing.rating_date = datetime.utcnow()
        db.session.commit()
        logger.info("Rating %s updated to %s", existing.id, rating)
        return existing, False

    new_rating = Rating(
        customer_id=customer.id,
        customer_name=customer.name,
        vendor_id=vendor.id,
        vendor_name=vendor.name,
        service_id=service.id,
        service_name=service.organization_name,
        rating=rating
    )
    db.session.add(new_rating)
    db.session.commit()
    logger.info("Rating %s submitted for service %s", new_rating.id, service.id)
    return new_rating, True


def submit_review(customer_id, service_id, vendor_id, comment):
    comment = comment.strip() if isinstance(comment, str) else ""
    if not comment:
        raise InvalidInput("Comment is required")
    customer, vendor, service = _lookup_parties(customer_id, vendor_id, service_id)

    if Review.query.filter_by(customer_id=customer.id, service_id=service.id).first():
        raise InvalidInput("You have already reviewed this service")

    review = Review(
        customer_id=customer.id,
        customer_name=customer.name,
        vendor_id=vendor.id,
        vendor_name=vendor.name,
        service_id=service.id,
        service_name=service.organization_name,
        comment=comment
    )
    db.session.add(review)
    db.session.commit()
    logger.info("Review %s submitted for service %s", review.id, service.id)
    return review


def vendor_ratings(vendor_id):
    return Rating.query.filter_by(vendor_id=vendor_id) \
        .order_by(Rating.created_at.desc(), Rating.id.desc()).all()


def vendor_aggregate(vendor_id):
    ratings = vendor_ratings(vendor_id)
    if not ratings:
        return {"averageRating": 0, "totalRatings": 0, "ratings": []}

    average = round(sum(r.rating for r in ratings) / len(ratings), 1)
    return {
        "averageRating": average,
        "totalRatings": len(ratings),
        "ratings": [r.to_dict() for r in ratings]
    }


def customer_ratings(customer_id):
    return Rating.query.filter_by(customer_id=customer_id) \
        .order_by(Rating.created_at.desc(), Rating.id.desc()).all()


def vendor_reviews(vendor_id):
    return Review.query.filter_by(vendor_id=vendor_id) \
        .order_by(Review.created_at.desc(), Review.id.desc()).all()


def customer_reviews(customer_id):
    return Review.query.filter_by(customer_id=customer_id) \
        .order_by(Review.created_at.desc(), Review.id.desc()).all()
