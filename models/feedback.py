from datetime import datetime
from database.db import db


class Rating(db.Model):
    __tablename__ = "ratings"

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    customer_name = db.Column(db.String(120), nullable=False)
    vendor_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    vendor_name = db.Column(db.String(120), nullable=False)
    service_id = db.Column(db.Integer, db.ForeignKey("services.id"), nullable=False)
    service_name = db.Column(db.String(120), nullable=False)
    rating = db.Column(db.Integer, nullable=False)
    rating_date = db.Column(db.DateTime, default=datetime.utcnow)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # the 1-5 range lives only here
    __table_args__ = (
        db.UniqueConstraint("customer_id", "service_id", name="uq_ratings_customer_service"),
        db.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_ratings_range"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "customerName": self.customer_name,
            "vendorId": self.vendor_id,
            "vendorName": self.vendor_name,
            "serviceId": self.service_id,
            "serviceName": self.service_name,
            "rating": self.rating,
            "ratingDate": self.rating_date.isoformat() if self.rating_date else None
        }


class Review(db.Model):
    __tablename__ = "reviews"

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    customer_name = db.Column(db.String(120), nullable=False)
    vendor_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    vendor_name = db.Column(db.String(120), nullable=False)
    service_id = db.Column(db.Integer, db.ForeignKey("services.id"), nullable=False)
    service_name = db.Column(db.String(120), nullable=False)
    comment = db.Column(db.Text, nullable=False)
    review_date = db.Column(db.DateTime, default=datetime.utcnow)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("customer_id", "service_id", name="uq_reviews_customer_service"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "customerName": self.customer_name,
            "vendorId": self.vendor_id,
            "vendorName": self.vendor_name,
            "serviceId": self.service_id,
            "serviceName": self.service_name,
            "comment": self.comment,
            "reviewDate": self.review_date.isoformat() if self.review_date else None
        }
