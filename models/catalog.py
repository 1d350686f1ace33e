from datetime import datetime
from database.db import db

CATEGORIES = ("Decoration", "Photography", "Transportation", "Music", "Food")
AVAILABILITY = ("Yes", "No")
DESCRIPTION_MAX_LENGTH = 150


class Service(db.Model):
    __tablename__ = "services"

    id = db.Column(db.Integer, primary_key=True)
    organization_name = db.Column(db.String(120), nullable=False)
    category = db.Column(db.Enum(*CATEGORIES, name="service_category"), nullable=False)
    price = db.Column(db.Integer, nullable=False)
    availability = db.Column(db.Enum(*AVAILABILITY, name="service_availability"), nullable=False, default="Yes")
    description = db.Column(db.String(DESCRIPTION_MAX_LENGTH), nullable=False)
    vendor_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    vendor_name = db.Column(db.String(120), nullable=False)
    photo = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint("price > 0", name="ck_services_price_positive"),
    )

    @property
    def is_available(self):
        return self.availability == "Yes"

    def to_dict(self):
        return {
            "id": self.id,
            "organizationName": self.organization_name,
            "category": self.category,
            "price": self.price,
            "availability": self.availability,
            "description": self.description,
            "vendorId": self.vendor_id,
            "vendorName": self.vendor_name,
            "photo": self.photo,
            "createdAt": self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f"<Service {self.organization_name} ({self.availability})>"
