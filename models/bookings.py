from datetime import datetime
from database.db import db

BOOKING_STATUSES = ("pending", "confirmed", "in-progress", "completed", "cancelled")
PAYMENT_STATUSES = ("pending", "paid", "refunded")
ACTIVE_STATUSES = ("pending", "confirmed", "in-progress")


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    customer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    customer_name = db.Column(db.String(120), nullable=False)
    customer_email = db.Column(db.String(120), nullable=False)
    customer_phone = db.Column(db.String(20), nullable=False)

    vendor_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    vendor_name = db.Column(db.String(120), nullable=False)
    vendor_email = db.Column(db.String(120), nullable=False)

    # snapshot of the service at booking time
    service_id = db.Column(db.Integer, db.ForeignKey("services.id"), nullable=False, index=True)
    service_name = db.Column(db.String(120), nullable=False)
    service_category = db.Column(db.String(50), nullable=False)
    service_price = db.Column(db.Integer, nullable=False)
    service_description = db.Column(db.String(150), nullable=False)

    booking_date = db.Column(db.DateTime, default=datetime.utcnow)
    event_date = db.Column(db.DateTime, nullable=True)
    status = db.Column(db.Enum(*BOOKING_STATUSES, name="booking_status"), nullable=False, default="pending")

    total_amount = db.Column(db.Integer, nullable=False)
    payment_status = db.Column(db.Enum(*PAYMENT_STATUSES, name="booking_payment_status"), nullable=False, default="pending")

    special_requirements = db.Column(db.Text, default="")
    notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "customerName": self.customer_name,
            "customerEmail": self.customer_email,
            "customerPhone": self.customer_phone,
            "vendorId": self.vendor_id,
            "vendorName": self.vendor_name,
            "vendorEmail": self.vendor_email,
            "serviceId": self.service_id,
            "serviceName": self.service_name,
            "serviceCategory": self.service_category,
            "servicePrice": self.service_price,
            "serviceDescription": self.service_description,
            "bookingDate": self.booking_date.isoformat() if self.booking_date else None,
            "eventDate": self.event_date.strftime("%Y-%m-%d") if self.event_date else None,
            "status": self.status,
            "totalAmount": self.total_amount,
            "paymentStatus": self.payment_status,
            "specialRequirements": self.special_requirements,
            "notes": self.notes,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f"<Booking {self.id} {self.status}/{self.payment_status}>"
