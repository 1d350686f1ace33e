from datetime import datetime
from sqlalchemy import Numeric
from database.db import db
from utils.encrypt import encryption_manager, mask

PAYMENT_METHODS = ("mobile_banking", "bank")
PAYMENT_OUTCOMES = ("successful", "unsuccessful")


class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    customer_name = db.Column(db.String(120), nullable=False)
    customer_email = db.Column(db.String(120), nullable=False)
    customer_phone = db.Column(db.String(20), nullable=False)
    payment_method = db.Column(db.Enum(*PAYMENT_METHODS, name="payment_method"), nullable=False)
    payment_provider = db.Column(db.String(100), nullable=False)
    _card_number = db.Column("card_number", db.Text)  # Encrypted
    _mobile_number = db.Column("mobile_number", db.Text)  # Encrypted
    amount = db.Column(Numeric(12, 2), nullable=False)
    required_amount = db.Column(Numeric(12, 2), nullable=False)
    payment_status = db.Column(db.Enum(*PAYMENT_OUTCOMES, name="payment_outcome"), nullable=False)
    transaction_id = db.Column(db.String(40), unique=True, nullable=False, index=True)
    payment_date = db.Column(db.DateTime, default=datetime.utcnow)
    notes = db.Column(db.Text, default="")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    services = db.relationship("PaymentService", backref="payment", lazy=True,
                               cascade="all, delete-orphan")

    @property
    def card_number(self):
        """Decrypt card number when accessed"""
        return encryption_manager.decrypt(self._card_number)

    @card_number.setter
    def card_number(self, value):
        """Encrypt card number when set"""
        self._card_number = encryption_manager.encrypt(value) if value else None

    @property
    def mobile_number(self):
        return encryption_manager.decrypt(self._mobile_number)

    @mobile_number.setter
    def mobile_number(self, value):
        self._mobile_number = encryption_manager.encrypt(value) if value else None

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "customerName": self.customer_name,
            "customerEmail": self.customer_email,
            "customerPhone": self.customer_phone,
            "paymentMethod": self.payment_method,
            "paymentProvider": self.payment_provider,
            "cardNumber": mask(self.card_number),  # Only last 4 digits
            "mobileNumber": mask(self.mobile_number),
            "amount": float(self.amount) if self.amount is not None else None,
            "requiredAmount": float(self.required_amount) if self.required_amount is not None else None,
            "paymentStatus": self.payment_status,
            "services": [s.to_dict() for s in self.services],
            "transactionId": self.transaction_id,
            "paymentDate": self.payment_date.isoformat() if self.payment_date else None,
            "notes": self.notes
        }


class PaymentService(db.Model):
    __tablename__ = "payment_services"

    id = db.Column(db.Integer, primary_key=True)
    payment_id = db.Column(db.Integer, db.ForeignKey("payments.id"), nullable=False, index=True)
    service_id = db.Column(db.Integer, db.ForeignKey("services.id"), nullable=False, index=True)
    service_name = db.Column(db.String(120), nullable=False)
    service_price = db.Column(db.Integer, nullable=False)
    booking_id = db.Column(db.Integer, db.ForeignKey("bookings.id"), nullable=False)

    def to_dict(self):
        return {
            "serviceId": self.service_id,
            "serviceName": self.service_name,
            "servicePrice": self.service_price,
            "bookingId": self.booking_id
        }
