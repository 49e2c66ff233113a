from datetime import datetime
from src.extensions import db


class Customer(db.Model):
    __tablename__ = "customers"

    id = db.Column(db.Integer, primary_key=True)

    # Full Name
    name = db.Column(db.String(255), nullable=False)

    # Email Address (stored lower-cased)
    email = db.Column(db.String(255), unique=True, nullable=False)

    # Phone Number (digits only)
    phone = db.Column(db.String(20), unique=True, nullable=False)

    # Address
    address = db.Column(db.Text, nullable=True)

    # Created Date (automate)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Last Updated Date (automate only when updated)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)
