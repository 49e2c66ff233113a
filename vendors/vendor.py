from datetime import datetime
from src.extensions import db


class Vendor(db.Model):
    __tablename__ = "vendors"

    id = db.Column(db.Integer, primary_key=True)

    # Vendor / Business Name
    name = db.Column(db.String(100), nullable=False)

    # Email Address
    email = db.Column(db.String(100), unique=True, nullable=False)

    # Phone Number (10 digits)
    phone = db.Column(db.String(10), unique=True, nullable=False)

    # Address
    address = db.Column(db.String(255), nullable=False)

    # GST / Tax Number
    gst_number = db.Column(db.String(15), unique=True, nullable=False)

    # Notes / Description
    description = db.Column(db.String(255), nullable=True)

    # Created Date (automate)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Last Updated Date (automate only when updated)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    invoices = db.relationship("VendorInvoice", backref="vendor", lazy=True)
