from datetime import datetime
from sqlalchemy.orm import relationship
from src.extensions import db


class VendorInvoice(db.Model):
    __tablename__ = "vendor_invoices"

    id = db.Column(db.Integer, primary_key=True)
    # Number printed on the vendor's bill
    invoice_no = db.Column(db.String(100), unique=True, nullable=False)
    vendor_id = db.Column(db.Integer, db.ForeignKey("vendors.id"), nullable=False)
    vendor_name = db.Column(db.String(100), nullable=False)
    vendor_address = db.Column(db.String(255), nullable=True)
    vendor_phone = db.Column(db.String(20), nullable=True)
    date_time = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Derived from the items on every save
    subtotal = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    total_tax = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    grand_total = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship(
        "VendorInvoiceItem",
        cascade="all, delete-orphan",
        order_by="VendorInvoiceItem.id",
        lazy="selectin",
    )
