from src.extensions import db


class VendorInvoiceItem(db.Model):
    __tablename__ = "vendor_invoice_items"

    id = db.Column(db.Integer, primary_key=True)
    vendor_invoice_id = db.Column(db.Integer, db.ForeignKey("vendor_invoices.id", ondelete="CASCADE"), nullable=False)
    product_id = db.Column(db.Integer, nullable=False)
    product_name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(100), nullable=True)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    cgst_percent = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    sgst_percent = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    total = db.Column(db.Numeric(14, 2), nullable=False)
