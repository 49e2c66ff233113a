from src.extensions import db


class InvoiceItem(db.Model):
    __tablename__ = "invoice_items"

    id = db.Column(db.Integer, primary_key=True)
    # Owning invoice; items are never stored on their own
    invoice_id = db.Column(db.Integer, db.ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False)
    item_name = db.Column(db.String(255), nullable=False)
    item_description = db.Column(db.String(500), nullable=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    cgst_rate = db.Column(db.Numeric(5, 2), default=0)  # percentage
    sgst_rate = db.Column(db.Numeric(5, 2), default=0)  # percentage

    # Derived, recalculated before every save
    cgst_amount = db.Column(db.Numeric(12, 2), default=0)
    sgst_amount = db.Column(db.Numeric(12, 2), default=0)
    tax_amount = db.Column(db.Numeric(12, 2), default=0)
    total_price = db.Column(db.Numeric(14, 2), nullable=False)
