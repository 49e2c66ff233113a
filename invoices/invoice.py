import enum
from datetime import datetime
from sqlalchemy.orm import relationship
from src.extensions import db
from src.exceptions import ValidationError
from invoices.invoice_calculator import recompute_total
from invoices.money import ZERO


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    CANCELLED = "CANCELLED"
    OVERDUE = "OVERDUE"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            allowed = ", ".join(status.value for status in cls)
            raise ValidationError(f"Invalid payment status: {value!r}. Allowed values: {allowed}")


class Invoice(db.Model):
    __tablename__ = "invoices"

    id = db.Column(db.Integer, primary_key=True)
    invoice_no = db.Column(db.String(50), unique=True, nullable=False)
    customer_name = db.Column(db.String(255), nullable=False)
    customer_mobile = db.Column(db.String(20), nullable=True)
    customer_address = db.Column(db.Text, nullable=True)
    invoice_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    # Sum of item totals, kept in step by the item helpers below
    total_amount = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    payment_status = db.Column(db.String(20), nullable=False, default=PaymentStatus.PENDING.value)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    items = relationship(
        "InvoiceItem",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.id",
        lazy="selectin",
    )

    def __init__(self, **kwargs):
        now = datetime.utcnow()
        kwargs.setdefault("created_at", now)
        kwargs.setdefault("updated_at", now)
        kwargs.setdefault("invoice_date", now)
        kwargs.setdefault("payment_status", PaymentStatus.PENDING.value)
        kwargs.setdefault("total_amount", ZERO)
        super().__init__(**kwargs)

    @property
    def status(self):
        return PaymentStatus(self.payment_status)

    def touch(self):
        self.updated_at = datetime.utcnow()

    def calculate_total_amount(self):
        self.total_amount = recompute_total(self.items)
        return self.total_amount

    def add_item(self, item):
        self.items.append(item)
        self.calculate_total_amount()
        self.touch()

    def remove_item(self, item):
        self.items.remove(item)
        self.calculate_total_amount()
        self.touch()

    def clear_items(self):
        self.items = []
        self.total_amount = ZERO
        self.touch()

    def replace_items(self, items):
        # Old items are orphaned and deleted on flush, never merged
        self.items = list(items)
        self.calculate_total_amount()
        self.touch()
