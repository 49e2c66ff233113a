from datetime import datetime, timedelta
from invoices.invoice import Invoice, PaymentStatus
from invoices.invoice_item import InvoiceItem
from invoices.invoice_calculator import apply_item_amounts, parse_quantity, validate_for_persistence
from invoices.invoice_number import next_invoice_number
from invoices.invoice_repository import InvoiceRepository
from invoices.money import to_decimal
from src.exceptions import ConflictError, NotFoundError, ValidationError
from src.logger import get_logger

logger = get_logger("InvoiceService")

# Generated numbers get one regeneration when another request took them first
NUMBER_ATTEMPTS = 2


def parse_datetime(value, field):
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {field} format, use ISO 8601 (YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS)")


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class InvoiceService:
    def __init__(self, repository=None, notifier=None, clock=None):
        self.repository = repository or InvoiceRepository()
        self.notifier = notifier
        self.clock = clock or datetime.now

    # ------------------------- Draft handling ------------------------- #
    @staticmethod
    def build_item(data):
        """Turn one item of a draft into a calculated InvoiceItem."""
        if not isinstance(data, dict):
            raise ValidationError(f"Invalid item format: {data!r}")

        item = InvoiceItem(
            item_name=_clean(data.get("item_name")),
            item_description=_clean(data.get("item_description")),
            quantity=parse_quantity(data.get("quantity")),
            unit_price=to_decimal(data.get("unit_price"), "unit_price"),
            cgst_rate=to_decimal(data.get("cgst_rate"), "cgst_rate"),
            sgst_rate=to_decimal(data.get("sgst_rate"), "sgst_rate"),
        )
        apply_item_amounts(item)
        return item

    def _build_items(self, draft):
        raw_items = draft.get("items")
        if not raw_items or not isinstance(raw_items, list):
            raise ValidationError("Invoice must contain at least one item")
        return [self.build_item(raw) for raw in raw_items]

    @staticmethod
    def _read_scalars(draft):
        customer_name = _clean(draft.get("customer_name"))
        if not customer_name:
            raise ValidationError("Customer name is required")

        fields = {
            "customer_name": customer_name,
            "customer_mobile": _clean(draft.get("customer_mobile")),
            "customer_address": _clean(draft.get("customer_address")),
        }
        invoice_date = parse_datetime(draft.get("invoice_date"), "invoice_date")
        if invoice_date is not None:
            fields["invoice_date"] = invoice_date
        if draft.get("payment_status") is not None:
            fields["payment_status"] = PaymentStatus.parse(draft["payment_status"]).value
        return fields

    # ------------------------- Lifecycle ------------------------- #
    def create_invoice(self, draft, notify=False):
        draft = draft or {}
        invoice = Invoice(**self._read_scalars(draft))
        invoice.replace_items(self._build_items(draft))
        validate_for_persistence(invoice)

        requested_no = _clean(draft.get("invoice_no"))
        attempts = 1 if requested_no else NUMBER_ATTEMPTS

        clashed = None
        for attempt in range(1, attempts + 1):
            invoice.invoice_no = requested_no or self._fresh_number(clashed)
            try:
                if self.repository.exists_by_invoice_no(invoice.invoice_no):
                    raise ConflictError(f"Invoice number already exists: {invoice.invoice_no}")
                saved = self.repository.save(invoice)
                break
            except ConflictError:
                if attempt == attempts:
                    raise
                clashed = invoice.invoice_no
                logger.warning("Invoice number %s is taken, generating a new one", invoice.invoice_no)

        logger.info("Created invoice %s (id=%s, total=%s)", saved.invoice_no, saved.id, saved.total_amount)
        if notify:
            self._notify(saved)
        return saved

    def update_invoice(self, invoice_id, draft):
        draft = draft or {}
        invoice = self.get_invoice(invoice_id)
        requested_no = _clean(draft.get("invoice_no"))
        if requested_no and requested_no != invoice.invoice_no:
            raise ValidationError("Invoice number cannot be changed once issued")
        # Validate the whole draft before touching the stored invoice
        fields = self._read_scalars(draft)
        items = self._build_items(draft)

        for name, value in fields.items():
            setattr(invoice, name, value)
        invoice.replace_items(items)
        validate_for_persistence(invoice)
        invoice.touch()

        saved = self.repository.save(invoice)
        logger.info("Updated invoice %s (id=%s, total=%s)", saved.invoice_no, saved.id, saved.total_amount)
        return saved

    def delete_invoice(self, invoice_id):
        invoice = self.get_invoice(invoice_id)
        invoice_no = invoice.invoice_no
        self.repository.delete(invoice)
        logger.info("Deleted invoice %s (id=%s)", invoice_no, invoice_id)

    def update_status(self, invoice_id, status):
        payment_status = PaymentStatus.parse(status)
        invoice = self.get_invoice(invoice_id)
        invoice.payment_status = payment_status.value
        invoice.touch()
        saved = self.repository.save(invoice)
        logger.info("Invoice %s marked %s", saved.invoice_no, payment_status.value)
        return saved

    # ------------------------- Notifications ------------------------- #
    def _notify(self, invoice):
        if self.notifier is None:
            return False
        try:
            return self.notifier.send_invoice_notification(invoice)
        except Exception:
            # The invoice is already committed; a broken notifier must not surface here
            logger.exception("Notification for invoice %s raised", invoice.invoice_no)
            return False

    def send_notification(self, invoice_id):
        return self._notify(self.get_invoice(invoice_id))

    # ------------------------- Queries ------------------------- #
    def get_invoice(self, invoice_id):
        invoice = self.repository.find_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError(f"Invoice not found with id: {invoice_id}")
        return invoice

    def get_invoice_by_number(self, invoice_no):
        invoice = self.repository.find_by_invoice_no(invoice_no)
        if invoice is None:
            raise NotFoundError(f"Invoice not found with number: {invoice_no}")
        return invoice

    def list_invoices(self):
        return self.repository.find_all()

    def search_invoices(self, term):
        term = (term or "").strip()
        if not term:
            return self.list_invoices()
        return self.repository.search(term)

    def invoices_by_customer_name(self, customer_name):
        return self.repository.find_by_customer_name((customer_name or "").strip())

    def invoices_by_mobile(self, mobile):
        return self.repository.find_by_customer_mobile(mobile)

    def invoices_by_date_range(self, start, end):
        start = parse_datetime(start, "start")
        end = parse_datetime(end, "end")
        if start is None or end is None:
            raise ValidationError("Both start and end dates are required")
        if start > end:
            raise ValidationError("start must not be after end")
        return self.repository.find_by_date_range(start, end)

    def recent_invoices(self, days=30):
        return self.repository.find_recent(datetime.utcnow() - timedelta(days=days))

    def invoices_by_status(self, status):
        return self.repository.find_by_payment_status(PaymentStatus.parse(status))

    def generate_next_invoice_number(self):
        return next_invoice_number(self.repository.find_latest_invoice_number(), now=self.clock())

    def _fresh_number(self, clashed=None):
        candidate = self.generate_next_invoice_number()
        if clashed and candidate == clashed:
            # Latest row is not the highest number; move past the taken one
            candidate = next_invoice_number(clashed, now=self.clock())
        return candidate

    def exists_by_invoice_no(self, invoice_no):
        return self.repository.exists_by_invoice_no(invoice_no)

    def monthly_revenue(self, year, month):
        if not 1 <= int(month) <= 12:
            raise ValidationError("month must be between 1 and 12")
        return self.repository.monthly_revenue(int(year), int(month))

    def statistics(self):
        return {
            "total_invoices": self.repository.count(),
            "total_revenue": self.repository.total_revenue(),
            "paid_invoices": self.repository.count_by_payment_status(PaymentStatus.PAID),
            "pending_invoices": self.repository.count_by_payment_status(PaymentStatus.PENDING),
            "overdue_invoices": self.repository.count_by_payment_status(PaymentStatus.OVERDUE),
            "recent_invoices_count": len(self.recent_invoices()),
        }
