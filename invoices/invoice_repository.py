from sqlalchemy import extract, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from src.extensions import db
from src.exceptions import ConflictError, StorageError
from src.logger import get_logger
from invoices.invoice import Invoice, PaymentStatus
from invoices.money import ZERO, quantize_money

logger = get_logger("InvoiceRepository")


class InvoiceRepository:
    """SQLAlchemy-backed storage for invoices and their items."""

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def _query(self):
        return self.session.query(Invoice)

    def save(self, invoice):
        """Insert or update ``invoice`` together with all of its items in one commit."""
        try:
            self.session.add(invoice)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("Integrity error while saving invoice %s: %s", invoice.invoice_no, e.orig)
            raise ConflictError(f"Invoice number already exists: {invoice.invoice_no}") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Failed to save invoice %s", invoice.invoice_no)
            raise StorageError(f"Could not save invoice: {e}") from e
        return invoice

    def delete(self, invoice):
        try:
            self.session.delete(invoice)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Failed to delete invoice %s", invoice.id)
            raise StorageError(f"Could not delete invoice: {e}") from e

    def _run(self, query_fn):
        try:
            return query_fn()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Invoice query failed")
            raise StorageError(f"Invoice query failed: {e}") from e

    def find_by_id(self, invoice_id):
        return self._run(lambda: self.session.get(Invoice, invoice_id))

    def find_by_invoice_no(self, invoice_no):
        return self._run(lambda: self._query().filter_by(invoice_no=invoice_no).first())

    def exists_by_invoice_no(self, invoice_no):
        return self._run(
            lambda: self.session.query(self._query().filter_by(invoice_no=invoice_no).exists()).scalar()
        )

    def find_latest_invoice_number(self):
        return self._run(
            lambda: self.session.query(Invoice.invoice_no).order_by(Invoice.id.desc()).limit(1).scalar()
        )

    def find_all(self):
        return self._run(lambda: self._query().order_by(Invoice.invoice_date.desc(), Invoice.id.desc()).all())

    def search(self, term):
        pattern = f"%{term.lower()}%"
        return self._run(
            lambda: self._query()
            .filter(
                or_(
                    func.lower(Invoice.invoice_no).like(pattern),
                    func.lower(Invoice.customer_name).like(pattern),
                    Invoice.customer_mobile.like(f"%{term}%"),
                )
            )
            .order_by(Invoice.invoice_date.desc())
            .all()
        )

    def find_by_customer_name(self, customer_name):
        pattern = f"%{customer_name.lower()}%"
        return self._run(lambda: self._query().filter(func.lower(Invoice.customer_name).like(pattern)).all())

    def find_by_customer_mobile(self, mobile):
        return self._run(lambda: self._query().filter_by(customer_mobile=mobile).all())

    def find_by_date_range(self, start, end):
        return self._run(
            lambda: self._query()
            .filter(Invoice.invoice_date.between(start, end))
            .order_by(Invoice.invoice_date.desc())
            .all()
        )

    def find_recent(self, since):
        return self._run(
            lambda: self._query().filter(Invoice.invoice_date >= since).order_by(Invoice.invoice_date.desc()).all()
        )

    def find_by_payment_status(self, status):
        return self._run(lambda: self._query().filter_by(payment_status=PaymentStatus.parse(status).value).all())

    def count(self):
        return self._run(lambda: self._query().count())

    def count_by_payment_status(self, status):
        return self._run(lambda: self._query().filter_by(payment_status=PaymentStatus.parse(status).value).count())

    def total_revenue(self):
        total = self._run(
            lambda: self.session.query(func.sum(Invoice.total_amount))
            .filter(Invoice.payment_status == PaymentStatus.PAID.value)
            .scalar()
        )
        return quantize_money(total) if total is not None else ZERO

    def monthly_revenue(self, year, month):
        total = self._run(
            lambda: self.session.query(func.sum(Invoice.total_amount))
            .filter(
                Invoice.payment_status == PaymentStatus.PAID.value,
                extract("year", Invoice.invoice_date) == year,
                extract("month", Invoice.invoice_date) == month,
            )
            .scalar()
        )
        return quantize_money(total) if total is not None else ZERO
