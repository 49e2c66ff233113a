from datetime import datetime
from sqlalchemy import func
from src.extensions import db
from src.exceptions import ConflictError, NotFoundError, ValidationError
from src import persistence
from src.logger import get_logger
from invoices.invoice_calculator import aggregate_amounts, calculate_item, parse_quantity, parse_rate, parse_unit_price
from invoices.invoice_service import parse_datetime
from products.product import Product
from purchases.vendor_invoice import VendorInvoice
from purchases.vendor_invoice_item import VendorInvoiceItem
from vendors.vendor_service import VendorService

logger = get_logger("VendorInvoiceService")


def _text(value):
    value = (str(value) if value is not None else "").strip()
    return value or None


class VendorInvoiceService:
    """Purchase bills received from vendors.

    Item totals and the subtotal / tax / grand total on the header are always
    recomputed from quantity, unit price and GST rates; amounts sent by the
    client are ignored.
    """

    @staticmethod
    def _build_item(data):
        if not isinstance(data, dict):
            raise ValidationError(f"Invalid item format: {data!r}")

        product_id = data.get("product_id")
        if product_id is None:
            raise ValidationError("Product ID is required")
        try:
            product_id = int(product_id)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid product ID: {product_id!r}")

        product = db.session.get(Product, product_id)
        product_name = _text(data.get("product_name")) or (product.name if product else None)
        category = _text(data.get("category")) or (product.category if product else None)

        quantity = parse_quantity(data.get("quantity"))
        unit_price = parse_unit_price(data.get("unit_price"))
        cgst_percent = parse_rate(data.get("cgst_percent"), "cgst_percent")
        sgst_percent = parse_rate(data.get("sgst_percent"), "sgst_percent")

        amounts = calculate_item(unit_price, quantity, cgst_percent, sgst_percent, item_name=product_name)
        item = VendorInvoiceItem(
            product_id=product_id,
            product_name=product_name,
            category=category,
            quantity=quantity,
            unit_price=unit_price,
            cgst_percent=cgst_percent,
            sgst_percent=sgst_percent,
            total=amounts.total_price,
        )
        return item, amounts

    @staticmethod
    def _prepare(data):
        """Validate a draft and return (header fields, items)."""
        invoice_no = _text(data.get("invoice_no"))
        if not invoice_no:
            raise ValidationError("Invoice number is required")

        vendor_id = data.get("vendor_id")
        if vendor_id is None:
            raise ValidationError("Vendor ID is required")
        vendor = VendorService.get_vendor(vendor_id)

        raw_items = data.get("items")
        if not raw_items or not isinstance(raw_items, list):
            raise ValidationError("Vendor invoice must contain at least one item")

        built = [VendorInvoiceService._build_item(raw) for raw in raw_items]
        totals = aggregate_amounts([amounts for _, amounts in built])

        fields = {
            "invoice_no": invoice_no,
            "vendor_id": vendor.id,
            "vendor_name": _text(data.get("vendor_name")) or vendor.name,
            "vendor_address": _text(data.get("vendor_address")) or vendor.address,
            "vendor_phone": _text(data.get("vendor_phone")) or vendor.phone,
            "date_time": parse_datetime(data.get("date_time"), "date_time") or datetime.utcnow(),
            "subtotal": totals.subtotal,
            "total_tax": totals.tax_amount,
            "grand_total": totals.total,
        }
        return fields, [item for item, _ in built]

    @staticmethod
    def _check_number(invoice_no, current=None):
        owner = VendorInvoice.query.filter_by(invoice_no=invoice_no).first()
        if owner and owner is not current:
            raise ConflictError(f"Vendor invoice number already exists: {invoice_no}")

    @staticmethod
    def create_invoice(data):
        fields, items = VendorInvoiceService._prepare(data or {})
        VendorInvoiceService._check_number(fields["invoice_no"])

        invoice = VendorInvoice(**fields)
        invoice.items = items
        persistence.save(invoice, f"Vendor invoice number already exists: {fields['invoice_no']}")
        logger.info("Created vendor invoice %s for vendor %s (grand total %s)",
                    invoice.invoice_no, invoice.vendor_id, invoice.grand_total)
        return invoice

    @staticmethod
    def update_invoice(invoice_id, data):
        invoice = VendorInvoiceService.get_invoice(invoice_id)
        fields, items = VendorInvoiceService._prepare(data or {})
        VendorInvoiceService._check_number(fields["invoice_no"], current=invoice)

        for name, value in fields.items():
            setattr(invoice, name, value)
        invoice.items = items
        invoice.updated_at = datetime.utcnow()
        persistence.commit(f"Vendor invoice number already exists: {fields['invoice_no']}")
        logger.info("Updated vendor invoice %s", invoice.invoice_no)
        return invoice

    @staticmethod
    def delete_invoice(invoice_id):
        invoice = VendorInvoiceService.get_invoice(invoice_id)
        persistence.delete(invoice)
        logger.info("Deleted vendor invoice %s", invoice_id)

    @staticmethod
    def get_invoice(invoice_id):
        invoice = db.session.get(VendorInvoice, invoice_id)
        if not invoice:
            raise NotFoundError(f"Vendor Invoice not found with id: {invoice_id}")
        return invoice

    @staticmethod
    def get_invoice_by_invoice_no(invoice_no):
        invoice = VendorInvoice.query.filter_by(invoice_no=invoice_no).first()
        if not invoice:
            raise NotFoundError(f"Vendor Invoice not found with invoice number: {invoice_no}")
        return invoice

    @staticmethod
    def list_invoices():
        return VendorInvoice.query.order_by(VendorInvoice.date_time.desc()).all()

    @staticmethod
    def invoices_by_vendor(vendor_id):
        return VendorInvoice.query.filter_by(vendor_id=vendor_id).order_by(VendorInvoice.date_time.desc()).all()

    @staticmethod
    def invoices_by_vendor_name(vendor_name):
        pattern = f"%{(vendor_name or '').strip().lower()}%"
        return VendorInvoice.query.filter(func.lower(VendorInvoice.vendor_name).like(pattern)).all()

    @staticmethod
    def invoices_by_invoice_no(invoice_no):
        return VendorInvoice.query.filter_by(invoice_no=(invoice_no or "").strip()).all()

    @staticmethod
    def invoices_by_mobile(mobile):
        return VendorInvoice.query.filter_by(vendor_phone=(mobile or "").strip()).all()

    @staticmethod
    def invoices_by_date_range(start, end):
        start = parse_datetime(start, "start")
        end = parse_datetime(end, "end")
        if start is None or end is None:
            raise ValidationError("Both start and end dates are required")
        return (
            VendorInvoice.query.filter(VendorInvoice.date_time.between(start, end))
            .order_by(VendorInvoice.date_time.desc())
            .all()
        )
