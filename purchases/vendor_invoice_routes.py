from flask import Blueprint, request, jsonify
from purchases.vendor_invoice_service import VendorInvoiceService

bp = Blueprint("vendor_invoices", __name__)


def serialize_vendor_invoice(inv):
    return {
        "id": inv.id,
        "invoice_no": inv.invoice_no,
        "vendor_id": inv.vendor_id,
        "vendor_name": inv.vendor_name,
        "vendor_address": inv.vendor_address,
        "vendor_phone": inv.vendor_phone,
        "date_time": inv.date_time.isoformat() if inv.date_time else None,
        "subtotal": str(inv.subtotal),
        "total_tax": str(inv.total_tax),
        "grand_total": str(inv.grand_total),
        "created_at": inv.created_at.isoformat() if inv.created_at else None,
        "updated_at": inv.updated_at.isoformat() if inv.updated_at else None,
        "items": [{
            "id": item.id,
            "product_id": item.product_id,
            "product_name": item.product_name,
            "category": item.category,
            "quantity": item.quantity,
            "unit_price": str(item.unit_price),
            "cgst_percent": str(item.cgst_percent),
            "sgst_percent": str(item.sgst_percent),
            "total": str(item.total),
        } for item in inv.items],
    }


def _many(invoices):
    return jsonify([serialize_vendor_invoice(inv) for inv in invoices]), 200


@bp.route("/", methods=["POST"])
def create_vendor_invoice():
    invoice = VendorInvoiceService.create_invoice(request.get_json(silent=True) or {})
    return jsonify(serialize_vendor_invoice(invoice)), 201


@bp.route("/", methods=["GET"])
def list_vendor_invoices():
    return _many(VendorInvoiceService.list_invoices())


@bp.route("/search", methods=["GET"])
def search_vendor_invoices():
    # One criterion per request, checked in this order
    if request.args.get("invoice_no"):
        return _many(VendorInvoiceService.invoices_by_invoice_no(request.args["invoice_no"]))
    if request.args.get("mobile"):
        return _many(VendorInvoiceService.invoices_by_mobile(request.args["mobile"]))
    if request.args.get("vendor_name"):
        return _many(VendorInvoiceService.invoices_by_vendor_name(request.args["vendor_name"]))
    return _many(VendorInvoiceService.list_invoices())


@bp.route("/date-range", methods=["GET"])
def vendor_invoices_by_date_range():
    return _many(VendorInvoiceService.invoices_by_date_range(request.args.get("start"), request.args.get("end")))


@bp.route("/vendor/<int:vendor_id>", methods=["GET"])
def vendor_invoices_by_vendor(vendor_id):
    return _many(VendorInvoiceService.invoices_by_vendor(vendor_id))


@bp.route("/number/<invoice_no>", methods=["GET"])
def get_vendor_invoice_by_number(invoice_no):
    return jsonify(serialize_vendor_invoice(VendorInvoiceService.get_invoice_by_invoice_no(invoice_no))), 200


@bp.route("/<int:invoice_id>", methods=["GET"])
def get_vendor_invoice(invoice_id):
    return jsonify(serialize_vendor_invoice(VendorInvoiceService.get_invoice(invoice_id))), 200


@bp.route("/<int:invoice_id>", methods=["PUT"])
def update_vendor_invoice(invoice_id):
    invoice = VendorInvoiceService.update_invoice(invoice_id, request.get_json(silent=True) or {})
    return jsonify(serialize_vendor_invoice(invoice)), 200


@bp.route("/<int:invoice_id>", methods=["DELETE"])
def delete_vendor_invoice(invoice_id):
    VendorInvoiceService.delete_invoice(invoice_id)
    return jsonify({"message": "Vendor invoice deleted successfully"}), 200
