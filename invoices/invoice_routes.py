from flask import Blueprint, request, jsonify, send_file, make_response, current_app
from invoices.invoice_service import InvoiceService
from notifications.whatsapp_service import WhatsAppService
import pandas as pd
import io

bp = Blueprint("invoices", __name__)


def _service():
    return InvoiceService(notifier=WhatsAppService.from_config(current_app.config))


def serialize_item(item):
    return {
        "id": item.id,
        "item_name": item.item_name,
        "item_description": item.item_description,
        "quantity": item.quantity,
        "unit_price": str(item.unit_price),
        "cgst_rate": str(item.cgst_rate),
        "sgst_rate": str(item.sgst_rate),
        "cgst_amount": str(item.cgst_amount),
        "sgst_amount": str(item.sgst_amount),
        "tax_amount": str(item.tax_amount),
        "total_price": str(item.total_price),
    }


def serialize_invoice(invoice):
    return {
        "id": invoice.id,
        "invoice_no": invoice.invoice_no,
        "customer_name": invoice.customer_name,
        "customer_mobile": invoice.customer_mobile,
        "customer_address": invoice.customer_address,
        "invoice_date": invoice.invoice_date.isoformat() if invoice.invoice_date else None,
        "total_amount": str(invoice.total_amount),
        "payment_status": invoice.payment_status,
        "created_at": invoice.created_at.isoformat() if invoice.created_at else None,
        "updated_at": invoice.updated_at.isoformat() if invoice.updated_at else None,
        "items": [serialize_item(item) for item in invoice.items],
    }


def _many(invoices):
    return jsonify([serialize_invoice(inv) for inv in invoices]), 200


@bp.route("/", methods=["POST"])
def create_invoice():
    payload = request.get_json(silent=True) or {}
    invoice = _service().create_invoice(payload, notify=bool(payload.get("send_notification")))
    return jsonify(serialize_invoice(invoice)), 201


@bp.route("/", methods=["GET"])
def list_invoices():
    return _many(_service().list_invoices())


@bp.route("/search", methods=["GET"])
def search_invoices():
    return _many(_service().search_invoices(request.args.get("q", "")))


@bp.route("/customer", methods=["GET"])
def invoices_by_customer_name():
    return _many(_service().invoices_by_customer_name(request.args.get("name", "")))


@bp.route("/mobile/<mobile>", methods=["GET"])
def invoices_by_mobile(mobile):
    return _many(_service().invoices_by_mobile(mobile))


@bp.route("/date-range", methods=["GET"])
def invoices_by_date_range():
    return _many(_service().invoices_by_date_range(request.args.get("start"), request.args.get("end")))


@bp.route("/recent", methods=["GET"])
def recent_invoices():
    days = request.args.get("days", 30, type=int)
    return _many(_service().recent_invoices(days))


@bp.route("/status/<status>", methods=["GET"])
def invoices_by_status(status):
    return _many(_service().invoices_by_status(status))


@bp.route("/next-number", methods=["GET"])
def next_invoice_number():
    return jsonify({"invoice_no": _service().generate_next_invoice_number()}), 200


@bp.route("/exists/<invoice_no>", methods=["GET"])
def invoice_number_exists(invoice_no):
    return jsonify({"exists": _service().exists_by_invoice_no(invoice_no)}), 200


@bp.route("/statistics", methods=["GET"])
def invoice_statistics():
    stats = _service().statistics()
    stats["total_revenue"] = str(stats["total_revenue"])
    return jsonify(stats), 200


@bp.route("/revenue/<int:year>/<int:month>", methods=["GET"])
def monthly_revenue(year, month):
    revenue = _service().monthly_revenue(year, month)
    return jsonify({"year": year, "month": month, "revenue": str(revenue)}), 200


@bp.route("/number/<invoice_no>", methods=["GET"])
def get_invoice_by_number(invoice_no):
    return jsonify(serialize_invoice(_service().get_invoice_by_number(invoice_no))), 200


@bp.route("/<int:invoice_id>", methods=["GET"])
def get_invoice_by_id(invoice_id):
    return jsonify(serialize_invoice(_service().get_invoice(invoice_id))), 200


@bp.route("/<int:invoice_id>", methods=["PUT"])
def update_invoice(invoice_id):
    invoice = _service().update_invoice(invoice_id, request.get_json(silent=True) or {})
    return jsonify(serialize_invoice(invoice)), 200


@bp.route("/<int:invoice_id>/status", methods=["PATCH", "PUT"])
def update_invoice_status(invoice_id):
    payload = request.get_json(silent=True) or {}
    status = payload.get("status") or request.args.get("status")
    invoice = _service().update_status(invoice_id, status)
    return jsonify(serialize_invoice(invoice)), 200


@bp.route("/<int:invoice_id>/notify", methods=["POST"])
def notify_customer(invoice_id):
    return jsonify({"sent": _service().send_notification(invoice_id)}), 200


@bp.route("/<int:invoice_id>", methods=["DELETE"])
def delete_invoice(invoice_id):
    _service().delete_invoice(invoice_id)
    return jsonify({"message": "Invoice deleted successfully"}), 200


@bp.route("/export", methods=["GET"])
def export_invoices():
    format_type = request.args.get("format", "csv").lower()

    rows = [{
        "invoice_id": invoice.id,
        "invoice_no": invoice.invoice_no,
        "customer_name": invoice.customer_name,
        "customer_mobile": invoice.customer_mobile or "",
        "invoice_date": invoice.invoice_date.strftime("%Y-%m-%d"),
        "item_count": len(invoice.items),
        "tax_amount": float(sum(item.tax_amount for item in invoice.items)),
        "total_amount": float(invoice.total_amount),
        "payment_status": invoice.payment_status,
    } for invoice in _service().list_invoices()]
    df = pd.DataFrame(rows, columns=[
        "invoice_id", "invoice_no", "customer_name", "customer_mobile", "invoice_date",
        "item_count", "tax_amount", "total_amount", "payment_status",
    ])

    if format_type == "excel":
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            # One sheet per payment status
            for status, group in df.groupby("payment_status"):
                group.to_excel(writer, sheet_name=status.title().replace("_", " "), index=False)
            if df.empty:
                df.to_excel(writer, sheet_name="Invoices", index=False)
        output.seek(0)
        return send_file(
            output,
            as_attachment=True,
            download_name="invoices_export.xlsx",
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

    output = io.StringIO()
    df.to_csv(output, index=False)
    response = make_response(output.getvalue())
    response.headers["Content-Type"] = "text/csv; charset=utf-8"
    response.headers["Content-Disposition"] = "attachment; filename=invoices_export.csv"
    return response
