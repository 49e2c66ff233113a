from decimal import Decimal

import pytest

from products.product_service import ProductService
from purchases.vendor_invoice import VendorInvoice
from purchases.vendor_invoice_item import VendorInvoiceItem
from purchases.vendor_invoice_service import VendorInvoiceService
from vendors.vendor_service import VendorService
from src.exceptions import ConflictError, NotFoundError, ValidationError
from src.extensions import db


@pytest.fixture()
def stored_vendor(app):
    return VendorService.create_vendor({
        "name": "Kaveri Steels",
        "email": "sales@kaveri.example",
        "phone": "9876543210",
        "address": "Coimbatore",
        "gst_number": "33ABCDE1234F1Z5",
    })


@pytest.fixture()
def stored_product(app):
    return ProductService.create_product({"name": "TMT bar 12mm", "category": "Steel", "unit_price": "100"})


def bill(vendor_id, product_id, **overrides):
    data = {
        "invoice_no": "KS/2026/118",
        "vendor_id": vendor_id,
        "date_time": "2026-10-01T09:30:00",
        "items": [
            {"product_id": product_id, "quantity": 2, "unit_price": "100", "cgst_percent": 9, "sgst_percent": 9},
            {"product_id": product_id, "product_name": "Binding wire", "quantity": 1, "unit_price": "50",
             "cgst_percent": 6, "sgst_percent": 6, "total": "1"},
        ],
    }
    data.update(overrides)
    return data


def test_create_recomputes_totals_and_fills_vendor_details(stored_vendor, stored_product):
    invoice = VendorInvoiceService.create_invoice(bill(stored_vendor.id, stored_product.id))

    assert invoice.vendor_name == "Kaveri Steels"
    assert invoice.vendor_phone == "9876543210"
    assert invoice.subtotal == Decimal("250.00")
    assert invoice.total_tax == Decimal("42.00")
    assert invoice.grand_total == Decimal("292.00")
    first, second = invoice.items
    assert first.product_name == "TMT bar 12mm"
    assert first.category == "Steel"
    assert first.total == Decimal("236.00")
    assert second.total == Decimal("56.00")


def test_stored_items_match_their_rounded_inputs(app, stored_vendor, stored_product):
    items = [{"product_id": stored_product.id, "quantity": 3, "unit_price": "10.005", "cgst_percent": "9.125"}]
    invoice_id = VendorInvoiceService.create_invoice(bill(stored_vendor.id, stored_product.id, items=items)).id
    db.session.expunge_all()

    invoice = VendorInvoiceService.get_invoice(invoice_id)
    item = invoice.items[0]

    assert item.unit_price == Decimal("10.01")
    assert item.cgst_percent == Decimal("9.13")
    assert item.total == Decimal("32.77")
    assert invoice.grand_total == invoice.subtotal + invoice.total_tax == Decimal("32.77")


def test_duplicate_number_is_a_conflict(stored_vendor, stored_product):
    VendorInvoiceService.create_invoice(bill(stored_vendor.id, stored_product.id))

    with pytest.raises(ConflictError):
        VendorInvoiceService.create_invoice(bill(stored_vendor.id, stored_product.id))


def test_unknown_vendor_is_not_found(stored_product):
    with pytest.raises(NotFoundError):
        VendorInvoiceService.create_invoice(bill(999, stored_product.id))


def test_bill_without_items_is_rejected(stored_vendor, stored_product):
    with pytest.raises(ValidationError):
        VendorInvoiceService.create_invoice(bill(stored_vendor.id, stored_product.id, items=[]))
    assert VendorInvoice.query.count() == 0


def test_unknown_product_needs_a_name(stored_vendor):
    items = [{"product_id": 42, "quantity": 1, "unit_price": "10"}]

    with pytest.raises(ValidationError, match="Item name"):
        VendorInvoiceService.create_invoice(bill(stored_vendor.id, 42, items=items))


def test_update_replaces_items(stored_vendor, stored_product):
    invoice = VendorInvoiceService.create_invoice(bill(stored_vendor.id, stored_product.id))
    items = [{"product_id": stored_product.id, "quantity": 5, "unit_price": "10"}]

    updated = VendorInvoiceService.update_invoice(invoice.id, bill(stored_vendor.id, stored_product.id, items=items))

    assert updated.grand_total == Decimal("50.00")
    assert VendorInvoiceItem.query.count() == 1


def test_queries_and_delete(stored_vendor, stored_product):
    invoice = VendorInvoiceService.create_invoice(bill(stored_vendor.id, stored_product.id))

    assert VendorInvoiceService.get_invoice_by_invoice_no("KS/2026/118").id == invoice.id
    assert len(VendorInvoiceService.invoices_by_vendor(stored_vendor.id)) == 1
    assert len(VendorInvoiceService.invoices_by_vendor_name("kaveri")) == 1
    assert len(VendorInvoiceService.invoices_by_mobile("9876543210")) == 1
    assert len(VendorInvoiceService.invoices_by_date_range("2026-10-01", "2026-10-02")) == 1
    assert VendorInvoiceService.invoices_by_date_range("2026-11-01", "2026-11-30") == []

    VendorInvoiceService.delete_invoice(invoice.id)
    assert VendorInvoiceItem.query.count() == 0
    with pytest.raises(NotFoundError):
        VendorInvoiceService.get_invoice(invoice.id)


def test_vendor_invoice_endpoints(client, stored_vendor, stored_product):
    response = client.post("/vendor-invoices/", json=bill(stored_vendor.id, stored_product.id))

    assert response.status_code == 201
    assert response.get_json()["grand_total"] == "292.00"
    found = client.get("/vendor-invoices/search", query_string={"vendor_name": "kaveri"}).get_json()
    assert [f["invoice_no"] for f in found] == ["KS/2026/118"]
    assert client.get(f"/vendor-invoices/vendor/{stored_vendor.id}").status_code == 200
