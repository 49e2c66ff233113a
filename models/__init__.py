from src.extensions import db

# Import all models so migrations can detect them
from customers.customer import Customer
from vendors.vendor import Vendor
from products.product import Product
from invoices.invoice import Invoice
from invoices.invoice_item import InvoiceItem
from purchases.vendor_invoice import VendorInvoice
from purchases.vendor_invoice_item import VendorInvoiceItem


__all__ = [
    "db",
    "Customer",
    "Vendor",
    "Product",
    "Invoice",
    "InvoiceItem",
    "VendorInvoice",
    "VendorInvoiceItem",
]
