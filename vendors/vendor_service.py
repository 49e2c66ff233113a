import re
from src.extensions import db
from src.exceptions import ConflictError, NotFoundError, ValidationError
from src import persistence
from src.logger import get_logger
from vendors.vendor import Vendor

logger = get_logger("VendorService")

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_PATTERN = re.compile(r"^\d{10}$")
GST_PATTERN = re.compile(r"^[0-9A-Z]{15}$")


def _validate(data):
    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip()
    phone = str(data.get("phone") or "").strip()
    address = (data.get("address") or "").strip()
    gst_number = (data.get("gst_number") or "").strip()
    description = (data.get("description") or "").strip() or None

    if not 2 <= len(name) <= 100:
        raise ValidationError("Name must be between 2 and 100 characters")
    if not email:
        raise ValidationError("Email is required")
    if len(email) > 100 or not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email address")
    if not PHONE_PATTERN.match(phone):
        raise ValidationError("Phone number must be exactly 10 digits")
    if not address:
        raise ValidationError("Address is required")
    if len(address) > 255:
        raise ValidationError("Address must not exceed 255 characters")
    if not GST_PATTERN.match(gst_number):
        raise ValidationError("GST Number must be 15 alphanumeric characters")
    if description and len(description) > 255:
        raise ValidationError("Description must not exceed 255 characters")

    return {
        "name": name,
        "email": email,
        "phone": phone,
        "address": address,
        "gst_number": gst_number,
        "description": description,
    }


class VendorService:
    @staticmethod
    def list_vendors():
        return Vendor.query.order_by(Vendor.id.asc()).all()

    @staticmethod
    def get_vendor(vendor_id):
        vendor = db.session.get(Vendor, vendor_id)
        if not vendor:
            raise NotFoundError(f"Vendor not found with id: {vendor_id}")
        return vendor

    @staticmethod
    def _check_unique(fields, current=None):
        checks = (
            ("email", "A vendor with this email already exists"),
            ("phone", "A vendor with this phone number already exists"),
            ("gst_number", "A vendor with this GST number already exists"),
        )
        for field, message in checks:
            # Unchanged values on update are not duplicates
            if current is not None and getattr(current, field) == fields[field]:
                continue
            if Vendor.query.filter_by(**{field: fields[field]}).first():
                raise ConflictError(message)

    @staticmethod
    def create_vendor(data):
        fields = _validate(data or {})
        VendorService._check_unique(fields)

        vendor = persistence.save(Vendor(**fields), "Vendor email, phone or GST number already exists")
        logger.info("Created vendor %s (%s)", vendor.id, vendor.name)
        return vendor

    @staticmethod
    def update_vendor(vendor_id, data):
        vendor = VendorService.get_vendor(vendor_id)
        fields = _validate(data or {})
        VendorService._check_unique(fields, current=vendor)

        for name, value in fields.items():
            setattr(vendor, name, value)
        persistence.commit("Vendor email, phone or GST number already exists")
        logger.info("Updated vendor %s", vendor.id)
        return vendor

    @staticmethod
    def delete_vendor(vendor_id):
        vendor = VendorService.get_vendor(vendor_id)
        if vendor.invoices:
            raise ConflictError("Vendor has purchase invoices and cannot be deleted")
        persistence.delete(vendor)
        logger.info("Deleted vendor %s", vendor_id)

    @staticmethod
    def search_vendors(name):
        name = (name or "").strip()
        if not name:
            return VendorService.list_vendors()
        return Vendor.query.filter(Vendor.name.ilike(f"%{name}%")).order_by(Vendor.name.asc()).all()
