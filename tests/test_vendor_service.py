import pytest

from vendors.vendor_service import VendorService
from src.exceptions import ConflictError, NotFoundError, ValidationError


def vendor(**overrides):
    data = {
        "name": "Kaveri Steels",
        "email": "sales@kaveri.example",
        "phone": "9876543210",
        "address": "Industrial Estate, Coimbatore",
        "gst_number": "33ABCDE1234F1Z5",
        "description": "TMT bars",
    }
    data.update(overrides)
    return data


def test_create_and_search(app):
    created = VendorService.create_vendor(vendor())

    assert created.id is not None
    assert [v.id for v in VendorService.search_vendors("kaveri")] == [created.id]
    assert len(VendorService.search_vendors(None)) == 1


@pytest.mark.parametrize(
    "field, value",
    [("email", "sales@kaveri.example"), ("phone", "9876543210"), ("gst_number", "33ABCDE1234F1Z5")],
)
def test_duplicate_unique_field_is_a_conflict(app, field, value):
    VendorService.create_vendor(vendor())
    fresh = vendor(email="other@kaveri.example", phone="9000000000", gst_number="33ZZZZZ9999Z9Z9")
    fresh[field] = value

    with pytest.raises(ConflictError):
        VendorService.create_vendor(fresh)


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "K"},
        {"email": "nope"},
        {"phone": "12345"},
        {"address": ""},
        {"gst_number": "33abcde1234f1z5"},
        {"description": "x" * 256},
    ],
)
def test_invalid_vendor_is_rejected(app, overrides):
    with pytest.raises(ValidationError):
        VendorService.create_vendor(vendor(**overrides))


def test_update_allows_unchanged_unique_values(app):
    created = VendorService.create_vendor(vendor())

    updated = VendorService.update_vendor(created.id, vendor(description="Structural steel"))

    assert updated.description == "Structural steel"


def test_delete_vendor(app):
    created = VendorService.create_vendor(vendor())

    VendorService.delete_vendor(created.id)

    with pytest.raises(NotFoundError):
        VendorService.get_vendor(created.id)


def test_vendor_endpoints(client):
    assert client.post("/vendors/", json=vendor()).status_code == 201
    assert client.post("/vendors/", json=vendor()).status_code == 409
    assert client.post("/vendors/", json=vendor(phone="1")).status_code == 400
    assert client.get("/vendors/999").status_code == 404
