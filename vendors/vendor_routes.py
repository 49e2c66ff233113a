from flask import Blueprint, request, jsonify
from vendors.vendor_service import VendorService

bp = Blueprint("vendors", __name__)


def serialize_vendor(v):
    return {
        "id": v.id,
        "name": v.name,
        "email": v.email,
        "phone": v.phone,
        "address": v.address,
        "gst_number": v.gst_number,
        "description": v.description,
        "created_at": v.created_at.isoformat() if v.created_at else None,
        "updated_at": v.updated_at.isoformat() if v.updated_at else None,
    }


@bp.route("/", methods=["POST"])
def create_vendor():
    vendor = VendorService.create_vendor(request.get_json(silent=True) or {})
    return jsonify(serialize_vendor(vendor)), 201


@bp.route("/", methods=["GET"])
def list_vendors():
    return jsonify([serialize_vendor(v) for v in VendorService.list_vendors()]), 200


@bp.route("/search", methods=["GET"])
def search_vendors():
    return jsonify([serialize_vendor(v) for v in VendorService.search_vendors(request.args.get("name"))]), 200


@bp.route("/<int:vendor_id>", methods=["GET"])
def get_vendor(vendor_id):
    return jsonify(serialize_vendor(VendorService.get_vendor(vendor_id))), 200


@bp.route("/<int:vendor_id>", methods=["PUT"])
def update_vendor(vendor_id):
    vendor = VendorService.update_vendor(vendor_id, request.get_json(silent=True) or {})
    return jsonify(serialize_vendor(vendor)), 200


@bp.route("/<int:vendor_id>", methods=["DELETE"])
def delete_vendor(vendor_id):
    VendorService.delete_vendor(vendor_id)
    return jsonify({"message": "Vendor deleted successfully"}), 200
