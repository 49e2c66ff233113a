from flask import Blueprint, request, jsonify
from customers.customer_service import CustomerService

bp = Blueprint("customers", __name__)


def serialize_customer(c):
    return {
        "id": c.id,
        "name": c.name,
        "email": c.email,
        "phone": c.phone,
        "address": c.address,
        "created_at": c.created_at.isoformat() if c.created_at else None,
        "updated_at": c.updated_at.isoformat() if c.updated_at else None,
    }


# -------------------- CREATE CUSTOMER --------------------
@bp.route("/", methods=["POST"])
def create_customer():
    customer = CustomerService.create_customer(request.get_json(silent=True) or {})
    return jsonify(serialize_customer(customer)), 201


# -------------------- LIST CUSTOMERS --------------------
@bp.route("/", methods=["GET"])
def list_customers():
    return jsonify([serialize_customer(c) for c in CustomerService.list_customers()]), 200


# -------------------- SEARCH CUSTOMERS --------------------
@bp.route("/search", methods=["GET"])
def search_customers():
    term = request.args.get("q", "")
    return jsonify([serialize_customer(c) for c in CustomerService.search_customers(term)]), 200


# -------------------- EMAIL CHECK --------------------
@bp.route("/exists", methods=["GET"])
def customer_email_exists():
    return jsonify({"exists": CustomerService.exists_by_email(request.args.get("email"))}), 200


# -------------------- GET CUSTOMER --------------------
@bp.route("/<int:customer_id>", methods=["GET"])
def get_customer(customer_id):
    return jsonify(serialize_customer(CustomerService.get_customer(customer_id))), 200


# -------------------- UPDATE CUSTOMER --------------------
@bp.route("/<int:customer_id>", methods=["PUT"])
def update_customer(customer_id):
    customer = CustomerService.update_customer(customer_id, request.get_json(silent=True) or {})
    return jsonify(serialize_customer(customer)), 200


# -------------------- DELETE CUSTOMER --------------------
@bp.route("/<int:customer_id>", methods=["DELETE"])
def delete_customer(customer_id):
    CustomerService.delete_customer(customer_id)
    return jsonify({"message": "Customer deleted successfully"}), 200
