from flask import Blueprint, request, jsonify
from products.product_service import ProductService

bp = Blueprint("products", __name__)


def serialize_product(p):
    return {
        "id": p.id,
        "name": p.name,
        "category": p.category,
        "unit_price": str(p.unit_price),
        "description": p.description,
        "created_at": p.created_at.isoformat() if p.created_at else None,
        "updated_at": p.updated_at.isoformat() if p.updated_at else None,
    }


@bp.route("/", methods=["POST"])
def create_product():
    product = ProductService.create_product(request.get_json(silent=True) or {})
    return jsonify(serialize_product(product)), 201


@bp.route("/", methods=["GET"])
def list_products():
    return jsonify([serialize_product(p) for p in ProductService.list_products()]), 200


@bp.route("/search", methods=["GET"])
def search_products():
    return jsonify([serialize_product(p) for p in ProductService.search_products(request.args.get("q"))]), 200


@bp.route("/category/<category>", methods=["GET"])
def products_by_category(category):
    return jsonify([serialize_product(p) for p in ProductService.products_by_category(category)]), 200


@bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id):
    return jsonify(serialize_product(ProductService.get_product(product_id))), 200


@bp.route("/<int:product_id>", methods=["PUT"])
def update_product(product_id):
    product = ProductService.update_product(product_id, request.get_json(silent=True) or {})
    return jsonify(serialize_product(product)), 200


@bp.route("/<int:product_id>", methods=["DELETE"])
def delete_product(product_id):
    ProductService.delete_product(product_id)
    return jsonify({"message": "Product deleted successfully"}), 200
