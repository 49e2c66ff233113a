from sqlalchemy import func, or_
from src.extensions import db
from src.exceptions import NotFoundError, ValidationError
from src import persistence
from src.logger import get_logger
from products.product import Product
from invoices.money import quantize_money, to_decimal

logger = get_logger("ProductService")


def _validate(data):
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Product name is required")

    unit_price = to_decimal(data.get("unit_price"), "unit_price")
    if unit_price is None or unit_price <= 0:
        raise ValidationError("Unit price must be greater than 0")

    return {
        "name": name,
        "category": (data.get("category") or "").strip() or None,
        "unit_price": quantize_money(unit_price),
        "description": (data.get("description") or "").strip() or None,
    }


class ProductService:
    @staticmethod
    def list_products():
        return Product.query.order_by(Product.name.asc()).all()

    @staticmethod
    def get_product(product_id):
        product = db.session.get(Product, product_id)
        if not product:
            raise NotFoundError(f"Product not found with id: {product_id}")
        return product

    @staticmethod
    def create_product(data):
        product = persistence.save(Product(**_validate(data or {})))
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    @staticmethod
    def update_product(product_id, data):
        product = ProductService.get_product(product_id)
        for name, value in _validate(data or {}).items():
            setattr(product, name, value)
        persistence.commit()
        return product

    @staticmethod
    def delete_product(product_id):
        product = ProductService.get_product(product_id)
        persistence.delete(product)
        logger.info("Deleted product %s", product_id)

    @staticmethod
    def search_products(term):
        term = (term or "").strip()
        if not term:
            return ProductService.list_products()
        pattern = f"%{term.lower()}%"
        return (
            Product.query.filter(
                or_(func.lower(Product.name).like(pattern), func.lower(Product.category).like(pattern))
            )
            .order_by(Product.name.asc())
            .all()
        )

    @staticmethod
    def products_by_category(category):
        return Product.query.filter(Product.category.ilike(f"%{(category or '').strip()}%")).all()
