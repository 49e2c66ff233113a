from datetime import datetime
from src.extensions import db


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)

    # Product Name
    name = db.Column(db.String(255), nullable=False)

    # Category
    category = db.Column(db.String(100), nullable=True)

    # Unit Price
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)

    # Product Description
    description = db.Column(db.Text, nullable=True)

    # Date Added (automate)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Last Updated Date (automate only when updated)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)
