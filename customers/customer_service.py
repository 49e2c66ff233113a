import re
from sqlalchemy import func, or_
from src.extensions import db
from src.exceptions import ConflictError, NotFoundError, ValidationError
from src import persistence
from src.logger import get_logger
from customers.customer import Customer

logger = get_logger("CustomerService")

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _sanitize(data):
    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip().lower()
    phone = re.sub(r"\D", "", str(data.get("phone") or ""))
    address = (data.get("address") or "").strip() or None

    if not name:
        raise ValidationError("name is required")
    if not email:
        raise ValidationError("email is required")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email address")
    if not phone:
        raise ValidationError("phone is required")
    return {"name": name, "email": email, "phone": phone, "address": address}


class CustomerService:
    @staticmethod
    def list_customers():
        return Customer.query.order_by(Customer.name.asc()).all()

    @staticmethod
    def get_customer(customer_id):
        customer = db.session.get(Customer, customer_id)
        if not customer:
            raise NotFoundError(f"Customer not found with id: {customer_id}")
        return customer

    @staticmethod
    def exists_by_email(email):
        email = (email or "").strip().lower()
        return Customer.query.filter_by(email=email).first() is not None

    @staticmethod
    def _check_unique(fields, current=None):
        email_owner = Customer.query.filter_by(email=fields["email"]).first()
        if email_owner and email_owner is not current:
            raise ConflictError(f"A customer with email {fields['email']} already exists")
        phone_owner = Customer.query.filter_by(phone=fields["phone"]).first()
        if phone_owner and phone_owner is not current:
            raise ConflictError(f"A customer with phone {fields['phone']} already exists")

    @staticmethod
    def create_customer(data):
        fields = _sanitize(data or {})
        CustomerService._check_unique(fields)

        customer = persistence.save(Customer(**fields), "Customer email or phone already exists")
        logger.info("Created customer %s (%s)", customer.id, customer.email)
        return customer

    @staticmethod
    def update_customer(customer_id, data):
        customer = CustomerService.get_customer(customer_id)
        fields = _sanitize(data or {})
        CustomerService._check_unique(fields, current=customer)

        for name, value in fields.items():
            setattr(customer, name, value)
        persistence.commit("Customer email or phone already exists")
        logger.info("Updated customer %s", customer.id)
        return customer

    @staticmethod
    def delete_customer(customer_id):
        customer = CustomerService.get_customer(customer_id)
        persistence.delete(customer)
        logger.info("Deleted customer %s", customer_id)

    @staticmethod
    def search_customers(term):
        term = (term or "").strip()
        if not term:
            return CustomerService.list_customers()

        pattern = f"%{term.lower()}%"
        return (
            Customer.query.filter(
                or_(
                    func.lower(Customer.name).like(pattern),
                    func.lower(Customer.email).like(pattern),
                    func.lower(Customer.phone).like(pattern),
                    func.lower(Customer.address).like(pattern),
                )
            )
            .order_by(Customer.name.asc())
            .all()
        )
