def register_routes(app):
    from customers.customer_routes import bp as customer_bp
    app.register_blueprint(customer_bp, url_prefix="/customers")

    from vendors.vendor_routes import bp as vendor_bp
    app.register_blueprint(vendor_bp, url_prefix="/vendors")

    from products.product_routes import bp as product_bp
    app.register_blueprint(product_bp, url_prefix="/products")

    from invoices.invoice_routes import bp as invoice_bp
    app.register_blueprint(invoice_bp, url_prefix="/invoices")

    from purchases.vendor_invoice_routes import bp as vendor_invoice_bp
    app.register_blueprint(vendor_invoice_bp, url_prefix="/vendor-invoices")
