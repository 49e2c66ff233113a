import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from flask import Flask, jsonify
from flask_cors import CORS
from src.config import Config
from src.extensions import db, migrate
from src.exceptions import BillingError
from src.logger import get_logger

# register blueprints dynamically
from routes import register_routes

logger = get_logger("BillingApp")


def register_error_handlers(app):
    @app.errorhandler(BillingError)
    def handle_billing_error(error):
        if error.status_code >= 500:
            logger.error("Request failed: %s", error)
        return jsonify({"error": str(error)}), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({"error": "Resource not found"}), 404


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Enable CORS for all routes
    CORS(app, origins="*", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
         allow_headers=["Content-Type", "Authorization"], supports_credentials=True)

    # initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import all models within app context to resolve relationships
    with app.app_context():
        import models  # noqa: F401

    register_error_handlers(app)
    register_routes(app)

    @app.get("/")
    def index():
        return jsonify({"message": "Billing Management API"}), 200

    @app.route("/api/test")
    def test():
        return jsonify({"message": "Backend Connected Successfully"}), 200

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 5000)), debug=app.config["DEBUG"])
