import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    DEBUG = os.getenv("FLASK_DEBUG", "1") == "1"
    SECRET_KEY = os.getenv("SECRET_KEY", "change_me")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "postgresql://postgres@localhost:5432/billing_db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Bounded wait for a pooled connection; stale connections are re-checked
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_timeout": int(os.getenv("DB_POOL_TIMEOUT", 10)),
    }

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # WhatsApp Cloud API
    WHATSAPP_API_URL = os.getenv("WHATSAPP_API_URL")
    WHATSAPP_API_TOKEN = os.getenv("WHATSAPP_API_TOKEN")
    WHATSAPP_TEMPLATE_NAME = os.getenv("WHATSAPP_TEMPLATE_NAME", "invoice_notification")
    WHATSAPP_TIMEOUT = float(os.getenv("WHATSAPP_TIMEOUT", 10))
    WHATSAPP_COUNTRY_CODE = os.getenv("WHATSAPP_COUNTRY_CODE", "91")


class TestConfig(Config):
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WHATSAPP_API_URL = None
    WHATSAPP_API_TOKEN = None
