import re
import requests
from src.logger import get_logger

logger = get_logger("WhatsAppService")


class WhatsAppService:
    """Sends invoice notifications through the WhatsApp Cloud API.

    Delivery is best-effort: every failure is logged and reported as ``False``
    so that a committed invoice is never affected by the messaging provider.
    """

    def __init__(self, api_url=None, api_token=None, template_name="invoice_notification",
                 timeout=10, country_code="91", session=None):
        self.api_url = api_url
        self.api_token = api_token
        self.template_name = template_name
        self.timeout = timeout
        self.country_code = country_code
        self.http = session or requests.Session()

    @classmethod
    def from_config(cls, config):
        return cls(
            api_url=config.get("WHATSAPP_API_URL"),
            api_token=config.get("WHATSAPP_API_TOKEN"),
            template_name=config.get("WHATSAPP_TEMPLATE_NAME", "invoice_notification"),
            timeout=config.get("WHATSAPP_TIMEOUT", 10),
            country_code=config.get("WHATSAPP_COUNTRY_CODE", "91"),
        )

    @property
    def configured(self):
        return bool(self.api_url and self.api_token)

    def format_phone(self, mobile):
        phone = re.sub(r"\D", "", mobile or "")
        if len(phone) == 10:
            phone = f"{self.country_code}{phone}"
        return phone

    def build_message(self, invoice):
        parameters = [
            {"type": "text", "text": invoice.invoice_no},
            {"type": "text", "text": str(invoice.total_amount)},
            {"type": "text", "text": invoice.customer_name},
        ]
        return {
            "messaging_product": "whatsapp",
            "to": self.format_phone(invoice.customer_mobile),
            "type": "template",
            "template": {
                "name": self.template_name,
                "language": {"code": "en"},
                "components": [{"type": "body", "parameters": parameters}],
            },
        }

    def send_invoice_notification(self, invoice):
        if not self.configured:
            logger.warning("WhatsApp API is not configured; skipping notification for %s", invoice.invoice_no)
            return False
        if not self.format_phone(invoice.customer_mobile):
            logger.info("Invoice %s has no customer mobile; nothing to send", invoice.invoice_no)
            return False

        try:
            response = self.http.post(
                self.api_url,
                json=self.build_message(invoice),
                headers={"Authorization": f"Bearer {self.api_token}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.Timeout:
            logger.warning("WhatsApp API timed out after %ss for invoice %s", self.timeout, invoice.invoice_no)
            return False
        except requests.exceptions.RequestException as e:
            logger.warning("WhatsApp notification failed for invoice %s: %s", invoice.invoice_no, str(e))
            return False
        except ValueError:
            logger.warning("WhatsApp API returned a non-JSON reply for invoice %s", invoice.invoice_no)
            return False

        sent = isinstance(body, dict) and "messages" in body
        if sent:
            logger.info("WhatsApp notification sent for invoice %s", invoice.invoice_no)
        else:
            logger.warning("WhatsApp API did not accept the message for invoice %s: %s", invoice.invoice_no, body)
        return sent
