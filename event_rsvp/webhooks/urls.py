WHATSAPP_WEBHOOK_URL = "/webhook"
