"""Application settings for the ordering context, read from the environment."""

import os

DELIVERY_FEE = float(os.getenv("DELIVERY_FEE", "60"))
MIN_ADDRESS_LENGTH = int(os.getenv("MIN_ADDRESS_LENGTH", "10"))
CURRENCY = os.getenv("CURRENCY", "bdt")

GROWTH_WINDOW_DAYS = int(os.getenv("GROWTH_WINDOW_DAYS", "30"))
STALE_PAYMENT_HOURS = int(os.getenv("STALE_PAYMENT_HOURS", "24"))
REVENUE_MONTHS = int(os.getenv("REVENUE_MONTHS", "6"))

INTENT_TTL_HOURS = int(os.getenv("INTENT_TTL_HOURS", "24"))
GATEWAY_TIMEOUT_SECONDS = float(os.getenv("GATEWAY_TIMEOUT_SECONDS", "10"))
PAYMENT_GATEWAY = os.getenv("PAYMENT_GATEWAY", "fake")
STRIPE_API_KEY = os.getenv("STRIPE_API_KEY", "")

CATALOG_BACKEND = os.getenv("CATALOG_BACKEND", "fake")
CATALOG_SERVICE_URL = os.getenv("CATALOG_SERVICE_URL", "http://localhost:5000")
CATALOG_TIMEOUT_SECONDS = float(os.getenv("CATALOG_TIMEOUT_SECONDS", "2"))

AUTH_TOKEN_SECRET = os.getenv("AUTH_TOKEN_SECRET", "homeplate-dev-secret-change-me-in-production")
AUTH_TOKEN_ALGORITHM = os.getenv("AUTH_TOKEN_ALGORITHM", "HS256")
