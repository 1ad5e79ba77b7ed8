import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./assurscan.db")

# Mock mode (for testing without API key)
MOCK_MODE = os.environ.get("MOCK_MODE", "false").lower() == "true"

# Scanned PDFs/images get the sample contract text until an OCR service is wired in
MOCK_OCR = os.environ.get("MOCK_OCR", "true").lower() == "true"

# OpenRouter (OpenAI-compatible)
OPENROUTER_BASE_URL = os.environ.get("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
OPENROUTER_MODEL = os.environ.get("OPENROUTER_MODEL", "openai/gpt-4o")
OPENROUTER_REFERER = "https://assurscan.fr"
OPENROUTER_TITLE = "AssurScan"

# Object storage
STORAGE_API_URL = os.environ.get("STORAGE_API_URL")
STORAGE_API_KEY = os.environ.get("STORAGE_API_KEY")

# Identity provider
IDENTITY_URL = os.environ.get("IDENTITY_URL")
IDENTITY_API_KEY = os.environ.get("IDENTITY_API_KEY")
OWNER_ID = os.environ.get("OWNER_ID")

# Stripe
STRIPE_SECRET_KEY = os.environ.get("STRIPE_SECRET_KEY")
STRIPE_WEBHOOK_SECRET = os.environ.get("STRIPE_WEBHOOK_SECRET")
STRIPE_PREMIUM_PRICE_ID = os.environ.get("STRIPE_PREMIUM_PRICE_ID")
STRIPE_ENTERPRISE_PRICE_ID = os.environ.get("STRIPE_ENTERPRISE_PRICE_ID")

# App
APP_URL = os.environ.get("APP_URL", "http://localhost:3000")
FRONTEND_URL = os.environ.get("FRONTEND_URL", APP_URL)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def get_api_key():
    key = os.environ.get("OPENROUTER_API_KEY")
    if key:
        return key
    env_path = Path(__file__).parent / ".env"
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                if line.startswith("OPENROUTER_API_KEY="):
                    key = line.split("=", 1)[1].strip()
                    if key:
                        return key
    return None
