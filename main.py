"""
ASGI entry point.

    uvicorn main:app --port 8000

Reads DATABASE_URL and JWT_SECRET from the environment (or .env) and exits when either is missing.
"""
from crowdfund.core.config import load_settings
from crowdfund.main import create_app

settings = load_settings()
app = create_app(settings)
