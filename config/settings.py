import os
from dotenv import load_dotenv

load_dotenv()

# API Configuration
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 8000))
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./interex.db")
APP_ENV = os.getenv("APP_ENV", "development")  # "development" or "production"
LOG_LEVEL = os.getenv("LOG_LEVEL", "")  # e.g. "DEBUG"; empty follows uvicorn

# Frontend origins allowed by CORS (comma separated)
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:8000").split(",")
    if origin.strip()
]

# CMS HIH Gateway Configuration
CMS_HIH_BASE_URL = os.getenv("CMS_HIH_BASE_URL", "https://shmsimpl.cms.gov")
CMS_HIH_TOKEN_URL = os.getenv("CMS_HIH_TOKEN_URL", "")
CMS_HIH_CLIENT_ID = os.getenv("CMS_HIH_CLIENT_ID", "")
CMS_HIH_CLIENT_SECRET = os.getenv("CMS_HIH_CLIENT_SECRET", "")
CMS_HIH_SCOPE = os.getenv("CMS_HIH_SCOPE", "clientCreds")
# Message/Signature headers issued by the gateway team (optional)
CMS_HIH_MESSAGE = os.getenv("CMS_HIH_MESSAGE", "")
CMS_HIH_SIGNATURE = os.getenv("CMS_HIH_SIGNATURE", "")
CMS_HIH_TIMEOUT_SECONDS = float(os.getenv("CMS_HIH_TIMEOUT_SECONDS", 30))
# Fall back to mock responses when the gateway cannot be reached
CMS_HIH_MOCK_FALLBACK = os.getenv("CMS_HIH_MOCK_FALLBACK", "true").lower() == "true"

# Bootstrap system administrator (created by the seed when both are set)
BOOTSTRAP_ADMIN_EMAIL = os.getenv("BOOTSTRAP_ADMIN_EMAIL")
BOOTSTRAP_ADMIN_USERNAME = os.getenv("BOOTSTRAP_ADMIN_USERNAME", "admin")
BOOTSTRAP_ADMIN_PASSWORD = os.getenv("BOOTSTRAP_ADMIN_PASSWORD")
