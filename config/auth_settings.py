import os
from dotenv import load_dotenv

load_dotenv()

# Session token configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-in-production")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", 24 * 7))

# Cookie carrying the session token
ACCESS_TOKEN_COOKIE = "access_token"
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"

# Temporary passwords handed out when admins create users
TEMPORARY_PASSWORD_LENGTH = 12
