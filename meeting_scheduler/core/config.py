import os
from dotenv import load_dotenv


load_dotenv()

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

MY_DOMAIN = os.getenv("MY_DOMAIN", "http://localhost:5173")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./meeting_scheduler.db")

# Tokens
JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", 7))

# Passwords
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))
MAX_PASSWORD_BYTES = 72

# Meeting duration bounds, in minutes
MEETING_MIN_MINUTES = int(os.getenv("MEETING_MIN_MINUTES", 5))
MEETING_MAX_MINUTES = int(os.getenv("MEETING_MAX_MINUTES", 480))

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:4173"
    ).split(",")
    if origin.strip()
]
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "True").lower() == "true"
