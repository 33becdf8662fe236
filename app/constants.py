# Configuration for the AddedEmail backend

import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./added_email.db")

SECRET_KEY = os.getenv(
    "SUPABASE_JWT_SECRET", "your-secret-key"
)  # Replace with the project's JWT secret in production
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")

ADDED_EMAIL_CREATE_RATE_LIMIT = os.getenv("ADDED_EMAIL_CREATE_RATE_LIMIT", "60/minute")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Physical table name: the original migration created public.AddedEmail
# unquoted, which PostgreSQL folds to lower case.
ADDED_EMAIL_TABLE = "addedemail"
