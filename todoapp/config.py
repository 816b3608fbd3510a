import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./todos.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Left empty here so security.py can warn before generating one
SECRET_KEY = os.getenv("SECRET_KEY", "")
SESSION_EXPIRE_MINUTES = int(os.getenv("SESSION_EXPIRE_MINUTES", 60 * 24 * 7))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session_token")
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"

STATIC_DIR = os.getenv("STATIC_DIR", "client/dist")
