import os
from dotenv import load_dotenv
load_dotenv()  # fine locally; harmless in production

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev")
    # resource endpoints live under API_URL, /login and /me under API_ORIGIN
    API_URL = os.getenv("API_URL", "http://localhost:3000/api")
    API_ORIGIN = os.getenv("API_ORIGIN")
    API_TIMEOUT = float(os.getenv("API_TIMEOUT", "15"))
    TOKEN_SESSION_KEY = "admin_token"
    UPLOAD_FOLDER = os.getenv(
        "UPLOAD_FOLDER", os.path.join(BASE_DIR, "static", "uploads")
    )


class DevConfig(BaseConfig):
    DEBUG = True


class TestConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test"
    API_URL = "http://backend.test/api"
    API_ORIGIN = None
