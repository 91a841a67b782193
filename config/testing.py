import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker_test"),
    "connect_timeout": 5,
}

ADMIN_VERIFICATION_CODE = "TEST-CODE"

JWT_SECRET = "test-jwt-secret-for-the-suite-0123456789"
JWT_EXPIRES_DAYS = 7

EMAIL_HOST = "localhost"
EMAIL_PORT = 1025
EMAIL_USER = ""
EMAIL_PASS = ""
EMAIL_TIMEOUT = 5
FRONTEND_URL = "http://frontend.test"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ADMIN_EMAIL = ""
ADMIN_PASSWORD = ""
