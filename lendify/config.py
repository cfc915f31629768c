import os


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "super-secret-key")

    SQLALCHEMY_DATABASE_URI = os.getenv(
        "SQLALCHEMY_DATABASE_URI",
        "mysql+pymysql://root:@localhost/lendify_db"
    )

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-super-secret")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Accounts created by an admin get this password until the user changes it
    DEFAULT_USER_PASSWORD = os.getenv("DEFAULT_USER_PASSWORD", "password123")

    # Loan reminders
    SCHEDULER_ENABLED = os.getenv("SCHEDULER_ENABLED", "1") == "1"
    REMINDER_INTERVAL_MINUTES = int(os.getenv("REMINDER_INTERVAL_MINUTES", "60"))
    LOAN_REMINDER_DAYS = int(os.getenv("LOAN_REMINDER_DAYS", "7"))

    MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USE_TLS = True
    MAIL_USERNAME = os.getenv("MAIL_USERNAME", "")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD", "")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "noreply@lendify.local")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///lendify-test.db"
    # threads in the concurrency tests share pooled connections
    SQLALCHEMY_ENGINE_OPTIONS = {
        "connect_args": {"check_same_thread": False, "timeout": 15},
    }
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length-32"
    SCHEDULER_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    LOG_LEVEL = "DEBUG"
