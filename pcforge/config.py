# pcforge/config.py
import os


class Settings:
    """
    Very simple settings holder.

    Everything is read from the environment once at import time; defaults
    give a working local setup (sqlite file, local invoice directory, mail
    and payment collaborators disabled).
    """

    def __init__(self) -> None:
        self.database_url: str = os.getenv("DATABASE_URL", "sqlite:///./pcforge.db")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")

        # Orders
        self.tracking_prefix: str = os.getenv("TRACKING_PREFIX", "NB")
        self.build_charge_policy: str = os.getenv("BUILD_CHARGE_POLICY", "tiered")
        self.delivery_days: int = int(os.getenv("DELIVERY_DAYS", "14"))

        # Mail collaborator (POST {to, subject, body, attachmentUrl})
        self.mail_endpoint: str | None = os.getenv("MAIL_ENDPOINT") or None
        self.mail_api_key: str | None = os.getenv("MAIL_API_KEY") or None

        # Invoice storage
        self.storage_dir: str = os.getenv("STORAGE_DIR", "./storage")
        self.public_base_url: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000/files")

        # Payment gateway
        self.razorpay_api: str = os.getenv("RAZORPAY_API", "https://api.razorpay.com")
        self.razorpay_key_id: str = os.getenv("RAZORPAY_KEY_ID", "")
        self.razorpay_key_secret: str = os.getenv("RAZORPAY_KEY_SECRET", "")

        self.http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "10"))


settings = Settings()
