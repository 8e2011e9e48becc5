import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from course_checkout.errors import ConfigurationError

# Force-load .env (Windows-safe, reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")

DEFAULT_DATABASE_URL = "sqlite:///./courses.db"
DEFAULT_TIMEOUT = 10.0

logger = logging.getLogger(__name__)


def _flag(value):
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    database_url: str = ""
    upstream_timeout: float = DEFAULT_TIMEOUT
    strict: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 5000

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            razorpay_key_id=env.get("RAZORPAY_KEY_ID", ""),
            razorpay_key_secret=env.get("RAZORPAY_KEY_SECRET", ""),
            database_url=env.get("DATABASE_URL", ""),
            upstream_timeout=float(env.get("UPSTREAM_TIMEOUT") or DEFAULT_TIMEOUT),
            strict=_flag(env.get("STRICT_CONFIG", "")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT") or 5000),
        )

    @property
    def effective_database_url(self) -> str:
        return self.database_url or DEFAULT_DATABASE_URL

    def missing(self):
        names = []
        if not self.razorpay_key_id:
            names.append("RAZORPAY_KEY_ID")
        if not self.razorpay_key_secret:
            names.append("RAZORPAY_KEY_SECRET")
        if not self.database_url:
            names.append("DATABASE_URL")
        return names

    def validate(self) -> "Settings":
        """Warn about missing settings, or refuse them in strict mode."""
        missing = self.missing()
        if not missing:
            return self
        if self.strict:
            raise ConfigurationError(
                "Missing required settings: %s" % ", ".join(missing)
            )
        for name in missing:
            logger.warning("%s is not set", name)
        if not self.database_url:
            logger.warning("Falling back to %s", DEFAULT_DATABASE_URL)
        return self


def setup_logging(level="INFO"):
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
