import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

# Both are required; see require_config()
APP_SECRET_KEY = os.getenv("APP_SECRET_KEY", "")
_database_path = os.getenv("DATABASE_PATH", "")
DATABASE_PATH = BASE_DIR / _database_path if _database_path else None

SESSION_EXPIRY_DAYS = int(os.getenv("SESSION_EXPIRY_DAYS", "30"))
CHAT_HISTORY_LIMIT = int(os.getenv("CHAT_HISTORY_LIMIT", "50"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8100"))

LEVELS = ("N3", "N2", "N1")
DEFAULT_LEVEL = "N3"
MIN_PASSWORD_LENGTH = 6

REQUIRED_SETTINGS = ("DATABASE_PATH", "APP_SECRET_KEY")


class ConfigError(RuntimeError):
    pass


def require_config(env=None):
    """Fail fast when a backend connection setting is missing."""
    env = os.environ if env is None else env
    missing = [name for name in REQUIRED_SETTINGS if not env.get(name)]
    if missing:
        raise ConfigError(f"Missing required configuration: {', '.join(missing)}")
