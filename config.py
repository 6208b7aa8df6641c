import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default="false"):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    API_ID = int(os.getenv("API_ID", "0"))
    API_HASH = os.getenv("API_HASH", "")
    BOT_TOKEN = os.getenv("BOT_TOKEN", "")

    # Access
    BOT_PASSWORD = os.getenv("BOT_PASSWORD", "")
    # 0 until the first authorized user copies their id here
    OWNER_ID = int(os.getenv("OWNER_ID", "0"))
    # Chat that receives import notifications (user, group or channel id)
    NOTIFY_ID = int(os.getenv("NOTIFY_ID", "0"))

    # Sonarr
    SONARR_HOST = os.getenv("SONARR_HOST", "localhost")
    SONARR_PORT = int(os.getenv("SONARR_PORT", "8989"))
    SONARR_URL_BASE = os.getenv("SONARR_URL_BASE", "").strip("/")
    SONARR_SSL = _env_bool("SONARR_SSL")
    SONARR_API_KEY = os.getenv("SONARR_API_KEY", "")
    # Optional basic auth in front of Sonarr
    SONARR_USERNAME = os.getenv("SONARR_USERNAME", "")
    SONARR_PASSWORD = os.getenv("SONARR_PASSWORD", "")

    # Wizard
    MAX_RESULTS = int(os.getenv("MAX_RESULTS", "15"))
    CACHE_TTL = int(os.getenv("CACHE_TTL", "120"))  # seconds
    CACHE_CHECK_PERIOD = int(os.getenv("CACHE_CHECK_PERIOD", "150"))  # seconds

    # Storage
    ACL_FILE = os.getenv("ACL_FILE", "acl.json")
    # If set, the access list lives in MongoDB instead of ACL_FILE
    MONGO_URI = os.getenv("MONGO_URI", "")

    LANG = os.getenv("LANG_CODE", "en")
    LOG_FILE = os.getenv("LOG_FILE", "")


    # Bot Version
    BOT_VERSION = "1.0.0"
