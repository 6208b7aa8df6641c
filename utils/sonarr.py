import asyncio
import requests
from config import Config
from log import get_logger
from utils.errors import SonarrError

logger = get_logger(__name__)


class SonarrClient:
    """
    Thin wrapper around the Sonarr HTTP API.

    Requests run in a worker thread so a slow Sonarr only holds up the
    handler that is waiting on it.
    """

    def __init__(self, hostname, port, api_key, url_base="", ssl=False, username="", password="", timeout=30):
        scheme = "https" if ssl else "http"
        base = f"/{url_base.strip('/')}" if url_base else ""
        self.base_url = f"{scheme}://{hostname}:{port}{base}/api"
        self.api_key = api_key
        self.auth = (username, password) if username else None
        self.timeout = timeout

    @classmethod
    def from_config(cls):
        return cls(
            hostname=Config.SONARR_HOST,
            port=Config.SONARR_PORT,
            api_key=Config.SONARR_API_KEY,
            url_base=Config.SONARR_URL_BASE,
            ssl=Config.SONARR_SSL,
            username=Config.SONARR_USERNAME,
            password=Config.SONARR_PASSWORD,
        )

    def _request(self, method, path, params=None, payload=None):
        url = f"{self.base_url}/{path}"
        headers = {"X-Api-Key": self.api_key}

        try:
            response = requests.request(
                method, url,
                params=params, json=payload,
                headers=headers, auth=self.auth,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Sonarr {method} {path} failed: {e}")
            raise SonarrError(f"could not reach Sonarr ({e.__class__.__name__})") from e

        if not response.ok:
            detail = _error_detail(response)
            logger.error(f"Sonarr {method} {path} returned {response.status_code}: {detail}")
            raise SonarrError(f"Sonarr returned {response.status_code}: {detail}")

        if not response.content:
            return None

        # A proxy or login page in front of Sonarr answers 200 with HTML
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Sonarr {method} {path} returned a non-JSON body")
            raise SonarrError("Sonarr returned an invalid response") from e

    async def _call(self, method, path, params=None, payload=None):
        return await asyncio.to_thread(self._request, method, path, params, payload)

    # --- Lookup / Listing ---

    async def lookup_series(self, term):
        return await self._call("GET", "series/lookup", params={"term": term}) or []

    async def get_profiles(self):
        return await self._call("GET", "profile") or []

    async def get_root_folders(self):
        return await self._call("GET", "rootfolder") or []

    async def get_series(self):
        """Series already in the library."""
        return await self._call("GET", "series") or []

    async def get_calendar(self, start, end):
        params = {"start": start.isoformat(), "end": end.isoformat()}
        return await self._call("GET", "calendar", params=params) or []

    async def get_status(self):
        return await self._call("GET", "system/status")

    # --- Actions ---

    async def add_series(self, payload):
        return await self._call("POST", "series", payload=payload)

    async def command(self, name):
        return await self._call("POST", "command", payload={"name": name})


def _error_detail(response):
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason

    # Validation errors come back as a list of {propertyName, errorMessage}
    if isinstance(body, list):
        return "; ".join(str(e.get("errorMessage", e)) for e in body if isinstance(e, dict)) or str(body)
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or str(body)
    return str(body)


sonarr = SonarrClient.from_config()
