import asyncio
import json
import os
import shutil
from motor.motor_asyncio import AsyncIOMotorClient
from config import Config
from log import get_logger

logger = get_logger(__name__)

EMPTY_ACL = {"allowedUsers": [], "revokedUsers": []}


class Database:
    """
    Durable copy of the access list.

    The whole list is read once at startup and rewritten in full on every
    change. With ``MONGO_URI`` set it is stored as a single document in the
    ``acl`` collection; otherwise in ``ACL_FILE`` (seeded from
    ``<ACL_FILE>.template`` the first time).
    """

    def __init__(self, acl_file=None, mongo_uri=None):
        self.acl_file = acl_file if acl_file is not None else Config.ACL_FILE
        self.mongo_uri = mongo_uri if mongo_uri is not None else Config.MONGO_URI

        self.client = None
        self.db = None
        self.acl_col = None

    @property
    def template_file(self):
        return self.acl_file + ".template"

    def connect(self):
        if not self.mongo_uri:
            logger.info(f"Using ACL file {self.acl_file}")
            return

        try:
            self.client = AsyncIOMotorClient(self.mongo_uri)
            try:
                self.db = self.client.get_database()
            except Exception:
                self.db = self.client["sonarr_bot"]
            self.acl_col = self.db.acl
            logger.info("Connected to MongoDB (ACL)")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise e

    # --- Load ---

    async def load_acl(self):
        if self.acl_col is not None:
            doc = await self.acl_col.find_one({"_id": "acl"})
            if not doc:
                logger.warning("ACL document not found, starting with an empty list")
                return _normalize(dict(EMPTY_ACL))
            doc.pop("_id", None)
            return _normalize(doc)

        return await asyncio.to_thread(self._read_acl_file)

    def _read_acl_file(self):
        if not os.path.exists(self.acl_file):
            logger.warning("ACL file not found, copying from template")
            if os.path.exists(self.template_file):
                shutil.copyfile(self.template_file, self.acl_file)
            else:
                self._write_acl_file(EMPTY_ACL)

        logger.info(f"ACL file found {self.acl_file}")
        try:
            with open(self.acl_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError("Invalid acl file, please make sure the file is in JSON format.") from e

        if not isinstance(data, dict):
            raise ValueError("Invalid acl file, expected a JSON object.")
        return _normalize(data)

    # --- Persist ---

    async def save_acl(self, data):
        """Overwrite the stored list with ``data``. Errors propagate to the caller."""
        if self.acl_col is not None:
            await self.acl_col.replace_one({"_id": "acl"}, dict(data), upsert=True)
        else:
            await asyncio.to_thread(self._write_acl_file, data)
        logger.info("The access control list was updated!")

    def _write_acl_file(self, data):
        tmp = self.acl_file + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, self.acl_file)


def _normalize(data):
    return {
        "allowedUsers": list(data.get("allowedUsers") or []),
        "revokedUsers": list(data.get("revokedUsers") or []),
    }


db = Database()
