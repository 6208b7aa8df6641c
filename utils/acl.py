import asyncio
import sys
from config import Config
from db import db
from log import get_logger
from utils.errors import AccessRevoked, AlreadyAuthorized

logger = get_logger(__name__)


def make_record(user):
    """AccessRecord from a pyrogram User (or anything with the same attributes)."""
    return {
        "id": user.id,
        "username": getattr(user, "username", None),
        "first_name": getattr(user, "first_name", None),
        "last_name": getattr(user, "last_name", None),
    }


class AccessControl:
    """
    Allowed / revoked user lists, mirrored to durable storage.

    An id is never in both lists. Every change is written through ``store``
    before it becomes visible; if the write fails the process exits, so the
    in-memory list never drifts from the stored one.
    """

    def __init__(self, store, owner_id=0):
        self.store = store
        self.owner_id = owner_id
        self.allowed = []
        self.revoked = []
        self._lock = asyncio.Lock()

    async def load(self):
        data = await self.store.load_acl()
        self.allowed = data["allowedUsers"]
        self.revoked = data["revokedUsers"]
        logger.info(f"ACL loaded: {len(self.allowed)} allowed, {len(self.revoked)} revoked")

    # --- Queries ---

    def is_authorized(self, user_id):
        return any(u["id"] == user_id for u in self.allowed)

    def is_revoked(self, user_id):
        return any(u["id"] == user_id for u in self.revoked)

    def is_admin(self, user_id):
        return bool(self.owner_id) and user_id == self.owner_id

    def get_allowed(self, user_id):
        return next((u for u in self.allowed if u["id"] == user_id), None)

    def get_revoked(self, user_id):
        return next((u for u in self.revoked if u["id"] == user_id), None)

    # --- Mutations ---

    async def authorize(self, user):
        """
        Add ``user`` to the allowed list.

        Returns True when this is the first allowed user, which is the cue to
        ask them to configure themselves as the owner.
        """
        record = make_record(user)
        async with self._lock:
            if self.is_authorized(record["id"]):
                raise AlreadyAuthorized("Already authorized.")
            if self.is_revoked(record["id"]):
                raise AccessRevoked("Your access has been revoked and cannot reauthorize.")

            allowed = self.allowed + [record]
            await self._commit(allowed, self.revoked)

        logger.info(f"user: {record['id']}, message: authorized")
        return len(self.allowed) == 1

    async def revoke(self, user_id):
        async with self._lock:
            record = self.get_allowed(user_id)
            if record is None:
                return False

            allowed = [u for u in self.allowed if u["id"] != user_id]
            revoked = self.revoked + [record]
            await self._commit(allowed, revoked)

        logger.info(f"user: {user_id}, message: access revoked")
        return True

    async def unrevoke(self, user_id):
        """Remove ``user_id`` from the revoked list. It is not re-added to allowed."""
        async with self._lock:
            if self.get_revoked(user_id) is None:
                return False

            revoked = [u for u in self.revoked if u["id"] != user_id]
            await self._commit(self.allowed, revoked)

        logger.info(f"user: {user_id}, message: access unrevoked")
        return True

    async def _commit(self, allowed, revoked):
        try:
            await self.store.save_acl({"allowedUsers": allowed, "revokedUsers": revoked})
        except Exception as e:
            logger.critical(f"Could not save the access control list: {e}")
            sys.exit(f"ACL persistence failed: {e}")

        self.allowed = allowed
        self.revoked = revoked


acl = AccessControl(db, owner_id=Config.OWNER_ID)
