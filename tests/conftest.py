import copy
from types import SimpleNamespace

import pytest

from utils.acl import AccessControl
from utils.cache import OptionCache
from utils.errors import SonarrError
from utils.flow import FlowController

OWNER_ID = 1000
PASSWORD = "hunter2"


def make_user(user_id, username=None, first_name="User", last_name=None):
    return SimpleNamespace(id=user_id, username=username, first_name=first_name, last_name=last_name)


def record(user):
    return {"id": user.id, "username": user.username, "first_name": user.first_name, "last_name": user.last_name}


OWNER = make_user(OWNER_ID, username="owner")
ALICE = make_user(2000, username="alice")
BOB = make_user(3000, first_name="Bob", last_name="Builder")


def lost(tvdb_id=73739):
    return {
        "title": "Lost",
        "year": 2004,
        "tvdbId": tvdb_id,
        "titleSlug": "lost",
        "seasons": [{"seasonNumber": n, "monitored": True} for n in range(0, 4)],
    }


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeStore:
    def __init__(self, allowed=None, revoked=None):
        self.data = {"allowedUsers": list(allowed or []), "revokedUsers": list(revoked or [])}
        self.saves = []
        self.fail = False

    async def load_acl(self):
        return copy.deepcopy(self.data)

    async def save_acl(self, data):
        if self.fail:
            raise OSError("disk full")
        self.data = copy.deepcopy(data)
        self.saves.append(self.data)


class FakeSonarr:
    def __init__(self):
        self.lookup = [lost()]
        self.profiles = [{"id": 1, "name": "Any"}, {"id": 4, "name": "HD-1080p"}, {"id": 6, "name": "Ultra-HD"}]
        self.folders = [{"id": 1, "path": "/tv"}, {"id": 2, "path": "/mnt/anime"}]
        self.series = []
        self.calendar = []
        self.added = []
        self.commands = []
        self.add_result = {"id": 99}
        self.fail = set()

    def _check(self, name):
        if name in self.fail:
            raise SonarrError(f"{name} failed")

    async def lookup_series(self, term):
        self._check("lookup")
        return copy.deepcopy(self.lookup)

    async def get_profiles(self):
        self._check("profiles")
        return list(self.profiles)

    async def get_root_folders(self):
        self._check("folders")
        return list(self.folders)

    async def get_series(self):
        self._check("series")
        return list(self.series)

    async def get_calendar(self, start, end):
        self._check("calendar")
        self.calendar_range = (start, end)
        return list(self.calendar)

    async def add_series(self, payload):
        self._check("add")
        self.added.append(payload)
        return self.add_result

    async def command(self, name):
        self._check("command")
        self.commands.append(name)
        return {"name": name, "status": "queued"}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return OptionCache(ttl=120, check_period=150, clock=clock)


@pytest.fixture
def store():
    return FakeStore(allowed=[record(OWNER), record(ALICE)], revoked=[record(BOB)])


@pytest.fixture
def acl(store):
    gate = AccessControl(store, owner_id=OWNER_ID)
    gate.allowed = copy.deepcopy(store.data["allowedUsers"])
    gate.revoked = copy.deepcopy(store.data["revokedUsers"])
    return gate


@pytest.fixture
def sonarr():
    return FakeSonarr()


@pytest.fixture
def flow(cache, sonarr, acl):
    return FlowController(cache, sonarr, acl, max_results=5, password=PASSWORD)
