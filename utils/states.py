from enum import Enum


class State(str, Enum):
    """Where a user currently is inside a flow. Idle is the absence of a state."""

    # Series-add wizard
    SERIES = "sonarrSeries"
    PROFILE = "sonarrProfile"
    FOLDER = "sonarrFolder"
    MONITOR = "sonarrMonitor"

    # Admin
    REVOKE = "adminRevoke"
    REVOKE_CONFIRM = "adminRevokeConfirm"
    UNREVOKE = "adminUnrevoke"
    UNREVOKE_CONFIRM = "adminUnrevokeConfirm"

    @property
    def is_admin(self):
        return self in ADMIN_STATES


ADMIN_STATES = frozenset({
    State.REVOKE,
    State.REVOKE_CONFIRM,
    State.UNREVOKE,
    State.UNREVOKE_CONFIRM,
})


class CacheKey(str, Enum):
    STATE = "state"

    # Series-add selections
    SERIES_LIST = "seriesList"
    SERIES_ID = "seriesId"
    PROFILE_LIST = "seriesProfileList"
    PROFILE_ID = "seriesProfileId"
    FOLDER_LIST = "seriesFolderList"
    FOLDER_ID = "seriesFolderId"
    MONITOR_LIST = "seriesMonitorList"

    # Admin selections
    REVOKE_USER_LIST = "revokeUserList"
    UNREVOKE_USER_LIST = "unrevokeUserList"
    REVOKE_TARGET = "revokedUserName"


# Everything a flow may leave behind; /clear and flow completion drop all of it
FLOW_KEYS = tuple(CacheKey)
