import copy
import functools
from config import Config
from log import get_logger
from utils.acl import acl as default_acl
from utils.cache import cache as default_cache
from utils.errors import AdminOnly, BotError, ExpiredFlow, NotAuthorized, SonarrError
from utils.helpers import Reply, error_reply, get_telegram_name, keyboard_column, keyboard_pairs, numbered
from utils.library import SONARR_COMMANDS
from utils.lang import translate
from utils.monitor import MONITOR_TYPES, apply_monitor_policy
from utils.resolver import build_candidates, resolve
from utils.sonarr import sonarr as default_sonarr
from utils.states import CacheKey, FLOW_KEYS, State

logger = get_logger(__name__)

CONFIRM_KEYBOARD = [["NO"], ["yes"]]

BOT_COMMANDS = {
    "start", "auth", "query", "q", "library", "upcoming", "clear",
    "users", "revoke", "unrevoke", *SONARR_COMMANDS,
}


def is_bot_command(text):
    """True for "/clear" or "/clear@SomeBot arg", false for a path like "/tv/shows"."""
    token = text.split()[0][1:].split("@")[0].lower()
    return token in BOT_COMMANDS


def replies_errors(func):
    """Turn a BotError raised inside a step into an error reply for that user."""
    @functools.wraps(func)
    async def wrapper(self, user_id, *args, **kwargs):
        try:
            return await func(self, user_id, *args, **kwargs)
        except BotError as e:
            return error_reply(user_id, e)
    return wrapper


def series_label(series):
    year = series.get("year")
    return f"{series['title']} - {year}" if year else series["title"]


class FlowController:
    """
    Per-user conversation state machine.

    Series-add wizard: series -> quality profile -> root folder -> monitor
    type -> submit. Admin flows: pick a user -> confirm -> revoke/unrevoke.
    The current step and every offered option list live in the option cache
    under the user's id, so each reply is matched against exactly what that
    user was shown.
    """

    def __init__(self, cache, sonarr, acl, max_results=15, password=""):
        self.cache = cache
        self.sonarr = sonarr
        self.acl = acl
        self.max_results = max_results
        self.password = password

        self._steps = {
            State.SERIES: self._on_series,
            State.PROFILE: self._on_profile,
            State.FOLDER: self._on_folder,
            State.MONITOR: self._on_monitor,
            State.REVOKE: self._on_revoke_target,
            State.REVOKE_CONFIRM: self._on_revoke_confirm,
            State.UNREVOKE: self._on_unrevoke_target,
            State.UNREVOKE_CONFIRM: self._on_unrevoke_confirm,
        }

    # --- Permissions ---

    def require_user(self, user_id):
        if not self.acl.is_authorized(user_id):
            raise NotAuthorized(translate("notAuthorized"))

    def require_admin(self, user_id):
        if self.acl.is_admin(user_id):
            return

        message = translate("adminOnly")
        if self.acl.is_authorized(user_id) and not self.acl.owner_id:
            message += "\n\n" + translate("ownerPrompt", user_id=user_id)
        raise AdminOnly(message)

    def get_state(self, user_id):
        return self.cache.get(user_id, CacheKey.STATE)

    # --- Entry commands ---

    @replies_errors
    async def start(self, user_id, user):
        self.require_user(user_id)
        logger.info(f"user: {user_id}, message: sent '/start' command")
        return Reply(translate("welcome", name=get_telegram_name(user)))

    async def auth(self, user, password):
        """
        Handle ``/auth <password>``.

        Returns a list of ``(chat_id, Reply)``; besides the answer to the user
        it may hold the owner bootstrap prompt and a notice for the owner.
        """
        user_id = user.id
        if self.acl.is_authorized(user_id):
            return [(user_id, Reply(translate("alreadyAuthorized")))]

        if self.acl.is_revoked(user_id):
            return [(user_id, Reply(translate("revokedAuth")))]

        if not self.password or password != self.password:
            logger.warning(f"user: {user_id}, message: failed authorization attempt")
            return [(user_id, Reply(translate("invalidPassword")))]

        try:
            first = await self.acl.authorize(user)
        except BotError as e:
            return [(user_id, error_reply(user_id, e))]

        outbox = [(user_id, Reply(translate("authorized")))]
        if first and not self.acl.owner_id:
            outbox.append((user_id, Reply(translate("ownerPrompt", user_id=user_id))))
        if self.acl.owner_id and self.acl.owner_id != user_id:
            outbox.append((self.acl.owner_id, Reply(translate("grantedAccess", name=get_telegram_name(user)))))
        return outbox

    @replies_errors
    async def clear(self, user_id):
        self.require_user(user_id)
        logger.info(f"user: {user_id}, message: sent '/clear' command")
        self.cache.clear(user_id, FLOW_KEYS)
        return Reply(translate("cleared"), hide_keyboard=True)

    @replies_errors
    async def query(self, user_id, term):
        self.require_user(user_id)
        logger.info(f"user: {user_id}, message: sent '/query' command for \"{term}\"")

        found = await self.sonarr.lookup_series(term)
        if not found:
            raise BotError(f"could not find {term}, try searching again")

        found = found[:self.max_results]
        series_list = build_candidates(
            found, series_label,
            title=lambda s: s["title"],
            year=lambda s: s.get("year"),
            tvdbId=lambda s: s.get("tvdbId"),
            titleSlug=lambda s: s.get("titleSlug"),
            seasons=lambda s: s.get("seasons", []),
        )

        lines = [f"**Found {len(series_list)} series:**"]
        for s in series_list:
            link = f"[{s['title']}](http://thetvdb.com/?tab=series&id={s['tvdbId']})"
            if s["year"]:
                link += f" - __{s['year']}__"
            lines.append(numbered(s["id"], link))
        lines.append(translate("selectFromMenu"))

        values = [s["keyboard_value"] for s in series_list]
        logger.info(f"user: {user_id}, message: found the following series {', '.join(values)}")

        self._begin(user_id, State.SERIES, CacheKey.SERIES_LIST, series_list)
        return Reply("\n".join(lines), keyboard_column(values))

    @replies_errors
    async def users(self, user_id):
        self.require_admin(user_id)
        if not self.acl.allowed:
            return Reply("There aren't any allowed users.")

        lines = ["**Allowed Users:**"]
        for idx, u in enumerate(self.acl.allowed, start=1):
            lines.append(numbered(idx, get_telegram_name(u)))
        return Reply("\n".join(lines))

    @replies_errors
    async def revoke(self, user_id):
        self.require_admin(user_id)
        logger.info(f"user: {user_id}, message: sent '/revoke' command")
        return self._pick_user(
            user_id, self.acl.allowed, "Allowed Users",
            State.REVOKE, CacheKey.REVOKE_USER_LIST,
            "There aren't any allowed users."
        )

    @replies_errors
    async def unrevoke(self, user_id):
        self.require_admin(user_id)
        logger.info(f"user: {user_id}, message: sent '/unrevoke' command")
        return self._pick_user(
            user_id, self.acl.revoked, "Revoked Users",
            State.UNREVOKE, CacheKey.UNREVOKE_USER_LIST,
            "There aren't any revoked users."
        )

    # --- Free text ---

    @replies_errors
    async def handle_text(self, user_id, text):
        """
        Route a non-command message to the step the user is on.

        Returns None for commands, which have their own handlers. While a
        folder is being chosen a leading "/" is part of the path, unless the
        text names one of the bot commands.
        """
        state = self.get_state(user_id)

        if text.startswith("/") and (state != State.FOLDER or is_bot_command(text)):
            return None

        self.require_user(user_id)

        if state is None:
            if self.cache.lapsed(user_id, CacheKey.STATE):
                raise ExpiredFlow(translate("expiredFlow"))
            logger.info(f"user: {user_id}, message: received unknown message \"{text}\"")
            raise BotError(translate("unknownMessage"))

        if state.is_admin:
            self.require_admin(user_id)

        logger.info(f"user: {user_id}, message: replied \"{text}\" at step {state.value}")
        return await self._steps[state](user_id, text)

    # --- Series wizard ---

    async def _on_series(self, user_id, text):
        series = resolve(self.cache.get(user_id, CacheKey.SERIES_LIST), text, "series with title")
        self.cache.set(user_id, CacheKey.SERIES_ID, series["id"])

        profiles = await self.sonarr.get_profiles()
        if not profiles:
            raise SonarrError("could not get profiles, try searching again")
        if not self.cache.has(user_id, CacheKey.SERIES_LIST):
            raise ExpiredFlow("could not get previous series list, try searching again")

        profile_list = build_candidates(profiles, lambda p: p["name"], profileId=lambda p: p["id"])
        values = [p["keyboard_value"] for p in profile_list]

        lines = [f"**Found {len(profile_list)} profiles:**"]
        lines += [numbered(p["id"], p["keyboard_value"]) for p in profile_list]
        lines.append(translate("selectFromMenu"))

        logger.info(f"user: {user_id}, message: found the following profiles {', '.join(values)}")

        self.cache.set(user_id, CacheKey.PROFILE_LIST, profile_list)
        self.cache.set(user_id, CacheKey.STATE, State.PROFILE)
        # Profile names are short, two per row
        return Reply("\n".join(lines), keyboard_pairs(values))

    async def _on_profile(self, user_id, text):
        profile = resolve(self.cache.get(user_id, CacheKey.PROFILE_LIST), text, "profile")
        self.cache.set(user_id, CacheKey.PROFILE_ID, profile["id"])

        folders = await self.sonarr.get_root_folders()
        if not folders:
            raise SonarrError("could not get folders, try searching again")
        if not self.cache.has(user_id, CacheKey.SERIES_LIST):
            raise ExpiredFlow("could not get previous list, try searching again")

        folder_list = build_candidates(folders, lambda f: f["path"], path=lambda f: f["path"], folderId=lambda f: f["id"])
        values = [f["keyboard_value"] for f in folder_list]

        lines = [f"**Found {len(folder_list)} folders:**"]
        lines += [numbered(f["id"], f["keyboard_value"]) for f in folder_list]
        lines.append(translate("selectFromMenu"))

        logger.info(f"user: {user_id}, message: found the following folders {', '.join(values)}")

        self.cache.set(user_id, CacheKey.FOLDER_LIST, folder_list)
        self.cache.set(user_id, CacheKey.STATE, State.FOLDER)
        return Reply("\n".join(lines), keyboard_column(values))

    async def _on_folder(self, user_id, text):
        self._require_cached(
            user_id, CacheKey.SERIES_LIST, CacheKey.SERIES_ID, CacheKey.FOLDER_LIST
        )

        folder = resolve(self.cache.get(user_id, CacheKey.FOLDER_LIST), text, "folder")
        self.cache.set(user_id, CacheKey.FOLDER_ID, folder["id"])

        monitor_list = build_candidates(MONITOR_TYPES, lambda m: m, type=lambda m: m)
        values = [m["keyboard_value"] for m in monitor_list]

        lines = ["**Select which seasons to monitor:**"]
        lines += [numbered(m["id"], m["keyboard_value"]) for m in monitor_list]
        lines.append(translate("selectFromMenu"))

        self.cache.set(user_id, CacheKey.MONITOR_LIST, monitor_list)
        self.cache.set(user_id, CacheKey.STATE, State.MONITOR)
        return Reply("\n".join(lines), keyboard_pairs(values))

    async def _on_monitor(self, user_id, text):
        self._require_cached(
            user_id,
            CacheKey.SERIES_LIST, CacheKey.SERIES_ID,
            CacheKey.PROFILE_LIST, CacheKey.PROFILE_ID,
            CacheKey.FOLDER_LIST, CacheKey.FOLDER_ID,
            CacheKey.MONITOR_LIST,
        )

        monitor = resolve(self.cache.get(user_id, CacheKey.MONITOR_LIST), text, "monitor type")
        series = self._cached_item(user_id, CacheKey.SERIES_LIST, CacheKey.SERIES_ID)
        profile = self._cached_item(user_id, CacheKey.PROFILE_LIST, CacheKey.PROFILE_ID)
        folder = self._cached_item(user_id, CacheKey.FOLDER_LIST, CacheKey.FOLDER_ID)

        payload = {
            "tvdbId": series["tvdbId"],
            "title": series["title"],
            "titleSlug": series["titleSlug"],
            "rootFolderPath": folder["path"],
            "seasonFolder": True,
            "monitored": True,
            "seriesType": "standard",
            "qualityProfileId": profile["profileId"],
        }
        apply_monitor_policy(payload, copy.deepcopy(series["seasons"]), monitor["type"])

        logger.info(f"user: {user_id}, message: adding series \"{series['title']}\" with options {payload}")

        try:
            result = await self.sonarr.add_series(payload)
            if not result:
                raise SonarrError("could not add series, try searching again.")
        finally:
            self.cache.clear(user_id, FLOW_KEYS)

        logger.info(f"user: {user_id}, message: added series \"{series['title']}\"")
        return Reply(f"Series `{series['title']}` added", hide_keyboard=True)

    # --- Admin flows ---

    async def _on_revoke_target(self, user_id, text):
        return self._confirm_target(
            user_id, text, CacheKey.REVOKE_USER_LIST, State.REVOKE_CONFIRM,
            "Are you sure you want to revoke access to {name}?"
        )

    async def _on_unrevoke_target(self, user_id, text):
        return self._confirm_target(
            user_id, text, CacheKey.UNREVOKE_USER_LIST, State.UNREVOKE_CONFIRM,
            "Are you sure you want to unrevoke access for {name}?"
        )

    async def _on_revoke_confirm(self, user_id, text):
        return await self._apply_confirmed(user_id, text, self.acl.revoke, "revoked")

    async def _on_unrevoke_confirm(self, user_id, text):
        return await self._apply_confirmed(user_id, text, self.acl.unrevoke, "unrevoked")

    def _pick_user(self, user_id, records, title, state, list_key, empty_text):
        if not records:
            return Reply(empty_text)

        user_list = build_candidates(records, get_telegram_name, userId=lambda u: u["id"])
        values = [u["keyboard_value"] for u in user_list]

        lines = [f"**{title}:**"]
        lines += [numbered(u["id"], u["keyboard_value"]) for u in user_list]
        lines.append(translate("selectFromMenu"))

        self._begin(user_id, state, list_key, user_list)
        return Reply("\n".join(lines), keyboard_pairs(values))

    def _confirm_target(self, user_id, text, list_key, next_state, question):
        target = resolve(self.cache.get(user_id, list_key), text, "user")
        logger.info(f"user: {user_id}, message: selected user {target['keyboard_value']}")

        self.cache.set(user_id, CacheKey.REVOKE_TARGET, target)
        self.cache.set(user_id, CacheKey.STATE, next_state)
        return Reply(question.format(name=target["keyboard_value"]), CONFIRM_KEYBOARD)

    async def _apply_confirmed(self, user_id, text, action, verb):
        target = self.cache.get(user_id, CacheKey.REVOKE_TARGET)
        if target is None:
            raise ExpiredFlow()

        name = target["keyboard_value"]
        logger.info(f"user: {user_id}, message: confirmation \"{text}\" for {name}")

        try:
            if text != "yes":
                return Reply(f"Access for {name} has **NOT** been {verb}.", hide_keyboard=True)

            if not await action(target["userId"]):
                raise BotError(f"could not find the user {name}")
            return Reply(f"Access for {name} has been {verb}.", hide_keyboard=True)
        finally:
            self.cache.clear(user_id, FLOW_KEYS)

    # --- Cache helpers ---

    def _begin(self, user_id, state, list_key, candidates):
        """Start a flow: anything left from a previous one is dropped first."""
        self.cache.clear(user_id, FLOW_KEYS)
        self.cache.set(user_id, list_key, candidates)
        self.cache.set(user_id, CacheKey.STATE, state)

    def _require_cached(self, user_id, *keys):
        missing = [k.value for k in keys if not self.cache.has(user_id, k)]
        if missing:
            logger.info(f"user: {user_id}, message: missing cache entries {', '.join(missing)}")
            raise ExpiredFlow()

    def _cached_item(self, user_id, list_key, id_key):
        item_id = self.cache.get(user_id, id_key)
        for item in self.cache.get(user_id, list_key) or []:
            if item["id"] == item_id:
                return item
        raise ExpiredFlow()


flow = FlowController(
    default_cache, default_sonarr, default_acl,
    max_results=Config.MAX_RESULTS,
    password=Config.BOT_PASSWORD,
)
