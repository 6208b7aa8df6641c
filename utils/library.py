from datetime import date, timedelta
from log import get_logger
from utils.errors import BotError
from utils.helpers import Reply, numbered

logger = get_logger(__name__)

DEFAULT_UPCOMING_DAYS = 7
MAX_UPCOMING_DAYS = 60

# /command -> (Sonarr command name, confirmation)
SONARR_COMMANDS = {
    "wanted": ("MissingEpisodeSearch", "Wanted search command sent."),
    "rss": ("RssSync", "RSS Sync command sent."),
    "refresh": ("RefreshSeries", "Refresh series command sent."),
}


async def search_library(sonarr, term):
    """Series already in Sonarr whose title contains ``term`` (case-insensitive)."""
    needle = term.strip().lower()
    matches = [s for s in await sonarr.get_series() if needle in s.get("title", "").lower()]
    if not matches:
        raise BotError(f"could not find {term} in the library")

    matches.sort(key=lambda s: s.get("sortTitle") or s.get("title", "").lower())

    lines = [f"**Found {len(matches)} series in the library:**"]
    for idx, s in enumerate(matches, start=1):
        title = s["title"]
        if s.get("year"):
            title += f" ({s['year']})"
        have = s.get("episodeFileCount", 0)
        total = s.get("episodeCount", 0)
        status = s.get("status", "unknown")
        lines.append(numbered(idx, f"{title} - {have}/{total} episodes, {status}"))
    return Reply("\n".join(lines))


def parse_days(arg):
    if not arg:
        return DEFAULT_UPCOMING_DAYS
    try:
        days = int(arg)
    except ValueError:
        raise BotError(f"{arg} is not a number of days")
    return max(1, min(days, MAX_UPCOMING_DAYS))


async def upcoming(sonarr, days=DEFAULT_UPCOMING_DAYS, today=None):
    start = today or date.today()
    end = start + timedelta(days=days)
    episodes = await sonarr.get_calendar(start, end)

    if not episodes:
        return Reply(f"Nothing airing in the next {days} days.")

    episodes.sort(key=lambda e: e.get("airDateUtc") or e.get("airDate") or "")

    lines = [f"**Airing in the next {days} days:**"]
    for ep in episodes:
        series = ep.get("series", {}).get("title", "Unknown Series")
        code = f"S{ep.get('seasonNumber', 0):02d}E{ep.get('episodeNumber', 0):02d}"
        aired = ep.get("airDate", "")
        line = f"{aired} - **{series}** {code}"
        if ep.get("title"):
            line += f" - {ep['title']}"
        lines.append(line)
    return Reply("\n".join(lines))


async def run_command(sonarr, user_id, command):
    name, confirmation = SONARR_COMMANDS[command]
    logger.info(f"user: {user_id}, message: sent '/{command}' command")
    await sonarr.command(name)
    logger.info(f"user: {user_id}, message: '/{command}' command successfully executed")
    return Reply(confirmation)
