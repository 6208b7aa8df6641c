import os
from log import get_logger

logger = get_logger(__name__)

# Environment variables Sonarr sets for a custom script connection
EVENT_TYPE = "sonarr_eventtype"
SERIES_TITLE = "sonarr_series_title"
SEASON = "sonarr_episodefile_seasonnumber"
EPISODES = "sonarr_episodefile_episodenumbers"
AIR_DATES = "sonarr_episodefile_episodeairdates"
QUALITY = "sonarr_episodefile_quality"
FILE_PATH = "sonarr_episodefile_path"


def file_size_mb(path):
    """Size in MB to one decimal, 0 if the file cannot be read."""
    try:
        return round(os.path.getsize(path) / 1048576, 1)
    except (OSError, TypeError) as e:
        logger.error(f"Could not read file size for {path}: {e}")
        return 0


def format_import_message(attrs, size_lookup=file_size_mb):
    """
    Render the "episode imported" notice from Sonarr's event attributes.

    ``attrs`` is any mapping, usually ``os.environ``. Missing attributes are
    shown as "Unknown ...".
    """
    if attrs.get(EVENT_TYPE) == "Test":
        return "**Sonarr Connection Test**\nThe notification hook is working."

    title = attrs.get(SERIES_TITLE) or "Unknown Title"
    season = attrs.get(SEASON) or "Unknown Season"
    episodes = attrs.get(EPISODES) or "Unknown Episode"
    air_date = attrs.get(AIR_DATES) or "Unknown Air Date"
    quality = attrs.get(QUALITY) or "Unknown Quality"
    size = size_lookup(attrs.get(FILE_PATH) or "")

    message = [
        "**Episode Imported**",
        f"{title} - {season}x{episodes}",
        f"**Aired:** {air_date}",
        f"**Quality:** {quality}",
        f"**Size:** {size} MB",
    ]
    return "\n".join(message)
