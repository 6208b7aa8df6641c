"""
Sonarr custom-script hook: send one "episode imported" message and exit.

Configure it in Sonarr under Settings > Connect > Custom Script with the
"On Import" / "On Upgrade" triggers. The event details arrive as
environment variables.
"""
import asyncio
import os
import sys
from pyrogram import Client
from pyrogram.enums import ParseMode
from config import Config
from log import get_logger
from utils.notify import format_import_message

logger = get_logger(__name__)


async def send_notification(attrs):
    if not Config.NOTIFY_ID:
        logger.error("NOTIFY_ID is not configured, nothing to notify")
        return False

    text = format_import_message(attrs)

    # In-memory session, nothing is written next to the script
    app = Client(
        "sonarr_notify",
        api_id=Config.API_ID,
        api_hash=Config.API_HASH,
        bot_token=Config.BOT_TOKEN,
        in_memory=True
    )

    async with app:
        await app.send_message(
            Config.NOTIFY_ID,
            text,
            parse_mode=ParseMode.MARKDOWN,
            disable_web_page_preview=True
        )

    logger.info(f"Import notification sent to {Config.NOTIFY_ID}")
    return True


if __name__ == "__main__":
    ok = asyncio.run(send_notification(os.environ))
    sys.exit(0 if ok else 1)
