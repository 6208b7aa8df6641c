import asyncio
from pyrogram import Client, idle
from config import Config
from db import db
from log import get_logger
from utils.acl import acl
from utils.cache import cache
from utils.errors import SonarrError
from utils.sonarr import sonarr

logger = get_logger(__name__)


async def check_sonarr():
    try:
        status = await sonarr.get_status()
        logger.info(f"📡 Sonarr: v{(status or {}).get('version', '?')} at {sonarr.base_url}")
    except SonarrError as e:
        # Not fatal, commands will report the error to the user
        logger.warning(f"Sonarr not reachable at startup: {e}")


async def main():
    # Access list must load before any message is handled
    db.connect()
    await acl.load()

    plugins = dict(root="plugins")
    app = Client(
        "sonarr_bot",
        api_id=Config.API_ID,
        api_hash=Config.API_HASH,
        bot_token=Config.BOT_TOKEN,
        plugins=plugins
    )

    await app.start()

    me = await app.get_me()

    # Startup Logs
    logger.info("========================================")
    logger.info(f"🚀 Sonarr Bot v{Config.BOT_VERSION}")
    logger.info(f"👤 Bot: @{me.username} ({me.id})")
    logger.info(f"🔑 Owner ID: {Config.OWNER_ID or 'not configured'}")
    logger.info("========================================")

    if not Config.BOT_PASSWORD:
        logger.warning("BOT_PASSWORD is empty, nobody can /auth")

    await check_sonarr()

    # Start Background Tasks
    asyncio.create_task(cache.sweep_loop())

    await idle()
    await app.stop()

if __name__ == "__main__":
    asyncio.run(main())
