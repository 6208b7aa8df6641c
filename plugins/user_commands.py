from pyrogram import Client, filters
from pyrogram.types import Message
from log import get_logger
from utils.errors import BotError
from utils.flow import flow
from utils.helpers import error_reply, send_reply
from utils.library import parse_days, search_library, upcoming

logger = get_logger(__name__)


def command_arg(message):
    parts = message.text.split(maxsplit=1)
    return parts[1].strip() if len(parts) > 1 else ""


@Client.on_message(filters.private & filters.command("start"))
async def start_cmd(client: Client, message: Message):
    reply = await flow.start(message.from_user.id, message.from_user)
    await send_reply(client, message.chat.id, reply)


@Client.on_message(filters.private & filters.command("auth"))
async def auth_cmd(client: Client, message: Message):
    password = command_arg(message)
    if not password:
        await message.reply("Usage: `/auth <password>`")
        return

    for chat_id, reply in await flow.auth(message.from_user, password):
        try:
            await send_reply(client, chat_id, reply)
        except Exception as e:
            # The owner may never have started a chat with the bot
            logger.warning(f"Could not deliver message to {chat_id}: {e}")


@Client.on_message(filters.private & filters.command(["query", "q"]))
async def query_cmd(client: Client, message: Message):
    term = command_arg(message)
    if not term:
        await message.reply("Usage: `/q [series name]`")
        return

    reply = await flow.query(message.from_user.id, term)
    await send_reply(client, message.chat.id, reply)


@Client.on_message(filters.private & filters.command("library"))
async def library_cmd(client: Client, message: Message):
    user_id = message.from_user.id
    term = command_arg(message)
    if not term:
        await message.reply("Usage: `/library [series name]`")
        return

    logger.info(f"user: {user_id}, message: sent '/library' command for \"{term}\"")
    try:
        reply = await search_library(flow.sonarr, term)
    except BotError as e:
        reply = error_reply(user_id, e)
    await send_reply(client, message.chat.id, reply)


@Client.on_message(filters.private & filters.command("upcoming"))
async def upcoming_cmd(client: Client, message: Message):
    user_id = message.from_user.id
    logger.info(f"user: {user_id}, message: sent '/upcoming' command")
    try:
        days = parse_days(command_arg(message))
        reply = await upcoming(flow.sonarr, days)
    except BotError as e:
        reply = error_reply(user_id, e)
    await send_reply(client, message.chat.id, reply)


@Client.on_message(filters.private & filters.command("clear"))
async def clear_cmd(client: Client, message: Message):
    reply = await flow.clear(message.from_user.id)
    await send_reply(client, message.chat.id, reply)
    logger.info(f"user: {message.from_user.id}, message: '/clear' command successfully executed")
