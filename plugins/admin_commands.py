from pyrogram import Client, filters
from pyrogram.types import Message
from log import get_logger
from utils.errors import BotError
from utils.flow import flow
from utils.helpers import error_reply, send_reply
from utils.library import SONARR_COMMANDS, run_command

logger = get_logger(__name__)

# --- Users ---

@Client.on_message(filters.private & filters.command("users"))
async def users_cmd(client: Client, message: Message):
    reply = await flow.users(message.from_user.id)
    await send_reply(client, message.chat.id, reply)


@Client.on_message(filters.private & filters.command("revoke"))
async def revoke_cmd(client: Client, message: Message):
    reply = await flow.revoke(message.from_user.id)
    await send_reply(client, message.chat.id, reply)


@Client.on_message(filters.private & filters.command("unrevoke"))
async def unrevoke_cmd(client: Client, message: Message):
    reply = await flow.unrevoke(message.from_user.id)
    await send_reply(client, message.chat.id, reply)

# --- Sonarr Commands ---

@Client.on_message(filters.private & filters.command(list(SONARR_COMMANDS)))
async def sonarr_command(client: Client, message: Message):
    user_id = message.from_user.id
    command = message.command[0].lower()

    try:
        flow.require_admin(user_id)
        reply = await run_command(flow.sonarr, user_id, command)
    except BotError as e:
        reply = error_reply(user_id, e)
    await send_reply(client, message.chat.id, reply)
