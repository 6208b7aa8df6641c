from pyrogram import Client, StopPropagation, filters
from pyrogram.types import Message
from log import get_logger
from utils.acl import acl
from utils.lang import translate

logger = get_logger(__name__)

# Commands anyone may send
OPEN_COMMANDS = {"/auth"}


def command_token(text):
    token = text.split(maxsplit=1)[0].lower() if text else ""
    # /auth@MyBot -> /auth
    return token.split("@", 1)[0]


@Client.on_message(filters.private & filters.text, group=-1)
async def check_access(client: Client, message: Message):
    """
    High-priority handler: only authorized users get past this point.
    Everyone else is told so and propagation stops.
    """
    user_id = message.from_user.id if message.from_user else None
    if not user_id:
        raise StopPropagation

    if acl.is_authorized(user_id):
        return

    if command_token(message.text) in OPEN_COMMANDS:
        return

    logger.info(f"Access check: user {user_id} → not authorized")
    await message.reply(translate("notAuthorized"))
    raise StopPropagation
