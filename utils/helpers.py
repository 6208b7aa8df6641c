from dataclasses import dataclass
from pyrogram.enums import ParseMode
from pyrogram.types import ReplyKeyboardMarkup, ReplyKeyboardRemove
from log import get_logger
from utils.lang import translate

logger = get_logger(__name__)


@dataclass
class Reply:
    """A message for one user: text plus an optional custom keyboard."""
    text: str
    keyboard: list = None
    hide_keyboard: bool = False


def keyboard_pairs(values):
    """Two buttons per row, a trailing odd one on its own row."""
    return [values[i:i + 2] for i in range(0, len(values), 2)]


def keyboard_column(values):
    return [[v] for v in values]


def get_telegram_name(user):
    """Display name for a pyrogram User or a stored access record."""
    if isinstance(user, dict):
        username = user.get("username")
        first = user.get("first_name") or ""
        last = user.get("last_name")
    else:
        username = getattr(user, "username", None)
        first = getattr(user, "first_name", None) or ""
        last = getattr(user, "last_name", None)

    if username:
        return username
    return f"{first} {last}" if last else first


def numbered(idx, text):
    return f"**{idx}**) {text}"


async def send_reply(client, chat_id, reply: Reply):
    if reply.keyboard:
        markup = ReplyKeyboardMarkup(reply.keyboard, one_time_keyboard=True, resize_keyboard=True)
    elif reply.hide_keyboard:
        markup = ReplyKeyboardRemove()
    else:
        markup = None

    return await client.send_message(
        chat_id,
        reply.text,
        parse_mode=ParseMode.MARKDOWN,
        disable_web_page_preview=True,
        reply_markup=markup
    )


def error_reply(user_id, err):
    logger.warning(f"user: {user_id}, message: {err}")
    return Reply(translate("errorPrefix", error=err))
