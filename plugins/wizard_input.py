from pyrogram import Client, filters
from pyrogram.types import Message
from utils.flow import flow
from utils.helpers import send_reply


@Client.on_message(filters.private & filters.text, group=1)
async def wizard_input(client: Client, message: Message):
    """Replies picked from the custom keyboard (or typed) during a flow."""
    reply = await flow.handle_text(message.from_user.id, message.text)
    if reply is None:
        return
    await send_reply(client, message.chat.id, reply)
