from conftest import BOB, make_user
from plugins.access_gate import command_token
from utils.helpers import get_telegram_name, keyboard_pairs
from utils.lang import translate


def test_keyboard_pairs():
    assert keyboard_pairs(["a", "b", "c"]) == [["a", "b"], ["c"]]
    assert keyboard_pairs(["a", "b"]) == [["a", "b"]]
    assert keyboard_pairs([]) == []


def test_telegram_name():
    assert get_telegram_name(make_user(1, username="neo")) == "neo"
    assert get_telegram_name(BOB) == "Bob Builder"
    assert get_telegram_name({"id": 1, "first_name": "Solo"}) == "Solo"


def test_command_token():
    assert command_token("/auth secret") == "/auth"
    assert command_token("/AUTH@SonarrBot secret") == "/auth"
    assert command_token("") == ""


def test_translate():
    assert translate("adminOnly") == "Only the admin can do this."
    assert translate("grantedAccess", name="neo") == "neo has been granted access."
    assert translate("noSuchKey") == "noSuchKey"
