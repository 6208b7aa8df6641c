from utils.errors import ExpiredFlow, SelectionNotFound


def build_candidates(items, to_value, **fields):
    """
    Number ``items`` from 1 and attach the literal text offered to the user.

    ``fields`` maps output names to callables applied to each item, e.g.
    ``build_candidates(profiles, lambda p: p["name"], profileId=lambda p: p["id"])``.
    """
    candidates = []
    for idx, item in enumerate(items, start=1):
        c = {"id": idx, "keyboard_value": to_value(item)}
        for name, getter in fields.items():
            c[name] = getter(item)
        candidates.append(c)
    return candidates


def resolve(candidates, text, label="option"):
    """
    Return the first candidate whose keyboard value equals ``text`` exactly.

    ``candidates`` being None means the list was never offered or has
    expired. Duplicate keyboard values resolve to the earliest one.
    """
    if candidates is None:
        raise ExpiredFlow()

    for c in candidates:
        if c["keyboard_value"] == text:
            return c

    raise SelectionNotFound(f"could not find the {label} {text}")
