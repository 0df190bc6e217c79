"""Line-oriented encoding of string lists stored in a single state value.

Items are joined by a newline and every stored item ends with one. Literal
newlines inside an item are written as the two characters ``\\n``. An item
that already contains a backslash followed by ``n`` decodes to a newline;
that ambiguity is accepted.
"""

from __future__ import annotations

from typing import Iterable

ITEM_DELIMITER = "\n"
ESCAPED_DELIMITER = "\\n"


def encode_item(item: str) -> str:
    return item.replace(ITEM_DELIMITER, ESCAPED_DELIMITER) + ITEM_DELIMITER


def encode_items(items: Iterable[str]) -> str:
    return "".join(encode_item(item) for item in items)


def decode_items(raw: str) -> list[str]:
    """Decode a stored value back into its items.

    One trailing newline is dropped and the rest is split, so both ``""``
    and ``"\\n"`` decode to the one-item list ``[""]``. Only an absent value
    reads as an empty list.
    """
    if raw.endswith(ITEM_DELIMITER):
        raw = raw[: -len(ITEM_DELIMITER)]
    return [item.replace(ESCAPED_DELIMITER, ITEM_DELIMITER) for item in raw.split(ITEM_DELIMITER)]
