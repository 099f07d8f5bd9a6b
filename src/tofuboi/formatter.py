"""UTF-8 safe text splitting for byte-limited message channels.

Provides:
  - split_safe_utf8(): carve a string into chunks of at most ``max_bytes``
    UTF-8 bytes without ever cutting a multi-byte character.
  - utf8_len(): byte length of a string once encoded as UTF-8.
"""

from .errors import BudgetTooSmall, InvalidBudget


def utf8_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _is_continuation(byte: int) -> bool:
    # 0b10xxxxxx never starts a character
    return byte & 0xC0 == 0x80


def split_safe_utf8(text: str, max_bytes: int) -> list[str]:
    """Split text into contiguous chunks of at most max_bytes encoded bytes.

    Each cut point is computed as ``start + max_bytes`` and walked backward
    until it lands on the first byte of a character. The chunks concatenate
    back to ``text`` exactly; only the last one may be shorter than needed.

    Raises InvalidBudget if max_bytes <= 0 and BudgetTooSmall if a single
    character is wider than max_bytes.
    """
    if max_bytes <= 0:
        raise InvalidBudget(max_bytes)

    data = text.encode("utf-8")
    total = len(data)
    chunks: list[str] = []
    start = 0

    while start < total:
        if total - start <= max_bytes:
            chunks.append(data[start:].decode("utf-8"))
            break

        end = start + max_bytes
        while end > start and _is_continuation(data[end]):
            end -= 1

        if end == start:
            # Decode just the offending character for the error message
            width = 1
            while start + width < total and _is_continuation(data[start + width]):
                width += 1
            char = data[start : start + width].decode("utf-8")
            raise BudgetTooSmall(max_bytes, char)

        chunks.append(data[start:end].decode("utf-8"))
        start = end

    return chunks
