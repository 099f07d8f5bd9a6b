"""Greedy packing of transcript fragments into byte-bounded messages.

Fragments arrive in transcript order and are joined with a separator into as
few messages as possible, each at most ``budget`` UTF-8 bytes. A fragment that
is larger than the budget on its own is cut by split_safe_utf8() and every
piece goes out as a separate message.

Provides:
  - pack_fragments(): lazy generator of outgoing messages.
  - deliver_fragments(): awaits a send callable once per packed message.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable, Iterator

from .errors import InvalidBudget
from .formatter import split_safe_utf8, utf8_len

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "\n"

SendFn = Callable[[str], Awaitable[object]]


def pack_fragments(
    fragments: Iterable[str],
    budget: int,
    separator: str = DEFAULT_SEPARATOR,
) -> Iterator[str]:
    """Yield messages built from fragments, none longer than budget bytes.

    Empty fragments carry no content and are skipped. Nothing is yielded when
    every fragment is empty. Raises InvalidBudget for a non-positive budget and
    BudgetTooSmall (from the splitter) when an oversized fragment holds a
    character wider than the budget.
    """
    if budget <= 0:
        raise InvalidBudget(budget)
    sep_len = utf8_len(separator)

    buffer: list[str] = []
    buffer_len = 0

    for fragment in fragments:
        if not fragment:
            continue
        frag_len = utf8_len(fragment)

        if frag_len > budget:
            if buffer:
                yield separator.join(buffer)
                buffer, buffer_len = [], 0
            # Pieces are already budget-sized and cannot be combined further
            yield from split_safe_utf8(fragment, budget)
            continue

        extra = frag_len + sep_len if buffer else frag_len
        if buffer and buffer_len + extra > budget:
            yield separator.join(buffer)
            buffer, buffer_len = [], 0
            extra = frag_len

        buffer.append(fragment)
        buffer_len += extra

    if buffer:
        yield separator.join(buffer)


async def deliver_fragments(
    fragments: Iterable[str],
    send: SendFn,
    budget: int,
    separator: str = DEFAULT_SEPARATOR,
) -> int:
    """Pack fragments and await send() for each message, strictly in order.

    Returns the number of messages sent; 0 means there was nothing to deliver.
    Any exception from send() or the splitter stops delivery and propagates;
    messages already sent stay sent.
    """
    sent = 0
    for message in pack_fragments(fragments, budget, separator):
        await send(message)
        sent += 1
    logger.debug("Delivered %d message(s) with budget %d", sent, budget)
    return sent
