"""Block reference fragments: ``#<blockId>`` with an optional ``+`` or ``[start:end]``."""

from __future__ import annotations

import logging
import re
from typing import Optional

from hmid.models.entity import (
    BlockRange,
    CollapsedBlockRange,
    ExpandedBlockRange,
    ParsedFragment,
)

logger = logging.getLogger(__name__)

FRAGMENT_RE = re.compile(
    r"^(?P<block_id>\S{8})"
    r"(?:(?P<expanded>\+)|\[(?P<range_start>[0-9]*):(?P<range_end>[0-9]*)\])?$"
)
URL_FRAGMENT_RE = re.compile(r"#(.*)$")


def parse_fragment(text: Optional[str]) -> Optional[ParsedFragment]:
    """Decode a fragment (without the leading ``#``).

    Anything that does not fit the 8-character block id grammar is kept
    whole as a bare block id instead of failing, so older anchor-style
    fragments still resolve to "link to this block".
    """
    if not text:
        return None
    match = FRAGMENT_RE.match(text)
    if match is None:
        logger.debug("Non-conforming fragment %r kept as bare block id", text)
        return ParsedFragment(block_id=text)

    block_id = match.group("block_id")
    if match.group("expanded"):
        return ParsedFragment(block_id=block_id, block_range=ExpandedBlockRange())
    start, end = match.group("range_start"), match.group("range_end")
    if start is not None or end is not None:
        # "[:5]" and "[3:]" are accepted with the missing half read as 0
        return ParsedFragment(
            block_id=block_id,
            block_range=CollapsedBlockRange(start=int(start or 0), end=int(end or 0)),
        )
    return ParsedFragment(block_id=block_id)


def serialize_block_range(block_range: Optional[BlockRange]) -> str:
    if isinstance(block_range, ExpandedBlockRange):
        return "+"
    if isinstance(block_range, CollapsedBlockRange):
        return f"[{block_range.start}:{block_range.end}]"
    return ""


def serialize_fragment(
    block_ref: Optional[str], block_range: Optional[BlockRange] = None
) -> str:
    """Fragment text for a block reference, without the leading ``#``."""
    if not block_ref:
        return ""
    return f"{block_ref}{serialize_block_range(block_range)}"


def _url_fragment(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    match = URL_FRAGMENT_RE.search(url)
    return match.group(1) if match else None


def extract_block_ref_of_url(url: Optional[str]) -> Optional[str]:
    """Block id referenced by the fragment of any url, or None."""
    fragment = parse_fragment(_url_fragment(url))
    return fragment.block_id if fragment else None


def extract_block_range_of_url(url: Optional[str]) -> Optional[BlockRange]:
    fragment = parse_fragment(_url_fragment(url))
    return fragment.block_range if fragment else None
