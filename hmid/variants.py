"""Variant selectors carried in the ``b`` query parameter.

A value looks like ``a/<author>.g/<groupEid>/<pathName>``: tokens joined
with ``.``, each one ``<kind>/<payload>`` (``<kind>:<payload>`` is read too).
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Union

from hmid.models.entity import AuthorVariant, GroupVariant, PublicationVariant

logger = logging.getLogger(__name__)

TOKEN_SPLIT_RE = re.compile(r"[:/]")


def parse_variants_query(
    value: Union[str, list[str], None],
) -> Optional[list[PublicationVariant]]:
    """Decode a ``b`` value into variants, in order.

    Unknown kinds are dropped so ids written by newer producers still
    decode; callers needing a particular variant must check for it.
    """
    from hmid.ids import create_hm_id

    if not value:
        return None
    if isinstance(value, list):
        value = ".".join(value)

    variants: list[PublicationVariant] = []
    for token in value.split("."):
        if not token:
            continue
        kind, *rest = TOKEN_SPLIT_RE.split(token)
        if kind == "g" and rest and rest[0]:
            path_name = rest[1] if len(rest) > 1 else None
            variants.append(GroupVariant(
                group_id=create_hm_id("g", rest[0]),
                path_name=path_name or None,
            ))
        elif kind == "a" and rest and rest[0]:
            variants.append(AuthorVariant(author=rest[0]))
        else:
            logger.debug("Dropping unrecognized variant token %r", token)

    return variants or None


def variants_param_value(variants: Optional[list[PublicationVariant]]) -> str:
    """Encode variants for the ``b`` parameter; "" when nothing encodes."""
    from hmid.ids import unpack_hm_id

    tokens = []
    for variant in variants or []:
        if isinstance(variant, GroupVariant):
            group_id = unpack_hm_id(variant.group_id)
            if group_id is None:
                logger.debug("Skipping group variant with bad id %r", variant.group_id)
                continue
            token = f"g/{group_id.eid}"
            if variant.path_name:
                token += f"/{variant.path_name}"
            tokens.append(token)
        elif isinstance(variant, AuthorVariant):
            tokens.append(f"a/{variant.author}")
    return ".".join(tokens)
