"""Hypermedia ids: compose, unpack and convert ``hm://`` and gateway urls.

Scheme form::

    hm://<type>/<eid>[/<groupPathName>][?v=<version>][&b=<variants>][&l][#<fragment>]

Public web form is the same with ``https://<host>`` in place of ``hm:``.
Query keys are always written in the order ``v``, ``b``, ``l`` so equal ids
serialize to equal strings.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

from hmid.fragment import parse_fragment, serialize_fragment
from hmid.models.config import DEFAULT_GATEWAY_URL
from hmid.models.entity import (
    BlockRange,
    EntityType,
    PublicationVariant,
    UnpackedDocId,
    UnpackedHypermediaId,
)
from hmid.url_utils import parse_custom_url, quote_query_value, serialize_query_string
from hmid.variants import parse_variants_query, variants_param_value

logger = logging.getLogger(__name__)

HYPERMEDIA_SCHEME = "hm"
HYPERMEDIA_PUBLIC_WEB_GATEWAY = DEFAULT_GATEWAY_URL
WEB_SCHEMES = ("https", "http")

# Marks "hostname not given" apart from an explicit None (host-relative url).
UNSET: Any = object()

GatewaySource = Union[str, Callable[[], str], Any]


def _entity_type(type: Union[EntityType, str]) -> EntityType:
    entity_type = EntityType.from_tag(type.value if isinstance(type, EntityType) else type)
    if entity_type is None:
        raise ValueError(f"Unknown entity type: {type!r}")
    return entity_type


def _query(
    version: Optional[str],
    variants: Optional[list[PublicationVariant]],
    latest: Optional[bool],
) -> dict[str, Optional[str]]:
    query: dict[str, Optional[str]] = {}
    if version:
        query["v"] = version
    variants_value = variants_param_value(variants)
    if variants_value:
        query["b"] = variants_value
    if latest:
        query["l"] = None
    return query


def _suffix(
    version: Optional[str],
    variants: Optional[list[PublicationVariant]],
    latest: Optional[bool],
    block_ref: Optional[str],
    block_range: Optional[BlockRange],
) -> str:
    suffix = serialize_query_string(_query(version, variants, latest))
    if block_ref:
        suffix += f"#{serialize_fragment(block_ref, block_range)}"
    return suffix


def _url_host(hostname: Optional[str], gateway_url: str) -> str:
    if hostname is UNSET:
        return gateway_url.rstrip("/")
    if not hostname:
        return ""
    if "://" in hostname:
        return hostname.rstrip("/")
    return f"https://{hostname}"


def _read_gateway(gateway_url: GatewaySource) -> str:
    """Current gateway url; accepts a string, a callable or a ``.get()`` stream."""
    if isinstance(gateway_url, str):
        return gateway_url
    if callable(gateway_url):
        return gateway_url()
    return gateway_url.get()


def create_hm_id(
    type: Union[EntityType, str],
    eid: str,
    *,
    version: Optional[str] = None,
    block_ref: Optional[str] = None,
    block_range: Optional[BlockRange] = None,
    group_path_name: Optional[str] = None,
    variants: Optional[list[PublicationVariant]] = None,
    latest: Optional[bool] = None,
) -> str:
    """Build the canonical ``hm://`` string for an entity."""
    path = f"{_entity_type(type).value}/{eid}"
    if group_path_name:
        path += f"/{group_path_name}"
    return f"{HYPERMEDIA_SCHEME}://{path}" + _suffix(
        version, variants, latest, block_ref, block_range
    )


def hm_id(
    type: Union[EntityType, str],
    eid: str,
    *,
    version: Optional[str] = None,
    block_ref: Optional[str] = None,
    block_range: Optional[BlockRange] = None,
    group_path_name: Optional[str] = None,
    variants: Optional[list[PublicationVariant]] = None,
    latest: Optional[bool] = None,
    hostname: Optional[str] = None,
) -> UnpackedHypermediaId:
    """Build an id record straight from its parts, trusting type and eid."""
    entity_type = _entity_type(type)
    return UnpackedHypermediaId(
        id=create_hm_id(
            entity_type,
            eid,
            version=version,
            block_ref=block_ref,
            block_range=block_range,
            group_path_name=group_path_name,
            variants=variants,
            latest=latest,
        ),
        type=entity_type,
        eid=eid,
        qid=create_hm_id(entity_type, eid),
        group_path_name=group_path_name or None,
        version=version or None,
        block_ref=block_ref or None,
        block_range=block_range,
        hostname=hostname or None,
        scheme=None,
        variants=variants or None,
        latest=latest,
    )


def unpack_hm_id(hypermedia_id: Optional[str]) -> Optional[UnpackedHypermediaId]:
    """Decode an ``hm://`` id or an ``http(s)://<host>/...`` gateway url.

    For web urls the host is read as path segment 0 and everything else
    shifts by one. Returns None when the text has no ``://``, an unknown
    scheme or entity type tag, or no eid.
    """
    parsed = parse_custom_url(hypermedia_id)
    if parsed is None:
        return None
    if parsed.scheme == HYPERMEDIA_SCHEME:
        offset, hostname, scheme = 0, None, None
    elif parsed.scheme in WEB_SCHEMES:
        offset, hostname, scheme = 1, parsed.segment(0), parsed.scheme
    else:
        return None

    entity_type = EntityType.from_tag(parsed.segment(offset))
    eid = parsed.segment(offset + 1)
    if entity_type is None or not eid:
        return None

    fragment = parse_fragment(parsed.fragment)
    return UnpackedHypermediaId(
        id=hypermedia_id,
        qid=create_hm_id(entity_type, eid),
        type=entity_type,
        eid=eid,
        group_path_name=parsed.segment(offset + 2) or None,
        version=parsed.get("v") or None,
        variants=parse_variants_query(parsed.get("b")),
        block_ref=fragment.block_id if fragment else None,
        block_range=fragment.block_range if fragment else None,
        hostname=hostname or None,
        latest=parsed.has("l"),
        scheme=scheme,
    )


def unpack_doc_id(input_url: Optional[str]) -> Optional[UnpackedDocId]:
    """Like :func:`unpack_hm_id`, but the id must point at a document.

    Raises ValueError when it decodes to any other entity type.
    """
    unpacked = unpack_hm_id(input_url)
    if unpacked is None:
        return None
    if unpacked.type != EntityType.DOCUMENT:
        raise ValueError(f"URL is expected to be a document ID: {input_url}")
    return UnpackedDocId(
        **unpacked.model_dump(),
        doc_id=create_hm_id(EntityType.DOCUMENT, unpacked.eid),
    )


def is_hypermedia_scheme(url: Optional[str]) -> bool:
    return bool(url) and url.startswith(f"{HYPERMEDIA_SCHEME}://")


def is_public_gateway_link(text: str, gateway_url: GatewaySource) -> bool:
    gateway = _read_gateway(gateway_url)
    return bool(gateway) and text.startswith(gateway)


def create_public_web_hm_url(
    type: Union[EntityType, str],
    eid: str,
    *,
    version: Optional[str] = None,
    block_ref: Optional[str] = None,
    block_range: Optional[BlockRange] = None,
    hostname: Optional[str] = UNSET,
    variants: Optional[list[PublicationVariant]] = None,
    latest: Optional[bool] = None,
    group_path_name: Optional[str] = None,
    gateway_url: str = HYPERMEDIA_PUBLIC_WEB_GATEWAY,
) -> str:
    """Public web url for an entity.

    ``hostname`` left unset uses ``gateway_url``; None gives a host-relative
    path; a bare host name is served over https.
    """
    web_path = f"/{_entity_type(type).value}/{eid}"
    if group_path_name:
        web_path += f"/{group_path_name}"
    return _url_host(hostname, gateway_url) + web_path + _suffix(
        version, variants, latest, block_ref, block_range
    )


def id_to_url(
    hm_id: str,
    hostname: Optional[str] = UNSET,
    *,
    version: Optional[str] = None,
    block_ref: Optional[str] = None,
    block_range: Optional[BlockRange] = None,
    variants: Optional[list[PublicationVariant]] = None,
    gateway_url: str = HYPERMEDIA_PUBLIC_WEB_GATEWAY,
) -> Optional[str]:
    """Convert an id to its public web url; explicit options win over the id's own."""
    unpacked = unpack_hm_id(hm_id)
    if unpacked is None:
        return None
    return create_public_web_hm_url(
        unpacked.type,
        unpacked.eid,
        version=version or unpacked.version,
        block_ref=block_ref or unpacked.block_ref,
        block_range=block_range or unpacked.block_range,
        hostname=hostname,
        variants=variants or unpacked.variants,
        latest=unpacked.latest,
        group_path_name=unpacked.group_path_name,
        gateway_url=gateway_url,
    )


def normalize_hm_id(url: str, gateway_url: GatewaySource) -> Optional[str]:
    """Return ``url`` as an ``hm://`` id, or None when it is not one.

    Scheme-form ids come back unchanged. Links under the current gateway
    (read at call time) are re-encoded keeping version and block reference.
    """
    if not url:
        return None
    if is_hypermedia_scheme(url):
        return url
    if is_public_gateway_link(url, gateway_url):
        unpacked = unpack_hm_id(url)
        if unpacked is not None:
            return create_hm_id(
                unpacked.type,
                unpacked.eid,
                block_range=unpacked.block_range,
                block_ref=unpacked.block_ref,
                version=unpacked.version,
            )
    logger.debug("Not a hypermedia link: %s", url)
    return None


def hm_id_with_version(
    hm_id: Optional[str],
    version: Optional[str],
    block_ref: Optional[str] = None,
    block_range: Optional[BlockRange] = None,
) -> Optional[str]:
    """Re-encode an id pinned to ``version`` (the id's own when not given)."""
    if not hm_id:
        return None
    unpacked = unpack_hm_id(hm_id)
    if unpacked is None:
        return None
    return create_hm_id(
        unpacked.type,
        unpacked.eid,
        group_path_name=unpacked.group_path_name,
        version=version or unpacked.version,
        block_ref=block_ref,
        block_range=block_range,
    )


def create_hm_doc_link(
    document_id: str,
    *,
    version: Optional[str] = None,
    block_ref: Optional[str] = None,
    block_range: Optional[BlockRange] = None,
    latest: Optional[bool] = None,
    variants: Optional[list[PublicationVariant]] = None,
) -> str:
    """Append version, variants and block reference to an existing document id."""
    link = document_id + serialize_query_string(_query(version, variants, latest))
    if block_ref:
        link += f"#{serialize_fragment(block_ref.removeprefix('#'), block_range)}"
    return link


def create_hm_group_doc_link(
    group_id: str,
    path_name: Optional[str],
    version: Optional[str] = None,
    block_ref: Optional[str] = None,
    block_range: Optional[BlockRange] = None,
) -> str:
    link = group_id
    if path_name:
        # the group's root document is addressed as "-"
        link += "/-" if path_name == "/" else f"/{path_name}"
    if version:
        link += f"?v={quote_query_value(version)}"
    if block_ref:
        link += f"#{serialize_fragment(block_ref.removeprefix('#'), block_range)}"
    return link


def group_doc_url(
    group_eid: str,
    version: Optional[str],
    path_name: Optional[str],
    hostname: Optional[str] = None,
    gateway_url: str = HYPERMEDIA_PUBLIC_WEB_GATEWAY,
) -> str:
    """Web url of a document published under a group path (host-relative by default)."""
    web_url = _url_host(hostname, gateway_url) + f"/{EntityType.GROUP.value}/{group_eid}"
    if path_name and path_name != "/":
        web_url += f"/{path_name}"
    if version:
        web_url += f"?v={quote_query_value(version)}"
    return web_url


def label_of_entity_type(type: Union[EntityType, str]) -> str:
    return _entity_type(type).label
