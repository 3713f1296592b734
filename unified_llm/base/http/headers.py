"""Request header assembly shared by all providers.

Header names live in ``base.constants``. Optional headers are only attached
when their value is non-blank.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from ..constants import (
    AUTHORIZATION_HEADER,
    IDEMPOTENCY_HEADER,
    ORGANIZATION_HEADER,
    TAG_KV_SEPARATOR,
    TAG_KV_SEPARATOR_REPLACEMENT,
    TAG_PAIR_SEPARATOR,
    TAG_PAIR_SEPARATOR_REPLACEMENT,
    TAGS_HEADER,
)


def _sanitize_tag_part(value: str) -> str:
    return value.replace(TAG_PAIR_SEPARATOR, TAG_PAIR_SEPARATOR_REPLACEMENT).replace(
        TAG_KV_SEPARATOR, TAG_KV_SEPARATOR_REPLACEMENT
    )


def format_tags_header(tags: Optional[Mapping[str, str]]) -> Optional[str]:
    """Encode tags as ``k=v;k2=v2`` preserving insertion order.

    ``;`` and ``=`` inside keys or values are replaced with ``_`` and ``:``
    respectively. Returns ``None`` for missing or empty tag maps.
    """
    if not tags:
        return None
    return TAG_PAIR_SEPARATOR.join(
        f"{_sanitize_tag_part(str(k))}{TAG_KV_SEPARATOR}{_sanitize_tag_part(str(v))}" for k, v in tags.items()
    )


def build_request_headers(
    *,
    bearer_token: Optional[str] = None,
    organization: Optional[str] = None,
    idempotency_key: Optional[str] = None,
    tags: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Build the header mapping for one provider call.

    Parameters:
        bearer_token: API key sent as ``Authorization: Bearer``; omit for
            providers that take the key as a query parameter.
        organization: Optional organization id.
        idempotency_key: Optional idempotency key.
        tags: Optional correlation tags.
    """
    headers: Dict[str, str] = {}
    if bearer_token:
        headers[AUTHORIZATION_HEADER] = f"Bearer {bearer_token}"
    if organization and organization.strip():
        headers[ORGANIZATION_HEADER] = organization
    if idempotency_key and idempotency_key.strip():
        headers[IDEMPOTENCY_HEADER] = idempotency_key
    tag_header = format_tags_header(tags)
    if tag_header:
        headers[TAGS_HEADER] = tag_header
    return headers


__all__ = ["build_request_headers", "format_tags_header"]
