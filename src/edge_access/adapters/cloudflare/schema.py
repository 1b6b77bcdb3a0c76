"""
Schema for the identity edge's published key set.

Each entry is tagged before anything is imported, so unsupported or broken
keys are skipped deterministically instead of failing the whole set.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError

from ...domain.constants import KeyEntryKind


class JsonWebKey(BaseModel):
    model_config = ConfigDict(extra="allow")

    kid: Optional[str] = None
    kty: Optional[str] = None
    alg: Optional[str] = None
    use: Optional[str] = None
    n: Optional[str] = None
    e: Optional[str] = None


class KeySetDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    keys: List[Any]


def classify_key_entry(raw: Any) -> Tuple[KeyEntryKind, Optional[JsonWebKey]]:
    """
    Tag one raw key-set entry as RSA, OTHER (well formed, unsupported type)
    or MALFORMED (unusable, including anything without a `kid`).
    """
    if not isinstance(raw, dict):
        return KeyEntryKind.MALFORMED, None

    try:
        jwk = JsonWebKey.model_validate(raw)
    except ValidationError:
        return KeyEntryKind.MALFORMED, None

    if not jwk.kid or not jwk.kty:
        return KeyEntryKind.MALFORMED, jwk

    if jwk.kty != "RSA":
        return KeyEntryKind.OTHER, jwk

    if not jwk.n or not jwk.e:
        return KeyEntryKind.MALFORMED, jwk

    return KeyEntryKind.RSA, jwk
