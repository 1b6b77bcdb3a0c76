import binascii
import json
import numbers
from typing import Any, Mapping, Optional

from jwt.algorithms import RSAAlgorithm
from jwt.utils import base64url_decode as _jwt_base64url_decode

from ...domain.entities import ParsedToken
from ...domain.exceptions import (
    AudienceMismatchError,
    ExpiredTokenError,
    InvalidSignatureError,
    IssuerMismatchError,
    MalformedTokenError,
    UnknownKeyError,
)
from ...domain.ports import Clock, KeySetSource, TokenDecoder
from ..clock import system_clock_ms

_RS256 = RSAAlgorithm(RSAAlgorithm.SHA256)


def base64url_decode(segment: str) -> bytes:
    """
    Decode one base64url JWT segment. Missing `=` padding is inferred.

    Raises:
        ValueError on input that is not base64url
    """
    try:
        return _jwt_base64url_decode(segment.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError(f"Invalid base64url segment: {exc}") from exc


def _decode_json_segment(segment: str, name: str) -> Mapping[str, Any]:
    try:
        value = json.loads(base64url_decode(segment))
    except (ValueError, RecursionError) as exc:
        raise MalformedTokenError(f"Invalid token {name}: {exc}") from exc

    if not isinstance(value, dict):
        raise MalformedTokenError(f"Invalid token {name}: expected a JSON object")
    return value


def parse_token(token: str) -> ParsedToken:
    """
    Split a compact JWT into its parts without verifying anything.

    Raises:
        MalformedTokenError
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError("Token must have exactly three segments")

    header_segment, payload_segment, signature_segment = parts
    header = _decode_json_segment(header_segment, "header")
    payload = _decode_json_segment(payload_segment, "payload")

    try:
        signature = base64url_decode(signature_segment)
    except ValueError as exc:
        raise MalformedTokenError(f"Invalid token signature: {exc}") from exc

    return ParsedToken(
        header=header,
        payload=payload,
        signature=signature,
        signing_input=f"{header_segment}.{payload_segment}".encode("ascii"),
    )


class AccessJWTDecoder(TokenDecoder):
    """
    Adapter implementing TokenDecoder for identity-edge tokens.

    Checks run cheapest first and never consult unverified claims before the
    signature has been checked:
      structure -> key lookup -> RS256 signature -> exp / aud / iss
    """

    def __init__(
        self,
        key_source: KeySetSource,
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
        clock: Clock = system_clock_ms,
    ) -> None:
        self._key_source = key_source
        self._audience = audience
        self._issuer = issuer
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def decode(self, token: str, domain: str) -> Mapping[str, Any]:
        """
        Decode and validate an edge token for `domain`.

        Returns:
            The decoded payload.

        Raises:
            MalformedTokenError
            UnknownKeyError
            InvalidSignatureError
            ExpiredTokenError
            AudienceMismatchError
            IssuerMismatchError
            KeySetFetchError
        """
        parsed = parse_token(token)

        keys = self._key_source.get_keys(domain)
        kid = parsed.kid
        key = keys.get(kid) if kid is not None else None
        if key is None:
            raise UnknownKeyError(f"No signing key found for kid {kid!r}")

        if not _RS256.verify(parsed.signing_input, key, parsed.signature):
            raise InvalidSignatureError("Token signature verification failed")

        self._check_claims(parsed.payload)
        return parsed.payload

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _check_claims(self, payload: Mapping[str, Any]) -> None:
        exp = payload.get("exp")
        if not isinstance(exp, numbers.Real) or isinstance(exp, bool):
            raise ExpiredTokenError("Token has no expiry")

        now = self._clock() / 1000
        if not exp > now:
            raise ExpiredTokenError("Token has expired")

        if self._audience is not None:
            aud_claim = payload.get("aud")
            if isinstance(aud_claim, str):
                aud_list = [aud_claim]
            elif isinstance(aud_claim, list):
                aud_list = aud_claim
            else:
                aud_list = []

            if self._audience not in aud_list:
                raise AudienceMismatchError(
                    f"Invalid audience: expected {self._audience}, got {aud_list}"
                )

        if self._issuer is not None and payload.get("iss") != self._issuer:
            raise IssuerMismatchError(
                f"Invalid issuer: expected {self._issuer}, got {payload.get('iss')!r}"
            )
