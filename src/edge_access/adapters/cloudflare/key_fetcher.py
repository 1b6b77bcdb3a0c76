from __future__ import annotations

from typing import Any, Iterable, Optional

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from jwt.algorithms import RSAAlgorithm
from jwt.exceptions import InvalidKeyError
from pydantic import ValidationError
from requests import RequestException, Session

from ...domain.constants import KeyEntryKind
from ...domain.exceptions import KeySetFetchError
from ...domain.ports import SigningKeySet
from ...domain.value_objects import ProviderDomain
from ...logging_config import get_logger
from .schema import KeySetDocument, classify_key_entry

logger = get_logger(__name__)


class KeySetFetcher:
    """
    Retrieves an identity edge's public key set and imports its RSA keys.

    Infrastructure layer:
    - Knows the edge's well-known certs endpoint.
    - Knows how to turn JWKs into verification keys (PyJWT).

    Never caches; see CachedKeySetProvider for that.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self._session = session or Session()
        self._timeout = timeout

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def get_keys(self, domain: str) -> SigningKeySet:
        """
        Fetch and parse the key set for `domain`.

        Returns:
            Mapping of kid -> RSA public key. May be empty.

        Raises:
            KeySetFetchError
        """
        url = ProviderDomain.parse(domain).certs_url
        logger.debug("Fetching key set", domain=domain, url=url)

        try:
            response = self._session.get(url, timeout=self._timeout)
        except RequestException as exc:
            logger.warning("Key set request failed", domain=domain, error=str(exc))
            raise KeySetFetchError(url, reason=type(exc).__name__) from exc

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Key set endpoint returned an error",
                domain=domain,
                status_code=response.status_code,
            )
            raise KeySetFetchError(url, status_code=response.status_code)

        try:
            document = KeySetDocument.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("Key set body is not a key set document", domain=domain)
            raise KeySetFetchError(
                url, status_code=response.status_code, reason="invalid key set document"
            ) from exc

        keys = self.parse_keys(document.keys)
        logger.debug("Fetched key set", domain=domain, kids=sorted(keys))
        return keys

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def parse_keys(entries: Iterable[Any]) -> SigningKeySet:
        """
        Import every well-formed RSA entry, keyed by kid. Anything else is
        skipped, never fatal.
        """
        keys: SigningKeySet = {}
        for raw in entries:
            kind, jwk = classify_key_entry(raw)
            if kind is KeyEntryKind.OTHER:
                logger.debug("Skipping unsupported key type", kid=jwk.kid, kty=jwk.kty)
                continue
            if kind is KeyEntryKind.MALFORMED:
                logger.debug("Skipping malformed key entry", kid=jwk.kid if jwk else None)
                continue

            try:
                public_key = RSAAlgorithm.from_jwk(raw)
            except (InvalidKeyError, ValueError) as exc:
                logger.warning("Skipping RSA key that failed to import", kid=jwk.kid, error=str(exc))
                continue

            if isinstance(public_key, RSAPrivateKey):
                public_key = public_key.public_key()

            keys[jwk.kid] = public_key
        return keys
