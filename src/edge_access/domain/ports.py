from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

SigningKeySet = dict[str, RSAPublicKey]

# Returns the current time as integer milliseconds since the epoch.
Clock = Callable[[], int]


class KeySetSource(Protocol):
    """
    Port for obtaining the signing keys trusted for a provider domain.

    Implementations live in the adapters layer (fetcher, cached provider).
    """

    def get_keys(self, domain: str) -> SigningKeySet:
        """
        Raises:
          - KeySetFetchError when the key set cannot be retrieved
        """
        ...


class TokenDecoder(Protocol):
    """
    Port for decoding an access token into claims.

    Implementations live in the adapters layer (e.g. the Access JWT decoder).
    """

    def decode(self, token: str, domain: str) -> Mapping[str, Any]:
        """
        Decode and verify the given token.

        Should:
          - reject structurally invalid tokens before any key lookup
          - verify signature
          - check expiry and basic claims
        Raises:
          - InvalidTokenError subclasses
          - KeySetFetchError
        """
        ...
