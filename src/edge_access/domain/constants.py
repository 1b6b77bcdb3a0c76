from enum import Enum

# Provider key material is trusted for one hour after a successful fetch.
KEY_SET_TTL_MS = 3_600_000

KEY_SET_PATH = "/cdn-cgi/access/certs"

DEFAULT_TOKEN_HEADER = "Cf-Access-Jwt-Assertion"
DEFAULT_TOKEN_COOKIE = "CF_Authorization"

SIGNING_ALGORITHM = "RS256"


class ResponseMode(Enum):
    HTML = "html"
    API = "api"


class KeyEntryKind(Enum):
    RSA = "rsa"
    OTHER = "other"
    MALFORMED = "malformed"


class FailureKind(Enum):
    KEY_SET_FETCH = "key_set_fetch"
    MALFORMED = "malformed"
    UNKNOWN_KEY = "unknown_key"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"
    AUDIENCE_MISMATCH = "audience_mismatch"
    ISSUER_MISMATCH = "issuer_mismatch"
    UNEXPECTED = "unexpected"


class DecisionOutcome(Enum):
    PROCEED = "proceed"
    BYPASS = "bypass"
    REDIRECT = "redirect"
    REJECT = "reject"
