"""
PKCE (Proof Key for Code Exchange) utilities.

RFC 7636: the verifier is a high-entropy secret kept by the client, the
challenge is BASE64URL(SHA256(ASCII(verifier))) and is the only part sent
with the authorization request.
"""

import base64
import hashlib
import hmac
import re
import secrets

MIN_VERIFIER_LENGTH = 43
MAX_VERIFIER_LENGTH = 128

CODE_CHALLENGE_METHOD = "S256"

# RFC 7636 section 4.1 unreserved characters
VERIFIER_PATTERN = re.compile(r"^[A-Za-z0-9\-._~]{43,128}$")


def generate_code_verifier(length: int = MAX_VERIFIER_LENGTH) -> str:
    """
    Generates a random code verifier for PKCE.

    Args:
        length: Length of the code verifier (43-128 characters)

    Returns:
        Code verifier in base64url format

    Raises:
        ValueError: If length is outside 43-128
    """
    if not MIN_VERIFIER_LENGTH <= length <= MAX_VERIFIER_LENGTH:
        raise ValueError("Length must be between 43 and 128")

    # 96 random bytes encode to exactly 128 base64url characters, no padding
    code_verifier = base64.urlsafe_b64encode(secrets.token_bytes(96)).decode("ascii")
    return code_verifier[:length]


def generate_code_challenge(code_verifier: str) -> str:
    """
    Generates a code challenge from the code verifier using SHA256.

    Args:
        code_verifier: Generated code verifier

    Returns:
        Code challenge in base64url format, without padding
    """
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def verify_code_challenge(code_verifier: str, code_challenge: str) -> bool:
    """
    Verifies that the code verifier corresponds to the code challenge.

    Args:
        code_verifier: Received code verifier
        code_challenge: Expected code challenge

    Returns:
        True if they match, False otherwise
    """
    if not code_verifier.isascii():
        return False
    expected_challenge = generate_code_challenge(code_verifier)
    return hmac.compare_digest(
        expected_challenge.encode("utf-8"), code_challenge.encode("utf-8")
    )


def is_valid_code_verifier(code_verifier: str) -> bool:
    """Check length and charset of a verifier against RFC 7636."""
    return bool(VERIFIER_PATTERN.fullmatch(code_verifier))
