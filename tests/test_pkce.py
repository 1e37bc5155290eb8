"""
Tests for PKCE utilities.
"""

import base64
import hashlib

import pytest

from pkceflow.utils.pkce import (
    MAX_VERIFIER_LENGTH,
    MIN_VERIFIER_LENGTH,
    generate_code_challenge,
    generate_code_verifier,
    is_valid_code_verifier,
    verify_code_challenge,
)


def test_generate_code_verifier():
    """Test code verifier generation."""
    verifier = generate_code_verifier()
    assert len(verifier) == 128
    assert verifier.replace("-", "").replace("_", "").isalnum()
    assert is_valid_code_verifier(verifier)


@pytest.mark.parametrize("length", [MIN_VERIFIER_LENGTH, 64, MAX_VERIFIER_LENGTH])
def test_generate_code_verifier_lengths(length):
    """Verifier honours the requested length within the RFC bounds."""
    verifier = generate_code_verifier(length)
    assert len(verifier) == length
    assert is_valid_code_verifier(verifier)


@pytest.mark.parametrize("length", [0, 42, 129])
def test_generate_code_verifier_rejects_out_of_range(length):
    """Lengths outside 43-128 are rejected."""
    with pytest.raises(ValueError):
        generate_code_verifier(length)


def test_generate_code_verifier_is_random():
    """Consecutive verifiers differ."""
    assert generate_code_verifier() != generate_code_verifier()


def test_generate_code_challenge():
    """Test code challenge generation."""
    verifier = "test_verifier_1234567890"
    challenge = generate_code_challenge(verifier)
    assert len(challenge) == 43
    assert "=" not in challenge
    assert challenge.replace("-", "").replace("_", "").isalnum()


def test_generate_code_challenge_rfc7636_vector():
    """Appendix B of RFC 7636."""
    verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
    assert (
        generate_code_challenge(verifier)
        == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"
    )


def test_generate_code_challenge_is_sha256_base64url():
    """Challenge equals unpadded base64url of the SHA-256 digest."""
    verifier = generate_code_verifier()
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    expected = base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
    assert generate_code_challenge(verifier) == expected


def test_verify_code_challenge():
    """Test code challenge verification."""
    verifier = generate_code_verifier()
    challenge = generate_code_challenge(verifier)
    assert verify_code_challenge(verifier, challenge) is True
    assert verify_code_challenge("wrong_verifier", challenge) is False


def test_is_valid_code_verifier_rejects_bad_input():
    """Short values and characters outside the unreserved set fail."""
    assert not is_valid_code_verifier("short")
    assert not is_valid_code_verifier("a" * 42 + "+")
    assert not is_valid_code_verifier("a" * 129)
    assert is_valid_code_verifier("a" * 43)


def test_random_verifiers_are_valid_with_distinct_challenges():
    """Across many samples, verifiers are valid and challenges never collide."""
    verifiers = {generate_code_verifier() for _ in range(1000)}

    for verifier in verifiers:
        assert MIN_VERIFIER_LENGTH <= len(verifier) <= MAX_VERIFIER_LENGTH
        assert is_valid_code_verifier(verifier)

    challenges = {generate_code_challenge(verifier) for verifier in verifiers}
    assert len(verifiers) == 1000
    assert len(challenges) == len(verifiers)


def test_verify_code_challenge_non_ascii_input():
    """Non-ASCII input does not match instead of raising."""
    verifier = generate_code_verifier()
    challenge = generate_code_challenge(verifier)

    assert verify_code_challenge(verifier, "défi") is False
    assert verify_code_challenge("vérifieur", challenge) is False
