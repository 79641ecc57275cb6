"""Shared fixtures for the aesbridge test suite."""

import os

import pytest

from aesbridge.core.config import BridgeConfig


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Isolate every test from AESBRIDGE_* variables and the cached config."""
    for name in list(os.environ):
        if name.startswith("AESBRIDGE_"):
            monkeypatch.delenv(name)
    BridgeConfig.reset_instance()
    yield
    BridgeConfig.reset_instance()


@pytest.fixture
def fips_vectors():
    """FIPS-197 Appendix C known answers: (key hex, plaintext hex, ciphertext hex)."""
    plaintext = "00112233445566778899aabbccddeeff"
    return [
        ("000102030405060708090a0b0c0d0e0f", plaintext,
         "69c4e0d86a7b0430d8cdb78070b4c55a"),
        ("000102030405060708090a0b0c0d0e0f1011121314151617", plaintext,
         "dda97ca4864cdfe06eaf70a0ec0d7191"),
        ("000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f", plaintext,
         "8ea2b7ca516745bfeafc49904b496089"),
    ]
