from __future__ import annotations

import pytest

from sessionauth.application.services.password_hashing import WerkzeugPasswordHasher


@pytest.fixture(scope="module")
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher()


def test_hash_verifies(hasher: WerkzeugPasswordHasher) -> None:
    hashed = hasher.hash("Passw0rd!")

    assert hashed != "Passw0rd!"
    assert hasher.verify("Passw0rd!", hashed)
    assert not hasher.verify("passw0rd!", hashed)


def test_hash_is_salted(hasher: WerkzeugPasswordHasher) -> None:
    assert hasher.hash("Passw0rd!") != hasher.hash("Passw0rd!")


@pytest.mark.parametrize("hashed", ["", "plain", "bogus$salt$value", "scrypt:x:y$salt$abc"])
def test_malformed_hash_never_raises(hasher: WerkzeugPasswordHasher, hashed: str) -> None:
    assert hasher.verify("Passw0rd!", hashed) is False
