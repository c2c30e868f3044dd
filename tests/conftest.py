"""Shared pytest fixtures for tagwire tests."""

import pytest

from tagwire.container import Container
from tagwire.lock_mode import LockMode
from tagwire.signature import SignatureExtractor


@pytest.fixture()
def container() -> Container:
    """Default container with thread locking and self-registration."""
    return Container()


@pytest.fixture()
def container_unlocked() -> Container:
    """Container without locking."""
    return Container(lock_mode=LockMode.NONE)


@pytest.fixture()
def signature_extractor() -> SignatureExtractor:
    """SignatureExtractor instance."""
    return SignatureExtractor()
