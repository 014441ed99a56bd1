"""Shared fixtures for gfshamir tests."""

import random
import pytest
from gfshamir.gf2 import get_field


@pytest.fixture
def rng():
    """Deterministic RNG for reproducible tests."""
    return random.Random(42)


@pytest.fixture
def gf8():
    return get_field(8)


@pytest.fixture(params=[4, 8, 16, 32])
def width(request):
    return request.param


@pytest.fixture
def sample_secret():
    return b'correct horse battery staple'
