"""
Shared fixtures for factory tests.
"""

import pytest

from src.config import CacheConfig, Config, EmbedderConfig


@pytest.fixture
def config():
    """Default configuration with the cache enabled."""
    return Config()


@pytest.fixture
def openai_embedder_config():
    return EmbedderConfig(provider="openai", model="text-embedding-3-small", api_key="sk-test")


@pytest.fixture
def disabled_cache():
    return CacheConfig(enabled=False)
