"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from hmid.models.config import CodecConfig
from hmid.models.entity import (
    AuthorVariant,
    CollapsedBlockRange,
    ExpandedBlockRange,
    GroupVariant,
)


# ============================================================================
# Block Range Fixtures
# ============================================================================


@pytest.fixture
def collapsed_range() -> CollapsedBlockRange:
    """Create a numeric block range."""
    return CollapsedBlockRange(start=1, end=2)


@pytest.fixture
def expanded_range() -> ExpandedBlockRange:
    """Create an expanded block range."""
    return ExpandedBlockRange()


# ============================================================================
# Variant Fixtures
# ============================================================================


@pytest.fixture
def author_variant() -> AuthorVariant:
    """Create an author variant."""
    return AuthorVariant(author="x")


@pytest.fixture
def group_variant() -> GroupVariant:
    """Create a group variant with a path name."""
    return GroupVariant(group_id="hm://g/y", path_name="p")


@pytest.fixture
def mixed_variants(author_variant: AuthorVariant, group_variant: GroupVariant) -> list:
    """Author first, then group; order matters for encoding."""
    return [author_variant, group_variant]


# ============================================================================
# Config Fixtures
# ============================================================================


@pytest.fixture
def codec_config() -> CodecConfig:
    """Create a config pointing at a test gateway."""
    return CodecConfig(gateway_url="https://gw.test")


@pytest.fixture
def temp_config_file(codec_config: CodecConfig, tmp_path: Path) -> Path:
    """Create a temporary config file."""
    config_file = tmp_path / "hmid-config.json"
    codec_config.save(config_file)
    return config_file


@pytest.fixture
def missing_config_file(tmp_path: Path) -> Path:
    """Path to a config file that does not exist."""
    return tmp_path / "missing.json"
