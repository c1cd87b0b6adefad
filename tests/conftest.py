"""Shared test fixtures for catalog-diff."""

import logging

import pytest

from catalog_diff.config.models import CatalogDiffConfig


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo configure_logging() so caplog sees records after CLI tests."""
    yield
    logger = logging.getLogger("catalog_diff")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def sample_config():
    return CatalogDiffConfig()


@pytest.fixture
def button_schema():
    """A component schema with required, enum and default declarations."""
    return {
        "$schema": "https://example.com/component.json",
        "title": "Button",
        "type": "object",
        "properties": {
            "variant": {"type": "string", "enum": ["accent", "primary", "secondary"]},
            "size": {"type": "string", "enum": ["s", "m", "l"], "default": "m"},
            "icon": {"type": "string", "default": None},
            "isDisabled": {"type": "boolean", "default": False},
        },
        "required": ["variant"],
    }


@pytest.fixture
def token_snapshot():
    """A small token catalog, including a set token with per-theme members."""
    return {
        "accent-color-100": {
            "value": "{blue-100}",
            "uuid": "7a1c-100",
        },
        "accent-color-200": {
            "value": "{blue-200}",
            "uuid": "7a1c-200",
        },
        "gray-50": {
            "sets": {
                "light": {"value": "rgb(255, 255, 255)", "uuid": "g50-light"},
                "dark": {"value": "rgb(29, 29, 29)", "uuid": "g50-dark"},
            },
        },
        "corner-radius-75": {"value": "4px"},
    }
