import pytest

from scimcore import config
from scimcore.config import ConversionConfig, UnknownAttributes, set_conversion_config


def test_default_config_ignores_unknown_attributes():
    assert config.conversion_config.unknown_attributes == UnknownAttributes.IGNORE


def test_config_can_be_created_from_policy_name():
    assert ConversionConfig.create("reject") == ConversionConfig(
        unknown_attributes=UnknownAttributes.REJECT
    )


def test_config_creation_fails_for_unknown_policy():
    with pytest.raises(ValueError):
        ConversionConfig.create("retain")


def test_global_config_can_be_replaced():
    new_config = ConversionConfig.create(unknown_attributes=UnknownAttributes.REJECT)

    set_conversion_config(new_config)

    assert config.conversion_config is new_config
