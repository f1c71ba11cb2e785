import dataclasses

import pytest

from config.variants import (
    EXPRESS_VARIANT,
    STANDARD_VARIANT,
    VariantConfig,
    available_variants,
    get_variant,
    register_variant,
)


def test_standard_timings():
    assert STANDARD_VARIANT.floor_travel_time == 10
    assert STANDARD_VARIANT.door_open_time == 2
    assert STANDARD_VARIANT.door_close_time == 2
    assert STANDARD_VARIANT.passenger_transfer_time == 4
    assert STANDARD_VARIANT.operation_timeout == 15
    assert STANDARD_VARIANT.traveling_label == "traveling"


def test_express_differs_only_in_travel():
    assert EXPRESS_VARIANT.floor_travel_time == 5
    assert EXPRESS_VARIANT.traveling_label == "traveling-express"
    shared = ("door_open_time", "door_close_time", "passenger_transfer_time", "operation_timeout")
    for field_name in shared:
        assert getattr(EXPRESS_VARIANT, field_name) == getattr(STANDARD_VARIANT, field_name)


def test_travel_time_is_constant_rate():
    assert STANDARD_VARIANT.travel_time(10, 13) == 30
    assert STANDARD_VARIANT.travel_time(13, 10) == 30
    assert EXPRESS_VARIANT.travel_time(-2, 2) == 20
    assert EXPRESS_VARIANT.travel_time(4, 4) == 0


def test_variants_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        STANDARD_VARIANT.floor_travel_time = 1


@pytest.mark.parametrize("kwargs", [
    {"name": ""},
    {"floor_travel_time": -1},
    {"door_open_time": 0},
    {"door_close_time": -2},
    {"passenger_transfer_time": 0},
    {"operation_timeout": 0},
    {"traveling_label": ""},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        VariantConfig(**kwargs)


def test_from_dict_uses_standard_defaults():
    variant = VariantConfig.from_dict({"name": "fast-test", "floor_travel_time": 3})
    assert variant.floor_travel_time == 3
    assert variant.door_open_time == 2
    assert variant.traveling_label == "traveling"
    assert VariantConfig.from_dict(variant.to_dict()) == variant


def test_lookup_by_name():
    assert get_variant("standard") is STANDARD_VARIANT
    assert get_variant("express") is EXPRESS_VARIANT
    assert {"standard", "express"} <= set(available_variants())


def test_unknown_variant():
    with pytest.raises(ValueError, match="Unknown elevator variant: turbo"):
        get_variant("turbo")


def test_register_variant():
    custom = VariantConfig(name="registry-test", floor_travel_time=7)
    register_variant(custom)
    assert get_variant("registry-test") == custom

    # Registering the same value again is harmless
    register_variant(VariantConfig(name="registry-test", floor_travel_time=7))

    other = VariantConfig(name="registry-test", floor_travel_time=8)
    with pytest.raises(ValueError, match="already registered"):
        register_variant(other)
    register_variant(other, replace=True)
    assert get_variant("registry-test").floor_travel_time == 8
