"""
Elevator Variant Configuration

A variant is a named set of timing constants. Standard and express elevators
run the same phase sequence; they differ only in the values supplied here.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List


@dataclass(frozen=True)
class VariantConfig:
    """Timing constants for one elevator variant (time-units, seconds in real-time mode)"""
    name: str = "standard"
    floor_travel_time: float = 10  # per floor
    door_open_time: float = 2
    door_close_time: float = 2
    passenger_transfer_time: float = 4
    operation_timeout: float = 15  # max duration of a door operation
    traveling_label: str = "traveling"  # status shown while moving

    def __post_init__(self):
        if not self.name:
            raise ValueError("name cannot be empty")
        if self.floor_travel_time < 0:
            raise ValueError("floor_travel_time cannot be negative")
        if self.door_open_time <= 0:
            raise ValueError("door_open_time must be positive")
        if self.door_close_time <= 0:
            raise ValueError("door_close_time must be positive")
        if self.passenger_transfer_time <= 0:
            raise ValueError("passenger_transfer_time must be positive")
        if self.operation_timeout <= 0:
            raise ValueError("operation_timeout must be positive")
        if not self.traveling_label:
            raise ValueError("traveling_label cannot be empty")

    def travel_time(self, from_floor: int, to_floor: int) -> float:
        """Constant-rate travel time between two floors"""
        return abs(to_floor - from_floor) * self.floor_travel_time

    @classmethod
    def from_dict(cls, data: dict) -> 'VariantConfig':
        """Create VariantConfig from dictionary; missing keys use standard values"""
        defaults = cls()
        return cls(
            name=data.get('name', defaults.name),
            floor_travel_time=data.get('floor_travel_time', defaults.floor_travel_time),
            door_open_time=data.get('door_open_time', defaults.door_open_time),
            door_close_time=data.get('door_close_time', defaults.door_close_time),
            passenger_transfer_time=data.get('passenger_transfer_time', defaults.passenger_transfer_time),
            operation_timeout=data.get('operation_timeout', defaults.operation_timeout),
            traveling_label=data.get('traveling_label', defaults.traveling_label)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return asdict(self)


STANDARD_VARIANT = VariantConfig(name="standard")
EXPRESS_VARIANT = VariantConfig(
    name="express",
    floor_travel_time=5,
    traveling_label="traveling-express"
)

_VARIANTS: Dict[str, VariantConfig] = {
    STANDARD_VARIANT.name: STANDARD_VARIANT,
    EXPRESS_VARIANT.name: EXPRESS_VARIANT,
}


def register_variant(variant: VariantConfig, replace: bool = False) -> VariantConfig:
    """
    Make a variant available by name.

    Args:
        variant: Variant to register
        replace: Allow overwriting an existing variant with the same name

    Raises:
        ValueError: If the name is taken and replace is False
    """
    if variant.name in _VARIANTS and not replace and _VARIANTS[variant.name] != variant:
        raise ValueError(f"Variant '{variant.name}' is already registered")
    _VARIANTS[variant.name] = variant
    return variant


def get_variant(name: str) -> VariantConfig:
    """Look up a registered variant by name"""
    try:
        return _VARIANTS[name]
    except KeyError:
        raise ValueError(
            f"Unknown elevator variant: {name} (available: {', '.join(available_variants())})"
        ) from None


def available_variants() -> List[str]:
    return list(_VARIANTS)
