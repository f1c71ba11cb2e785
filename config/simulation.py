"""
Simulation Configuration

Describes one simulation request: the raw form inputs (start floor,
destination list, variant, mode) plus run controls such as the real-time
speed factor and output files.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .variants import VariantConfig, get_variant

MODES = ("realtime", "instant")


@dataclass
class SimulationConfig:
    """
    Complete run configuration

    start_floor and destination_floors are kept as the raw strings entered by
    the user; they are parsed when the run is built so that input errors are
    reported before any simulation state is created.
    """
    start_floor: str = "10"
    destination_floors: str = "9,11,13"
    variant: str = "standard"
    mode: str = "realtime"  # realtime, instant

    # Run control
    speed_factor: float = 1.0  # 1.0 = realtime, 0.0 = as fast as possible
    event_log: Optional[str] = None  # JSON Lines output path
    plot: Optional[str] = None  # route diagram output path

    # Extra variants declared alongside the run
    variants: List[VariantConfig] = field(default_factory=list)

    def __post_init__(self):
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {', '.join(MODES)}")
        if self.speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")

    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationConfig':
        """Create SimulationConfig from dictionary"""
        sim_data = data.get('simulation', data) or {}

        variants = [VariantConfig.from_dict(v) for v in sim_data.get('variants') or []]

        return cls(
            start_floor=str(sim_data.get('start_floor', '10')),
            destination_floors=_floors_to_text(sim_data.get('destination_floors', '9,11,13')),
            variant=sim_data.get('variant', 'standard'),
            mode=sim_data.get('mode', 'realtime'),
            speed_factor=sim_data.get('speed_factor', 1.0),
            event_log=sim_data.get('event_log'),
            plot=sim_data.get('plot'),
            variants=variants
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        result = {
            'simulation': {
                'start_floor': self.start_floor,
                'destination_floors': self.destination_floors,
                'variant': self.variant,
                'mode': self.mode,
                'speed_factor': self.speed_factor
            }
        }

        if self.event_log is not None:
            result['simulation']['event_log'] = self.event_log
        if self.plot is not None:
            result['simulation']['plot'] = self.plot
        if self.variants:
            result['simulation']['variants'] = [v.to_dict() for v in self.variants]

        return result

    def validate(self):
        """Validate configuration consistency"""
        names = [v.name for v in self.variants]
        if len(names) != len(set(names)):
            raise ValueError("variants must have unique names")
        if self.variant not in names:
            # Raises ValueError for unknown names
            get_variant(self.variant)

    def resolve_variant(self) -> VariantConfig:
        """
        Return the selected variant.

        Variants declared in this config take precedence over the registry,
        which is left untouched so that one run cannot change another's presets.
        """
        for variant in self.variants:
            if variant.name == self.variant:
                return variant
        return get_variant(self.variant)


def _floors_to_text(value) -> str:
    # YAML lists are accepted and joined back into the form's text format
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)
