"""
Configuration management package

Provides elevator variant definitions and simulation run configuration.
"""

from .variants import (
    VariantConfig,
    STANDARD_VARIANT,
    EXPRESS_VARIANT,
    get_variant,
    register_variant,
    available_variants
)

from .simulation import (
    SimulationConfig,
    MODES
)

from .config_loader import (
    ConfigLoader,
    load_simulation_config,
    save_simulation_config
)

__all__ = [
    # Variants
    'VariantConfig',
    'STANDARD_VARIANT',
    'EXPRESS_VARIANT',
    'get_variant',
    'register_variant',
    'available_variants',

    # Simulation
    'SimulationConfig',
    'MODES',

    # Loader
    'ConfigLoader',
    'load_simulation_config',
    'save_simulation_config',
]
