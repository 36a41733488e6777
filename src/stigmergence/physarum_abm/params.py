"""Parameter records for the physarum model.

Holds the population and simulation parameter containers, the closed
variant types for food placement and colormap choice, agent partitioning,
and the preset helpers built on `config.py`.
"""
import dataclasses
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple

from stigmergence.physarum_abm.config import (
    AESTHETIC_MODES,
    DEFAULT_POPULATIONS,
    ENGINE,
    PHYSARUM_DEFAULTS,
)

logger = logging.getLogger(__name__)


class FoodPlacement(str, Enum):
    CLUSTERS = 'clusters'
    RINGS = 'rings'
    GRADIENT = 'gradient'
    GRID = 'grid'
    MIXED = 'mixed'
    IMAGE = 'image'


class Colormap(str, Enum):
    MAGMA = 'magma'
    VIRIDIS = 'viridis'
    INFERNO = 'inferno'
    PLASMA = 'plasma'
    CIVIDIS = 'cividis'


@dataclass(frozen=True)
class PopulationConfig:
    """One colored population and its share of the total agent count."""
    color: Tuple[int, int, int] = (255, 160, 40)
    agent_fraction: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, 'color', tuple(int(c) for c in self.color))

    def to_dict(self) -> Dict[str, Any]:
        return {'color': self.color, 'agent_fraction': self.agent_fraction}

    @classmethod
    def from_dict(cls, data) -> 'PopulationConfig':
        if isinstance(data, PopulationConfig):
            return data
        return cls(color=tuple(data['color']), agent_fraction=float(data['agent_fraction']))


def _default_populations():
    return tuple(PopulationConfig.from_dict(p) for p in DEFAULT_POPULATIONS)


@dataclass(frozen=True)
class PhysarumParams:
    """Complete parameter record for one simulation run.

    Defaults come from `config.PHYSARUM_DEFAULTS`. Enum fields accept their
    string values. Call `validate()` before allocating anything; the engine
    does this itself.
    """
    seed: int = 0
    width: int = PHYSARUM_DEFAULTS['width']
    height: int = PHYSARUM_DEFAULTS['height']
    agent_count: int = PHYSARUM_DEFAULTS['agent_count']
    iterations: int = PHYSARUM_DEFAULTS['iterations']
    sensor_angle: float = PHYSARUM_DEFAULTS['sensor_angle']
    sensor_distance: float = PHYSARUM_DEFAULTS['sensor_distance']
    turn_angle: float = PHYSARUM_DEFAULTS['turn_angle']
    step_size: float = PHYSARUM_DEFAULTS['step_size']
    deposit_amount: float = PHYSARUM_DEFAULTS['deposit_amount']
    decay_factor: float = PHYSARUM_DEFAULTS['decay_factor']
    colormap: Colormap = Colormap(PHYSARUM_DEFAULTS['colormap'])
    populations: Tuple[PopulationConfig, ...] = field(default_factory=_default_populations)
    repulsion_strength: float = PHYSARUM_DEFAULTS['repulsion_strength']
    food_weight: float = PHYSARUM_DEFAULTS['food_weight']
    food_placement: FoodPlacement = FoodPlacement(PHYSARUM_DEFAULTS['food_placement'])
    food_density: float = PHYSARUM_DEFAULTS['food_density']
    food_cluster_count: int = PHYSARUM_DEFAULTS['food_cluster_count']
    gamma: float = PHYSARUM_DEFAULTS['gamma']
    carry_color: bool = PHYSARUM_DEFAULTS['carry_color']

    def __post_init__(self):
        # coerce loose inputs (strings, lists of dicts) into the closed types
        object.__setattr__(self, 'colormap', Colormap(self.colormap))
        object.__setattr__(self, 'food_placement', FoodPlacement(self.food_placement))
        object.__setattr__(self, 'populations',
                           tuple(PopulationConfig.from_dict(p) for p in self.populations))

    @property
    def population_count(self) -> int:
        return len(self.populations)

    def validate(self, food=None) -> None:
        """Raise ValueError describing the first invalid field.

        `food` is the externally supplied food field, if any; its dimensions
        must match the grid exactly.
        """
        if int(self.width) <= 0 or int(self.height) <= 0:
            raise ValueError(f'grid dimensions must be positive, got {self.width}x{self.height}')
        if int(self.agent_count) <= 0:
            raise ValueError(f'agent_count must be positive, got {self.agent_count}')
        if int(self.iterations) < 0:
            raise ValueError(f'iterations must be non-negative, got {self.iterations}')
        if not (0.0 < self.decay_factor <= 1.0):
            raise ValueError(f'decay_factor must be in (0, 1], got {self.decay_factor}')
        if not self.populations:
            raise ValueError('populations must contain at least one population')
        for i, pop in enumerate(self.populations):
            if pop.agent_fraction < 0.0 or not math.isfinite(pop.agent_fraction):
                raise ValueError(f'population {i}: agent_fraction must be a finite non-negative number')
            if len(pop.color) != 3 or any(c < 0 or c > 255 for c in pop.color):
                raise ValueError(f'population {i}: color must be three components in 0..255, got {pop.color}')
        if self.gamma <= 0.0:
            raise ValueError(f'gamma must be positive, got {self.gamma}')
        if self.sensor_distance < 0.0:
            raise ValueError(f'sensor_distance must be non-negative, got {self.sensor_distance}')
        if self.step_size < 0.0:
            raise ValueError(f'step_size must be non-negative, got {self.step_size}')
        if food is not None:
            if food.width != self.width or food.height != self.height:
                raise ValueError(
                    f'food field is {food.width}x{food.height} but the grid is {self.width}x{self.height}')
        elif self.food_placement is FoodPlacement.IMAGE:
            raise ValueError("food_placement 'image' requires an externally supplied food field")

    def replace(self, **changes) -> 'PhysarumParams':
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Export parameters as a plain dictionary (enums as strings)."""
        out = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif f.name == 'populations':
                value = [p.to_dict() for p in value]
            out[f.name] = value
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PhysarumParams':
        """Build parameters from a dictionary, ignoring unknown keys."""
        names = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


def default_params(seed: int = 0, **overrides) -> PhysarumParams:
    """Default parameters from `config.PHYSARUM_DEFAULTS` with `overrides` applied."""
    return PhysarumParams(seed=seed, **overrides)


def partition_agents(agent_count: int, populations: Sequence[PopulationConfig]) -> List[int]:
    """Split `agent_count` across populations by agent_fraction.

    All but the last population get round-half-up of their share, capped so the
    running total never exceeds `agent_count`; the last gets the remainder. The
    returned counts always sum to `agent_count`.
    """
    n = len(populations)
    assert n > 0, 'populations must be non-empty'
    total_fraction = sum(p.agent_fraction for p in populations)
    if abs(total_fraction - 1.0) > ENGINE['fraction_tolerance']:
        logger.warning('[SIM] agent fractions sum to %.6f, not 1.0; last population takes the remainder',
                       total_fraction)
    counts: List[int] = []
    assigned = 0
    for i, pop in enumerate(populations):
        if i < n - 1:
            count = int(math.floor(agent_count * pop.agent_fraction + 0.5))
            count = min(count, agent_count - assigned)
        else:
            count = agent_count - assigned
        counts.append(count)
        assigned += count
    return counts


def vary_params(edition: int, base: PhysarumParams) -> PhysarumParams:
    """Return `base` overridden by the aesthetic mode for `edition`.

    Modes rotate: edition 0 -> mode 0, edition 7 -> mode 2, and so on.
    """
    mode = dict(AESTHETIC_MODES[int(edition) % len(AESTHETIC_MODES)])
    mode.pop('name')
    return base.replace(**mode)


def mode_names() -> List[str]:
    return [m['name'] for m in AESTHETIC_MODES]


def adapt_params_to_food(params: PhysarumParams, food) -> PhysarumParams:
    """Adopt an externally supplied food field's dimensions.

    The agent count is scaled by the area ratio (never below the configured
    count) and food_weight is capped, since image food carries signal in every
    cell rather than only at attractors.
    """
    default_area = params.width * params.height
    image_area = food.width * food.height
    scaled_agents = int(math.floor(params.agent_count * (image_area / default_area) + 0.5))
    return params.replace(
        width=food.width,
        height=food.height,
        agent_count=max(scaled_agents, params.agent_count),
        food_weight=min(params.food_weight, ENGINE['image_food_weight_cap']),
        food_placement=FoodPlacement.IMAGE,
    )
