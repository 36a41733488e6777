import sys
from pathlib import Path

import pytest

# allow running the suite from a source checkout without an editable install
_SRC = Path(__file__).parent / "src"
if _SRC.is_dir() and str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))


@pytest.fixture
def small_params():
    """64x64 grid, 100 agents, 10 iterations, seed 42."""
    from stigmergence.physarum_abm.params import PhysarumParams

    return PhysarumParams(
        seed=42,
        width=64,
        height=64,
        agent_count=100,
        iterations=10,
        sensor_angle=0.785398,
        sensor_distance=9.0,
        turn_angle=0.785398,
        step_size=1.0,
        deposit_amount=5.0,
        decay_factor=0.9,
        colormap='magma',
        food_placement='clusters',
        food_weight=150.0,
    )


@pytest.fixture
def two_population_params(small_params):
    from stigmergence.physarum_abm.params import PopulationConfig

    return small_params.replace(
        agent_count=200,
        populations=(
            PopulationConfig(color=(255, 85, 15), agent_fraction=0.55),
            PopulationConfig(color=(15, 165, 255), agent_fraction=0.45),
        ),
        repulsion_strength=0.5,
    )


@pytest.fixture
def striped_rgb():
    """8x8 uint8 raster: left half white, right half pure red."""
    import numpy as np

    rgb = np.zeros((8, 8, 3), dtype=np.uint8)
    rgb[:, :4, :] = 255
    rgb[:, 4:, 0] = 255
    return rgb
