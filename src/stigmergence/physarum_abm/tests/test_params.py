import logging

import numpy as np
import pytest

from stigmergence.physarum_abm.config import AESTHETIC_MODES, PHYSARUM_DEFAULTS
from stigmergence.physarum_abm.food import FoodField
from stigmergence.physarum_abm.params import (
    Colormap,
    FoodPlacement,
    PhysarumParams,
    PopulationConfig,
    adapt_params_to_food,
    default_params,
    mode_names,
    partition_agents,
    vary_params,
)


def _pops(*fractions):
    return [PopulationConfig(color=(255, 255, 255), agent_fraction=f) for f in fractions]


@pytest.mark.parametrize('total, fractions, expected', [
    (100, (1.0,), [100]),
    (3, (0.5, 0.5), [2, 1]),
    (100, (0.333, 0.333, 0.334), [33, 33, 34]),
    (10, (0.7, 0.7), [7, 3]),
    (10, (1.2, 0.3), [10, 0]),
    (7, (0.1, 0.1, 0.1), [1, 1, 5]),
    (1, (0.5, 0.5), [1, 0]),
])
def test_partition_agents_exact(total, fractions, expected):
    counts = partition_agents(total, _pops(*fractions))
    assert counts == expected
    assert sum(counts) == total


def test_partition_agents_many_cases():
    rng = np.random.RandomState(3)
    for _ in range(500):
        n = rng.randint(1, 6)
        total = int(rng.randint(1, 10000))
        fractions = rng.rand(n) * 1.5
        counts = partition_agents(total, _pops(*fractions))
        assert sum(counts) == total
        assert min(counts) >= 0


def test_partition_warns_on_bad_fraction_sum(caplog):
    with caplog.at_level(logging.WARNING):
        partition_agents(10, _pops(0.2, 0.2))
    assert 'agent fractions sum' in caplog.text


def test_defaults_follow_config():
    p = default_params(seed=5)
    assert p.seed == 5
    assert p.width == PHYSARUM_DEFAULTS['width']
    assert p.food_placement is FoodPlacement.GRADIENT
    assert p.colormap is Colormap.VIRIDIS
    assert p.population_count == 1
    assert p.gamma == pytest.approx(1.0 / 3.0)


def test_string_coercion():
    p = PhysarumParams(food_placement='rings', colormap='plasma',
                       populations=[{'color': [1, 2, 3], 'agent_fraction': 1.0}])
    assert p.food_placement is FoodPlacement.RINGS
    assert p.colormap is Colormap.PLASMA
    assert p.populations[0].color == (1, 2, 3)
    with pytest.raises(ValueError):
        PhysarumParams(food_placement='spiral')


@pytest.mark.parametrize('changes', [
    {'width': 0},
    {'height': -4},
    {'agent_count': 0},
    {'iterations': -1},
    {'decay_factor': 0.0},
    {'decay_factor': 1.5},
    {'populations': ()},
    {'populations': (PopulationConfig(agent_fraction=-0.1),)},
    {'populations': (PopulationConfig(color=(0, 0, 300)),)},
    {'gamma': 0.0},
    {'sensor_distance': -1.0},
    {'food_placement': 'image'},
])
def test_validate_rejects(changes):
    p = PhysarumParams(width=16, height=16, agent_count=10).replace(**changes)
    with pytest.raises(ValueError):
        p.validate()


def test_validate_decay_of_one_is_allowed():
    PhysarumParams(width=16, height=16, agent_count=10, decay_factor=1.0).validate()


def test_validate_food_dimensions():
    p = PhysarumParams(width=16, height=16, agent_count=10)
    ok = FoodField(16, 16, np.zeros(256, dtype=np.float32))
    bad = FoodField(8, 16, np.zeros(128, dtype=np.float32))
    p.validate(ok)
    p.replace(food_placement='image').validate(ok)
    with pytest.raises(ValueError):
        p.validate(bad)


def test_dict_round_trip():
    p = vary_params(2, default_params(seed=11))
    d = p.to_dict()
    assert d['food_placement'] == 'clusters'
    assert isinstance(d['populations'], list)
    assert PhysarumParams.from_dict(d) == p
    assert PhysarumParams.from_dict({'seed': 3, 'unknown': 1}).seed == 3


def test_vary_params_rotates_modes():
    base = default_params(seed=1, step_size=2.5)
    conflict = vary_params(7, base)
    assert conflict.population_count == 2
    assert conflict.repulsion_strength == 0.5
    assert conflict.step_size == 2.5
    assert vary_params(0, base).colormap is Colormap.VIRIDIS
    assert vary_params(len(AESTHETIC_MODES), base) == vary_params(0, base)
    assert mode_names()[4] == 'ghost_web'


def test_adapt_params_to_food():
    base = PhysarumParams(width=100, height=100, agent_count=1000, food_weight=150.0)
    same_area = adapt_params_to_food(base, FoodField(200, 50, np.zeros(10000, dtype=np.float32)))
    assert (same_area.width, same_area.height) == (200, 50)
    assert same_area.agent_count == 1000
    assert same_area.food_weight == 60.0
    assert same_area.food_placement is FoodPlacement.IMAGE

    bigger = adapt_params_to_food(base, FoodField(200, 200, np.zeros(40000, dtype=np.float32)))
    assert bigger.agent_count == 4000

    smaller = adapt_params_to_food(base.replace(food_weight=10.0),
                                   FoodField(10, 10, np.zeros(100, dtype=np.float32)))
    assert smaller.agent_count == 1000
    assert smaller.food_weight == 10.0
