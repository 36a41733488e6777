"""End-to-end runs through the public entry points."""
import numpy as np
import pytest

from stigmergence.physarum_abm.engine import SimulationResult, simulate
from stigmergence.physarum_abm.food import FoodField, food_field_from_image
from stigmergence.physarum_abm.params import (
    PhysarumParams,
    PopulationConfig,
    adapt_params_to_food,
    mode_names,
    vary_params,
)
from stigmergence.physarum_abm.render import render_result, to_image


def _scenario_a(seed=42):
    return PhysarumParams(seed=seed, width=64, height=64, agent_count=100, iterations=10)


def test_scenario_a_small_run():
    res = simulate(_scenario_a())
    grid = res.trail_map(0)
    assert grid.shape == (4096,)
    assert grid.max() == 1.0
    assert np.count_nonzero(grid) > 0


def test_scenario_b_seed_changes_output():
    a = simulate(_scenario_a(42)).trail_map(0)
    b = simulate(_scenario_a(99)).trail_map(0)
    assert not np.array_equal(a, b)


def test_scenario_c_empty_field_renders_palette_floor():
    res = SimulationResult(
        trail_maps=np.zeros((1, 4), dtype=np.float32),
        food=FoodField(2, 2, np.zeros(4, dtype=np.float32)),
        width=2,
        height=2,
        populations=(PopulationConfig(),),
        agent_counts=(1,),
    )
    out = render_result(res, colormap='magma')
    assert out.ravel().tolist() == [0, 0, 4, 255] * 4


def test_scenario_d_additive_population_blend():
    res = SimulationResult(
        trail_maps=np.ones((2, 1), dtype=np.float32),
        food=FoodField(1, 1, np.zeros(1, dtype=np.float32)),
        width=1,
        height=1,
        populations=(PopulationConfig(color=(255, 0, 0), agent_fraction=0.5),
                     PopulationConfig(color=(0, 0, 255), agent_fraction=0.5)),
        agent_counts=(1, 1),
    )
    assert render_result(res)[0, 0].tolist() == [255, 0, 255, 255]


@pytest.mark.parametrize('edition', range(len(mode_names())))
def test_aesthetic_modes_run_small(edition):
    base = PhysarumParams(seed=edition, width=48, height=48, agent_count=300, iterations=4)
    params = vary_params(edition, base).replace(width=48, height=48, agent_count=300, iterations=4)
    res = simulate(params)
    out = render_result(res, colormap=params.colormap)
    assert out.shape == (48, 48, 4)
    assert res.trail_maps.max() <= 1.0


def test_image_food_pipeline():
    from PIL import Image

    img = Image.linear_gradient('L').convert('RGB')
    food = food_field_from_image(img, max_side=40)
    base = PhysarumParams(seed=3, width=40, height=40, agent_count=200, iterations=5,
                          food_placement='image')
    params = adapt_params_to_food(base, food)
    res = simulate(params, food)
    assert res.has_color
    pic = to_image(render_result(res))
    assert pic.size == (40, 40)
