import numpy as np
import pytest

from stigmergence.physarum_abm.config import COLORMAP_STOPS
from stigmergence.physarum_abm.engine import SimulationResult, simulate
from stigmergence.physarum_abm.food import FoodField, food_field_from_rgb
from stigmergence.physarum_abm.params import Colormap, PopulationConfig
from stigmergence.physarum_abm.render import (
    RenderMode,
    render_result,
    select_render_mode,
    to_image,
)


def _result(trail_maps, populations, width, height, color_trails=None, food=None):
    if food is None:
        food = FoodField(width, height, np.zeros(width * height, dtype=np.float32))
    return SimulationResult(
        trail_maps=np.asarray(trail_maps, dtype=np.float32),
        food=food,
        width=width,
        height=height,
        populations=tuple(populations),
        agent_counts=tuple(1 for _ in populations),
        color_trails=color_trails,
    )


RED = PopulationConfig(color=(255, 0, 0), agent_fraction=0.5)
BLUE = PopulationConfig(color=(0, 0, 255), agent_fraction=0.5)


def test_mode_selection():
    single = _result(np.zeros((1, 4)), [RED], 2, 2)
    double = _result(np.zeros((2, 4)), [RED, BLUE], 2, 2)
    colored = _result(np.zeros((1, 4)), [RED], 2, 2, color_trails=np.zeros((3, 4), dtype=np.float32))
    assert select_render_mode(single) is RenderMode.COLORMAP
    assert select_render_mode(double) is RenderMode.POPULATIONS
    assert select_render_mode(colored) is RenderMode.COLOR_TRAIL


def test_single_population_uses_palette():
    out = render_result(_result(np.zeros((1, 4)), [RED], 2, 2))
    assert out.shape == (2, 2, 4)
    assert out.ravel().tolist() == [0, 0, 4, 255] * 4


def test_palette_defaults_to_the_run_colormap(small_params):
    res = simulate(small_params.replace(colormap='viridis', deposit_amount=0.0))
    assert res.colormap is Colormap.VIRIDIS
    out = render_result(res)
    assert out[0, 0, :3].tolist() == list(COLORMAP_STOPS['viridis'][0])
    assert render_result(res, colormap='magma')[0, 0].tolist() == [0, 0, 4, 255]



def test_forced_colormap_on_multi_population():
    res = _result(np.ones((2, 4)), [RED, BLUE], 2, 2)
    assert render_result(res)[0, 0].tolist() == [255, 0, 255, 255]
    forced = render_result(res, colormap='viridis', mode=RenderMode.COLORMAP)
    assert forced[0, 0, :3].tolist() == list(COLORMAP_STOPS['viridis'][-1])


def test_color_trail_mode_needs_color():
    res = _result(np.zeros((1, 4)), [RED], 2, 2)
    with pytest.raises(ValueError):
        render_result(res, mode='color_trail')


def test_color_trail_ambient_toggle():
    food = food_field_from_rgb(np.full((4, 4, 3), 255, dtype=np.uint8))
    res = _result(np.zeros((1, 16)), [RED], 4, 4,
                  color_trails=np.zeros((3, 16), dtype=np.float32), food=food)
    assert render_result(res)[:, :, :3].min() > 0
    assert not render_result(res, ambient=False)[:, :, :3].any()


def test_render_real_run(small_params):
    out = render_result(simulate(small_params))
    assert out.shape == (64, 64, 4)
    assert out.dtype == np.uint8


def test_to_image():
    rgba = np.zeros((3, 5, 4), dtype=np.uint8)
    img = to_image(rgba)
    assert img.size == (5, 3)
    assert img.mode == 'RGBA'


def test_to_image_rejects_rgb():
    with pytest.raises(ValueError):
        to_image(np.zeros((3, 5, 3), dtype=np.uint8))
