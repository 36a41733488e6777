"""
engine.py

Multi-population physarum simulation.

Each iteration every agent of every population senses three headings,
turns, moves, and deposits onto its population's trail grid (or respawns
when it leaves the grid). After all populations have moved, every trail grid
(and every carried-color channel) is diffused and decayed into its second
buffer and the buffers are swapped. `result()` normalizes copies of the
grids into an immutable `SimulationResult`.

Sensing reads the live arena, not a snapshot of the previous iteration:
an agent sees deposits already made this iteration by agents earlier in
buffer order and by earlier populations.

The whole run is a pure function of the parameters, the seed and the
optional supplied food field. All buffers are allocated in `__init__`; the
iteration loop only calls the kernels in `kernels.py`.

Usage:
------
    from stigmergence.physarum_abm.engine import simulate
    from stigmergence.physarum_abm.params import PhysarumParams

    result = simulate(PhysarumParams(seed=42, width=256, height=256, agent_count=20_000))
"""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from stigmergence.physarum_abm import kernels
from stigmergence.physarum_abm.config import ENGINE
from stigmergence.physarum_abm.food import FoodField, generate_food_field
from stigmergence.physarum_abm.params import Colormap, PhysarumParams, PopulationConfig, partition_agents
from stigmergence.physarum_abm.prng import Mulberry32
from stigmergence.physarum_abm.utils import freeze, grid_summary

log = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SimulationResult:
    """Terminal snapshot of a run. Arrays are read-only.

    - trail_maps: (population_count, width * height) float32 in [0, 1]
    - color_trails: (3, width * height) float32 in [0, 1], or None
    - colormap: the run's palette, used when rendering does not name one
    """
    trail_maps: np.ndarray
    food: FoodField
    width: int
    height: int
    populations: Tuple[PopulationConfig, ...]
    agent_counts: Tuple[int, ...]
    color_trails: Optional[np.ndarray] = None
    colormap: Colormap = Colormap.MAGMA

    @property
    def population_count(self) -> int:
        return len(self.populations)

    @property
    def has_color(self) -> bool:
        return self.color_trails is not None

    def trail_map(self, pop: int) -> np.ndarray:
        return self.trail_maps[pop]


class PhysarumSimulation:
    """Stateful engine for one run.

    Parameters
    ----------
    params : PhysarumParams
        Validated before any buffer is allocated.
    food : FoodField, optional
        Externally supplied food. Must match params.width/height. When it has
        color channels and params.carry_color is set, agents carry color.
    """

    def __init__(self, params: PhysarumParams, food: Optional[FoodField] = None):
        params.validate(food)
        self.params = params
        self.width = int(params.width)
        self.height = int(params.height)
        self.iteration = 0
        size = self.width * self.height

        self.agent_counts: List[int] = partition_agents(int(params.agent_count), params.populations)
        self._rng = Mulberry32(params.seed)

        if food is None:
            food = generate_food_field(self._rng, self.width, self.height, params.food_placement,
                                       params.food_density, params.food_cluster_count)
        self.food = food
        self._food_values = np.ascontiguousarray(food.values, dtype=np.float32)
        self.has_color = bool(params.carry_color and food.has_color)

        n_pop = len(params.populations)
        self._trails = np.zeros((n_pop, size), dtype=np.float32)
        self._trails_next = np.zeros((n_pop, size), dtype=np.float32)
        if self.has_color:
            self._food_rgb = np.ascontiguousarray(food.rgb(), dtype=np.float32)
            self._color = np.zeros((3, size), dtype=np.float32)
            self._color_next = np.zeros((3, size), dtype=np.float32)
        else:
            # kernels take a fixed signature; color buffers are unused placeholders
            self._food_rgb = np.zeros((3, 1), dtype=np.float32)
            self._color = np.zeros((3, 1), dtype=np.float32)
            self._color_next = self._color

        self.stride = 6 if self.has_color else 3
        self.agents: List[np.ndarray] = []
        state = self._rng.state
        for count in self.agent_counts:
            buf = np.zeros(count * self.stride, dtype=np.float64)
            state = kernels.seed_agents(buf, self.stride, self.width, self.height,
                                        self._food_rgb, self.has_color, state)
            self.agents.append(buf)
        self._rng.state = int(state)

        log.info("[SIM] Starting: %s agents in %s populations %s, grid %dx%d, seed %s, color=%s",
                 params.agent_count, n_pop, self.agent_counts, self.width, self.height,
                 params.seed, self.has_color)

    # ------------------------------------------------------------------
    @property
    def trail_maps(self) -> np.ndarray:
        """Current (unnormalized) trail arena, shape (populations, width * height)."""
        return self._trails

    @property
    def color_trails(self) -> Optional[np.ndarray]:
        return self._color if self.has_color else None

    @property
    def rng_state(self) -> int:
        return self._rng.state

    def positions(self, pop: int) -> np.ndarray:
        """(count, 2) view of x, y for population `pop`."""
        return self.agents[pop].reshape(-1, self.stride)[:, :2]

    def total_mass(self) -> np.ndarray:
        """Per-population sum of the current trail grids."""
        return self._trails.sum(axis=1, dtype=np.float64)

    # ------------------------------------------------------------------
    def step(self) -> None:
        """Advance every population by one iteration, then diffuse and decay."""
        p = self.params
        state = self._rng.state
        for pop, agents in enumerate(self.agents):
            state = kernels.step_population(
                agents, self.stride, pop, self._trails, self._food_values, self._food_rgb,
                self._color, self.has_color, self.width, self.height,
                p.sensor_angle, p.sensor_distance, p.turn_angle, p.step_size,
                p.deposit_amount, p.repulsion_strength, p.food_weight,
                ENGINE['color_blend'], state)
        self._rng.state = int(state)

        for pop in range(self._trails.shape[0]):
            kernels.diffuse_decay(self._trails[pop], self._trails_next[pop],
                                  self.width, self.height, p.decay_factor)
        self._trails, self._trails_next = self._trails_next, self._trails

        if self.has_color:
            for c in range(3):
                kernels.diffuse_decay(self._color[c], self._color_next[c],
                                      self.width, self.height, p.decay_factor)
            self._color, self._color_next = self._color_next, self._color

        self.iteration += 1
        if log.isEnabledFor(logging.DEBUG):
            log.debug("[SIM] iteration %d mass=%s", self.iteration, self.total_mass().round(3))

    def run(self, iterations: Optional[int] = None) -> 'PhysarumSimulation':
        """Run `iterations` steps (default: params.iterations)."""
        n = int(self.params.iterations if iterations is None else iterations)
        t0 = time.perf_counter()
        for _ in range(n):
            self.step()
        log.info("[SIM] Completed %d iterations in %.2f s", n, time.perf_counter() - t0)
        return self

    def result(self) -> SimulationResult:
        """Normalize copies of the trail grids and return the immutable snapshot.

        Each population is divided by its own max and raised to params.gamma;
        color channels share one max of r+g+b so hue is preserved. A grid that
        never received a deposit stays zero.
        """
        gamma = float(self.params.gamma)
        trails = self._trails.copy()
        for pop in range(trails.shape[0]):
            peak = kernels.normalize_gamma(trails[pop], gamma)
            if peak <= 0.0:
                log.warning("[SIM] population %d has an empty trail grid", pop)
            else:
                log.debug("[SIM] population %d normalized: %s", pop, grid_summary(trails[pop]))

        color = None
        if self.has_color:
            color = self._color.copy()
            kernels.normalize_color_gamma(color, gamma)
            color = freeze(color)

        return SimulationResult(
            trail_maps=freeze(trails),
            food=self.food,
            width=self.width,
            height=self.height,
            populations=tuple(self.params.populations),
            agent_counts=tuple(self.agent_counts),
            color_trails=color,
            colormap=self.params.colormap,
        )


def simulate(params: PhysarumParams, food: Optional[FoodField] = None) -> SimulationResult:
    """Run a full simulation and return its normalized result."""
    return PhysarumSimulation(params, food).run().result()
