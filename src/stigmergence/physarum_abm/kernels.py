"""Numba kernels for the physarum engine.

All kernels work on preallocated flat buffers and allocate nothing:
- `step_population` advances one population's agents (sense, turn, move,
  deposit or respawn) and returns the updated PRNG state.
- `diffuse_decay` writes the 3x3 clamped mean of `src`, times the decay
  factor, into `dst`.
- `normalize_gamma` / `normalize_color_gamma` scale result copies to [0, 1].

Agent buffers are float64 with stride 3 (x, y, heading) or 6 (x, y, heading,
r, g, b). Trail arenas are float32 shaped (populations, width * height).
"""
import math

import numpy as np
from numba import njit, prange

from stigmergence.physarum_abm.prng import mulberry32_next

TWO_PI = 2.0 * math.pi


@njit(cache=True)
def _clamp_index(v, limit):
    if v < 0:
        return 0
    if v >= limit:
        return limit - 1
    return v


@njit(cache=True)
def _sample_index(x, y, angle, distance, width, height):
    sx = _clamp_index(int(math.floor(x + math.cos(angle) * distance)), width)
    sy = _clamp_index(int(math.floor(y + math.sin(angle) * distance)), height)
    return sy * width + sx


@njit(cache=True)
def _effective_signal(trails, food, pop, cell, repulsion, food_weight):
    own = trails[pop, cell]
    alien = 0.0
    for q in range(trails.shape[0]):
        if q != pop:
            alien += trails[q, cell]
    return own - repulsion * alien + food_weight * food[cell]


@njit(cache=True)
def seed_agents(agents, stride, width, height, food_rgb, has_color, state):
    """Place every agent uniformly at random; returns the new PRNG state."""
    n = agents.shape[0] // stride
    for i in range(n):
        idx = i * stride
        ax, state = mulberry32_next(state)
        ay, state = mulberry32_next(state)
        ah, state = mulberry32_next(state)
        x = ax * width
        y = ay * height
        agents[idx] = x
        agents[idx + 1] = y
        agents[idx + 2] = ah * TWO_PI
        if has_color:
            cell = _clamp_index(int(math.floor(y)), height) * width + _clamp_index(int(math.floor(x)), width)
            agents[idx + 3] = food_rgb[0, cell]
            agents[idx + 4] = food_rgb[1, cell]
            agents[idx + 5] = food_rgb[2, cell]
    return state


@njit(cache=True)
def step_population(agents, stride, pop, trails, food, food_rgb, color_trails, has_color,
                    width, height, sensor_angle, sensor_distance, turn_angle, step_size,
                    deposit, repulsion, food_weight, color_blend, state):
    """Advance one population by one iteration; returns the new PRNG state.

    Agents are processed in buffer order so deposits are summed in a fixed
    order and the run stays bit-reproducible.
    """
    n = agents.shape[0] // stride
    for i in range(n):
        idx = i * stride
        x = agents[idx]
        y = agents[idx + 1]
        angle = agents[idx + 2]

        left = _effective_signal(trails, food, pop,
                                 _sample_index(x, y, angle - sensor_angle, sensor_distance, width, height),
                                 repulsion, food_weight)
        center = _effective_signal(trails, food, pop,
                                   _sample_index(x, y, angle, sensor_distance, width, height),
                                   repulsion, food_weight)
        right = _effective_signal(trails, food, pop,
                                  _sample_index(x, y, angle + sensor_angle, sensor_distance, width, height),
                                  repulsion, food_weight)

        if center > left and center > right:
            pass
        elif center < left and center < right:
            u, state = mulberry32_next(state)
            if u > 0.5:
                angle += turn_angle
            else:
                angle -= turn_angle
        elif left > right:
            angle -= turn_angle
        elif right > left:
            angle += turn_angle

        x = x + math.cos(angle) * step_size
        y = y + math.sin(angle) * step_size

        # absorbing boundary: respawn without depositing
        if x < 0.0 or x >= width or y < 0.0 or y >= height:
            ux, state = mulberry32_next(state)
            uy, state = mulberry32_next(state)
            uh, state = mulberry32_next(state)
            x = ux * width
            y = uy * height
            agents[idx] = x
            agents[idx + 1] = y
            agents[idx + 2] = uh * TWO_PI
            if has_color:
                cell = _clamp_index(int(math.floor(y)), height) * width + _clamp_index(int(math.floor(x)), width)
                agents[idx + 3] = food_rgb[0, cell]
                agents[idx + 4] = food_rgb[1, cell]
                agents[idx + 5] = food_rgb[2, cell]
            continue

        agents[idx] = x
        agents[idx + 1] = y
        agents[idx + 2] = angle

        cell = int(math.floor(y)) * width + int(math.floor(x))
        trails[pop, cell] += deposit

        if has_color:
            nr = agents[idx + 3] + (food_rgb[0, cell] - agents[idx + 3]) * color_blend
            ng = agents[idx + 4] + (food_rgb[1, cell] - agents[idx + 4]) * color_blend
            nb = agents[idx + 5] + (food_rgb[2, cell] - agents[idx + 5]) * color_blend
            agents[idx + 3] = nr
            agents[idx + 4] = ng
            agents[idx + 5] = nb
            color_trails[0, cell] += nr * deposit
            color_trails[1, cell] += ng * deposit
            color_trails[2, cell] += nb * deposit
    return state


@njit(parallel=True, cache=True)
def diffuse_decay(src, dst, width, height, decay):
    """dst[cell] = mean of src over the in-bounds 3x3 neighborhood * decay.

    Edge cells average fewer neighbors; nothing wraps. Each output cell is
    written exactly once from `src`, so rows run in parallel.
    """
    for y in prange(height):
        for x in range(width):
            total = 0.0
            count = 0
            for dy in range(-1, 2):
                ny = y + dy
                if ny < 0 or ny >= height:
                    continue
                for dx in range(-1, 2):
                    nx = x + dx
                    if nx < 0 or nx >= width:
                        continue
                    total += src[ny * width + nx]
                    count += 1
            dst[y * width + x] = (total / count) * decay


@njit(cache=True)
def normalize_gamma(grid, gamma):
    """Divide `grid` by its max (if positive) and raise to `gamma`, in place."""
    peak = 0.0
    for i in range(grid.shape[0]):
        if grid[i] > peak:
            peak = grid[i]
    if peak > 0.0:
        for i in range(grid.shape[0]):
            grid[i] = (grid[i] / peak) ** gamma
    return peak


@njit(cache=True)
def normalize_color_gamma(channels, gamma):
    """Scale all three channels by the shared max of r+g+b, then apply gamma, in place."""
    peak = 0.0
    size = channels.shape[1]
    for i in range(size):
        total = channels[0, i] + channels[1, i] + channels[2, i]
        if total > peak:
            peak = total
    if peak > 0.0:
        for c in range(3):
            for i in range(size):
                channels[c, i] = (channels[c, i] / peak) ** gamma
    return peak


def warmup_kernels() -> None:
    """Compile every kernel on tiny inputs so the first real run is not timed with JIT."""
    w, h = 4, 4
    size = w * h
    trails = np.zeros((2, size), dtype=np.float32)
    nxt = np.zeros_like(trails)
    food = np.zeros(size, dtype=np.float32)
    food_rgb = np.zeros((3, size), dtype=np.float32)
    color_trails = np.zeros((3, size), dtype=np.float32)
    for stride, has_color in ((3, False), (6, True)):
        agents = np.zeros(2 * stride, dtype=np.float64)
        state = seed_agents(agents, stride, w, h, food_rgb, has_color, 1)
        step_population(agents, stride, 0, trails, food, food_rgb, color_trails, has_color,
                        w, h, 0.4, 1.0, 0.4, 1.0, 1.0, 0.0, 1.0, 0.05, state)
    diffuse_decay(trails[0], nxt[0], w, h, 0.9)
    normalize_gamma(trails[0].copy(), 1.0 / 3.0)
    normalize_color_gamma(color_trails.copy(), 1.0 / 3.0)
