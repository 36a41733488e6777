# -*- coding: utf-8 -*-

"""
physarum_abm/config.py

This module centralizes all configuration parameters for the physarum agent-based
model. Engine constants, renderer constants, the default parameter set and the
named aesthetic presets live here so the engine, the food generator and the
renderer all agree on them.

Contents:
---------
1. PHYSARUM_DEFAULTS:
   - Default simulation parameters (grid size, agent count, sensing geometry,
     deposit/decay, food placement, gamma).
   - `params.default_params(seed, **overrides)` builds a `PhysarumParams` from these.

2. DEFAULT_POPULATIONS:
   - The single amber population used when no populations are configured.

3. ENGINE:
   - Carried-color relaxation rate and the tolerance for agent fraction sums.

4. RENDER:
   - Ambient background strength and blur radius for color-trail rendering,
     luminance weights used to derive a food field from RGB data.

5. COLORMAP_STOPS:
   - 16-stop palettes interpolated to a 256 entry lookup table at runtime.

6. AESTHETIC_MODES:
   - Five named presets that override the visually important parameters.
     `params.vary_params(edition, base)` rotates through them.

Usage:
------
    from stigmergence.physarum_abm.config import PHYSARUM_DEFAULTS, AESTHETIC_MODES

"""

# ───────────────────────────────────────────────────────────────────────────────
# 1) DEFAULT SIMULATION PARAMETERS
# ───────────────────────────────────────────────────────────────────────────────
PHYSARUM_DEFAULTS = {
    # grid (cells)
    'width': 2048,
    'height': 2048,

    # agents
    'agent_count': 500_000,
    'iterations': 800,

    # sensing and steering (radians / cells)
    'sensor_angle': 0.45,       # half-angle between center and side sensors
    'sensor_distance': 20.0,    # distance from agent to sample point
    'turn_angle': 0.45,         # heading change per turn decision
    'step_size': 1.3,           # cells moved per iteration

    # trail
    'deposit_amount': 18.0,
    'decay_factor': 0.96,       # multiplier applied after each 3x3 diffusion pass

    # rendering
    'colormap': 'viridis',

    # populations
    'repulsion_strength': 0.0,  # weight of rival trails subtracted from the signal

    # food
    'food_weight': 150.0,
    'food_placement': 'gradient',
    'food_density': 0.7,
    'food_cluster_count': 6,

    # normalization exponent: 1/3 (cube root) brightens thin trails, 1/2 is the older look
    'gamma': 1.0 / 3.0,

    # agents pick up color from food RGB channels when present
    'carry_color': True,
}

# ───────────────────────────────────────────────────────────────────────────────
# 2) POPULATIONS
# ───────────────────────────────────────────────────────────────────────────────
DEFAULT_POPULATIONS = (
    {'color': (255, 160, 40), 'agent_fraction': 1.0},
)

# ───────────────────────────────────────────────────────────────────────────────
# 3) ENGINE CONSTANTS
# ───────────────────────────────────────────────────────────────────────────────
ENGINE = {
    'color_blend': 0.05,            # fraction a carried color relaxes toward the food color per deposit
    'fraction_tolerance': 1e-6,     # |sum(agent_fraction) - 1| above this is logged
    'image_food_weight_cap': 60.0,  # image food is dense; cap food_weight so trails can wander
}

# ───────────────────────────────────────────────────────────────────────────────
# 4) RENDER CONSTANTS
# ───────────────────────────────────────────────────────────────────────────────
RENDER = {
    'bg_strength': 0.3,             # ambient food color added under color trails
    'bg_blur_fraction': 0.025,      # box blur radius as a fraction of max(width, height)
    'luminance_weights': (0.299, 0.587, 0.114),
}

# ───────────────────────────────────────────────────────────────────────────────
# 5) COLORMAPS (16 stops each, RGB 0-255)
# ───────────────────────────────────────────────────────────────────────────────
COLORMAP_STOPS = {
    'magma': (
        (0, 0, 4), (1, 0, 11), (4, 3, 30), (14, 8, 57),
        (32, 12, 86), (56, 15, 110), (82, 18, 124), (110, 27, 128),
        (139, 38, 125), (167, 51, 115), (192, 68, 99), (215, 90, 78),
        (233, 118, 56), (247, 152, 42), (254, 194, 58), (252, 253, 191),
    ),
    'viridis': (
        (68, 1, 84), (72, 20, 103), (71, 38, 117), (65, 55, 124),
        (57, 70, 125), (48, 84, 124), (40, 97, 120), (33, 110, 114),
        (28, 123, 106), (25, 136, 96), (32, 149, 83), (53, 161, 66),
        (86, 173, 44), (127, 183, 22), (177, 191, 10), (253, 231, 37),
    ),
    'inferno': (
        (0, 0, 4), (2, 1, 15), (10, 5, 40), (26, 10, 72),
        (49, 11, 99), (74, 12, 113), (101, 17, 115), (129, 27, 107),
        (156, 40, 91), (181, 56, 72), (203, 77, 50), (222, 103, 30),
        (237, 134, 14), (247, 170, 9), (250, 209, 33), (252, 255, 164),
    ),
    'plasma': (
        (13, 8, 135), (38, 6, 149), (63, 4, 156), (88, 1, 155),
        (110, 3, 148), (130, 15, 137), (148, 30, 123), (163, 47, 108),
        (177, 63, 92), (189, 79, 76), (200, 96, 60), (210, 114, 44),
        (220, 135, 27), (229, 160, 10), (237, 189, 4), (240, 249, 33),
    ),
    'cividis': (
        (0, 32, 77), (0, 42, 93), (0, 52, 105), (18, 63, 108),
        (46, 73, 106), (65, 83, 103), (82, 93, 100), (98, 103, 99),
        (114, 113, 98), (131, 124, 95), (149, 135, 88), (168, 146, 78),
        (187, 157, 63), (207, 170, 43), (228, 183, 15), (253, 232, 37),
    ),
}

# ───────────────────────────────────────────────────────────────────────────────
# 6) AESTHETIC MODES
#    step_size, deposit_amount and food_weight are inherited from the base params.
# ───────────────────────────────────────────────────────────────────────────────
AESTHETIC_MODES = (
    # dense mycelium: thick persistent network over clustered food
    {
        'name': 'dense_mycelium',
        'agent_count': 500_000,
        'iterations': 600,
        'sensor_angle': 0.65,
        'sensor_distance': 12.0,
        'turn_angle': 0.6,
        'decay_factor': 0.98,
        'colormap': 'viridis',
        'populations': ({'color': (20, 220, 160), 'agent_fraction': 1.0},),
        'repulsion_strength': 0.0,
        'food_placement': 'clusters',
        'food_density': 0.7,
        'food_cluster_count': 12,
    },
    # river delta: long flowing filaments along a gradient
    {
        'name': 'river_delta',
        'agent_count': 400_000,
        'iterations': 700,
        'sensor_angle': 0.3,
        'sensor_distance': 26.0,
        'turn_angle': 0.3,
        'decay_factor': 0.94,
        'colormap': 'inferno',
        'populations': ({'color': (255, 140, 20), 'agent_fraction': 1.0},),
        'repulsion_strength': 0.0,
        'food_placement': 'gradient',
        'food_density': 0.55,
        'food_cluster_count': 6,
    },
    # conflict zone: two competing colonies
    {
        'name': 'conflict_zone',
        'agent_count': 400_000,
        'iterations': 600,
        'sensor_angle': 0.5,
        'sensor_distance': 18.0,
        'turn_angle': 0.5,
        'decay_factor': 0.96,
        'colormap': 'inferno',
        'populations': (
            {'color': (255, 85, 15), 'agent_fraction': 0.55},
            {'color': (15, 165, 255), 'agent_fraction': 0.45},
        ),
        'repulsion_strength': 0.5,
        'food_placement': 'clusters',
        'food_density': 0.7,
        'food_cluster_count': 10,
    },
    # three-way: red, cyan and green colonies with mutual repulsion
    {
        'name': 'three_way',
        'agent_count': 350_000,
        'iterations': 550,
        'sensor_angle': 0.6,
        'sensor_distance': 14.0,
        'turn_angle': 0.6,
        'decay_factor': 0.96,
        'colormap': 'magma',
        'populations': (
            {'color': (255, 60, 40), 'agent_fraction': 0.36},
            {'color': (40, 200, 255), 'agent_fraction': 0.32},
            {'color': (60, 255, 100), 'agent_fraction': 0.32},
        ),
        'repulsion_strength': 0.35,
        'food_placement': 'clusters',
        'food_density': 0.7,
        'food_cluster_count': 10,
    },
    # ghost web: sparse ephemeral traces over a food lattice
    {
        'name': 'ghost_web',
        'agent_count': 300_000,
        'iterations': 800,
        'sensor_angle': 0.25,
        'sensor_distance': 28.0,
        'turn_angle': 0.25,
        'decay_factor': 0.92,
        'colormap': 'plasma',
        'populations': ({'color': (200, 100, 255), 'agent_fraction': 1.0},),
        'repulsion_strength': 0.0,
        'food_placement': 'grid',
        'food_density': 0.5,
        'food_cluster_count': 8,
    },
)
