"""Public warmup helpers for the stigmergence package.

This module exposes a stable API that tools and runners can call to
prime the Numba kernels used by the physarum engine before a timed run.
"""
from __future__ import annotations

import importlib
import logging
import time
import types

log = logging.getLogger(__name__)

_KERNEL_MODULE = 'stigmergence.physarum_abm.kernels'


def _get_kernel_module() -> types.ModuleType:
    return importlib.import_module(_KERNEL_MODULE)


def numba_warmup() -> float:
    """Compile every engine kernel on tiny inputs.

    Returns the elapsed wall time in seconds. With numba's on-disk cache the
    second process to call this pays only the cache load.
    """
    mod = _get_kernel_module()
    if not hasattr(mod, 'warmup_kernels'):
        raise RuntimeError(f'{_KERNEL_MODULE}.warmup_kernels not found')
    t0 = time.perf_counter()
    mod.warmup_kernels()
    elapsed = time.perf_counter() - t0
    log.info('[WARMUP] physarum kernels ready in %.2f s', elapsed)
    return elapsed


def run_global_warmup(width: int = 32, height: int = 32, agent_count: int = 256) -> None:
    """Run a throwaway simulation end to end, including food generation and rendering.

    This is a convenience wrapper for tools that want every code path
    compiled without building their own parameters.
    """
    from stigmergence.physarum_abm.engine import simulate
    from stigmergence.physarum_abm.params import PhysarumParams
    from stigmergence.physarum_abm.render import render_result

    numba_warmup()
    params = PhysarumParams(seed=1, width=int(width), height=int(height),
                            agent_count=int(agent_count), iterations=2,
                            sensor_distance=4.0, food_placement='clusters')
    render_result(simulate(params))
