"""Seeded Mulberry32 generator.

`mulberry32_next` is a pure function of a 32-bit state and is compiled with
numba so the engine kernels can draw from it inside their loops. `Mulberry32`
is a thin stateful wrapper for Python-side consumers such as the food
generator. Every consumer owns its own instance; there is no module state.
"""
from numba import njit

_MASK32 = 0xFFFFFFFF
_INV_2_32 = 1.0 / 4294967296.0


@njit(cache=True)
def _imul32(a, b):
    # low 32 bits of a * b, split so the partial products fit in int64
    lo = a * (b & 0xFFFF)
    hi = ((a * (b >> 16)) & 0xFFFF) << 16
    return (lo + hi) & 0xFFFFFFFF


@njit(cache=True)
def mulberry32_next(state):
    """Advance `state` once.

    Returns (value, new_state) with value in [0, 1) and new_state in [0, 2**32).
    """
    s = (state + 0x6D2B79F5) & 0xFFFFFFFF
    t = _imul32(s ^ (s >> 15), s | 1)
    t = ((t + _imul32(t ^ (t >> 7), t | 61)) & 0xFFFFFFFF) ^ t
    value = ((t ^ (t >> 14)) & 0xFFFFFFFF) * _INV_2_32
    return value, s


class Mulberry32:
    """Callable generator: ``rng()`` returns the next value in [0, 1)."""

    def __init__(self, seed: int):
        self.state = int(seed) & _MASK32

    def __call__(self) -> float:
        value, self.state = mulberry32_next(self.state)
        return value

    def random(self, n: int):
        """Return a list with the next `n` values."""
        return [self() for _ in range(int(n))]
