"""
utils.py

Small helpers shared by the food generator, engine and renderer.

The public helpers:
- `configure_logging(level)` : attach a console handler to the package logger
- `clamp01_inplace(arr)` : clip a float array to [0, 1] without a copy
- `grid_summary(arr)` : (min, max, sum) of a grid for debug logging
- `freeze(arr)` : mark an array read-only and return it

"""

import logging
import sys
from typing import Tuple

import numpy as np

PACKAGE_LOGGER = 'stigmergence'


def configure_logging(level: int = logging.INFO) -> logging.Logger:
	"""Attach one console handler to the package logger and set its level.

	Safe to call repeatedly; a handler is only added the first time. The
	library never calls this itself.
	"""
	log = logging.getLogger(PACKAGE_LOGGER)
	if not log.handlers:
		h = logging.StreamHandler(sys.stdout)
		h.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
		log.addHandler(h)
	log.setLevel(level)
	for h in log.handlers:
		h.setLevel(level)
	return log


def clamp01_inplace(arr: np.ndarray) -> np.ndarray:
	"""Clip `arr` to [0, 1] in place and return it."""
	np.clip(arr, 0.0, 1.0, out=arr)
	return arr


def grid_summary(arr: np.ndarray) -> Tuple[float, float, float]:
	"""Return (min, max, sum) of `arr` as Python floats."""
	a = np.asarray(arr)
	if a.size == 0:
		return 0.0, 0.0, 0.0
	return float(a.min()), float(a.max()), float(a.sum(dtype=np.float64))


def freeze(arr: np.ndarray) -> np.ndarray:
	"""Mark `arr` read-only and return it."""
	arr.setflags(write=False)
	return arr
