import logging

import numpy as np
import pytest

from stigmergence.physarum_abm.utils import (
    PACKAGE_LOGGER,
    clamp01_inplace,
    configure_logging,
    freeze,
    grid_summary,
)


@pytest.fixture
def clean_package_logger():
    log = logging.getLogger(PACKAGE_LOGGER)
    saved = list(log.handlers), log.level
    log.handlers.clear()
    yield log
    log.handlers[:] = saved[0]
    log.setLevel(saved[1])


def test_configure_logging_adds_one_handler(clean_package_logger):
    configure_logging(logging.DEBUG)
    configure_logging(logging.WARNING)
    assert len(clean_package_logger.handlers) == 1
    assert clean_package_logger.level == logging.WARNING


def test_clamp01_inplace():
    a = np.array([-1.0, 0.5, 2.0], dtype=np.float32)
    out = clamp01_inplace(a)
    assert out is a
    assert a.tolist() == [0.0, 0.5, 1.0]


def test_grid_summary():
    assert grid_summary(np.array([1.0, -2.0, 4.0])) == (-2.0, 4.0, 3.0)
    assert grid_summary(np.array([])) == (0.0, 0.0, 0.0)


def test_freeze():
    a = freeze(np.zeros(3))
    with pytest.raises(ValueError):
        a[0] = 1.0
