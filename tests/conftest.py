import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest


class ZeroNormal:
    """ Random source returning only zeros."""

    def standard_normal(self, size):
        return np.zeros(size)


@pytest.fixture
def zero_rng():
    return ZeroNormal()
