"""tests/conftest.py"""
import copy
import os

import numpy as np
import pytest

# keep test runs from writing log files; must run before superlotto imports
os.environ.setdefault("LOG_DIR", "")

from superlotto.domain.draw import Draw
from superlotto.utils.config import get_engine_config


def build_history(size=200, always_front=None, seed=42, first_issue=25001):
    """Synthetic draws, newest first. ``always_front`` is forced into every front set."""
    rng = np.random.default_rng(seed)
    draws = []
    for k in range(size):
        pool = [n for n in range(1, 36) if n != always_front]
        picks = 4 if always_front else 5
        front = [int(n) for n in rng.choice(pool, size=picks, replace=False)]
        if always_front:
            front.append(always_front)
        back = [int(n) for n in rng.choice(range(1, 13), size=2, replace=False)]
        draws.append(Draw(issue=str(first_issue + k), front=tuple(front), back=tuple(back)))
    return list(reversed(draws))


@pytest.fixture
def make_history():
    return build_history


@pytest.fixture
def history():
    return build_history()


@pytest.fixture
def seven_history():
    return build_history(always_front=7)


@pytest.fixture
def short_history():
    return build_history(size=5)


@pytest.fixture
def fast_config():
    """Engine config with small Monte Carlo sample counts."""
    config = copy.deepcopy(get_engine_config())
    config["predictors"]["monte_carlo"].update(
        direct_samples=500, mcmc_steps=200, importance_samples=300
    )
    return config
