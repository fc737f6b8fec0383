"""
Pytest configuration and shared fixtures.

Plots are drawn on the non-interactive matplotlib backend and plotly figures
are never opened in a browser.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import pyro
import pytest


@pytest.fixture(autouse=True)
def no_figure_windows(monkeypatch):
    monkeypatch.setattr(go.Figure, "show", lambda self, *args, **kwargs: None)
    pyro.set_rng_seed(1)


@pytest.fixture
def auto_df() -> pd.DataFrame:
    """Synthetic auto-mpg like records, acceleration falling with weight."""
    rng = np.random.default_rng(0)
    weight = rng.normal(3000., 800., size=200)
    acceleration = 25. - 0.003 * weight + rng.normal(0., 2., size=200)
    return pd.DataFrame({"weight": weight, "acceleration": acceleration})


@pytest.fixture
def hmc_sample_chains() -> dict:
    """Four well mixed chains of iid draws for alpha, beta & sigma."""
    rng = np.random.default_rng(42)
    return {
        "chain_%s" % idx: {
            "alpha": rng.normal(0., 0.05, size=2000),
            "beta": rng.normal(-0.4, 0.05, size=2000),
            "sigma": np.abs(rng.normal(0.9, 0.03, size=2000)),
        }
        for idx in range(4)
    }
