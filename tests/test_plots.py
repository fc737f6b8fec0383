import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import plotly.graph_objects as go
import pytest

from chapter04 import MODEL_PRIORS, base


@pytest.fixture
def shown_titles(monkeypatch):
    titles = []
    monkeypatch.setattr(go.Figure, "show", lambda self, *args, **kwargs: titles.append(self.layout.title.text))
    return titles


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


def test_plot_parameters_for_n_chains_caps_chains_and_parameters(hmc_sample_chains, shown_titles, capsys):
    fit_df = base.build_fit_df(hmc_sample_chains)

    base.plot_parameters_for_n_chains(fit_df, plotting_cap=[2, 2], plot_interactive=True)

    out = capsys.readouterr().out
    assert "Cannot plot Number of chains greater than 2!, plotting ['chain_0', 'chain_1']" in out
    assert "Cannot plot Number of parameters greater than 2!, plotting ['alpha', 'beta']" in out
    assert shown_titles == ["chain_0", "chain_1"]


def test_plot_parameters_for_n_chains_skips_unknown_chain(hmc_sample_chains, shown_titles, capsys):
    fit_df = base.build_fit_df(hmc_sample_chains)

    base.plot_parameters_for_n_chains(fit_df, chains=["chain_1", "chain_9"], plot_interactive=True)

    assert "Chain number [chain_9] is Invalid" in capsys.readouterr().out
    assert shown_titles == ["chain_1"]


def test_plot_parameters_for_n_chains_with_seaborn(hmc_sample_chains):
    base.plot_parameters_for_n_chains(base.build_fit_df(hmc_sample_chains), chains=["chain_0"])


@pytest.mark.parametrize("plot_pacf, kind", [(False, "ACF"), (True, "PACF")])
def test_plot_autocorrelation(hmc_sample_chains, shown_titles, plot_pacf, kind):
    matrix_df = pd.DataFrame(hmc_sample_chains)

    base.plot_autocorrelation(matrix_df, parameters=["beta", "sigma"], chains=["chain_0", "chain_2"], lags=20,
                              plot_pacf=plot_pacf)

    assert shown_titles == ["%s plot for 'beta' (all chains)" % kind, "%s plot for 'sigma' (all chains)" % kind]


def test_plot_chains_draws_one_figure_per_parameter(hmc_sample_chains, monkeypatch):
    shown = []
    monkeypatch.setattr(plt, "show", lambda *args, **kwargs: shown.append(plt.gca().get_title()))

    base.plot_chains(pd.DataFrame(hmc_sample_chains))

    assert shown == ["Chain intermixing for '%s' samples" % param for param in ["alpha", "beta", "sigma"]]


def test_plot_prior_distributions(shown_titles, capsys):
    prior_samples = base.get_prior_samples(num_samples=200, **MODEL_PRIORS["model_laplace_c"])

    base.plot_prior_distributions(model_laplace_c=prior_samples)

    assert "For model 'model_laplace_c' Prior alpha Q(0.5)" in capsys.readouterr().out
    assert shown_titles == ["Prior distribution of 'model_laplace_c' parameters"]


def test_joint_and_hexbin_plots(hmc_sample_chains):
    fit_df = base.build_fit_df(hmc_sample_chains)

    base.plot_joint_distribution(fit_df, ["alpha", "beta"])
    base.plot_interaction_hexbins(fit_df, ["alpha", "beta", "sigma"])


@pytest.mark.parametrize("layout", [1, 2])
def test_summary_displays_selector(hmc_sample_chains, monkeypatch, capsys, layout):
    displayed = []
    monkeypatch.setattr("chapter04.display", lambda obj: displayed.append(obj))
    data = pd.DataFrame(hmc_sample_chains) if layout == 1 else base.build_fit_df(hmc_sample_chains)

    base.summary(data, layout=layout)

    assert "Select any value" in capsys.readouterr().out
    dropdown, output = displayed
    assert list(dropdown.options) == ["mean", "std", "25%", "50%", "75%", "ALL"]

    dropdown.value = "mean"
    summary_df = displayed[-1]
    assert isinstance(summary_df, pd.DataFrame)
    if layout == 1:
        assert summary_df.loc[("mean", "beta"), "chain_0"] == pytest.approx(np.mean(hmc_sample_chains["chain_0"]["beta"]))
    else:
        assert list(summary_df.columns) == ["mean"]
