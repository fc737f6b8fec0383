import numpy as np
import pytest
import torch
from pyro import poutine

from chapter04 import MODEL_PRIORS, PARAMETERS, base


def test_auto_model_samples_observations_when_y_missing(auto_df):
    x, _ = base.transform_data(auto_df)
    priors = MODEL_PRIORS["model_informative_b"]
    alpha_prior, beta_prior, sigma_prior = base.init_priors({"default": priors["alpha"], "beta": priors["beta"],
                                                             "sigma": priors["sigma"]})

    model_trace = poutine.trace(base.AutoModel).get_trace(x, alpha_prior=alpha_prior, beta_prior=beta_prior,
                                                          sigma_prior=sigma_prior)

    assert model_trace.nodes["obs"]["value"].shape == (200,)
    assert not model_trace.nodes["obs"]["is_observed"]
    assert model_trace.nodes["sigma"]["value"].item() > 0


def test_auto_model_conditions_on_y(auto_df):
    x, y = base.transform_data(auto_df)
    priors = MODEL_PRIORS["model_flat_a"]

    model_trace = poutine.trace(base.AutoModel).get_trace(x, y, alpha_prior=priors["alpha"],
                                                          beta_prior=priors["beta"], sigma_prior=priors["sigma"])

    assert model_trace.nodes["obs"]["is_observed"]
    assert torch.equal(model_trace.nodes["obs"]["value"], y)


@pytest.mark.parametrize("model_name", ["model_flat_a", "model_laplace_c"])
def test_get_hmc_n_chains_recovers_slope(auto_df, model_name):
    x, y = base.transform_data(auto_df)
    priors = MODEL_PRIORS[model_name]

    hmc_sample_chains, hmc_chain_diagnostics = base.get_hmc_n_chains(
        base.AutoModel, x, y, num_chains=2, sample_count=100, burnin_percentage=0.5, thining_percentage=0.,
        alpha_prior=priors["alpha"], beta_prior=priors["beta"], sigma_prior=priors["sigma"], disable_progbar=True)

    assert sorted(hmc_sample_chains) == ["chain_0", "chain_1"]
    for chain, samples in hmc_sample_chains.items():
        assert sorted(samples) == sorted(PARAMETERS)
        assert samples["beta"].shape == (200,)
        assert (samples["sigma"] > 0).all()
        assert "acceptance rate" in hmc_chain_diagnostics[chain]

    corr = float(np.corrcoef(x.numpy(), y.numpy())[0, 1])
    summary_df = base.fit_summary(hmc_sample_chains)
    assert summary_df.loc["beta", "mean"] == pytest.approx(corr, abs=0.15)
    assert summary_df.loc["alpha", "mean"] == pytest.approx(0., abs=0.15)
    assert (summary_df["Rhat"] < 1.1).all()

    diagnostics_df = base.get_chain_diagnostics(hmc_chain_diagnostics)
    assert set(diagnostics_df.index.get_level_values("parameters")) == set(PARAMETERS)
