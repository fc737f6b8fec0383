import pyro.distributions as dist
import pytest

from chapter04 import MODEL_PRIORS, PARAMETERS, base


def test_init_priors_default_orders_alpha_beta_sigma():
    alpha_prior, beta_prior, sigma_prior = base.init_priors()

    assert isinstance(alpha_prior, dist.Normal)
    assert float(alpha_prior.scale) == pytest.approx(316.)
    assert beta_prior is alpha_prior
    assert isinstance(sigma_prior, dist.HalfCauchy)


def test_init_priors_overrides_and_leaves_argument_untouched():
    prior_dict = {"default": dist.Laplace(0., 1.), "beta": dist.Laplace(0., 0.1), "sigma": dist.HalfNormal(1.)}
    alpha_prior, beta_prior, sigma_prior = base.init_priors(prior_dict)

    assert float(alpha_prior.scale) == pytest.approx(1.)
    assert float(beta_prior.scale) == pytest.approx(0.1)
    assert isinstance(sigma_prior, dist.HalfNormal)
    assert "names" not in prior_dict


def test_init_priors_requires_default():
    with pytest.raises(ValueError, match="default"):
        base.init_priors({"alpha": dist.Normal(0., 1.)})


def test_init_priors_rejects_sigma_with_negative_support():
    with pytest.raises(ValueError, match="sigma"):
        base.init_priors({"default": dist.Normal(0., 1.)})


def test_model_priors_share_likelihood_and_sigma():
    assert list(MODEL_PRIORS) == ["model_flat_a", "model_informative_b", "model_laplace_c"]
    for priors in MODEL_PRIORS.values():
        assert sorted(priors) == sorted(PARAMETERS)
        assert isinstance(priors["sigma"], dist.HalfCauchy)


def test_model_specification_renders_each_model():
    flat = base.model_specification(**{"%s_prior" % k: v for k, v in MODEL_PRIORS["model_flat_a"].items()})
    informative = base.model_specification(**{"%s_prior" % k: v for k, v in MODEL_PRIORS["model_informative_b"].items()})
    laplace = base.model_specification(**{"%s_prior" % k: v for k, v in MODEL_PRIORS["model_laplace_c"].items()})

    assert "alpha ~ normal(0.0, 316.0);" in flat
    assert "beta ~ normal(0.0, 10.0);" in flat
    assert "beta ~ normal(0.0, 0.1);" in informative
    assert "alpha ~ double_exponential(0.0, 1.0);" in laplace
    assert "beta ~ double_exponential(0.0, 0.1);" in laplace
    for model_code in (flat, informative, laplace):
        assert "sigma ~ cauchy(0.0, 5.0);" in model_code
        assert "real<lower=0> sigma;" in model_code
        assert "y ~ normal(alpha + beta * x, sigma);" in model_code


def test_stan_prior_uniform_and_unsupported():
    assert base.stan_prior(dist.Uniform(0., 10.)) == "uniform(0.0, 10.0)"
    assert base.stan_prior(dist.HalfNormal(2.)) == "normal(0.0, 2.0)"
    with pytest.raises(ValueError, match="Gamma"):
        base.stan_prior(dist.Gamma(2., 2.))


def test_get_prior_samples():
    prior_samples = base.get_prior_samples(num_samples=500, **MODEL_PRIORS["model_laplace_c"])

    assert sorted(prior_samples) == sorted(PARAMETERS)
    assert all(len(values) == 500 for values in prior_samples.values())
    assert min(prior_samples["sigma"]) > 0


def test_auto_model_docstring_names_prior_arguments():
    assert "alpha ~ alpha_prior;" in base.AutoModel.__doc__
    assert "316" not in base.AutoModel.__doc__
    assert "base.model_specification" in base.AutoModel.__doc__
