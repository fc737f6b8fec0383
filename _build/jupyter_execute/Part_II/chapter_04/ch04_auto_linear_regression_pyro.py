#!/usr/bin/env python
# coding: utf-8

# ## Chapter 04: Simple Linear Regression & the choice of priors
#
#
# ### 1. Introduction
#
# Heavier cars take longer to reach 60 mph, or do they? The [auto-mpg](https://archive.ics.uci.edu/ml/datasets/auto+mpg) data lists, among other things, the weight and the acceleration (seconds from 0 to 60 mph) of 398 cars from the 70s & early 80s. We use the two columns to revisit the simplest of Bayesian models, the simple linear regression, and to ask a question that is easy to gloss over:
#
# 1. How much do the priors matter when there is plenty of data?
# 2. Do they change how well the sampler behaves?
#
# We fit the same likelihood three times, changing only the priors on the intercept & the slope: flat/weakly informative, strongly informative, and Laplace (the Bayesian lasso). Inference is carried out in `Pyro` with the NUTS sampler. As in earlier chapters, all the helper functions are glued in the [base](https://github.com/mlsquare/p3/blob/main/Part_II/chapter_04/chapter04.py) class.

# In[1]:


import torch
import pyro
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import pyro.distributions as dist
import seaborn as sns
from chapter04 import base, DATA_URL, MODEL_PRIORS

pyro.set_rng_seed(1)

plt.style.use('default')

get_ipython().run_line_magic('matplotlib', 'inline')
get_ipython().run_line_magic('load_ext', 'autoreload')


# #### Data
# <br>
# The csv is fetched directly from the url below; rows with a missing weight or acceleration are dropped.

# In[2]:


print(DATA_URL)
auto_df = base.load_data()
print(auto_df.describe())

base.plot_original_y(auto_df)


# There is a negative, fairly noisy relationship: acceleration time drops as the weight increases (heavier cars of the era had bigger engines).

# #### Preprocessing
# <br>
# Weights are in the thousands of pounds, accelerations in the tens of seconds. Both columns are standardised (zero mean, unit variance) once, before any model sees them. On that scale the intercept should be close to 0 and the slope equals the correlation between the two columns, which makes priors easy to reason about.

# In[3]:


x, y = base.transform_data(auto_df)
print("x: %s, y: %s"%(x.shape, y.shape))
print("mean x: %s | sd x: %s"%(round(x.mean().item(), 4), round(float(x.numpy().std()), 4)))
print("Sample correlation: %s"%np.corrcoef(x.numpy(), y.numpy())[0, 1])


# ### 2. Model Specification
# ________
# The sampling distribution is:
# <br>
# <br>
# $y_{i}   \sim   N(\mu_{i}, \sigma)$
# <br>
# $\mu_{i}   =   \alpha + \beta x_{i}$
# <br>
# <br>
# where $x_i$ is the standardised weight of the i-th car, $y_i$ its standardised acceleration, $\alpha$ the intercept, $\beta$ the slope & $\sigma$ the residual scale.
#
# The three models differ only in the priors on $\alpha, \beta$; $\sigma$ gets a Half-Cauchy(5) prior throughout:
#
# __Model A.__ flat/weak: $\alpha \sim N(0, 316)$, $\beta \sim N(0, 10)$
#
# __Model B.__ strongly informative: $\alpha \sim N(0, 1)$, $\beta \sim N(0, 0.1)$
#
# __Model C.__ Laplace: $\alpha \sim Laplace(0, 1)$, $\beta \sim Laplace(0, 0.1)$
#
# Model B is deliberately opinionated: it believes the slope is within $\pm 0.2$ of zero, which the data (a correlation around $-0.42$) will contradict. Model C has a similar scale but heavier tails.
#
# The equivalent `Stan` model blocks follow.

# In[4]:


AutoModel= base.AutoModel

for model_name, priors in MODEL_PRIORS.items():
    alpha_prior, beta_prior, sigma_prior= base.init_priors(dict(priors, default=priors["alpha"]))
    print("%s\n%s\n%s\n"%(model_name, "_"*30, base.model_specification(alpha_prior, beta_prior, sigma_prior)))


# Let us also draw few samples from the priors, and look at the distribution

# In[5]:


num_samples = 1100

prior_samples_a = base.get_prior_samples(num_samples=num_samples, **MODEL_PRIORS["model_flat_a"])
prior_samples_b = base.get_prior_samples(num_samples=num_samples, **MODEL_PRIORS["model_informative_b"])
prior_samples_c = base.get_prior_samples(num_samples=num_samples, **MODEL_PRIORS["model_laplace_c"])

base.plot_prior_distributions(model_informative_b= {"beta": prior_samples_b["beta"]},
                              model_laplace_c= {"beta": prior_samples_c["beta"]})


# ### 3. Prior predictive checking
#
# Lines implied by the priors, before the data is seen. With Model A, a unit change in standardised weight can move acceleration by tens of standard deviations.

# In[6]:


prior_simulations = base.simulate_observations_given_prior_posterior_pairs(x, num_draws=500, model_flat_a= prior_samples_a,
                                                                           model_informative_b= prior_samples_b,
                                                                           model_laplace_c= prior_samples_c)

for model_name, simulated in prior_simulations.items():
    base.plot_predictive_scatter(x, y, simulated, title="Prior predictive for '%s'"%model_name)


# ### 4. Posterior Estimation
#
# Four NUTS chains per model. `sample_count` is the number of samples left after warm-up and thinning.

# In[7]:


hmc_sample_chains_a, hmc_chain_diagnostics_a = base.get_hmc_n_chains(AutoModel, x, y, num_chains=4, sample_count = 500,
                                                                     burnin_percentage = 0.1, thining_percentage =0.5,
                                                                     **{"%s_prior"%k: v for k, v in MODEL_PRIORS["model_flat_a"].items()})


# In[8]:


hmc_sample_chains_b, hmc_chain_diagnostics_b = base.get_hmc_n_chains(AutoModel, x, y, num_chains=4, sample_count = 500,
                                                                     burnin_percentage = 0.1, thining_percentage =0.5,
                                                                     **{"%s_prior"%k: v for k, v in MODEL_PRIORS["model_informative_b"].items()})


# In[9]:


hmc_sample_chains_c, hmc_chain_diagnostics_c = base.get_hmc_n_chains(AutoModel, x, y, num_chains=4, sample_count = 500,
                                                                     burnin_percentage = 0.1, thining_percentage =0.5,
                                                                     **{"%s_prior"%k: v for k, v in MODEL_PRIORS["model_laplace_c"].items()})


# ### 5. MCMC Diagnostics
#
# - __Burn-in__: chains are inspected visually for a transient start.
#
# - __Thinning__: the ACF is used to pick a thinning factor, keeping every k-th sample where k is the first lag at which the ACF drops below 0.1. Within a chain k is the largest over the parameters, so alpha, beta & sigma stay paired draw by draw.
#
# - __Mixing__: the Gelman-Rubin statistic ($\hat{R}$) compares between-chain & within-chain variance; values close to 1 indicate the chains converged to the same distribution.
#
# First, what the sampler reports itself.

# In[10]:


for model_name, hmc_chain_diagnostics in [("model_flat_a", hmc_chain_diagnostics_a),
                                          ("model_informative_b", hmc_chain_diagnostics_b),
                                          ("model_laplace_c", hmc_chain_diagnostics_c)]:
    print("For '%s'"%model_name)
    print(base.get_chain_diagnostics(hmc_chain_diagnostics))


# #### Model-A Summaries

# In[11]:


beta_chain_matrix_df_A = pd.DataFrame(hmc_sample_chains_a)

base.save_parameter_chain_dataframe(beta_chain_matrix_df_A, "data/auto_parameter_chain_matrix_A.csv")

base.plot_chains(beta_chain_matrix_df_A)

for chain, samples in hmc_sample_chains_a.items():
    print("____\nFor 'model_flat_a' %s"%chain)
    print(chain, "Sample count: ", len(samples["beta"]))
    print("Alpha Q(0.5) :%s | Beta Q(0.5) :%s | Sigma Q(0.5) :%s"%(np.quantile(samples["alpha"], 0.5),
                                                                np.quantile(samples["beta"], 0.5), np.quantile(samples["sigma"], 0.5)))


# In[12]:


base.plot_autocorrelation(beta_chain_matrix_df_A, lags=20)


# In[13]:


thining_dict_a = base.thinning_factors(beta_chain_matrix_df_A)
print(thining_dict_a)

pruned_hmc_sample_chains_a = base.prune_hmc_samples(hmc_sample_chains_a, thining_dict_a)


# In[14]:


grubin_values_a = base.gelman_rubin_stats(pruned_hmc_sample_chains_a)


# In[15]:


fit_df_A = base.build_fit_df(pruned_hmc_sample_chains_a)

base.save_parameter_chain_dataframe(fit_df_A, "data/auto_hmc_samples_A.csv")

base.summary(fit_df_A, layout =2)


# In[16]:


base.plot_parameters_for_n_chains(fit_df_A, plot_interactive=True)
base.plot_joint_distribution(fit_df_A, ["alpha", "beta"])
base.plot_interaction_hexbins(fit_df_A, ["alpha", "beta", "sigma"])


# #### Model-B & Model-C Summaries
#
# Same steps, condensed.

# In[17]:


pruned_sample_chains= {"model_flat_a": pruned_hmc_sample_chains_a}
for model_name, hmc_sample_chains in [("model_informative_b", hmc_sample_chains_b), ("model_laplace_c", hmc_sample_chains_c)]:
    print("%s\n\nFor model : %s"%("_"*30, model_name))
    beta_chain_matrix_df = pd.DataFrame(hmc_sample_chains)
    base.plot_chains(beta_chain_matrix_df)
    pruned_sample_chains[model_name] = base.prune_hmc_samples(hmc_sample_chains, base.thinning_factors(beta_chain_matrix_df))
    base.gelman_rubin_stats(pruned_sample_chains[model_name])


# #### Summary tables
#
# A table in the spirit of printing a `Stan` fit: mean, standard error of the mean, sd, quantiles, effective sample size & $\hat{R}$.

# In[18]:


for model_name, pruned_chains in pruned_sample_chains.items():
    print("%s\n%s"%(model_name, "_"*30))
    print(base.fit_summary(pruned_chains).round(3), "\n")


# All three models mix well on this data, $\hat{R}$ stays at 1.00. With close to 400 observations the likelihood dominates Model A & Model C; Model B's tight prior on $\beta$ is the only one that visibly drags the slope towards zero.

# ### 6. Posterior distributions

# In[19]:


fit_dfs= dict(map(lambda item: (item[0], base.build_fit_df(item[1])), pruned_sample_chains.items()))

posterior_df = base.plot_posterior_densities(**fit_dfs)


# On the original scale (seconds per pound):

# In[20]:


for model_name, pruned_chains in pruned_sample_chains.items():
    rescaled = base.rescale_parameters(base.merge_chains(pruned_chains), auto_df)
    print("For '%s' intercept Q(0.5): %s | slope Q(0.5): %s | sigma Q(0.5): %s"%(model_name,
          round(np.quantile(rescaled["intercept"], 0.5), 3), round(np.quantile(rescaled["slope"], 0.5), 6),
          round(np.quantile(rescaled["sigma"], 0.5), 3)))


# ### 7. Posterior predictive checking

# In[21]:


posterior_simulations = base.simulate_observations_given_prior_posterior_pairs(x, num_draws=1000,
                                                                               **dict(map(lambda item: (item[0], base.merge_chains(item[1])),
                                                                                          pruned_sample_chains.items())))

for model_name, simulated in posterior_simulations.items():
    base.plot_predictive_scatter(x, y, simulated, title="Posterior predictive for '%s'"%model_name)


# ### 8. Model Comparison
#
# Deviance information criterion, $DIC = 2\bar{D}(\theta) - D(\bar{\theta})$, lower is better.

# In[22]:


model_dics = base.compare_DICs_given_model(x, y, **pruned_sample_chains)
print(model_dics)


# Model B pays for its prior: the slope is pulled away from where the data puts it and the fit, hence the DIC, is worse. Flat and Laplace priors end up with practically the same fit; with this much data, a lasso prior on a single slope changes little.
