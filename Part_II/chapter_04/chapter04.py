import random
import time
import itertools
from io import StringIO
from collections import defaultdict

import numpy as np
import pandas as pd
import torch
import pyro
import pyro.distributions as dist
from pyro.infer import MCMC, NUTS
from pyro.ops.stats import effective_sample_size, split_gelman_rubin
from scipy import stats
import seaborn as sns
import matplotlib.pyplot as plt

import plotly.express as px
import plotly.figure_factory as ff
import plotly.graph_objects as go
from plotly.subplots import make_subplots
from statsmodels.tsa.stattools import acf, pacf
import ipywidgets as widgets
from IPython.display import display, clear_output


DATA_URL = "https://raw.githubusercontent.com/mwaskom/seaborn-data/master/mpg.csv"

PARAMETERS = ["alpha", "beta", "sigma"]

# Three successive specifications, differing only in the priors on intercept & slope
MODEL_PRIORS = {
    "model_flat_a": {"alpha": dist.Normal(0., 316.), "beta": dist.Normal(0., 10.),
                     "sigma": dist.HalfCauchy(5.)},
    "model_informative_b": {"alpha": dist.Normal(0., 1.), "beta": dist.Normal(0., 0.1),
                            "sigma": dist.HalfCauchy(5.)},
    "model_laplace_c": {"alpha": dist.Laplace(0., 1.), "beta": dist.Laplace(0., 0.1),
                        "sigma": dist.HalfCauchy(5.)},
}


class base(object):
    def __init__(self):
        pass

    @staticmethod
    def load_data(url=DATA_URL, columns=["weight", "acceleration"]):
        """
        Input
        -------
        url: location of the auto-mpg csv, any path or url accepted by pandas.read_csv
        columns: columns to keep, default ["weight", "acceleration"]

        Output
        --------
        pandas dataframe holding the selected columns, rows with missing values dropped.
        """
        auto_df= pd.read_csv(url)
        auto_df= auto_df[list(columns)].dropna().reset_index(drop=True)
        return auto_df

    @staticmethod
    def transform_data(auto_df, x_column="weight", y_column="acceleration"):
        """
        Input
        -------
        auto_df: dataframe returned by `base.load_data`
        x_column: predictor column name, default "weight"
        y_column: response column name, default "acceleration"

        Output
        --------
        x: tensor holding standardised predictor values
        y: tensor holding standardised response values

        """
        transform_data= lambda x: torch.tensor(stats.zscore(np.asarray(x, dtype=float)), dtype=torch.float)# standardises Input data
        x= transform_data(auto_df[x_column])
        y= transform_data(auto_df[y_column])
        return x, y

    @staticmethod
    def rescale_parameters(samples, auto_df, x_column="weight", y_column="acceleration"):
        """
        Input
        -------
        samples: dictionary of posterior draws on the standardised scale, with keys alpha, beta, sigma
        auto_df: unscaled dataframe the standardisation was computed from

        Output
        --------
        dictionary with intercept, slope & sigma draws expressed in the original units.
        """
        x_mean, x_sd= auto_df[x_column].mean(), auto_df[x_column].std(ddof=0)
        y_mean, y_sd= auto_df[y_column].mean(), auto_df[y_column].std(ddof=0)

        slope= np.asarray(samples["beta"], dtype=float) * y_sd / x_sd
        intercept= y_mean + y_sd * np.asarray(samples["alpha"], dtype=float) - slope * x_mean
        sigma= np.asarray(samples["sigma"], dtype=float) * y_sd
        return {"intercept": intercept, "slope": slope, "sigma": sigma}

    @staticmethod
    def plot_original_y(auto_df, x_column="weight", y_column="acceleration"):
        obs_y_title= "%s vs. %s"%(y_column, x_column)
        fig = px.scatter(auto_df, x=x_column, y=y_column, title=obs_y_title)
        fig.update_layout(title=obs_y_title, xaxis_title=x_column, yaxis_title=y_column)
        fig.show()

    @staticmethod
    def AutoModel(x, y=None, alpha_prior=None, beta_prior=None, sigma_prior=None):
        """
        Input
        -------
        x: tensor holding standardised vehicle weight, shaped (N,)
        y: tensor holding standardised acceleration, shaped (N,), None to sample from the model
        alpha_prior: pyro distribution for the intercept
        beta_prior: pyro distribution for the slope
        sigma_prior: pyro distribution with positive support for the residual scale

        Output
        --------
        Implements pystan model: {
                alpha ~ alpha_prior;
                beta  ~ beta_prior;
                sigma ~ sigma_prior;
                y ~ normal(alpha + beta * x, sigma);}

        Note: The three models of the chapter only vary the priors passed in,
        `base.model_specification` prints the block for a given prior set.

        """
        alpha = pyro.sample("alpha", alpha_prior)
        beta = pyro.sample("beta", beta_prior)
        sigma = pyro.sample("sigma", sigma_prior)

        mu = alpha + beta * x
        with pyro.plate("data", len(x)):
            pyro.sample("obs", dist.Normal(mu, sigma), obs=y)

    @staticmethod
    def init_priors(prior_dict=None):
        """
        Input
        -------
        prior_dict: dictionary with a 'default' distribution & optional per parameter
                    overrides, example: {"default": dist.Normal(0., 1.), "sigma": dist.HalfCauchy(5.)}

        Output
        --------
        list of priors ordered as prior_dict["names"], default ["alpha", "beta", "sigma"]
        """
        if prior_dict is None:
            prior_dict= {"default": dist.Normal(0., 316.), "sigma": dist.HalfCauchy(5.)}
        names= prior_dict.get("names") or PARAMETERS
        if prior_dict.get("default") is None:
            raise ValueError("pass a default distribution to key 'default' for parameters %s"%names)

        prior_list= [prior_dict.get(param, prior_dict["default"]) for param in names]
        if "sigma" in names:
            sigma_prior= prior_list[list(names).index("sigma")]
            if bool(sigma_prior.support.check(torch.tensor(-1e-3))):
                raise ValueError("prior for 'sigma' must have positive support, got %s"%sigma_prior)
        return prior_list

    @staticmethod
    def stan_prior(distribution):
        """Stan sampling statement for a pyro prior, e.g. `normal(0.0, 316.0)`."""
        as_float= lambda value: round(float(value), 6)
        if isinstance(distribution, dist.HalfNormal):
            return "normal(0.0, %s)"%as_float(distribution.scale)
        if isinstance(distribution, dist.HalfCauchy):
            return "cauchy(0.0, %s)"%as_float(distribution.scale)
        if isinstance(distribution, dist.Laplace):
            return "double_exponential(%s, %s)"%(as_float(distribution.loc), as_float(distribution.scale))
        if isinstance(distribution, dist.Cauchy):
            return "cauchy(%s, %s)"%(as_float(distribution.loc), as_float(distribution.scale))
        if isinstance(distribution, dist.Normal):
            return "normal(%s, %s)"%(as_float(distribution.loc), as_float(distribution.scale))
        if isinstance(distribution, dist.Uniform):
            return "uniform(%s, %s)"%(as_float(distribution.low), as_float(distribution.high))
        raise ValueError("No Stan counterpart for prior %s"%type(distribution).__name__)

    @staticmethod
    def model_specification(alpha_prior, beta_prior, sigma_prior):
        """
        Input
        -------
        alpha_prior, beta_prior, sigma_prior: pyro distributions used with `base.AutoModel`

        Output
        --------
        Textual (Stan) model block equivalent to `base.AutoModel` with the given priors.
        """
        model_code= ["data {",
                     "  int<lower=0> N;",
                     "  vector[N] x;",
                     "  vector[N] y;",
                     "}",
                     "parameters {",
                     "  real alpha;",
                     "  real beta;",
                     "  real<lower=0> sigma;",
                     "}",
                     "model {",
                     "  alpha ~ %s;"%base.stan_prior(alpha_prior),
                     "  beta ~ %s;"%base.stan_prior(beta_prior),
                     "  sigma ~ %s;"%base.stan_prior(sigma_prior),
                     "  y ~ normal(alpha + beta * x, sigma);",
                     "}"]
        return "\n".join(model_code)

    @staticmethod
    def get_prior_samples(num_samples=1100, **kwargs):
        """
        Input
        -------
        num_samples: count of samples to draw for each prior, default 1100
        kwargs: parameter names as keys & pyro distributions as values

        Output
        --------
        dictionary with parameter names as keys & list of prior samples as values
        """
        prior_samples={}
        for param, param_prior in kwargs.items():
            prior_samples[param]= param_prior.sample(torch.Size([num_samples])).tolist()
        return prior_samples

    @staticmethod
    def plot_prior_distributions(**kwargs):
        for model_name, prior_samples in kwargs.items():
            medians= ", ".join("%s Q(0.5) :%s"%(param, round(np.quantile(values, 0.5), 4)) for param, values in prior_samples.items())
            print("For model '%s' Prior %s"%(model_name, medians))
            fig = ff.create_distplot(list(prior_samples.values()), list(prior_samples.keys()), show_hist=False)
            fig.update_layout(title="Prior distribution of '%s' parameters"%(model_name), xaxis_title="parameter values", yaxis_title="density", legend_title="parameters")
            fig.show()

    @staticmethod
    def get_hmc_n_chains(pyromodel, x, y, num_chains=4, sample_count = 1000,
                     burnin_percentage = 0.1, thining_percentage =0.9,
                     alpha_prior= None, beta_prior= None, sigma_prior= None, disable_progbar=False):
        """
        Input
        -------
        pyromodel: Pyro model object with specific prior distribution
        x: tensor holding standardised weight
        y: tensor holding standardised acceleration, response observation
        num_chains: Count of MCMC chains to launch, default 4
        sample_count: count of samples expected in a MCMC chains after burn-in & thinning, default 1000
        burnin_percentage: fraction of the drawn samples run as warm-up, default 0.1
        thining_percentage: fraction of samples expected to be dropped by thinning, default 0.9

        Outputs
        ---------
        hmc_sample_chains: a dictionary with chain names as keys & dictionary of parameter vs sampled values list as values
        hmc_chain_diagnostics: a dictionary with chain names as keys & dictionary of chain diagnostic metric values from hmc sampling.

        """
        hmc_sample_chains =defaultdict(dict)
        hmc_chain_diagnostics =defaultdict(dict)

        net_sample_count= round(sample_count/((1- burnin_percentage)*(1- thining_percentage)))

        t1= time.time()
        for idx in range(num_chains):
            num_samples, burnin= net_sample_count, round(net_sample_count*burnin_percentage)
            nuts_kernel = NUTS(pyromodel)
            mcmc = MCMC(nuts_kernel, num_samples=num_samples, warmup_steps=burnin, disable_progbar=disable_progbar)
            mcmc.run(x, y, alpha_prior= alpha_prior, beta_prior= beta_prior, sigma_prior= sigma_prior)
            hmc_sample_chains['chain_{}'.format(idx)]={k: v.detach().cpu().numpy() for k, v in mcmc.get_samples().items()}
            hmc_chain_diagnostics['chain_{}'.format(idx)]= mcmc.diagnostics()

        print("\nTotal time: ", time.time()-t1)
        hmc_sample_chains= dict(hmc_sample_chains)
        hmc_chain_diagnostics= dict(hmc_chain_diagnostics)

        return hmc_sample_chains, hmc_chain_diagnostics

    @staticmethod
    def build_fit_df(hmc_sample_chains):
        """Long dataframe of draws, one row per sample with a 'chain' column."""
        param_dfs= []
        for chain, values in hmc_sample_chains.items():
            param_df = pd.DataFrame(values)
            param_df["chain"]= chain
            param_dfs.append(param_df)
        return pd.concat(param_dfs, axis=0).reset_index(drop=True)

    @staticmethod
    def merge_chains(hmc_sample_chains):
        """Concatenates draws of every chain per parameter."""
        merged= defaultdict(list)
        for chain, params_dict in hmc_sample_chains.items():
            for param, values in params_dict.items():
                merged[param].append(np.asarray(values))
        return dict(map(lambda item: (item[0], np.concatenate(item[1])), merged.items()))

    @staticmethod
    def get_chain_diagnostics(hmc_chain_diagnostics):
        """
        Input
        -------
        hmc_chain_diagnostics: dictionary holding chain diagnostic metric values from hmc sampling
                                (ex: {'chain_0': {'alpha': OrderedDict([('n_eff', tensor(320.6277)),('r_hat', tensor(0.9991))]),
                                'beta': OrderedDict([('n_eff', tensor(422.8024)), ('r_hat', tensor(0.9991))]),'divergences': {'chain 0': []},
                                'acceptance rate': {'chain 0': 0.986}}}).

        Outputs
        ---------
        pandas dataframe holding hmc chain diagnostic results.

        """
        diagnostics_dfs= []

        for chain, diag_di in hmc_chain_diagnostics.items():
            parameters= sorted(set(diag_di.keys())- {'acceptance rate', 'divergences'})
            diag_params= list(diag_di.get(parameters[0]).keys())

            diag_func = lambda param: (param, list(map(lambda d_param: float(diag_di[param][d_param]), diag_params)))

            diagnostics_dict = dict(map(diag_func, parameters))
            diagnostics_dict.update({"metric": diag_params, "chain":chain,
                        "acceptance rate":diag_di.get("acceptance rate", {}).get("chain 0")})

            diagnostics_dict_df = pd.DataFrame(diagnostics_dict)
            diagnostics_dict_df["divergences"]= str(diag_di.get("divergences", {}).get("chain 0", []))
            diagnostics_dfs.append(diagnostics_dict_df)

        diagnostics_df= pd.concat(diagnostics_dfs, axis=0)
        diagnostics_df= diagnostics_df.melt(id_vars=["chain", "metric", "acceptance rate", "divergences"], var_name="parameters", value_name="metric_values")
        diagnostics_df.set_index(["parameters", "chain", "metric"], inplace=True)

        return diagnostics_df

    @staticmethod
    def plot_chains(param_chain_matrix_df):
        """
        Input
        -------
        param_chain_matrix_df: Dataframe holding samples of parameters (alpha, beta & sigma)
                            with parameter names across rows chain names across columns.

        Output
        -------
        Plot intermixing chains for each parameter.

        """
        for param in param_chain_matrix_df.index:
            plt.figure(figsize=(10,8))
            for chain in param_chain_matrix_df.columns:
                plt.plot(param_chain_matrix_df.loc[param, chain], label=chain)
            plt.legend()
            plt.title("Chain intermixing for '%s' samples"%param)
            plt.show()

    @staticmethod
    def plot_autocorrelation(beta_chain_matrix_df, parameters=None, chains= None, msize=8, lags= 40, plot_pacf=False):
        lags= int(lags)
        chains_list= chains if chains else list(beta_chain_matrix_df.columns)
        parameters_list = parameters if parameters else list(beta_chain_matrix_df.index)

        for param in parameters_list:
            print("Autocorrelation for '%s'"%param)
            fig= make_subplots()
            for chain in chains_list:
                samples= np.asarray(beta_chain_matrix_df.loc[param][chain], dtype=float)
                corr_array = pacf(samples, nlags= lags, alpha=0.05) if plot_pacf else acf(samples, nlags= lags, alpha=0.05, fft=False)

                lower_y = corr_array[1][:,0] - corr_array[0]
                upper_y = corr_array[1][:,1] - corr_array[0]

                r, g, b= random.sample(range(0, 255), 3)
                for x in range(len(corr_array[0])):
                    fig.add_trace(go.Scatter(x=(x,x), y=(0,corr_array[0][x]), mode='lines',line_color='rgba(%s,%s,%s,0.9)'%(r, g,b), showlegend=False))

                fig.add_trace(go.Scatter(x=np.arange(len(corr_array[0])), y=corr_array[0], mode='markers', marker_color='rgba(%s, %s,%s,0.8)'%(r, g,b),
                                marker_size=msize, name=chain))
                fig.add_trace(go.Scatter(x=np.arange(len(corr_array[0])), y=upper_y, mode='lines', line_color='rgba(%s, %s,%s,0)'%(r, g,b), showlegend=False))
                fig.add_trace(go.Scatter(x=np.arange(len(corr_array[0])), y=lower_y, mode='lines',fillcolor='rgba(%s,%s,%s,0.2)'%(r, g,b),
                            fill='tonexty', line_color='rgba(255,255,255,0)', name=chain))
            fig.update_layout(title="%s plot for '%s' (all chains)"%("PACF" if plot_pacf else "ACF", param), legend_title="Chains")
            fig.show()

    @staticmethod
    def thinning_factors(beta_chain_matrix_df, threshold=0.1, lags=40):
        """
        Input
        -------
        beta_chain_matrix_df: Dataframe holding samples with parameter names across rows & chain names across columns.
        threshold: autocorrelation level below which samples are treated as independent, default 0.1
        lags: maximum lag inspected, default 40

        Output
        -------
        thining_dict, example: {"chain_0": {"alpha":3, "beta":3, "sigma":3}}, usable with `base.prune_hmc_samples`.
        Every parameter of a chain gets the chain's largest factor, so draws stay paired across parameters.
        A factor of lags+1 means the ACF never dropped below threshold.
        """
        thining_dict= defaultdict(dict)
        for chain in beta_chain_matrix_df.columns:
            for param in beta_chain_matrix_df.index:
                samples= np.asarray(beta_chain_matrix_df.loc[param][chain], dtype=float)
                corr= acf(samples, nlags= min(lags, len(samples)- 1), fft=True)
                below= np.flatnonzero(np.abs(corr) < threshold)
                thining_dict[chain][param]= int(below[0]) if below.size else lags+ 1
            chain_factor= max(thining_dict[chain].values())
            thining_dict[chain]= dict.fromkeys(thining_dict[chain], chain_factor)
        return dict(thining_dict)

    @staticmethod
    def prune_hmc_samples(hmc_sample_chains, thining_dict):
        """
        Input
        -------
        hmc_sample_chains: a dictionary with chain names as keys & dictionary of parameter vs sampled values list as values
        thining_dict: a dictionary with chain names as keys & dictionary of parameter vs thining factor list as values
                      example:  {"chain_0": {"alpha":6, "beta":3}, "chain_1": {"alpha":7, "beta":3}}
                      all parameters of a chain are thinned by the largest factor given for that chain,
                      so alpha[k], beta[k] & sigma[k] still come from the same iteration.


        Outputs
        ---------
        Outputs a pruned version of hmc_sample_chains in accordance with respective thining factors.

        """
        pruned_hmc_sample_chains= defaultdict(dict)
        for chain, params_dict in hmc_sample_chains.items():
            chain_factors= thining_dict.get(chain, {})
            chain_factor= max(chain_factors.values(), default=1)
            pruned_hmc_sample_chains[chain]= dict(map(lambda val: (val[0], val[1][::chain_factor]), params_dict.items()))

            original_sample_shape_dict= dict(map(lambda val: (val[0], val[1].shape), list(params_dict.items())))
            pruned_sample_shape_dict = dict(map(lambda val: (val[0], val[1].shape), list(pruned_hmc_sample_chains[chain].items())))

            print("%s\nOriginal sample counts for '%s' parameters: %s"%("-"*25, chain, original_sample_shape_dict))
            print("\nThining factor for '%s' parameters: %s "%(chain, chain_factor))
            print("Post thining sample counts for '%s' parameters: %s\n\n"%(chain, pruned_sample_shape_dict))

        pruned_hmc_sample_chains= dict(pruned_hmc_sample_chains)

        return pruned_hmc_sample_chains

    @staticmethod
    def compute_grubin(param_chains_sample_dict):
        """
        Input
        -------
        param_chains_sample_dict: dictionary with alpha, beta, sigma as keys and
                                array of chains of sample parameters values, shaped (num_chains, L).
                                example: {'alpha': array([[-0.18649854, ..,-0.19441406]]),
                                            'beta': array([[-0.18322189, ..,-0.19441406]])}

        Output
        -------
        Returns gelman-rubin statistics value (Rhat) for each parameter.
        """
        grubin_dict= {}
        for param, chain_list in param_chains_sample_dict.items():
            chain_arr= np.asarray(chain_list, dtype=float)
            num_chains_J, L = chain_arr.shape
            if num_chains_J < 2:
                raise ValueError("Gelman-rubin for '%s' needs at least 2 chains, got %s"%(param, num_chains_J))
            if L < 2:
                raise ValueError("Gelman-rubin for '%s' needs at least 2 samples per chain, got %s"%(param, L))
            chain_mean = np.mean(chain_arr, axis=1).reshape((-1,1))# shape (J, 1)

            grand_chain_mean = np.mean(chain_mean)

            B= L*np.reciprocal(num_chains_J-1.)*np.sum(np.square(chain_mean-grand_chain_mean))

            Sj_square= np.reciprocal(L-1.)*np.sum(np.square(chain_arr - chain_mean), axis=1)# within chain variances, shape (J,)

            W= np.mean(Sj_square)

            grubin = round(float(np.sqrt(((L-1)*np.reciprocal(float(L))*W + np.reciprocal(float(L))*B)/W)), 4)
            grubin_dict[param]= grubin
            print("\nGelmen-rubin for 'param' %s all chains is: %s"%(param, grubin))

        return grubin_dict

    @staticmethod
    def stack_chains(hmc_sample_chains):
        """
        Input
        -------
        hmc_sample_chains: dictionary with chain names as keys & dictionary of parameter vs sampled values as values.

        Output
        -------
        dictionary with parameter names as keys & arrays shaped (num_chains, L), every chain cut to the shortest one.
        """
        param_chain_list= defaultdict(list)
        for chain, params_dict in hmc_sample_chains.items():
            for param, samples_arr in params_dict.items():
                param_chain_list[param].append(np.asarray(samples_arr, dtype=float))

        param_chains_sample_dict= {}
        for param, chain_list in param_chain_list.items():
            L = min(map(len, chain_list))# find minimum of the chain
            param_chains_sample_dict[param]= np.stack([samples_arr[:L] for samples_arr in chain_list], axis=0)
        return param_chains_sample_dict

    @staticmethod
    def gelman_rubin_stats(pruned_hmc_sample_chains):
        """
        Input
        -------
        pruned_hmc_sample_chains: dictionary with chain names as keys and
                                dictionary of parameter vs sampled values.
                                example: {'chain_0': {'alpha': array([-0.18649854, ..,-0.19441406]),
                                            'beta': array([-0.18322189, ..,-0.19441406])}}

        Output
        -------
        Returns gelman-rubin statistics value given hmcs samples.
        """
        return base.compute_grubin(base.stack_chains(pruned_hmc_sample_chains))

    @staticmethod
    def fit_summary(hmc_sample_chains, probs=(0.025, 0.25, 0.5, 0.75, 0.975)):
        """
        Input
        -------
        hmc_sample_chains: dictionary with chain names as keys & dictionary of parameter vs sampled values as values.
        probs: quantiles to report

        Output
        -------
        Summary table similar to printing a stan fit, parameters across rows:
        mean, se_mean, sd, quantiles, n_eff & Rhat.
        """
        summary_rows= {}
        for param, draws in base.stack_chains(hmc_sample_chains).items():
            draws_tensor= torch.tensor(draws)
            flat_draws= draws.ravel()
            n_eff= effective_sample_size(draws_tensor, chain_dim=0, sample_dim=1).item()
            r_hat= split_gelman_rubin(draws_tensor, chain_dim=0, sample_dim=1).item()
            sd= np.std(flat_draws, ddof=1)

            row= {"mean": np.mean(flat_draws), "se_mean": sd/np.sqrt(n_eff), "sd": sd}
            for prob in probs:
                row["%g%%"%(100*prob)]= np.quantile(flat_draws, prob)
            row.update({"n_eff": n_eff, "Rhat": r_hat})
            summary_rows[param]= row

        return pd.DataFrame.from_dict(summary_rows, orient="index").astype(float)

    @staticmethod
    def summary_stats_df(beta_chain_matrix_df, key_metrics):
        all_metric_func_map = lambda metric, vals: {"mean":np.mean(vals), "std":np.std(vals),
                                            "25%":np.quantile(vals, 0.25),
                                            "50%":np.quantile(vals, 0.50),
                                            "75%":np.quantile(vals, 0.75)}.get(metric)
        metric_dfs= []
        for metric in key_metrics:
            final_di = {}
            for column in beta_chain_matrix_df.columns:
                final_di[column]= dict(beta_chain_matrix_df[column].apply(lambda x: all_metric_func_map(metric, x)))
            metric_df_= pd.DataFrame(final_di)
            metric_df_.index.name= "parameter"
            metric_df_["metric"]= metric
            metric_dfs.append(metric_df_.reset_index())

        summary_stats_df= pd.concat(metric_dfs, axis=0)
        summary_stats_df.set_index(["metric", "parameter"], inplace=True)

        return summary_stats_df

    @staticmethod
    def summary_stats_df_2(fit_df, key_metrics):
        summary_stats_dfs= []
        parameters= sorted(set(fit_df.columns) - {"chain"})
        for param in parameters:
            for name, groupdf in fit_df.groupby("chain"):
                groupdi = dict(groupdf[param].describe())
                values = dict(map(lambda key:(key, [groupdi.get(key)]), key_metrics))

                values.update({"parameter": param, "chain":name})
                summary_stats_dfs.append(pd.DataFrame(values))
        summary_stats_df= pd.concat(summary_stats_dfs, axis=0)
        summary_stats_df.set_index(["parameter", "chain"], inplace=True)

        return summary_stats_df

    @staticmethod
    def summary(beta_chain_matrix_df, layout = 1):
        """
        Input
        -------
        beta_chain_matrix_df: parameter vs chain matrix (layout 1) or long fit dataframe with a 'chain' column (layout 2)

        Output
        -------
        Dropdown to view "mean", "std", "25%", "50%", "75%" or ALL of them.
        """
        key_metrics= ["mean", "std", "25%", "50%", "75%"]
        summarise= lambda metrics: base.summary_stats_df(beta_chain_matrix_df, metrics) if layout!=2 else base.summary_stats_df_2(beta_chain_matrix_df, metrics)

        print("Select any value")
        dropdown = widgets.Dropdown(options =key_metrics+ ["ALL"], index=None, description='Summarise')
        dropdown_output = widgets.Output()

        def dropdown_eventhandler(change):
            dropdown_output.clear_output()
            with dropdown_output:
                display(summarise(key_metrics if change.new == "ALL" else [change.new]))

        dropdown.observe(dropdown_eventhandler, names='value')
        display(dropdown)
        display(dropdown_output)

    @staticmethod
    def plot_parameters_for_n_chains(fit_df, chains=None, parameters=None, plotting_cap=[4, 3], plot_interactive=False):
        """
        Input
        --------
        chains: list of valid chain names, example - ["chain_0"].

        parameters: list of valid parameters names, example -["alpha", "beta", "sigma"].

        plotting_cap: list of Cap on number of chains & Cap on number of parameters to plot, example- [4, 3]
                    means cap the plotting of number of chains upto 4 & number of parameters upto 3 ONLY,
                    If at all the list size for Chains & parameters passed increases.

        plot_interactive: Flag for using Plotly if True, else Seaborn plots for False.


        output
        -------
        Plots box plots for each chain from list of chains with parameters on x axis.

        """
        chains= list(chains) if chains else list(fit_df["chain"].unique())
        parameters= list(parameters) if parameters else PARAMETERS
        chain_cap, param_cap = plotting_cap
        if len(chains) > chain_cap:
            print("Note: Cannot plot Number of chains greater than %s!, plotting %s"%(chain_cap, chains[:chain_cap]))
            chains= chains[:chain_cap]
        if len(parameters) > param_cap:
            print("Note: Cannot plot Number of parameters greater than %s!, plotting %s"%(param_cap, parameters[:param_cap]))
            parameters= parameters[:param_cap]

        for chain in chains:
            df_all_params_per_chain = fit_df.loc[fit_df["chain"]==chain, parameters].reset_index(drop=True)
            if df_all_params_per_chain.empty:
                print("Note: Chain number [%s] is Invalid in context of this model!"%chain)
                continue
            if plot_interactive:
                df_all_params_per_chain= df_all_params_per_chain.melt(var_name="parameters", value_name="values")
                fig = px.box(df_all_params_per_chain, x="parameters", y="values")
                fig.update_layout(height=600, width=900, title_text=f'{chain}')
                fig.show()
            else:
                sns.boxplot(data=df_all_params_per_chain)
                plt.title(f'{chain}')
                plt.show()

    @staticmethod
    def plot_joint_distribution(fit_df, parameters):
        all_combination_params = list(itertools.combinations(parameters, 2))
        for param_combo in all_combination_params:
            param1, param2= param_combo
            print("\nPyro -- %s"%(f'{param1} Vs. {param2}'))
            sns.jointplot(data=fit_df, x=param1, y=param2, hue= "chain")
            plt.title(f'{param1} Vs. {param2}')
            plt.show()

    @staticmethod
    def hexbin_plot(x, y, x_label, y_label):
        """

        Input
        -------
        x: Pandas series or list of values to plot on x axis.
        y: Pandas series or list of values to plot on y axis.
        x_label: variable name x label.
        y_label: variable name y label.


        Output
        -------
        Plot Hexbin correlation density plots for given values.


        """

        fig = plt.figure()
        ax = fig.add_subplot(1, 1, 1)
        ax.set_title('{} vs. {} correlation scatterplot'.format(x_label, y_label))
        hbin= ax.hexbin(x, y, gridsize=25, mincnt=1, cmap=plt.cm.Reds)
        cb = fig.colorbar(hbin, ax=ax)
        cb.set_label('occurence_density')
        plt.ylabel(y_label)
        plt.xlabel(x_label)
        plt.show()

    @staticmethod
    def plot_interaction_hexbins(fit_df, parameters=["alpha", "beta"]):
        all_combination_params = list(itertools.combinations(parameters, 2))
        for param1, param2 in all_combination_params:#Plots interaction between each of two parameters
            base.hexbin_plot(fit_df[param1], fit_df[param2], param1, param2)

    @staticmethod
    def plot_posterior_densities(parameters=None, **kwargs):
        """
        Input
        -------
        parameters: parameters to plot, default ["alpha", "beta", "sigma"]
        kwargs: dict of type {"model_name": fit_df}

        Output
        -------
        Overlays posterior kernel density of each parameter across models, returns the combined dataframe.
        """
        parameters= parameters if parameters else PARAMETERS
        model_dfs= []
        for model_name, fit_df in kwargs.items():
            model_df= fit_df.copy()
            model_df["model"]= model_name
            model_dfs.append(model_df)
        posterior_df= pd.concat(model_dfs, axis=0).reset_index(drop=True)

        sns.set_style("darkgrid")
        for param in parameters:
            plt.figure(figsize=(10,6))
            sns.kdeplot(data=posterior_df, x=param, hue="model", fill=True, common_norm=False)
            plt.title("Posterior density of '%s' for %s"%(param, list(kwargs.keys())))
            plt.show()

        return posterior_df

    @staticmethod
    def simulate_observations_given_param(x, parameter_pair_list= [(0., -0.42, 0.9)]):
        """
        Input
        -------
        x: tensor or array holding standardised weight, shaped (N,)
        parameter_pair_list: list of (alpha, beta, sigma) tuples

        Output
        --------
        array shaped (len(parameter_pair_list), N) of acceleration simulated as y ~ Normal(alpha + beta*x, sigma)
        """
        t1= time.time()
        x= torch.as_tensor(x, dtype=torch.float)
        simulated_data_given_pair = []

        for alpha, beta, sigma in parameter_pair_list:
            mu= float(alpha) + float(beta) * x# (N,)
            simulated_y= dist.Normal(mu, float(sigma)).sample()
            simulated_data_given_pair.append(simulated_y.numpy())

        total_time= time.time()- t1
        print("Total execution time: %s\n"%total_time)

        return np.stack(simulated_data_given_pair, axis=0)

    @staticmethod
    def simulate_observations_given_prior_posterior_pairs(x, num_draws=None, **kwargs):
        """
        Input
        -------
        x: tensor holding standardised weight
        num_draws: if given, count of parameter tuples picked at random from each model's samples
        kwargs: dict of type {"model_name": samples_dict}, samples_dict holding alpha, beta & sigma draws
                from the prior (`base.get_prior_samples`) or the posterior (`base.merge_chains`)

        Output
        --------
        dict of type {"model_name": simulated array shaped (draws, N)}
        """
        simulated_dict= {}
        for model_name, samples_dict in kwargs.items():
            print("___________\n\nFor model '%s'"%model_name)
            parameters_pairs = list(zip(*[samples_dict[param] for param in PARAMETERS]))
            if num_draws is not None and num_draws < len(parameters_pairs):
                parameters_pairs= random.sample(parameters_pairs, num_draws)
            print("total samples count:", len(parameters_pairs), " sample example: ", parameters_pairs[:2])
            simulated_dict[model_name]= base.simulate_observations_given_param(x, parameters_pairs)
        return simulated_dict

    @staticmethod
    def predictive_summary(x, simulated, probs=(0.025, 0.975)):
        """Predictive mean & interval per observation, sorted by x."""
        simulated= np.asarray(simulated, dtype=float)
        lower, upper= np.quantile(simulated, probs, axis=0)
        predictive_df= pd.DataFrame({"x": np.asarray(x, dtype=float), "mean": simulated.mean(axis=0),
                                    "lower": lower, "upper": upper})
        return predictive_df.sort_values("x").reset_index(drop=True)

    @staticmethod
    def plot_predictive_scatter(x, y, simulated, probs=(0.025, 0.975), title="Posterior predictive",
                                xaxis_title="weight (standardised)", yaxis_title="acceleration (standardised)"):
        """
        Input
        -------
        x, y: observed standardised predictor & response
        simulated: array shaped (draws, N) from `base.simulate_observations_given_param`

        Output
        -------
        plotly figure with the observations, the predictive mean & the predictive interval band.
        """
        predictive_df= base.predictive_summary(x, simulated, probs)
        band_name= "%g%% - %g%% interval"%(100*probs[0], 100*probs[1])

        fig= go.Figure()
        fig.add_trace(go.Scatter(x=np.asarray(x, dtype=float), y=np.asarray(y, dtype=float), mode='markers',
                                marker_color='rgba(31, 119, 180, 0.6)', name="observed"))
        fig.add_trace(go.Scatter(x=predictive_df["x"], y=predictive_df["upper"], mode='lines',
                                line_color='rgba(255,127,14,0)', showlegend=False))
        fig.add_trace(go.Scatter(x=predictive_df["x"], y=predictive_df["lower"], mode='lines', fill='tonexty',
                                fillcolor='rgba(255,127,14,0.2)', line_color='rgba(255,127,14,0)', name=band_name))
        fig.add_trace(go.Scatter(x=predictive_df["x"], y=predictive_df["mean"], mode='lines',
                                line_color='rgba(255,127,14,1)', name="predictive mean"))
        fig.update_layout(title=title, xaxis_title=xaxis_title, yaxis_title=yaxis_title, legend_title="Legend")
        fig.show()
        return fig

    @staticmethod
    def calculate_deviance_given_param(parameters, x, y):
        """

        Input
        -------
        parameters : dictionary containing values of parameters alpha, beta & sigma
        x: tensor holding standardised weight
        y: tensor holding standardised acceleration

        Output
        -------
        Computes deviance as D(Bt) = -2 * Summation of log likelihood of y given param 'Bt' over all the 'n' cases.

        """
        alpha, beta, sigma= [torch.as_tensor(parameters[param], dtype=torch.float) for param in PARAMETERS]
        D_bt= dist.Normal(alpha + beta * x, sigma).log_prob(y).sum()
        return -2*D_bt.item()

    @staticmethod
    def calculate_mean_deviance(samples, x, y):
        """
        Input
        -------
        samples : dictionary containing sampled values of parameters alpha, beta & sigma.

        Output
        -------
        Computes mean deviance as D(Bt)_bar, average of D(Bt) over each sampled Bt.

        """
        alpha, beta, sigma= [torch.as_tensor(np.asarray(samples[param]), dtype=torch.float).reshape((-1, 1)) for param in PARAMETERS]
        log_likelihood= dist.Normal(alpha + beta * x, sigma).log_prob(y).sum(dim=1)# shaped (samples,)
        return torch.mean(-2*log_likelihood).item()

    @staticmethod
    def DIC(sample_chains, x, y):
        """

        Input
        -------
        sample_chains : dictionary containing multiple chains of sampled values, with chain name as
                        key and sampled values of parameters alpha, beta & sigma.
        x: tensor holding standardised weight
        y: tensor holding standardised acceleration

        Output
        -------
        Computes DIC as 2 D(alpha, beta, sigma)_bar - D(alpha_bar, beta_bar, sigma_bar) per chain.

        returns dictionary of Deviance Information Criterion per chain.

        """
        dic_dict= {}
        for chain, samples in sample_chains.items():
            mean_parameters = dict(map(lambda param: (param, np.mean(samples.get(param))), PARAMETERS))
            D_mean_parameters = base.calculate_deviance_given_param(mean_parameters, x, y)

            D_Bt_mean = base.calculate_mean_deviance(samples, x, y)
            dic = round(2* D_Bt_mean - D_mean_parameters,3)
            dic_dict[chain]= dic
            print(". . .DIC for %s: %s"%(chain, dic))
        print("\n. .Mean Deviance information criterion for all chains: %s\n"%(round(np.mean(list(dic_dict.values())), 3)))
        return dic_dict

    @staticmethod
    def compare_DICs_given_model(x, y, **kwargs):
        """
        Input
        --------
        kwargs: dict of type {"model_name": sample_chains_dict}

        Output
        --------
        dictionary of mean DIC over chains for each model.
        """
        model_dics= {}
        for model_name, sample_chains in kwargs.items():
            print("%s\n\nFor model : %s"%("_"*30, model_name))
            model_dics[model_name]= round(float(np.mean(list(base.DIC(sample_chains, x, y).values()))), 3)
        return model_dics

    #Save & load button widgets
    @staticmethod
    def toggle_status(any_button, flag= 0):
        time.sleep(0.3)
        if flag:
            any_button.icon = "hourglass-half"
            any_button.button_style='warning'
        else:
            any_button.icon = any_button.description.lower()
            any_button.button_style="info"

    @staticmethod
    def save_main(save_button, param_chain_matrix_df, filepath):
        clear_output()
        param_chain_matrix_df.to_csv(filepath, index=False)
        display(save_button)
        base.toggle_status(save_button, 1)
        base.toggle_status(save_button, 0)
        print("Saved at '%s'"%filepath)

    @staticmethod
    def build_save_button():
        save_button = widgets.Button(
            description='Save',
            disabled=False,
            button_style='info',
            tooltip='save',
            icon="save"
        )
        return save_button

    @staticmethod
    def save_parameter_chain_dataframe(param_chain_matrix_df, filepath):
        save_button= base.build_save_button()
        save_func = lambda x: base.save_main(save_button, param_chain_matrix_df, filepath)
        save_button.on_click(save_func)
        display(save_button)

    @staticmethod
    def load_main(load_button):
        clear_output()
        for uploaded_file in load_button.value:
            filename= uploaded_file["name"]
            string_representation=bytes(uploaded_file["content"]).decode('utf-8')
            param_chain_matrix_df=pd.read_csv(StringIO(string_representation))

        base.toggle_status(load_button, 1)
        base.toggle_status(load_button, 0)
        print("Loaded '%s'"%filename)
        return param_chain_matrix_df

    @staticmethod
    def build_upload_button():
        load_button = widgets.FileUpload(accept='.csv',
                                    button_style='info',
                                    icon="upload",
                                    multiple=False)

        display(load_button)
        return load_button

    @staticmethod
    def load_parameter_chain_dataframe(load_button):
        if load_button.value:
            param_chain_matrix_df= base.load_main(load_button)
        else:
            param_chain_matrix_df= pd.DataFrame()
        return param_chain_matrix_df
