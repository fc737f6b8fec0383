from types import SimpleNamespace

import pandas as pd

from chapter04 import base


def test_save_main_writes_csv(tmp_path, hmc_sample_chains):
    fit_df = base.build_fit_df(hmc_sample_chains)
    filepath = tmp_path / "auto_hmc_samples_A.csv"
    save_button = base.build_save_button()

    base.save_main(save_button, fit_df, str(filepath))

    saved_df = pd.read_csv(filepath)
    assert list(saved_df.columns) == ["alpha", "beta", "sigma", "chain"]
    assert len(saved_df) == len(fit_df)
    assert save_button.button_style == "info"


def test_load_parameter_chain_dataframe_reads_upload():
    content = memoryview(b"alpha,beta,sigma,chain\n0.01,-0.42,0.91,chain_0\n-0.02,-0.40,0.89,chain_1\n")
    load_button = SimpleNamespace(value=({"name": "auto_hmc_samples_A.csv", "content": content},),
                                  description="Upload", icon="upload", button_style="info")

    fit_df = base.load_parameter_chain_dataframe(load_button)

    assert fit_df["chain"].tolist() == ["chain_0", "chain_1"]
    assert fit_df["beta"].tolist() == [-0.42, -0.40]


def test_load_parameter_chain_dataframe_without_upload_is_empty():
    fit_df = base.load_parameter_chain_dataframe(SimpleNamespace(value=()))

    assert fit_df.empty


def test_upload_button_value_is_a_tuple_of_files():
    load_button = base.build_upload_button()

    assert load_button.value == ()
    assert base.load_parameter_chain_dataframe(load_button).empty
