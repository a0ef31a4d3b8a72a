import yaml
import re
from pathlib import Path
from typing import Any, Dict, Union

from pathassign.util.validation import (
    check_number,
    check_bool
)

DEFAULT_CONFIG = {
    "iter": 2000,
    "adaptive_B": True,
    "adaptive_S": False,
    "mixture_beta": True,
    "sigma_sZero": 0.01,
    "sigma_sNonZero": 1.0,
    "p_beta": 0.01,
    "sigma_bZero": 0.01,
    "sigma_bNonZero": 1.0,
    "alpha_tau": 1.0,
    "beta_tau": 0.01,
    "Bg_zeroPrior": True,
    "S_zeroPrior": False,
    "ECM": False,
    "progress_bar": True,
}

# key -> kwargs for check_number
_NUMERIC_KEYS = {
    "iter": dict(cast_type=int, min_allowed=1),
    "sigma_sZero": dict(min_allowed=0, inclusive_min=False),
    "sigma_sNonZero": dict(min_allowed=0, inclusive_min=False),
    "p_beta": dict(min_allowed=0, max_allowed=1,
                   inclusive_min=False, inclusive_max=False),
    "sigma_bZero": dict(min_allowed=0, inclusive_min=False),
    "sigma_bNonZero": dict(min_allowed=0, inclusive_min=False),
    "alpha_tau": dict(min_allowed=0, inclusive_min=False),
    "beta_tau": dict(min_allowed=0, inclusive_min=False),
}

_BOOL_KEYS = ["adaptive_B", "adaptive_S", "mixture_beta", "Bg_zeroPrior",
              "S_zeroPrior", "ECM", "progress_bar"]

# YAML 1.1 reads "1e-2" as a string
_SCI_NOTATION = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)$')


def _sci_to_float(node):
    """
    Convert strings in scientific notation to floats, recursing through
    dicts and lists.
    """

    if isinstance(node, dict):
        return {k: _sci_to_float(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_sci_to_float(v) for v in node]
    if isinstance(node, str) and _SCI_NOTATION.match(node):
        return float(node)

    return node


def _load_yaml(path) -> dict:

    try:
        with open(path, "r") as f:
            loaded = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise FileNotFoundError(
            f"Configuration file not found at '{path}'"
        ) from e
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML file '{path}': {e}") from e

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise ValueError(f"'{path}' must hold a mapping of sampler settings.")

    return _sci_to_float(loaded)


def read_config(cf: Union[Dict[str, Any], str, Path, None] = None,
                override_keys: Union[dict, None] = None) -> dict:
    """
    Build a validated sampler configuration.

    Parameters
    ----------
    cf : dict or str or pathlib.Path, optional
        Settings to apply over `DEFAULT_CONFIG`. Either a dictionary or a
        path to a YAML file holding a flat mapping of settings. If None,
        the defaults are used.
    override_keys : dict, optional
        Settings applied after `cf` (keyword arguments to `run_mcmc` end up
        here).

    Returns
    -------
    dict
        A complete configuration with every key in `DEFAULT_CONFIG`,
        validated and cast.

    Raises
    ------
    ValueError
        If a key is unknown or a value is out of range. The message names
        the offending parameter.
    """

    config = dict(DEFAULT_CONFIG)

    if cf is not None:
        if not isinstance(cf, dict):
            cf = _load_yaml(cf)
        config.update(cf)

    if override_keys is not None:
        config.update(override_keys)

    unknown = [k for k in config if k not in DEFAULT_CONFIG]
    if len(unknown) > 0:
        err = f"unrecognized sampler setting(s): {', '.join(map(str, unknown))}"
        raise ValueError(err)

    for key, kwargs in _NUMERIC_KEYS.items():
        config[key] = check_number(config[key], param_name=key, **kwargs)

    for key in _BOOL_KEYS:
        config[key] = check_bool(config[key], param_name=key)

    return config
