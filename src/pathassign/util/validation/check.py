import numpy as np
import pandas as pd
from typing import Any, Callable, Optional, Tuple, TypeVar

# Define a generic Numeric type for hinting
_Numeric = TypeVar("_Numeric", int, float)

def check_number(
    value: Any,
    param_name: Optional[str] = None,
    cast_type: Callable[[Any], _Numeric] = float,
    min_allowed: Optional[_Numeric] = None,
    max_allowed: Optional[_Numeric] = None,
    inclusive_min: bool = True,
    inclusive_max: bool = True,
    allow_none: bool = False,
) -> Optional[_Numeric]:
    """
    Validate and cast a scalar sampler setting (variance, probability,
    iteration count...).

    Parameters
    ----------
    value : Any
        The value to validate.
    param_name : str, optional
        The name of the parameter being checked, used for error messages.
    cast_type : Callable, default: float
        A function to cast the value to (e.g., `int`, `float`). When
        casting to `int`, values with a fractional part are rejected rather
        than silently truncated.
    min_allowed : int or float, optional
        The minimum allowed value. If None, no minimum is enforced.
    max_allowed : int or float, optional
        The maximum allowed value. If None, no maximum is enforced.
    inclusive_min : bool, default: True
        Whether the minimum bound is inclusive (value >= min_allowed).
    inclusive_max : bool, default: True
        Whether the maximum bound is inclusive (value <= max_allowed).
    allow_none : bool, default: False
        If True, a `value` of None is returned as None.

    Returns
    -------
    _Numeric or None
        The cast and validated value.

    Raises
    ------
    ValueError
        If the value is None (and not `allow_none`), is not a finite
        scalar, fails to cast, or falls outside the allowed range.
    """

    if value is None:
        if allow_none:
            return None
        raise ValueError(f"{param_name} cannot be None")

    try:
        if not np.isscalar(value) or isinstance(value, (str, bytes)):
            raise TypeError("Value must be a numeric scalar.")

        # bool is an int subclass; True is not an iteration count
        if isinstance(value, (bool, np.bool_)):
            raise TypeError("Value must be a number, not a bool.")

        if not np.isfinite(value):
            raise ValueError("Value must be finite.")

        if cast_type is int and float(value) != int(value):
            raise ValueError("Value must be a whole number.")

        v_cast = cast_type(value)

        if min_allowed is not None:
            if inclusive_min and v_cast < min_allowed:
                raise ValueError(f"Value must be >= {min_allowed}.")
            if not inclusive_min and v_cast <= min_allowed:
                raise ValueError(f"Value must be > {min_allowed}.")
        if max_allowed is not None:
            if inclusive_max and v_cast > max_allowed:
                raise ValueError(f"Value must be <= {max_allowed}.")
            if not inclusive_max and v_cast >= max_allowed:
                raise ValueError(f"Value must be < {max_allowed}.")

    except (ValueError, TypeError) as e:
        raise ValueError(
            f"Could not process parameter '{param_name}' with value '{value}'.\n"
            f"Reason: {e}"
        ) from e

    return v_cast


def check_bool(value: Any, param_name: Optional[str] = None) -> bool:
    """
    Make sure a mode flag is really a boolean. Strings like "False" are
    rejected because they are truthy.
    """

    if isinstance(value, (bool, np.bool_)):
        return bool(value)

    raise ValueError(
        f"Could not process parameter '{param_name}' with value '{value}'.\n"
        "Reason: Value must be True or False."
    )


def check_matrix(
    value: Any,
    param_name: Optional[str] = None,
    ndim: int = 2,
    shape: Optional[Tuple[Optional[int], ...]] = None,
    min_allowed: Optional[float] = None,
    max_allowed: Optional[float] = None,
    inclusive: bool = True,
) -> np.ndarray:
    """
    Validate a numeric vector or matrix input.

    Parameters
    ----------
    value : array_like or pandas.DataFrame or pandas.Series
        The array to validate. pandas objects are converted with their
        values; labels are handled by the caller.
    param_name : str, optional
        The name of the parameter being checked, used for error messages.
    ndim : int, default: 2
        Required number of dimensions. A 2D array with a single column is
        accepted when ``ndim == 1`` (a one-column data frame of baseline
        values, for example).
    shape : tuple, optional
        Required shape. Entries that are None are not checked.
    min_allowed, max_allowed : float, optional
        Bounds that every element must respect.
    inclusive : bool, default: True
        Whether the bounds are inclusive.

    Returns
    -------
    np.ndarray
        A float copy of the input.

    Raises
    ------
    ValueError
        If the input cannot be made into a finite float array of the
        requested dimensions, shape and range.
    """

    if value is None:
        raise ValueError(f"{param_name} cannot be None")

    if isinstance(value, (pd.DataFrame, pd.Series)):
        value = value.to_numpy()

    try:
        arr = np.array(value, dtype=float)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"'{param_name}' could not be converted to a numeric array.\n"
            f"Reason: {e}"
        ) from e

    if ndim == 1 and arr.ndim == 2 and arr.shape[1] == 1:
        arr = arr[:, 0]

    if arr.ndim != ndim:
        err = f"'{param_name}' must have {ndim} dimension(s), not {arr.ndim}."
        raise ValueError(err)

    if shape is not None:
        for i, (expected, found) in enumerate(zip(shape, arr.shape)):
            if expected is not None and expected != found:
                err = (f"'{param_name}' has shape {arr.shape}, but dimension "
                       f"{i} must have length {expected}.")
                raise ValueError(err)

    if arr.size == 0:
        raise ValueError(f"'{param_name}' cannot be empty.")

    if not np.all(np.isfinite(arr)):
        raise ValueError(f"'{param_name}' contains NaN or infinite values.")

    if min_allowed is not None:
        bad = arr < min_allowed if inclusive else arr <= min_allowed
        if np.any(bad):
            op = ">=" if inclusive else ">"
            raise ValueError(f"all values in '{param_name}' must be {op} {min_allowed}.")

    if max_allowed is not None:
        bad = arr > max_allowed if inclusive else arr >= max_allowed
        if np.any(bad):
            op = "<=" if inclusive else "<"
            raise ValueError(f"all values in '{param_name}' must be {op} {max_allowed}.")

    return arr
