from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from genpos.base import EQ_TOL_ABS, EQ_TOL_REL, MAX_COORDINATE
from genpos.exceptions import IncompatibleShapeError, InvalidInputError

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

    from genpos.utils.typing import FloatArray, NumericalDType


def is_numerical_dtype(dtype: npt.DTypeLike) -> TypeGuard[NumericalDType]:
    """Checks whether a dtype is a numerical dtype i.e. a number or a bool.

    Args:
        dtype: The dtype to check.

    Returns:
        True if the dtype is a numeric dtype

    """
    dtype = np.dtype(dtype)
    return np.issubdtype(dtype, np.number) or np.issubdtype(dtype, np.bool_)


def _assert_numerical_array(a: np.ndarray) -> None:
    if not is_numerical_dtype(a.dtype):
        raise TypeError(f"The input array must have a numeric dtype not {a.dtype.name}")


def _assert_real_array(a: np.ndarray) -> None:
    _assert_numerical_array(a)
    if np.issubdtype(a.dtype, np.complexfloating):
        raise InvalidInputError("Point coordinates must be real numbers, got complex values.")


def _assert_finite_array(a: np.ndarray) -> None:
    finite = np.isfinite(a)
    if not np.all(finite):
        bad = np.unique(np.argwhere(~finite)[:, 0])
        raise InvalidInputError(f"Point coordinates must be finite, got non-finite values at indices {bad.tolist()}")

    too_large = np.abs(a) > MAX_COORDINATE
    if np.any(too_large):
        bad = np.unique(np.argwhere(too_large)[:, 0])
        raise InvalidInputError(
            f"Point coordinates must not exceed {MAX_COORDINATE:g} in absolute value, got larger values at indices "
            f"{bad.tolist()}"
        )


def as_point_array(points: npt.ArrayLike | Iterable[npt.ArrayLike]) -> FloatArray:
    """Converts point data to a validated float array of shape (n, 2).

    Args:
        points: A sequence of (x, y) pairs, an array of shape (n, 2) or any object implementing ``__array__``
            like a `PointCollection`. Sequences may also contain objects implementing ``__array__`` like a `Point`.

    Returns:
        A new float array of shape (n, 2).

    Raises:
        TypeError: If the data is not numeric.
        IncompatibleShapeError: If the data can't be interpreted as an array of planar points.
        InvalidInputError: If any coordinate is complex, not finite or larger than `MAX_COORDINATE` in absolute
            value. Products of differences of larger coordinates would overflow.

    """
    if isinstance(points, np.ndarray) or hasattr(points, "__array__"):
        a = np.asarray(points)
    else:
        items = [np.asarray(p) for p in points]  # type: ignore[union-attr]
        if len(items) == 0:
            return np.empty((0, 2), dtype=np.float64)
        if any(item.shape != (2,) for item in items):
            raise IncompatibleShapeError("Every point must consist of exactly two coordinates.")
        a = np.stack(items)

    _assert_real_array(a)

    if a.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if a.ndim != 2 or a.shape[1] != 2:
        raise IncompatibleShapeError(f"Expected point data of shape (n, 2), got an array of shape {a.shape}.")

    a = a.astype(np.float64)
    _assert_finite_array(a)
    return a


def tolerance_radius(
    a: npt.ArrayLike,
    scale: npt.ArrayLike = 0,
    rtol: float = EQ_TOL_REL,
    atol: float = EQ_TOL_ABS,
) -> npt.NDArray[np.float64]:
    r"""Calculates how far a value may be from another value that is considered equal to it.

    .. math::

        r = \textrm{atol} + \textrm{rtol} \cdot \max(|a|, s)

    The scale s is the magnitude of the operands that a was computed from. If a is the result of a cancellation,
    e.g. a difference of two large numbers, its rounding error is proportional to s and not to |a|.

    Args:
        a: The values.
        scale: The magnitude of the operands of the computation that gave a, broadcast against a.
        rtol: The relative tolerance parameter.
        atol: The absolute tolerance parameter.

    Returns:
        The tolerance radius of each value.

    """
    a = np.asarray(a, dtype=np.float64)
    return atol + rtol * np.maximum(np.abs(a), np.abs(scale))


def nearly_equal(
    a: npt.ArrayLike,
    b: npt.ArrayLike,
    rtol: float = EQ_TOL_REL,
    atol: float = EQ_TOL_ABS,
    scale: npt.ArrayLike = 0,
) -> np.bool_ | npt.NDArray[np.bool_]:
    r"""Returns a boolean array where two arrays are element-wise equal within a tolerance.

    Unlike :func:`numpy.isclose` the comparison is symmetric in a and b:

    .. math::

        |a - b| \leq \textrm{atol} + \textrm{rtol} \cdot \max(|a|, |b|, s)

    Non-finite values are never considered equal to anything, including themselves.

    Args:
        a, b: Numeric input arrays to compare.
        rtol: The relative tolerance parameter.
        atol: The absolute tolerance parameter.
        scale: The magnitude s of the operands that a and b were computed from, see :func:`tolerance_radius`.

    Returns:
        A boolean array of where a and b are equal within the given tolerance. If a and b are scalars, a single
        boolean value is returned.

    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)

    with np.errstate(invalid="ignore", over="ignore"):
        radius = np.maximum(tolerance_radius(a, scale, rtol, atol), tolerance_radius(b, scale, rtol, atol))
        result = np.abs(a - b) <= radius

    return result & np.isfinite(a) & np.isfinite(b)


def orientation_terms(
    a: npt.ArrayLike, b: npt.ArrayLike, c: npt.ArrayLike
) -> tuple[FloatArray | np.float64, FloatArray | np.float64]:
    """Calculates the two products whose difference is the signed double area of the triangle (a, b, c).

    For points :math:`a=(x_1, y_1)`, :math:`b=(x_2, y_2)` and :math:`c=(x_3, y_3)` these are
    :math:`(x_2-x_1)(y_3-y_1)` and :math:`(y_2-y_1)(x_3-x_1)`. The points are collinear if and only if both
    products are equal. Comparing them instead of their difference against zero makes the tolerance scale with
    the magnitude of the operands.

    Args:
        a, b, c: (..., 2) The points.

    Returns:
        The two products, broadcast against each other.

    """
    a, b, c = np.asarray(a), np.asarray(b), np.asarray(c)
    ab = b - a
    ac = c - a
    return ab[..., 0] * ac[..., 1], ab[..., 1] * ac[..., 0]


def _assert_square_matrix(a: np.ndarray) -> None:
    _assert_numerical_array(a)
    if a.ndim < 2:
        raise np.linalg.LinAlgError(f"{a.ndim}-dimensional array given. Array must be at least two-dimensional")
    m, n = a.shape[-2:]
    if m != n:
        raise np.linalg.LinAlgError(f"Last 2 dimensions of the array must be square not ({m},{n})")


def det_terms(A: npt.ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    """Splits the determinant of a 3x3 matrix into the sums of its positive and negative Leibniz terms.

    The determinant is the difference of the two sums.

    Args:
        A: (..., 3, 3) The input matrix.

    Returns:
        (...) The sums of the terms belonging to even and odd permutations.

    """
    A = np.asarray(A)
    _assert_square_matrix(A)
    if A.shape[-1] != 3:
        raise np.linalg.LinAlgError(f"Expected matrices of shape (3, 3), got {A.shape[-2:]}")

    positive = (
        A[..., 0, 0] * A[..., 1, 1] * A[..., 2, 2]
        + A[..., 0, 1] * A[..., 1, 2] * A[..., 2, 0]
        + A[..., 0, 2] * A[..., 1, 0] * A[..., 2, 1]
    )
    negative = (
        A[..., 2, 0] * A[..., 1, 1] * A[..., 0, 2]
        + A[..., 2, 1] * A[..., 1, 2] * A[..., 0, 0]
        + A[..., 2, 2] * A[..., 1, 0] * A[..., 0, 1]
    )
    return positive, negative
