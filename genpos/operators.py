from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from genpos.base import EQ_TOL_ABS, EQ_TOL_REL, validate_tolerance
from genpos.point import DualLine, Point
from genpos.utils import det_terms, nearly_equal, orientation_terms

if TYPE_CHECKING:
    from genpos.utils.typing import PointLike


def is_collinear(
    a: PointLike, b: PointLike, c: PointLike, rtol: float = EQ_TOL_REL, atol: float = EQ_TOL_ABS
) -> bool:
    """Tests whether three points lie on a common line.

    The points :math:`(x_1, y_1), (x_2, y_2), (x_3, y_3)` are collinear if and only if

    .. math::

        (x_2 - x_1)(y_3 - y_1) = (y_2 - y_1)(x_3 - x_1).

    Both sides are compared with :func:`~genpos.utils.nearly_equal`, so vertical lines need no special treatment and
    a triple containing a repeated point is always collinear.

    Args:
        a, b, c: The points to test.
        rtol: The relative tolerance parameter.
        atol: The absolute tolerance parameter.

    Returns:
        True if the points are collinear.

    Raises:
        ConfigurationError: If the tolerance parameters are invalid.

    """
    rtol, atol = validate_tolerance(rtol, atol)
    left, right = orientation_terms(Point(a).array, Point(b).array, Point(c).array)
    return bool(nearly_equal(left, right, rtol=rtol, atol=atol))


def is_concurrent(
    l: DualLine, m: DualLine, n: DualLine, rtol: float = EQ_TOL_REL, atol: float = EQ_TOL_ABS
) -> bool:
    """Tests whether three lines pass through a common point.

    The common point may lie at infinity, i.e. three parallel lines are concurrent. The determinant of the
    homogeneous coordinates of the lines vanishes exactly for concurrent lines, its positive and negative terms are
    compared with :func:`~genpos.utils.nearly_equal`.

    Args:
        l, m, n: The lines to test.
        rtol: The relative tolerance parameter.
        atol: The absolute tolerance parameter.

    Returns:
        True if the lines are concurrent.

    Raises:
        ConfigurationError: If the tolerance parameters are invalid.

    """
    rtol, atol = validate_tolerance(rtol, atol)
    positive, negative = det_terms(np.stack([l.array, m.array, n.array]))
    return bool(nearly_equal(positive, negative, rtol=rtol, atol=atol))
