from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

import numpy as np
from typing_extensions import override

from genpos.base import EQ_TOL_ABS, EQ_TOL_REL, validate_tolerance
from genpos.point import PointCollection
from genpos.utils import nearly_equal, orientation_terms, tolerance_radius

if TYPE_CHECKING:
    from genpos.utils.typing import FloatArray, Method, PointSetLike

logger = logging.getLogger(__name__)


class GeneralPositionChecker(ABC):
    """Base class of algorithms that decide whether a set of planar points is in general position.

    A set of points is in general position if no three of its points are collinear. Sets with less than three points
    are always in general position. A point that occurs twice makes a set of three or more points degenerate.

    Checkers hold no state apart from their tolerance, so a single instance can be used for any number of
    (concurrent) evaluations.

    Args:
        rtol: The relative tolerance parameter used for all floating point comparisons.
        atol: The absolute tolerance parameter used for all floating point comparisons.

    Raises:
        ConfigurationError: If the tolerance parameters are invalid.

    """

    name: ClassVar[str]

    def __init__(self, rtol: float = EQ_TOL_REL, atol: float = EQ_TOL_ABS) -> None:
        self.rtol, self.atol = validate_tolerance(rtol, atol)

    def is_general_position(self, points: PointSetLike) -> bool:
        """Tests whether no three of the given points are collinear.

        Args:
            points: The points to test.

        Returns:
            True if the points are in general position.

        Raises:
            InvalidInputError: If any coordinate is not a finite real number.
            IncompatibleShapeError: If the data can't be interpreted as planar points.

        """
        array = PointCollection(points).array
        logger.debug("Checking %d points for general position using %s", len(array), self.name)

        if len(array) < 3:
            return True

        return self._is_general_position(array)

    def __call__(self, points: PointSetLike) -> bool:
        return self.is_general_position(points)

    @abstractmethod
    def _is_general_position(self, points: FloatArray) -> bool:
        """Runs the algorithm on a validated array of at least three points."""

    @override
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rtol={self.rtol!r}, atol={self.atol!r})"


class BruteForceChecker(GeneralPositionChecker):
    """Tests all triples of points for collinearity in O(n^3) time.

    For every pair (i, j) the orientation of all points k > j relative to the points i and j is computed at once,
    which needs O(n) extra memory for the orientation terms. The evaluation stops at the first collinear triple.

    """

    name = "brute_force"

    @override
    def _is_general_position(self, points: FloatArray) -> bool:
        n = len(points)
        for i in range(n - 2):
            for j in range(i + 1, n - 1):
                left, right = orientation_terms(points[i], points[j], points[j + 1 :])
                collinear = nearly_equal(left, right, rtol=self.rtol, atol=self.atol)
                if np.any(collinear):
                    k = j + 1 + int(np.argmax(collinear))
                    logger.debug("Points %d, %d and %d are collinear", i, j, k)
                    return False
        return True


class DualityChecker(GeneralPositionChecker):
    """Tests for collinear triples in O(n^2 log n) time using point-line duality.

    Every point (a, b) is mapped to its dual line y = a x - b. Three points are collinear if and only if their dual
    lines meet in a common point. So the points are in general position if and only if no two pairs of dual lines
    share their point of intersection.

    Intersections are compared with a tolerance that scales with the magnitude of the slopes and intercepts they
    were computed from, see :meth:`DualLineCollection.pairwise_meet`.

    Dual lines of points with equal x-coordinates are parallel and meet at infinity, in the direction given by their
    common slope. These intersections are compared among themselves only. Duplicate points have identical dual lines,
    which makes the set degenerate.

    """

    name = "duality"

    @override
    def _is_general_position(self, points: FloatArray) -> bool:
        lines = PointCollection(points).dual
        meets, scale = lines.pairwise_meet(rtol=self.rtol, atol=self.atol, return_scale=True)
        pairs = np.stack(np.triu_indices(len(points), 1), axis=-1)

        at_infinity = meets[:, 2] == 0
        identical = at_infinity & (meets[:, 0] == 0)

        if np.any(identical):
            i, j = pairs[np.argmax(identical)]
            logger.debug("Points %d and %d are equal", i, j)
            return False

        for mask, coordinates, coordinate_scale in (
            (~at_infinity, meets[:, :2], scale),
            (at_infinity, meets[:, 1:2], scale[:, 1:2]),
        ):
            duplicate = _find_close_duplicate(
                coordinates[mask], coordinate_scale[mask], rtol=self.rtol, atol=self.atol
            )
            if duplicate is not None:
                p, q = pairs[mask][list(duplicate)]
                logger.debug(
                    "Dual lines of the pairs %s and %s meet in the same point", tuple(p.tolist()), tuple(q.tolist())
                )
                return False

        return True


def _find_close_duplicate(
    coordinates: FloatArray, scale: FloatArray, rtol: float, atol: float
) -> tuple[int, int] | None:
    """Finds two rows of an (N, d) array that are equal within the given tolerance.

    Two rows are equal if every coordinate differs by at most the larger of the two tolerance radii, see
    :func:`~genpos.utils.tolerance_radius`. The rows are sorted lexicographically and only rows whose first
    coordinates are close are compared, which takes O(N log N) time unless many rows share the same first coordinate.

    Args:
        coordinates: (N, d) The rows to compare.
        scale: (N, d) The magnitude of the operands each coordinate was computed from.
        rtol: The relative tolerance parameter.
        atol: The absolute tolerance parameter.

    Returns:
        The indices of two such rows or None if all rows are distinct.

    """
    if len(coordinates) < 2:
        return None

    order = np.lexsort(coordinates.T[::-1])
    ordered = coordinates[order]
    radius = tolerance_radius(ordered, scale[order], rtol=rtol, atol=atol)
    finite = np.all(np.isfinite(ordered), axis=-1)

    for offset in range(1, len(ordered)):
        with np.errstate(invalid="ignore"):
            distance = np.abs(ordered[offset:] - ordered[:-offset])
            close = distance <= np.maximum(radius[offset:], radius[:-offset])
        # the first coordinates are sorted, so no row is close to a row further away once none is at this offset
        if not np.any(close[:, 0]):
            break
        equal = np.all(close, axis=-1) & finite[offset:] & finite[:-offset]
        if np.any(equal):
            index = int(np.argmax(equal))
            return int(order[index]), int(order[index + offset])

    return None


def brute_force_general_position(points: PointSetLike, rtol: float = EQ_TOL_REL, atol: float = EQ_TOL_ABS) -> bool:
    """Tests whether the given points are in general position by checking all triples of points.

    Args:
        points: The points to test.
        rtol: The relative tolerance parameter.
        atol: The absolute tolerance parameter.

    Returns:
        True if no three points are collinear.

    """
    return BruteForceChecker(rtol=rtol, atol=atol)(points)


def duality_general_position(points: PointSetLike, rtol: float = EQ_TOL_REL, atol: float = EQ_TOL_ABS) -> bool:
    """Tests whether the given points are in general position by intersecting their dual lines.

    Args:
        points: The points to test.
        rtol: The relative tolerance parameter.
        atol: The absolute tolerance parameter.

    Returns:
        True if no three points are collinear.

    """
    return DualityChecker(rtol=rtol, atol=atol)(points)


_CHECKERS: dict[str, type[GeneralPositionChecker]] = {
    BruteForceChecker.name: BruteForceChecker,
    DualityChecker.name: DualityChecker,
}


def is_general_position(
    points: PointSetLike, method: Method = "duality", rtol: float = EQ_TOL_REL, atol: float = EQ_TOL_ABS
) -> bool:
    """Tests whether no three of the given points are collinear.

    Args:
        points: The points to test.
        method: The algorithm to use, either "brute_force" or "duality".
        rtol: The relative tolerance parameter.
        atol: The absolute tolerance parameter.

    Returns:
        True if the points are in general position.

    Raises:
        ValueError: If the method is unknown.

    """
    try:
        checker = _CHECKERS[method]
    except KeyError:
        raise ValueError(f"Unknown method {method!r}, expected one of {sorted(_CHECKERS)}") from None

    return checker(rtol=rtol, atol=atol)(points)
