from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence, Sized
from typing import TYPE_CHECKING, Literal, overload

import numpy as np
import numpy.typing as npt
from typing_extensions import Self, override

from genpos.base import EQ_TOL_ABS, EQ_TOL_REL
from genpos.exceptions import IncompatibleShapeError, LinearDependenceError, NoIntersection
from genpos.utils import as_point_array, nearly_equal

if TYPE_CHECKING:
    from genpos.utils.typing import FloatArray, PointLike, PointSetLike


def _read_only(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


class Point:
    """Represents an immutable point in the real plane.

    Points compare equal if their coordinates are equal within the default tolerance of the package. Because that
    relation is not transitive, points are not hashable.

    Args:
        *args: A single iterable object with two coordinates or the two coordinates x and y.

    Attributes:
        array: The read-only coordinate array of shape (2,).

    """

    __slots__ = ("array",)

    array: FloatArray

    def __init__(self, *args: PointLike | float) -> None:
        data = args[0] if len(args) == 1 else args
        array = as_point_array([data])
        object.__setattr__(self, "array", _read_only(array[0]))

    @override
    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{self.__class__.__name__} objects are immutable")

    @property
    def x(self) -> float:
        return float(self.array[0])

    @property
    def y(self) -> float:
        return float(self.array[1])

    @property
    def dual(self) -> DualLine:
        """The dual line :math:`y = a x - b` of the point :math:`(a, b)`."""
        return DualLine(self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __array__(self, dtype: npt.DTypeLike | None = None, copy: bool | None = None) -> np.ndarray:
        if dtype is not None and dtype != self.array.dtype:
            return self.array.astype(dtype)
        if copy:
            return self.array.copy()
        return self.array

    @override
    def __eq__(self, other: object) -> bool:
        if isinstance(other, Point):
            other = other.array
        other = np.asanyarray(other)
        if other.shape != (2,):
            return False
        try:
            return bool(np.all(nearly_equal(self.array, other)))
        except (TypeError, ValueError):
            return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    @override
    def __repr__(self) -> str:
        return f"Point({self.x!r}, {self.y!r})"


class PointCollection(Sized, Iterable[Point]):
    """An ordered, immutable collection of points in the real plane.

    The order of the points is kept, so that pairs and triples of points are always enumerated in the same order.

    Args:
        points: A sequence of points or (x, y) pairs, an array of shape (n, 2) or another collection.

    Attributes:
        array: The read-only coordinate array of shape (n, 2).

    Raises:
        IncompatibleShapeError: If the data can't be interpreted as planar points.
        InvalidInputError: If any coordinate is complex or not finite.

    """

    array: FloatArray

    def __init__(self, points: PointSetLike = ()) -> None:
        if isinstance(points, PointCollection):
            self.array = points.array
        else:
            self.array = _read_only(as_point_array(points))

    @classmethod
    def from_array(cls, array: npt.ArrayLike) -> Self:
        """Constructs a collection from an array of shape (n, 2)."""
        return cls(np.asarray(array))

    @property
    def dual(self) -> DualLineCollection:
        """The dual lines of all points in the collection, in the same order."""
        return DualLineCollection(self.array[:, 0], -self.array[:, 1])

    @override
    def __len__(self) -> int:
        return self.array.shape[0]

    @override
    def __iter__(self) -> Iterator[Point]:
        for row in self.array:
            yield Point(row)

    @overload
    def __getitem__(self, index: int) -> Point: ...

    @overload
    def __getitem__(self, index: slice | Sequence[int] | npt.NDArray[np.int_]) -> PointCollection: ...

    def __getitem__(self, index: int | slice | Sequence[int] | npt.NDArray[np.int_]) -> Point | PointCollection:
        if isinstance(index, (int, np.integer)):
            return Point(self.array[index])
        return PointCollection(self.array[index])

    def __array__(self, dtype: npt.DTypeLike | None = None, copy: bool | None = None) -> np.ndarray:
        if dtype is not None and dtype != self.array.dtype:
            return self.array.astype(dtype)
        if copy:
            return self.array.copy()
        return self.array

    @override
    def __eq__(self, other: object) -> bool:
        if isinstance(other, PointCollection):
            other = other.array
        other = np.asanyarray(other)
        if self.array.shape != other.shape:
            return False
        try:
            return bool(np.all(nearly_equal(self.array, other)))
        except (TypeError, ValueError):
            return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    @override
    def __repr__(self) -> str:
        return f"PointCollection({self.array.tolist()})"


class DualLine:
    """Represents the non-vertical line :math:`y = m x + c` that is dual to the point :math:`(m, -c)`.

    A collinear triple of points corresponds to three dual lines passing through a common point, which is finite if
    the points lie on a non-vertical line and at infinity otherwise.

    Args:
        slope: The slope m of the line.
        intercept: The y-intercept c of the line.

    """

    __slots__ = ("slope", "intercept")

    slope: float
    intercept: float

    def __init__(self, slope: float, intercept: float) -> None:
        ((slope, intercept),) = as_point_array([(slope, intercept)])
        object.__setattr__(self, "slope", float(slope))
        object.__setattr__(self, "intercept", float(intercept))

    @override
    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{self.__class__.__name__} objects are immutable")

    @property
    def array(self) -> FloatArray:
        """The homogeneous coordinates :math:`(m, -1, c)` of the line."""
        return np.array([self.slope, -1.0, self.intercept])

    @property
    def dual(self) -> Point:
        """The point this line is dual to."""
        return Point(self.slope, -self.intercept)

    def __call__(self, x: float) -> float:
        return self.slope * x + self.intercept

    def contains(self, point: PointLike, rtol: float = EQ_TOL_REL, atol: float = EQ_TOL_ABS) -> bool:
        """Tests whether a point lies on the line.

        Args:
            point: The point to test.
            rtol: The relative tolerance parameter.
            atol: The absolute tolerance parameter.

        Returns:
            True if the point lies on the line (within the given tolerance).

        """
        x, y = Point(point)
        return bool(nearly_equal(y, self.slope * x + self.intercept, rtol=rtol, atol=atol))

    def is_parallel(self, other: DualLine, rtol: float = EQ_TOL_REL, atol: float = EQ_TOL_ABS) -> bool:
        return bool(nearly_equal(self.slope, other.slope, rtol=rtol, atol=atol))

    def meet(self, other: DualLine, rtol: float = EQ_TOL_REL, atol: float = EQ_TOL_ABS) -> Point:
        """Calculates the finite intersection point of two lines.

        Args:
            other: The other line.
            rtol: The relative tolerance parameter.
            atol: The absolute tolerance parameter.

        Returns:
            The point of intersection.

        Raises:
            LinearDependenceError: If the lines are the same.
            NoIntersection: If the lines are parallel.

        """
        if self.is_parallel(other, rtol=rtol, atol=atol):
            if nearly_equal(self.intercept, other.intercept, rtol=rtol, atol=atol):
                raise LinearDependenceError("The lines are identical.")
            raise NoIntersection("The lines are parallel and only meet at infinity.")

        x = (other.intercept - self.intercept) / (self.slope - other.slope)
        return Point(x, self.slope * x + self.intercept)

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DualLine):
            return NotImplemented
        return bool(np.all(nearly_equal([self.slope, self.intercept], [other.slope, other.intercept])))

    __hash__ = None  # type: ignore[assignment]

    @override
    def __repr__(self) -> str:
        return f"DualLine(slope={self.slope!r}, intercept={self.intercept!r})"


class DualLineCollection(Sized, Iterable[DualLine]):
    """A collection of the dual lines of a set of points.

    Args:
        slopes: The slopes of the lines.
        intercepts: The y-intercepts of the lines.

    """

    slopes: FloatArray
    intercepts: FloatArray

    def __init__(self, slopes: npt.ArrayLike, intercepts: npt.ArrayLike) -> None:
        slopes = np.asarray(slopes, dtype=np.float64)
        intercepts = np.asarray(intercepts, dtype=np.float64)
        if slopes.ndim != 1 or slopes.shape != intercepts.shape:
            raise IncompatibleShapeError(
                f"Expected slopes and intercepts of equal length, got shapes {slopes.shape} and {intercepts.shape}."
            )
        self.slopes = _read_only(slopes)
        self.intercepts = _read_only(intercepts)

    @property
    def array(self) -> FloatArray:
        """(n, 3) The homogeneous coordinates of the lines."""
        return np.stack([self.slopes, -np.ones_like(self.slopes), self.intercepts], axis=-1)

    @property
    def dual(self) -> PointCollection:
        return PointCollection(np.stack([self.slopes, -self.intercepts], axis=-1))

    @override
    def __len__(self) -> int:
        return len(self.slopes)

    @override
    def __iter__(self) -> Iterator[DualLine]:
        for m, c in zip(self.slopes, self.intercepts):
            yield DualLine(m, c)

    def __getitem__(self, index: int) -> DualLine:
        return DualLine(self.slopes[index], self.intercepts[index])

    @overload
    def pairwise_meet(
        self, rtol: float = ..., atol: float = ..., return_scale: Literal[False] = ...
    ) -> FloatArray: ...

    @overload
    def pairwise_meet(
        self, rtol: float = ..., atol: float = ..., *, return_scale: Literal[True]
    ) -> tuple[FloatArray, FloatArray]: ...

    def pairwise_meet(
        self, rtol: float = EQ_TOL_REL, atol: float = EQ_TOL_ABS, return_scale: bool = False
    ) -> FloatArray | tuple[FloatArray, FloatArray]:
        r"""Calculates the intersections of all unordered pairs of lines.

        Pairs are enumerated as (i, j) with i < j in the order of :func:`numpy.triu_indices`. The result is given in
        homogeneous coordinates (x, y, z):

        - finite intersections are returned as (x, y, 1),
        - parallel lines with slope m meet at the point at infinity (1, m, 0),
        - identical lines, i.e. the duals of duplicate points, give the zero vector.

        Two lines count as parallel if their slopes are equal within the given tolerance.

        The coordinates of a finite intersection are computed by cancellation, so their rounding error is
        proportional to the magnitude of the operands and not to the magnitude of the result. For lines
        :math:`y = m_i x + c_i` and :math:`y = m_j x + c_j` this magnitude is

        .. math::

            s_x = \frac{\max(|c_i|, |c_j|)}{|m_i - m_j|}, \quad s_y = \max(|m_i| s_x, |c_i|).

        Args:
            rtol: The relative tolerance parameter.
            atol: The absolute tolerance parameter.
            return_scale: If True, the magnitudes (s_x, s_y) of the operands of each intersection are returned, too.
                They are zero for intersections at infinity.

        Returns:
            (n*(n-1)/2, 3) The homogeneous intersection points and, if requested, (n*(n-1)/2, 2) the magnitudes of
            the operands that the affine coordinates were computed from.

        """
        i, j = np.triu_indices(len(self), 1)
        m_i, m_j = self.slopes[i], self.slopes[j]
        c_i, c_j = self.intercepts[i], self.intercepts[j]

        parallel = nearly_equal(m_i, m_j, rtol=rtol, atol=atol)
        identical = parallel & nearly_equal(c_i, c_j, rtol=rtol, atol=atol)

        result = np.empty((len(i), 3), dtype=np.float64)
        scale = np.zeros((len(i), 2), dtype=np.float64)

        finite = ~parallel
        m_i, m_j, c_i, c_j = m_i[finite], m_j[finite], c_i[finite], c_j[finite]
        x = (c_j - c_i) / (m_i - m_j)
        result[finite, 0] = x
        result[finite, 1] = m_i * x + c_i
        result[finite, 2] = 1

        s_x = np.maximum(np.abs(c_i), np.abs(c_j)) / np.abs(m_i - m_j)
        scale[finite, 0] = s_x
        scale[finite, 1] = np.maximum(np.abs(m_i) * s_x, np.abs(c_i))

        result[parallel, 0] = 1
        result[parallel, 1] = self.slopes[i][parallel]
        result[parallel, 2] = 0

        result[identical] = 0

        if return_scale:
            return result, scale
        return result

    @override
    def __repr__(self) -> str:
        return f"DualLineCollection({len(self)} lines)"


@overload
def dual(obj: Point) -> DualLine: ...


@overload
def dual(obj: DualLine) -> Point: ...


@overload
def dual(obj: DualLineCollection) -> PointCollection: ...


@overload
def dual(obj: PointSetLike) -> DualLineCollection: ...


def dual(
    obj: Point | DualLine | DualLineCollection | PointSetLike,
) -> Point | DualLine | PointCollection | DualLineCollection:
    r"""Applies the point-line duality :math:`(a, b) \leftrightarrow y = a x - b`.

    Args:
        obj: A point, a dual line, a collection of either or raw point data.

    Returns:
        The dual object.

    """
    if isinstance(obj, (Point, DualLine, DualLineCollection, PointCollection)):
        return obj.dual
    return PointCollection(obj).dual
