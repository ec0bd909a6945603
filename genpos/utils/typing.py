from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Literal, Union

import numpy as np
from numpy import typing as npt

if TYPE_CHECKING:
    from typing_extensions import TypeAlias

    from genpos.point import Point, PointCollection

NumericalScalarType: TypeAlias = Union[np.number, np.bool_]
NumericalDType: TypeAlias = np.dtype[NumericalScalarType]
FloatArray: TypeAlias = npt.NDArray[np.float64]
PointLike: TypeAlias = Union["Point", Sequence[float], npt.NDArray[np.number]]
PointSetLike: TypeAlias = Union["PointCollection", Sequence[PointLike], npt.NDArray[np.number]]
Method: TypeAlias = Literal["brute_force", "duality"]
