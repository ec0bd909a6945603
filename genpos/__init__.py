from genpos.base import EQ_TOL_ABS, EQ_TOL_REL, MAX_TOL, validate_tolerance
from genpos.checkers import (
    BruteForceChecker,
    DualityChecker,
    GeneralPositionChecker,
    brute_force_general_position,
    duality_general_position,
    is_general_position,
)
from genpos.exceptions import (
    ConfigurationError,
    GeometryException,
    IncompatibleShapeError,
    InvalidInputError,
    LinearDependenceError,
    NoIntersection,
)
from genpos.operators import is_collinear, is_concurrent
from genpos.point import DualLine, DualLineCollection, Point, PointCollection, dual
from genpos.utils import nearly_equal
from genpos.version import __version__
