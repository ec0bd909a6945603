class GeometryException(Exception):
    """A general geometric error occurred."""


class InvalidInputError(GeometryException, ValueError):
    """The given point data cannot be evaluated, e.g. because of non-finite coordinates."""


class IncompatibleShapeError(InvalidInputError):
    """The given point data has a shape that is not compatible with planar points."""


class ConfigurationError(GeometryException, ValueError):
    """The given numerical tolerance is not usable."""


class NoIntersection(GeometryException, ValueError):
    """The given lines are parallel and do not meet in a finite point."""


class LinearDependenceError(GeometryException, ValueError):
    """The given values were linearly dependent, making the computation impossible."""
