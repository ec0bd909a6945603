import logging

import numpy as np
import pytest

from genpos import (
    BruteForceChecker,
    ConfigurationError,
    DualityChecker,
    IncompatibleShapeError,
    InvalidInputError,
    Point,
    PointCollection,
    brute_force_general_position,
    duality_general_position,
    is_general_position,
)

CHECKS = [brute_force_general_position, duality_general_position]


def check_all(points, expected: bool, **kwargs) -> None:
    for check in CHECKS:
        assert check(points, **kwargs) is expected, check.__name__


class TestGeneralPosition:
    def test_trivial(self) -> None:
        check_all([], True)
        check_all([(1, 1)], True)
        check_all([(1, 1), (2, 2)], True)
        check_all([(1, 1), (1, 1)], True)
        check_all(np.empty((0, 2)), True)

    def test_collinear(self) -> None:
        check_all([(1, 2), (2, 4), (3, 6)], False)
        check_all([(3, 6), (1, 2), (2, 4)], False)
        check_all([(5.5344, 4.243), (1, 2), (2, 4), (3, 6)], False)

    def test_triangle(self) -> None:
        check_all([(0, 0), (1, 0), (0, 1)], True)
        check_all([(0, 0), (4, 0), (0, 3), (1, 1)], True)

    def test_duplicate_point(self) -> None:
        check_all([(1, 1), (1, 1), (2, 2)], False)
        check_all([(0, 0), (1, 5), (0, 0)], False)

    def test_vertical(self) -> None:
        check_all([(5, 1), (5, 9), (5, -3)], False)
        check_all([(5, 1), (5, 9), (6, -3)], True)
        check_all([(5, 1), (5, 9), (0, 0), (-2, 7), (5, -3)], False)
        check_all([(5, 1), (5, 9), (7, 1), (7, 9)], True)

        with np.errstate(divide="raise", invalid="raise"):
            check_all([(5, 1), (5, 9), (5, -3)], False)

    def test_horizontal(self) -> None:
        check_all([(1, 5), (9, 5), (-3, 5)], False)
        check_all([(1, 5), (9, 5), (-3, 5.5)], True)

    def test_near_collinear(self) -> None:
        points = [(0, 0), (1, 1), (2, 2 + 1e-13)]
        check_all(points, False)
        check_all(points, True, rtol=1e-18, atol=1e-18)

        # points on y = 0.1 x + 0.3 whose coordinates are not exactly representable
        points = [(0.1 * k, 0.01 * k + 0.3) for k in (1, 3, 7)]
        check_all(points, False)

        points = [(0.1, 0.2), (0.3, 0.6), (0.7, 1.4), (0.2, 0.9)]
        check_all(points, False)

    def test_near_vertical(self) -> None:
        check_all([(5, 1), (5 + 1e-13, 9), (5, -3)], False)

    def test_large_line_through_origin(self) -> None:
        x = np.array([-672150.918, -836557.134, -931696.337])
        points = np.column_stack([x, 0.10274 * x])
        check_all(points, False)
        check_all(np.vstack([points, [(1e5, -3e5), (2e5, 7e5)]]), False)

    def test_huge_coordinates(self) -> None:
        points = [(1e149, 1e149), (2e149, 2e149), (3e149, 3e149)]
        check_all(points, False)
        check_all([(1e149, 0), (0, 1e149), (-1e149, -1e149)], True)

        for check in CHECKS:
            with pytest.raises(InvalidInputError):
                check([(1e200, 1e200), (2e200, 2e200), (3e200, 3e200)])

    def test_input_types(self) -> None:
        data = [(1, 2), (2, 4), (3, 6)]
        check_all(np.array(data), False)
        check_all(PointCollection(data), False)
        check_all([Point(p) for p in data], False)
        check_all(tuple(data), False)

    def test_invalid_input(self) -> None:
        for check in CHECKS:
            with pytest.raises(InvalidInputError):
                check([(0, 0), (1, np.nan), (2, 3)])
            with pytest.raises(InvalidInputError):
                check([(0, 0), (np.inf, 1)])
            with pytest.raises(IncompatibleShapeError):
                check([(0, 0, 0), (1, 1, 1), (2, 2, 2)])

    def test_invalid_tolerance(self) -> None:
        for check in CHECKS:
            with pytest.raises(ConfigurationError):
                check([(0, 0), (1, 0), (0, 1)], rtol=0)
            with pytest.raises(ConfigurationError):
                check([(0, 0), (1, 0), (0, 1)], atol=-1e-12)
            with pytest.raises(ConfigurationError):
                check([(0, 0), (1, 0), (0, 1)], atol=1e3)

    def test_idempotent(self, random_points: np.ndarray) -> None:
        points = PointCollection(random_points)
        for check in CHECKS:
            results = {check(points) for _ in range(3)}
            assert len(results) == 1

    def test_order_independent(self, planted_collinear_points: np.ndarray, rng: np.random.Generator) -> None:
        for _ in range(3):
            shuffled = rng.permutation(planted_collinear_points)
            check_all(shuffled, False)


class TestAgreement:
    def test_random(self, rng: np.random.Generator) -> None:
        for n in (3, 4, 10, 40):
            points = rng.uniform(-100, 100, size=(n, 2))
            assert brute_force_general_position(points) == duality_general_position(points)

    def test_random_in_general_position(self, random_points: np.ndarray) -> None:
        check_all(random_points, True)

    def test_planted(self, planted_collinear_points: np.ndarray) -> None:
        check_all(planted_collinear_points, False)

    def test_grid(self, rng: np.random.Generator) -> None:
        for _ in range(20):
            n = rng.integers(3, 8)
            points = rng.integers(0, 5, size=(n, 2))
            assert brute_force_general_position(points) == duality_general_position(points), points.tolist()

    def test_no_three_in_line(self) -> None:
        # a maximal solution of the no-three-in-line problem on a 4x4 grid
        points = [(0, 1), (0, 2), (1, 0), (1, 3), (2, 0), (2, 3), (3, 1), (3, 2)]
        check_all(points, True)
        check_all(points + [(1, 1)], False)

    @pytest.mark.parametrize("scale", [1.0, 1e3, 1e6])
    @pytest.mark.parametrize("through_origin", [False, True])
    def test_planted_at_scale(self, rng, scale: float, through_origin: bool) -> None:
        for _ in range(50):
            slope = rng.uniform(-3, 3)
            intercept = 0.0 if through_origin else rng.uniform(-scale, scale)
            x = rng.uniform(-scale, scale, 3)
            on_line = np.column_stack([x, slope * x + intercept])
            others = rng.uniform(-scale, scale, (5, 2))
            points = rng.permutation(np.vstack([on_line, others]))
            check_all(points, False)

    @pytest.mark.parametrize("scale", [1.0, 1e3, 1e6])
    def test_random_at_scale(self, rng, scale: float) -> None:
        for _ in range(20):
            points = rng.uniform(-scale, scale, (8, 2))
            assert brute_force_general_position(points) == duality_general_position(points)


class TestCheckers:
    def test_call(self) -> None:
        for cls in (BruteForceChecker, DualityChecker):
            checker = cls()
            assert checker([(0, 0), (1, 0), (0, 1)])
            assert not checker.is_general_position([(1, 2), (2, 4), (3, 6)])

    def test_tolerance(self) -> None:
        checker = DualityChecker(rtol=1e-6, atol=1e-8)
        assert checker.rtol == 1e-6
        assert checker.atol == 1e-8
        assert repr(checker) == "DualityChecker(rtol=1e-06, atol=1e-08)"

        with pytest.raises(ConfigurationError):
            BruteForceChecker(rtol=np.nan)

    def test_is_general_position(self) -> None:
        collinear = [(1, 2), (2, 4), (3, 6)]
        assert not is_general_position(collinear)
        assert not is_general_position(collinear, method="brute_force")
        assert is_general_position(collinear, method="duality", rtol=1e-18, atol=1e-18) is False

        with pytest.raises(ValueError):
            is_general_position(collinear, method="sweep")  # type: ignore[arg-type]

    def test_logging(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="genpos"):
            brute_force_general_position([(0, 1), (3, 1), (1, 2), (2, 4), (3, 6)])
            duality_general_position([(1, 1), (2, 2), (1, 1)])
            duality_general_position([(0, 1), (3, 1), (1, 2), (2, 4), (3, 6)])

        assert "Points 2, 3 and 4 are collinear" in caplog.text
        assert "Points 0 and 2 are equal" in caplog.text
        assert "meet in the same point" in caplog.text
