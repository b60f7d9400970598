from gaussian_algebra import GaussianValue, InvalidBounds, truncate
from monte_carlo import sample_moments, between
from scipy.stats import truncnorm
import pytest
from jax import numpy as jnp
import numpy as np
from jax import config
config.update("jax_enable_x64", True)
np.random.seed(0)


def truncnorm_moments(x, lower, upper):
    loc, scale = x.mean, np.sqrt(x.variance)
    a, b = (lower - loc) / scale, (upper - loc) / scale
    return truncnorm.mean(a=a, b=b, loc=loc, scale=scale), truncnorm.var(a=a, b=b, loc=loc, scale=scale)


class TestTruncateConstant:
    @pytest.mark.parametrize("mean, variance, bound", [(0, 1, -1), (2, 3, 3), (-1, 0.5, -3), (0, 1, 5), (0, 1, 0)])
    def test_lower(self, mean, variance, bound):
        x = GaussianValue(mean, variance)
        y = x.truncate_lower(bound)
        mu, sigma2 = truncnorm_moments(x, bound, np.inf)
        assert y.mean == pytest.approx(mu, rel=1e-5)
        assert y.variance == pytest.approx(sigma2, rel=1e-5)

    @pytest.mark.parametrize("mean, variance, bound", [(0, 1, 1), (2, 3, 1), (-1, 0.5, 1), (0, 1, -5), (0, 1, 0)])
    def test_upper(self, mean, variance, bound):
        x = GaussianValue(mean, variance)
        y = x.truncate_upper(bound)
        mu, sigma2 = truncnorm_moments(x, -np.inf, bound)
        assert y.mean == pytest.approx(mu, rel=1e-5)
        assert y.variance == pytest.approx(sigma2, rel=1e-5)

    @pytest.mark.parametrize(
        "mean, variance, lower, upper",
        [(0, 1, -1, 2), (0, 1, 5, 6), (0, 1, -8, -7), (3, 2, 0, 10), (1, 4, 1.5, 1.6), (-2, 9, -1, 0)],
    )
    def test_two_sided(self, mean, variance, lower, upper):
        x = GaussianValue(mean, variance)
        y = x.truncate(lower, upper)
        mu, sigma2 = truncnorm_moments(x, lower, upper)
        assert y.mean == pytest.approx(mu, rel=1e-5)
        assert y.variance == pytest.approx(sigma2, rel=1e-5)

    @pytest.mark.parametrize("lower, upper", [(10, 5), (10, 10), (0, -1e-9)])
    def test_invalid_bounds(self, lower, upper):
        x = GaussianValue(0, 1)
        with pytest.raises(InvalidBounds):
            x.truncate(lower, upper)
        with pytest.raises(ValueError):
            x.truncate(lower, upper)

    @pytest.mark.parametrize("mean, variance, bound", [(0, 1, 0.5), (3, 2, 1), (-4, 0.1, -4.2)])
    def test_upper_is_mirrored_lower(self, mean, variance, bound):
        x = GaussianValue(mean, variance)
        y = x.truncate_upper(bound)
        z = -((-x).truncate_lower(-bound))
        assert y.mean == z.mean
        assert y.variance == z.variance

    def test_deep_tail(self):
        y = GaussianValue(0, 1).truncate_lower(50)
        assert 50 < y.mean < 50.1
        assert 0 < y.variance < 1e-3

    def test_narrow_window(self):
        y = GaussianValue(0, 1).truncate(0.999, 1.001)
        assert y.mean == pytest.approx(1, abs=1e-3)
        assert 0 < y.variance < 1e-5

    def test_open_bounds(self):
        x = GaussianValue(1, 4)
        assert x.truncate_lower(-np.inf) == x
        assert x.truncate_upper(np.inf) == x
        assert x.truncate(-np.inf, np.inf) == x
        assert x.truncate(-np.inf, 1.0) == x.truncate_upper(1.0)
        assert x.truncate(0.5, np.inf) == x.truncate_lower(0.5)
        mu, sigma2 = truncnorm_moments(x, -np.inf, 1.0)
        assert x.truncate(-np.inf, 1.0).mean == pytest.approx(mu, rel=1e-5)
        assert x.truncate(-np.inf, 1.0).variance == pytest.approx(sigma2, rel=1e-5)

    @pytest.mark.parametrize(
        "lower, upper", [(np.inf, np.inf), (-np.inf, -np.inf), (np.inf, 1.0), (np.nan, 1.0), (-1.0, np.nan)]
    )
    def test_non_finite_bounds(self, lower, upper):
        with pytest.raises(InvalidBounds):
            GaussianValue(0, 1).truncate(lower, upper)

    def test_empty_one_sided(self):
        with pytest.raises(InvalidBounds):
            GaussianValue(0, 1).truncate_lower(np.inf)
        with pytest.raises(InvalidBounds):
            GaussianValue(0, 1).truncate_upper(-np.inf)


class TestTruncateRandom:
    @pytest.mark.parametrize("lower, upper", [(-1, 2), (5, 6), (-8, -7), (0, 10)])
    def test_tends_to_constant(self, lower, upper):
        x = GaussianValue(3, 2)
        y = x.truncate(GaussianValue(lower, 1e-14), GaussianValue(upper, 1e-14))
        z = x.truncate(lower, upper)
        assert y.mean == pytest.approx(z.mean, rel=1e-5)
        assert y.variance == pytest.approx(z.variance, rel=1e-5)
        y = x.truncate_lower(GaussianValue(lower, 1e-14))
        assert y.mean == pytest.approx(x.truncate_lower(lower).mean, rel=1e-5)
        assert y.variance == pytest.approx(x.truncate_lower(lower).variance, rel=1e-5)

    def test_lower(self):
        x, lower = GaussianValue(0, 1), GaussianValue(0.5, 0.5)
        y = x.truncate_lower(lower)
        mc_mean, mc_var = sample_moments(lambda s, l: s[s >= l], x, lower)
        assert mc_mean == pytest.approx(y.mean, abs=1e-2)
        assert mc_var == pytest.approx(y.variance, rel=1e-2)

    def test_upper(self):
        x, upper = GaussianValue(0, 1), GaussianValue(0.5, 0.5)
        y = x.truncate_upper(upper)
        mc_mean, mc_var = sample_moments(lambda s, u: s[s <= u], x, upper)
        assert mc_mean == pytest.approx(y.mean, abs=1e-2)
        assert mc_var == pytest.approx(y.variance, rel=1e-2)

    def test_upper_is_mirrored_lower(self):
        x, bound = GaussianValue(1, 2), GaussianValue(0.5, 3)
        y = x.truncate_upper(bound)
        z = -((-x).truncate_lower(-bound))
        assert y.mean == z.mean
        assert y.variance == z.variance

    def test_arrival_times(self):
        a, b = GaussianValue(100, 16), GaussianValue(110, 36)
        first = a.truncate_upper(b)
        second = a.truncate_lower(b)
        assert first.mean < a.mean < second.mean
        assert first.variance < a.variance
        assert second.variance < a.variance

    def test_well_separated_bounds(self):
        x, lower, upper = GaussianValue(5, 4), GaussianValue(0, 1), GaussianValue(10, 1)
        y = x.truncate(lower, upper)
        mc_mean, mc_var = sample_moments(between, x, lower, upper)
        assert mc_mean == pytest.approx(y.mean, abs=1e-2)
        assert mc_var == pytest.approx(y.variance, rel=1e-2)

    def test_overlapping_bounds(self):
        x, lower, upper = GaussianValue(0, 1), GaussianValue(-1, 1), GaussianValue(1, 1)
        y = x.truncate(lower, upper)
        assert y == x.truncate_lower(lower).truncate_upper(upper)
        mc_mean, mc_var = sample_moments(between, x, lower, upper)
        assert mc_mean == pytest.approx(y.mean, abs=2e-2)
        assert mc_var == pytest.approx(y.variance, abs=5e-2)

    def test_mixed_bounds(self):
        x, upper = GaussianValue(5, 4), GaussianValue(10, 1)
        y = x.truncate(0.0, upper)
        mc_mean, mc_var = sample_moments(lambda s, u: between(s, 0.0, u), x, upper)
        assert mc_mean == pytest.approx(y.mean, abs=1e-2)
        assert mc_var == pytest.approx(y.variance, rel=1e-2)

    def test_open_constant_bound(self):
        x, lower, upper = GaussianValue(5, 4), GaussianValue(0, 1), GaussianValue(10, 1)
        assert x.truncate(-np.inf, upper) == x.truncate_upper(upper)
        assert x.truncate(lower, np.inf) == x.truncate_lower(lower)

    @pytest.mark.parametrize(
        "lower, upper, lower_first",
        [
            (GaussianValue(0, 1.2), GaussianValue(0.5, 1), True),
            (GaussianValue(0, 1), GaussianValue(0.5, 1.2), False),
            (GaussianValue(0, 4), GaussianValue(0.5, 1), False),
            (GaussianValue(-0.5, 1), GaussianValue(0, 1.2), False),
            (GaussianValue(-0.5, 1), GaussianValue(0, 1), True),
            (GaussianValue(-0.5, 1), GaussianValue(0, 4), True),
        ],
    )
    def test_application_order(self, lower, upper, lower_first):
        x = GaussianValue(0, 1)
        y = x.truncate(lower, upper)
        if lower_first:
            assert y == x.truncate_lower(lower).truncate_upper(upper)
        else:
            assert y == x.truncate_upper(upper).truncate_lower(lower)

    def test_joint_bounds_without_overlap(self):
        x, lower, upper = GaussianValue(-1000, 1), GaussianValue(0, 0.01), GaussianValue(100, 25)
        y = truncate.truncate(x, lower, upper)
        assert y == x.truncate_upper(upper).truncate_lower(lower)
        assert y.mean == pytest.approx(-1000 / 101, rel=1e-3)
        assert y.variance == pytest.approx(0.01 / 1.01, rel=1e-3)

    def test_variance_shrinks(self):
        for _ in range(10):
            x = GaussianValue(np.random.randn(), np.random.rand() + 0.1)
            lower = GaussianValue(np.random.randn() - 1, np.random.rand() + 0.1)
            upper = GaussianValue(np.random.randn() + 1, np.random.rand() + 0.1)
            y = x.truncate(lower, upper)
            assert 0 < y.variance < x.variance
