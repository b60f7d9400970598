# %%
from gaussian_algebra import GaussianValue

# %%
a = GaussianValue(100, 16)
b = GaussianValue(110, 36)

print("Two cars are approaching an intersection.")
print(
    "The arrival time of car A is normally distributed with mean %g seconds and variance %g."
    % (a.mean, a.variance)
)
print(
    "The arrival time of car B is normally distributed with mean %g seconds and variance %g."
    % (b.mean, b.variance)
)

# %%
first = a.minimum(b)
print(
    "The first car arrives with mean %.3f seconds and variance %.3f." % (first.mean, first.variance)
)
second = a.maximum(b)
print(
    "The second car arrives with mean %.3f seconds and variance %.3f."
    % (second.mean, second.variance)
)

# %%
a_first = a.truncate_upper(b)
print(
    "If car A arrives before car B, its arrival time has mean %.3f seconds and variance %.3f."
    % (a_first.mean, a_first.variance)
)
a_second = a.truncate_lower(b)
print(
    "If car A arrives after car B, its arrival time has mean %.3f seconds and variance %.3f."
    % (a_second.mean, a_second.variance)
)

# %%
gap = b - a
print(
    "Car B arrives %.3f seconds after car A on average, with variance %.3f."
    % (gap.mean, gap.variance)
)
