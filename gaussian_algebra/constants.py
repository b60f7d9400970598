"""Regime thresholds of the closed-form approximations.

The values are carried over from the approximation literature and are fixed.
"""

# mean**2 / variance below which 1/X is not approximated (4 standard deviations from zero).
INVERSE_MIN_SNR = 16.0

# mean**2 / variance of the numerator below which X/Y uses the direct ratio moments.
RATIO_MAX_NUMERATOR_SNR = 6.25

# Separation of two random bounds above which both are conditioned on jointly.
WELL_SEPARATED_BOUNDS = 1.3

# |log(std_lower / std_upper)| below which the more uncertain bound may be applied first.
SIMILAR_BOUND_SPREAD = 0.316
