"""Probability calculations for High-Low."""

from core.statistics.probability import (
    ConfidenceLevel,
    OutcomeProbabilities,
    ProbabilityEngine,
    compute_probabilities,
    confidence_level,
    format_probability,
    outcome_probabilities,
    remaining_population,
)

__all__ = [
    "ConfidenceLevel",
    "OutcomeProbabilities",
    "ProbabilityEngine",
    "compute_probabilities",
    "confidence_level",
    "format_probability",
    "outcome_probabilities",
    "remaining_population",
]
