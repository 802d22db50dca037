"""
Matching module for properties and purchase profiles.

This module scores properties against client purchase profiles and
runs batch matching in both directions (by property, by client).
"""

from src.matching.exceptions import (
    EntityNotFoundError,
    MatchingError,
    MatchValidationError,
    WeightConfigurationError,
)
from src.matching.evaluators import (
    CriterionOutcome,
    build_criteria,
    build_gates,
)
from src.matching.scorer import MatchScorer, ScoreCard, check_configuration
from src.matching.candidates import (
    active_profiles,
    active_properties,
    pairs_for_profiles,
    pairs_for_property,
    profiles_for_client,
)
from src.matching.batch import (
    BatchMatcher,
    MatchBatch,
    MatchWarning,
    coerce_records,
    get_batch_matcher,
    match_client_profiles,
    match_property,
)

__all__ = [
    # Errors
    "MatchingError",
    "MatchValidationError",
    "WeightConfigurationError",
    "EntityNotFoundError",
    # Evaluators
    "CriterionOutcome",
    "build_gates",
    "build_criteria",
    # Scorer
    "MatchScorer",
    "ScoreCard",
    "check_configuration",
    # Candidates
    "active_profiles",
    "active_properties",
    "profiles_for_client",
    "pairs_for_property",
    "pairs_for_profiles",
    # Batch
    "BatchMatcher",
    "MatchBatch",
    "MatchWarning",
    "coerce_records",
    "get_batch_matcher",
    "match_property",
    "match_client_profiles",
]
