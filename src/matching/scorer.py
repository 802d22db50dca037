"""
Match scorer.

Composes the criterion evaluators for a single (property, profile)
pair into a 0-100 score with ordered reasons and concerns.
"""

import math
from dataclasses import dataclass, field

from loguru import logger

from config.settings import MatchWeights, get_settings
from src.matching.evaluators import Criterion, build_criteria, build_gates
from src.matching.exceptions import MatchValidationError, WeightConfigurationError
from src.modules.matches.models import MatchResult
from src.modules.properties.models import Property
from src.modules.purchase_profiles.models import PurchaseProfile, find_inverted_bounds

scorer_log = logger.bind(module="Scorer")

MAX_SCORE = 100


@dataclass(frozen=True)
class ScoreCard:
    """Aggregated outcome of all criteria for one pair."""

    score: int
    reasons: list[str] = field(default_factory=list)
    concerns: list[str] = field(default_factory=list)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero for positives.

    Examples:
        >>> round_half_up(82.5)
        83
        >>> round_half_up(3.333)
        3
    """
    return int(math.floor(value + 0.5))


def check_configuration(weights: MatchWeights, price_tolerance: float) -> None:
    """
    Validate the weight table once, at engine initialisation.

    Args:
        weights: Weight table
        price_tolerance: Price tolerance fraction

    Raises:
        WeightConfigurationError: If the table cannot produce scores in [0, 100]
    """
    if weights.total > MAX_SCORE:
        raise WeightConfigurationError(
            f"Sum of maximum weights is {weights.total:g}, must not exceed {MAX_SCORE}"
        )
    if weights.price_partial > weights.price:
        raise WeightConfigurationError(
            f"price_partial ({weights.price_partial:g}) exceeds price weight ({weights.price:g})"
        )
    if not 0 <= price_tolerance < 1:
        raise WeightConfigurationError(
            f"price_tolerance must be in [0, 1), got {price_tolerance}"
        )


class MatchScorer:
    """
    Scores one property against one purchase profile.

    Flow:
    1. Must-match gates in order (property type, location); the first
       failure returns score 0 with no reasons
    2. Scored criteria in order (price, size, bedrooms, bathrooms,
       required features, desired features)
    3. Sum, clamp to [0, 100], round half-up
    """

    def __init__(
        self,
        weights: MatchWeights | None = None,
        price_tolerance: float | None = None,
    ):
        """
        Initialize scorer.

        Args:
            weights: Weight table (defaults to settings)
            price_tolerance: Price tolerance fraction (defaults to settings)

        Raises:
            WeightConfigurationError: If the weight table is malformed
        """
        settings = get_settings().matching
        self.weights = weights if weights is not None else settings.weights
        self.price_tolerance = (
            settings.price_tolerance if price_tolerance is None else price_tolerance
        )

        check_configuration(self.weights, self.price_tolerance)

        self.gates: list[Criterion] = build_gates(self.weights)
        self.criteria: list[Criterion] = build_criteria(self.weights, self.price_tolerance)

    def evaluate(self, prop: Property, profile: PurchaseProfile) -> ScoreCard:
        """
        Evaluate all criteria for a pair.

        Args:
            prop: Property
            profile: Purchase profile

        Returns:
            ScoreCard with score, reasons and concerns
        """
        total = 0.0
        reasons: list[str] = []
        concerns: list[str] = []

        for gate in self.gates:
            outcome = gate.evaluate(prop, profile)
            if not outcome.passed:
                return ScoreCard(score=0)
            total += outcome.points
            if outcome.reason:
                reasons.append(outcome.reason)

        for criterion in self.criteria:
            outcome = criterion.evaluate(prop, profile)
            total += outcome.points
            if outcome.reason:
                reasons.append(outcome.reason)
            if outcome.concern:
                concerns.append(outcome.concern)

        score = round_half_up(min(max(total, 0.0), MAX_SCORE))
        return ScoreCard(score=score, reasons=reasons, concerns=concerns)

    def score(self, prop: Property, profile: PurchaseProfile) -> MatchResult:
        """
        Score a pair and build its MatchResult.

        Args:
            prop: Property
            profile: Purchase profile

        Returns:
            MatchResult for the pair

        Raises:
            MatchValidationError: If identifiers are missing or bounds are inverted
        """
        self.validate_pair(prop, profile)
        card = self.evaluate(prop, profile)

        scorer_log.debug(
            f"Profile {profile.id} x property {prop.id}: score {card.score}"
        )
        return MatchResult(
            purchase_profile_id=profile.id,
            property_id=prop.id,
            client_id=profile.client_id,
            score=card.score,
            reasons=card.reasons,
            concerns=card.concerns,
        )

    @staticmethod
    def validate_pair(prop: Property, profile: PurchaseProfile) -> None:
        """
        Re-check pair invariants that unvalidated models could break.

        Raises:
            MatchValidationError: If the pair cannot be scored
        """
        if not prop.id:
            raise MatchValidationError("Property has no id")
        if not profile.id or not profile.client_id:
            raise MatchValidationError("Purchase profile has no id or client_id")

        inverted = find_inverted_bounds(profile)
        if inverted:
            raise MatchValidationError(
                f"Purchase profile {profile.id} has inverted bounds: {', '.join(inverted)}"
            )
