"""
Criterion evaluators for property / purchase profile matching.

Each criterion inspects one property attribute against one profile
constraint and returns a CriterionOutcome. Gates (property type,
location) are must-match: a failed gate zeroes the whole score.
All other criteria award fixed points from the weight table, with
partial credit for price tolerance and feature coverage.

A criterion never raises for missing optional data: an absent
property attribute or an absent profile bound means "unconstrained".
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from config.settings import MatchWeights
from src.modules.properties.models import Property
from src.modules.purchase_profiles.models import PurchaseProfile


@dataclass(frozen=True)
class CriterionOutcome:
    """Result of evaluating one criterion for one pair."""

    points: float = 0.0
    reason: str | None = None
    concern: str | None = None
    passed: bool = True


# Criterion not applicable (missing data or no constraint)
NOT_APPLICABLE = CriterionOutcome()


def format_number(value: Any) -> str:
    """
    Format a numeric attribute for reason strings.

    Examples:
        >>> format_number(Decimal("2000000.00"))
        '2000000'
        >>> format_number(400.0)
        '400'
        >>> format_number(12.5)
        '12.5'
    """
    if isinstance(value, Decimal):
        value = value.normalize()
        return format(value, "f")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def in_range(value: Any, low: Any, high: Any) -> bool:
    """
    Check value against an optional inclusive range.

    Args:
        value: Value to check
        low: Minimum (inclusive), None = no limit
        high: Maximum (inclusive), None = no limit

    Returns:
        True if value is within the range
    """
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def scale_bound(bound: Any, factor: float) -> Any:
    """Multiply a bound by a factor, keeping Decimal bounds exact."""
    if isinstance(bound, Decimal):
        return bound * Decimal(str(factor))
    return bound * factor


class Criterion(ABC):
    """Base class for all matching criteria."""

    name: str = ""

    def __init__(self, max_points: float):
        """
        Initialize criterion.

        Args:
            max_points: Points awarded on a full match
        """
        self.max_points = max_points

    @abstractmethod
    def evaluate(self, prop: Property, profile: PurchaseProfile) -> CriterionOutcome:
        """
        Evaluate the criterion for one pair.

        Args:
            prop: Property being matched
            profile: Purchase profile being matched

        Returns:
            CriterionOutcome with points, reason and concern
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(max_points={self.max_points})"


# ============================================================
# Gates (must-match)
# ============================================================


class PropertyTypeGate(Criterion):
    """Property type must be one of the profile's accepted types."""

    name = "property_type"

    def evaluate(self, prop: Property, profile: PurchaseProfile) -> CriterionOutcome:
        if prop.property_type not in profile.property_types:
            return CriterionOutcome(passed=False)
        return CriterionOutcome(
            points=self.max_points,
            reason=f'Property type "{prop.property_type.value}" matches client preferences',
        )


class LocationGate(Criterion):
    """Property city must be one of the profile's locations (case-insensitive)."""

    name = "location"

    def evaluate(self, prop: Property, profile: PurchaseProfile) -> CriterionOutcome:
        city = prop.city.strip().casefold()
        locations = {location.strip().casefold() for location in profile.locations}
        if city not in locations:
            return CriterionOutcome(passed=False)
        return CriterionOutcome(
            points=self.max_points,
            reason=f'Location "{prop.city}" is in client\'s desired areas',
        )


# ============================================================
# Range criteria
# ============================================================


class RangeCriterion(Criterion):
    """
    Numeric property attribute within the profile's [min_x, max_x] bounds.

    Full points inside the range, nothing outside it.
    """

    def __init__(self, name: str, max_points: float, reason_template: str):
        """
        Initialize range criterion.

        Args:
            name: Attribute name on Property (profile uses min_<name>/max_<name>)
            max_points: Points awarded when the value is in range
            reason_template: Reason format string with a {value} placeholder
        """
        super().__init__(max_points)
        self.name = name
        self.reason_template = reason_template

    def evaluate(self, prop: Property, profile: PurchaseProfile) -> CriterionOutcome:
        value = getattr(prop, self.name)
        if value is None:
            return NOT_APPLICABLE

        low = getattr(profile, f"min_{self.name}")
        high = getattr(profile, f"max_{self.name}")

        if in_range(value, low, high):
            return CriterionOutcome(
                points=self.max_points,
                reason=self.reason_template.format(value=format_number(value)),
            )
        return self.outside_range(value, low, high)

    def outside_range(self, value: Any, low: Any, high: Any) -> CriterionOutcome:
        """Outcome for a value outside the bounds (no credit by default)."""
        return NOT_APPLICABLE


class PriceCriterion(RangeCriterion):
    """
    Price within budget, with partial credit near the bounds.

    A price outside the range but within `tolerance` of the nearer
    bound earns `partial_points` and a concern instead of a reason.
    """

    def __init__(self, max_points: float, partial_points: float, tolerance: float):
        super().__init__(
            "price", max_points, "Price {value} is within client's budget range"
        )
        self.partial_points = partial_points
        self.tolerance = tolerance

    def outside_range(self, value: Any, low: Any, high: Any) -> CriterionOutcome:
        tolerant_low = None if low is None else scale_bound(low, 1 - self.tolerance)
        tolerant_high = None if high is None else scale_bound(high, 1 + self.tolerance)

        if not in_range(value, tolerant_low, tolerant_high):
            return NOT_APPLICABLE

        if low is not None and value < low:
            side = f"below budget range (min {format_number(low)})"
        else:
            side = f"above budget range (max {format_number(high)})"

        return CriterionOutcome(
            points=self.partial_points,
            concern=(
                f"Price {format_number(value)} is {side} "
                f"but within {self.tolerance:.0%} tolerance"
            ),
        )


# ============================================================
# Feature criteria
# ============================================================


class RequiredFeaturesCriterion(Criterion):
    """
    Required features present on the property.

    Points are proportional to the share of required features present;
    missing ones are reported as a concern.
    """

    name = "required_features"

    def evaluate(self, prop: Property, profile: PurchaseProfile) -> CriterionOutcome:
        required = profile.required_features
        if not required or not prop.features:
            return NOT_APPLICABLE

        matched = required & prop.features
        missing = required - prop.features

        reason = None
        if matched:
            reason = f"Property has {len(matched)} of {len(required)} required features"

        concern = None
        if missing:
            concern = f"Missing required features: {', '.join(sorted(missing))}"

        return CriterionOutcome(
            points=self.max_points * len(matched) / len(required),
            reason=reason,
            concern=concern,
        )


class DesiredFeaturesCriterion(Criterion):
    """Desired features present on the property (proportional credit)."""

    name = "desired_features"

    def evaluate(self, prop: Property, profile: PurchaseProfile) -> CriterionOutcome:
        desired = profile.desired_features
        if not desired or not prop.features:
            return NOT_APPLICABLE

        matched = desired & prop.features
        if not matched:
            return NOT_APPLICABLE

        return CriterionOutcome(
            points=self.max_points * len(matched) / len(desired),
            reason=f"Property has {len(matched)} of {len(desired)} desired features",
        )


# ============================================================
# Criteria table
# ============================================================


def build_gates(weights: MatchWeights) -> list[Criterion]:
    """
    Build the ordered must-match gates.

    Args:
        weights: Weight table

    Returns:
        [property type gate, location gate]
    """
    return [
        PropertyTypeGate(weights.property_type),
        LocationGate(weights.location),
    ]


def build_criteria(weights: MatchWeights, price_tolerance: float) -> list[Criterion]:
    """
    Build the ordered scored criteria.

    Args:
        weights: Weight table
        price_tolerance: Fraction around the nearer price bound for partial credit

    Returns:
        Criteria in evaluation order: price, size, bedrooms, bathrooms,
        required features, desired features
    """
    return [
        PriceCriterion(weights.price, weights.price_partial, price_tolerance),
        RangeCriterion("size", weights.size, "Size {value} sqm meets client's requirements"),
        RangeCriterion("bedrooms", weights.bedrooms, "{value} bedrooms matches client's needs"),
        RangeCriterion("bathrooms", weights.bathrooms, "{value} bathrooms matches client's needs"),
        RequiredFeaturesCriterion(weights.required_features),
        DesiredFeaturesCriterion(weights.desired_features),
    ]
