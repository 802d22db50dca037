"""
Batch matching.

Runs the scorer over every candidate pair, keeps results at or above
the minimum score and orders them. Malformed records are skipped and
reported as warnings; they never abort the batch.
"""

import os
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Iterable, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from config.settings import get_settings
from src.matching import candidates
from src.matching.candidates import Pair
from src.matching.exceptions import MatchValidationError, WeightConfigurationError
from src.matching.scorer import MatchScorer
from src.modules.matches.models import MatchResult
from src.modules.properties.models import Property
from src.modules.purchase_profiles.models import PurchaseProfile

batch_log = logger.bind(module="Batch")

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class MatchWarning:
    """A record or pair skipped during a batch."""

    entity_type: str  # "property" | "purchase_profile" | "pair"
    entity_id: str | None
    message: str


@dataclass
class MatchBatch:
    """Outcome of one batch run."""

    matches: list[MatchResult] = field(default_factory=list)
    warnings: list[MatchWarning] = field(default_factory=list)
    evaluated: int = 0


def _record_id(record: Any) -> str | None:
    """Best-effort ID of a raw record for warning messages."""
    if isinstance(record, Mapping):
        value = record.get("id")
    else:
        value = getattr(record, "id", None)
    return str(value) if value is not None else None


def _summarize_errors(error: ValidationError) -> str:
    """Flatten pydantic errors to 'field: message; ...'."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err.get("loc", []))
        msg = err.get("msg", "invalid")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


def coerce_records(
    records: Iterable[Any],
    model: type[ModelT],
    entity_type: str,
) -> tuple[list[ModelT], list[MatchWarning]]:
    """
    Validate raw records into models, collecting failures as warnings.

    Args:
        records: Model instances, mappings or attribute objects
        model: Target pydantic model
        entity_type: Label used in warnings

    Returns:
        Tuple of (valid_models, warnings)
    """
    valid: list[ModelT] = []
    warnings: list[MatchWarning] = []

    for record in records:
        if isinstance(record, model):
            valid.append(record)
            continue
        try:
            valid.append(model.model_validate(record))
        except ValidationError as e:
            warnings.append(
                MatchWarning(entity_type, _record_id(record), _summarize_errors(e))
            )

    return valid, warnings


def _recency(prop: Property) -> float:
    """Sort key component: newer properties first, undated last."""
    if prop.updated_at is None:
        return float("-inf")
    return prop.updated_at.timestamp()


class BatchMatcher:
    """
    Matches properties and purchase profiles in bulk.

    Results are ordered by score (highest first), then by most recently
    updated property, then by candidate generation order.
    """

    def __init__(
        self,
        scorer: MatchScorer | None = None,
        min_score: int | None = None,
        max_workers: int | None = None,
        parallel_min_pairs: int | None = None,
    ):
        """
        Initialize BatchMatcher.

        Args:
            scorer: MatchScorer (built from settings if not provided)
            min_score: Minimum score to keep a result (default from settings)
            max_workers: Worker pool size cap (None = CPU count)
            parallel_min_pairs: Pair count from which scoring runs on the pool

        Raises:
            WeightConfigurationError: If min_score is outside [0, 100]
        """
        settings = get_settings().matching
        self.scorer = scorer or MatchScorer()
        self.min_score = settings.min_score if min_score is None else min_score
        if not 0 <= self.min_score <= 100:
            raise WeightConfigurationError(
                f"min_score must be within [0, 100], got {self.min_score}"
            )
        self.max_workers = settings.max_workers if max_workers is None else max_workers
        self.parallel_min_pairs = (
            settings.parallel_min_pairs
            if parallel_min_pairs is None
            else parallel_min_pairs
        )

    # ========== Entry Points ==========

    def match_property(self, prop: Any, profiles: Iterable[Any]) -> MatchBatch:
        """
        Match one property against purchase profiles.

        Args:
            prop: Property (model or raw record)
            profiles: Candidate purchase profiles (inactive ones are ignored)

        Returns:
            MatchBatch with surviving matches and warnings
        """
        anchors, warnings = coerce_records([prop], Property, "property")
        valid_profiles, profile_warnings = coerce_records(
            profiles, PurchaseProfile, "purchase_profile"
        )
        warnings.extend(profile_warnings)

        if not anchors:
            self._log_warnings(warnings)
            return MatchBatch(warnings=warnings)

        pairs = list(candidates.pairs_for_property(anchors[0], valid_profiles))
        return self._run(pairs, warnings)

    def match_profiles(
        self, profiles: Iterable[Any], properties: Iterable[Any]
    ) -> MatchBatch:
        """
        Match purchase profiles against properties.

        Args:
            profiles: Anchor purchase profiles (inactive ones are ignored)
            properties: Candidate properties (inactive ones are ignored)

        Returns:
            MatchBatch with surviving matches and warnings
        """
        valid_profiles, warnings = coerce_records(
            profiles, PurchaseProfile, "purchase_profile"
        )
        valid_properties, property_warnings = coerce_records(
            properties, Property, "property"
        )
        warnings.extend(property_warnings)

        pairs = list(candidates.pairs_for_profiles(valid_profiles, valid_properties))
        return self._run(pairs, warnings)

    def match_client(
        self,
        client_id: str,
        profiles: Iterable[Any],
        properties: Iterable[Any],
    ) -> MatchBatch:
        """
        Match a client's active purchase profiles against properties.

        Args:
            client_id: Client ID
            profiles: Purchase profiles (filtered to the client's active ones)
            properties: Candidate properties

        Returns:
            MatchBatch with surviving matches and warnings
        """
        valid_profiles, warnings = coerce_records(
            profiles, PurchaseProfile, "purchase_profile"
        )
        owned = candidates.profiles_for_client(str(client_id), valid_profiles)

        batch = self.match_profiles(owned, properties)
        batch.warnings[:0] = warnings
        return batch

    # ========== Internals ==========

    def _score_pair(self, pair: Pair) -> MatchResult | MatchWarning:
        """Score one pair; validation failures become warnings."""
        prop, profile = pair
        try:
            return self.scorer.score(prop, profile)
        except MatchValidationError as e:
            return MatchWarning("pair", f"{profile.id}/{prop.id}", str(e))
        except (TypeError, ValueError) as e:
            # Unvalidated models (model_construct) can carry non-numeric bounds
            return MatchWarning("pair", f"{profile.id}/{prop.id}", f"cannot score: {e}")

    def _score_all(self, pairs: list[Pair]) -> list[MatchResult | MatchWarning]:
        """
        Score all pairs, on a thread pool for large batches.

        Output order always follows input order.
        """
        workers = min(len(pairs), self.max_workers or os.cpu_count() or 1)
        if len(pairs) < self.parallel_min_pairs or workers <= 1:
            return [self._score_pair(pair) for pair in pairs]

        batch_log.debug(f"Scoring {len(pairs)} pairs with {workers} workers")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self._score_pair, pairs))

    def _run(self, pairs: list[Pair], warnings: list[MatchWarning]) -> MatchBatch:
        """Score, filter by threshold and order."""
        if not pairs:
            self._log_warnings(warnings)
            return MatchBatch(warnings=warnings)

        outcomes = self._score_all(pairs)

        kept: list[tuple[MatchResult, Property]] = []
        for (prop, _profile), outcome in zip(pairs, outcomes, strict=True):
            if isinstance(outcome, MatchWarning):
                warnings.append(outcome)
                continue
            # Gate failures score 0 and are never matches, whatever the threshold
            if outcome.score > 0 and outcome.score >= self.min_score:
                kept.append((outcome, prop))

        # sort() is stable, so equal keys keep generation order
        kept.sort(key=lambda item: (-item[0].score, -_recency(item[1])))

        self._log_warnings(warnings)
        batch_log.info(
            f"Evaluated {len(pairs)} pairs: {len(kept)} at or above {self.min_score}, "
            f"{len(warnings)} skipped"
        )
        return MatchBatch(
            matches=[result for result, _ in kept],
            warnings=warnings,
            evaluated=len(pairs),
        )

    @staticmethod
    def _log_warnings(warnings: list[MatchWarning]) -> None:
        for warning in warnings:
            batch_log.warning(
                f"Skipped {warning.entity_type} {warning.entity_id or '?'}: {warning.message}"
            )


# Singleton instance
_batch_matcher: BatchMatcher | None = None


def get_batch_matcher() -> BatchMatcher:
    """Get BatchMatcher singleton built from settings."""
    global _batch_matcher
    if _batch_matcher is None:
        _batch_matcher = BatchMatcher()
    return _batch_matcher


def _matcher_for(min_score: int | None) -> BatchMatcher:
    default = get_batch_matcher()
    if min_score is None:
        return default
    return BatchMatcher(
        scorer=default.scorer,
        min_score=min_score,
        max_workers=default.max_workers,
        parallel_min_pairs=default.parallel_min_pairs,
    )


def match_property(
    prop: Any, profiles: Iterable[Any], min_score: int | None = None
) -> list[MatchResult]:
    """
    Find purchase profiles matching a property.

    Args:
        prop: Property (model or raw record)
        profiles: All active purchase profiles
        min_score: Threshold override (default from settings)

    Returns:
        Matches ordered by score, highest first
    """
    return _matcher_for(min_score).match_property(prop, profiles).matches


def match_client_profiles(
    profiles: Iterable[Any], properties: Iterable[Any], min_score: int | None = None
) -> list[MatchResult]:
    """
    Find properties matching a set of purchase profiles.

    Args:
        profiles: Purchase profiles (typically one client's)
        properties: All active properties
        min_score: Threshold override (default from settings)

    Returns:
        Matches ordered by score, highest first
    """
    return _matcher_for(min_score).match_profiles(profiles, properties).matches
