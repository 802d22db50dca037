"""
Candidate generation for matching runs.

Given a fixed anchor (a property, or a set of purchase profiles),
enumerates the opposite entities to score against. No scoring here.
"""

from typing import Iterable, Iterator

from src.modules.properties.models import Property
from src.modules.purchase_profiles.models import PurchaseProfile

Pair = tuple[Property, PurchaseProfile]


def active_profiles(profiles: Iterable[PurchaseProfile]) -> list[PurchaseProfile]:
    """Filter purchase profiles to active ones, keeping order."""
    return [profile for profile in profiles if profile.is_active]


def active_properties(properties: Iterable[Property]) -> list[Property]:
    """Filter properties to active listings, keeping order."""
    return [prop for prop in properties if prop.is_active]


def profiles_for_client(
    client_id: str, profiles: Iterable[PurchaseProfile]
) -> list[PurchaseProfile]:
    """
    Resolve a client to its active purchase profiles.

    Args:
        client_id: Client ID
        profiles: Profiles to search (any owner)

    Returns:
        Active profiles owned by the client
    """
    return [p for p in active_profiles(profiles) if p.client_id == client_id]


def pairs_for_property(
    prop: Property, profiles: Iterable[PurchaseProfile]
) -> Iterator[Pair]:
    """
    Pair a property with every active purchase profile.

    Args:
        prop: Anchor property
        profiles: Candidate profiles

    Yields:
        (property, profile) pairs
    """
    for profile in active_profiles(profiles):
        yield prop, profile


def pairs_for_profiles(
    profiles: Iterable[PurchaseProfile], properties: Iterable[Property]
) -> Iterator[Pair]:
    """
    Pair each active profile with every active property.

    Pairs are grouped by profile, properties in input order.

    Args:
        profiles: Anchor profiles
        properties: Candidate properties

    Yields:
        (property, profile) pairs
    """
    candidates = active_properties(properties)
    for profile in active_profiles(profiles):
        for prop in candidates:
            yield prop, profile
