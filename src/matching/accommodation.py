"""
Accommodation compatibility rules.

A seeker fits a host when the host has room for the whole party and the
host's gender preference admits it. Location is informational only, and
compatible hosts are not ranked.
"""

from loguru import logger

from src.modules.registrations.models import (
    GenderPreference,
    NeededCounts,
    ParticipantRecord,
)

accommodation_log = logger.bind(module="Accommodation")


def total_needed(needed: NeededCounts | None) -> int:
    """Total number of guests a seeker needs a place for."""
    if needed is None:
        return 0
    return needed.male + needed.female + needed.other


def provider_capacity(provider: ParticipantRecord) -> int:
    """Host capacity, negative or missing values count as 0."""
    if provider.accommodation is None:
        return 0
    return max(0, provider.accommodation.capacity or 0)


def gender_compatible(preference: str | None, needed: NeededCounts) -> bool:
    """
    Check a host's gender preference against a seeker's party.

    Args:
        preference: Host preference ("male-only", "female-only", "anyone")
        needed: Seeker's needed counts

    Returns:
        True if the host accepts the party. Unknown preferences deny.

    Examples:
        >>> gender_compatible("male-only", NeededCounts(male=2))
        True
        >>> gender_compatible("male-only", NeededCounts(male=1, female=1))
        False
    """
    if preference == GenderPreference.ANYONE.value:
        return True
    if preference == GenderPreference.MALE_ONLY.value:
        return needed.male > 0 and needed.female == 0
    if preference == GenderPreference.FEMALE_ONLY.value:
        return needed.female > 0 and needed.male == 0
    return False


def is_eligible(seeker: ParticipantRecord, provider: ParticipantRecord) -> bool:
    """
    Check if a host can take a seeker.

    Matching logic:
    - Seeker must need at least one place
    - Host capacity must cover the seeker's total
    - Host gender preference must admit the seeker's party

    Args:
        seeker: Registration with accommodation kind "need"
        provider: Registration with accommodation kind "provide"

    Returns:
        True if the pair can be matched
    """
    if seeker.accommodation is None or provider.accommodation is None:
        return False

    needed = seeker.accommodation.needed
    total = total_needed(needed)
    if total < 1:
        return False

    if provider_capacity(provider) < total:
        return False

    return gender_compatible(provider.accommodation.gender_preference, needed)


def filter_compatible(
    seeker: ParticipantRecord,
    providers: list[ParticipantRecord],
) -> list[ParticipantRecord]:
    """
    Keep hosts compatible with the seeker, in input order.

    Args:
        seeker: Accommodation seeker
        providers: Candidate hosts

    Returns:
        Compatible hosts (unranked)
    """
    compatible = [p for p in providers if is_eligible(seeker, p)]
    accommodation_log.debug(
        f"Seeker {seeker.id}: {len(compatible)}/{len(providers)} hosts compatible"
    )
    return compatible
