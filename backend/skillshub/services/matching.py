"""Skill overlap scoring.

Two formulas are used and they are not interchangeable:

* ``job_match_score`` ranks jobs for a seeker. It divides the overlap by the
  larger of the two skill sets, so a job asking for far more than the seeker
  has, or a seeker with far more skills than the job needs, both score lower.
* ``talent_match_score`` ranks seekers for an employer. It divides by the
  employer's wanted set only, so extra skills on the talent never hurt.

Both return an integer percentage rounded half up.
"""

import enum
from collections.abc import Callable, Iterable, Sequence
from decimal import Decimal, ROUND_HALF_UP
from typing import TypeVar

T = TypeVar("T")


class ScoreMode(str, enum.Enum):
    JOB_FOR_SEEKER = "job_for_seeker"
    TALENT_FOR_EMPLOYER = "talent_for_employer"


def _round_half_up(numerator: int, denominator: int) -> int:
    value = Decimal(100 * numerator) / Decimal(denominator)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def matching_skill_count(wanted: Iterable[int], possessed: Iterable[int]) -> int:
    return len(set(wanted) & set(possessed))


def job_match_score(wanted: Iterable[int], possessed: Iterable[int]) -> int:
    """Score a job's skills (wanted) against a seeker's skills (possessed)."""
    wanted, possessed = set(wanted), set(possessed)
    if not wanted:
        return 0
    return _round_half_up(len(wanted & possessed), max(len(wanted), len(possessed)))


def talent_match_score(wanted: Iterable[int], possessed: Iterable[int]) -> int:
    """Score a talent's skills (possessed) against an employer's skills (wanted)."""
    wanted, possessed = set(wanted), set(possessed)
    if not wanted:
        return 0
    return _round_half_up(len(wanted & possessed), len(wanted))


def match_score(wanted: Iterable[int], possessed: Iterable[int], mode: ScoreMode) -> int:
    if mode == ScoreMode.JOB_FOR_SEEKER:
        return job_match_score(wanted, possessed)
    if mode == ScoreMode.TALENT_FOR_EMPLOYER:
        return talent_match_score(wanted, possessed)
    raise ValueError(f"Unknown score mode: {mode}")


def rank_by_score(
    items: Sequence[T],
    score_key: Callable[[T], int],
    created_key: Callable[[T], object],
) -> list[T]:
    """Order by score descending, then creation time descending.

    Python's sort is stable, so items tied on both keys keep their input
    order. Sorting on the secondary key first and the primary key second
    gives the combined ordering without negating timestamps.
    """
    ranked = sorted(items, key=created_key, reverse=True)
    return sorted(ranked, key=score_key, reverse=True)
