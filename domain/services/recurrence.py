"""
Recurrence resolution: is a calendar date an occurrence of a ritual?

Part of RIT-21: Recurrence model for rituals

All functions here are pure and only deal with calendar dates (no times of
day, no timezones).

Rules:
- A candidate before the ritual's creation date never occurs.
- once: only on the creation date.
- daily: every `interval` days counted from the creation date.
- weekly: on `days_of_week` (0=Sunday), in every `interval`-th week counted
  from the first week that contains a matching day on or after creation.
  Weeks run Sunday to Saturday. An empty `days_of_week` never occurs.
- custom: exactly on `specific_dates`.
- Any date in `exclude_dates` never occurs.

Usage:
    >>> rule = FrequencyRule(type=FrequencyType.DAILY, interval=3)
    >>> occurs_on(rule, date(2024, 1, 1), date(2024, 1, 4))
    True
    >>> list(enumerate_occurrences(rule, date(2024, 1, 1), date(2024, 1, 1), date(2024, 1, 8)))
    [datetime.date(2024, 1, 1), datetime.date(2024, 1, 4), datetime.date(2024, 1, 7)]
"""

from datetime import date, timedelta
from typing import Iterator, Optional

from domain.exceptions import InvalidFrequencyRuleError
from domain.models.frequency import FrequencyRule, FrequencyType

DEFAULT_HORIZON_DAYS = 366


def weekday_index(d: date) -> int:
    """Weekday with 0=Sunday ... 6=Saturday."""
    return (d.weekday() + 1) % 7


def week_start(d: date) -> date:
    """Sunday starting the week that contains d."""
    return d - timedelta(days=weekday_index(d))


def validate_rule(rule: FrequencyRule) -> FrequencyRule:
    """
    Check that the populated fields match the rule type.

    Raises:
        InvalidFrequencyRuleError: On the first mismatch found.
    """
    if rule.interval < 1:
        raise InvalidFrequencyRuleError("interval must be a positive integer")

    has_days = bool(rule.days_of_week)
    has_dates = bool(rule.specific_dates)

    if rule.type == FrequencyType.WEEKLY:
        if rule.days_of_week is None:
            raise InvalidFrequencyRuleError("weekly rules require days_of_week")
        if any(d < 0 or d > 6 for d in rule.days_of_week):
            raise InvalidFrequencyRuleError("days_of_week values must be between 0 and 6")
        if has_dates:
            raise InvalidFrequencyRuleError("weekly rules cannot have specific_dates")
    elif rule.type == FrequencyType.CUSTOM:
        if not has_dates:
            raise InvalidFrequencyRuleError("custom rules require a non-empty specific_dates")
        if has_days:
            raise InvalidFrequencyRuleError("custom rules cannot have days_of_week")
    else:
        if has_days:
            raise InvalidFrequencyRuleError(f"{rule.type.value} rules cannot have days_of_week")
        if has_dates:
            raise InvalidFrequencyRuleError(f"{rule.type.value} rules cannot have specific_dates")

    return rule


def _first_matching_day(days_of_week, created: date) -> Optional[date]:
    for offset in range(7):
        d = created + timedelta(days=offset)
        if weekday_index(d) in days_of_week:
            return d
    return None


def _matches(rule: FrequencyRule, created: date, candidate: date) -> bool:
    if rule.type == FrequencyType.ONCE:
        return candidate == created

    if rule.type == FrequencyType.DAILY:
        return (candidate - created).days % rule.interval == 0

    if rule.type == FrequencyType.WEEKLY:
        days = set(rule.days_of_week or [])
        if weekday_index(candidate) not in days:
            return False
        first = _first_matching_day(days, created)
        if first is None:
            return False
        week_index = (week_start(candidate) - week_start(first)).days // 7
        return week_index % rule.interval == 0

    if rule.type == FrequencyType.CUSTOM:
        return candidate in set(rule.specific_dates or [])

    return False


def occurs_on(rule: FrequencyRule, ritual_created_date: date, candidate: date) -> bool:
    """
    Decide whether candidate is an occurrence of the rule.

    Args:
        rule: Frequency rule of the ritual
        ritual_created_date: Calendar date the ritual was created
        candidate: Date to test

    Returns:
        True if the ritual is due on candidate.

    Raises:
        InvalidFrequencyRuleError: If the rule's type does not match its fields.
    """
    validate_rule(rule)
    if candidate < ritual_created_date:
        return False
    if candidate in rule.exclude_dates:
        return False
    return _matches(rule, ritual_created_date, candidate)


class OccurrenceRange:
    """
    Lazy, finite and restartable sequence of occurrence dates in [start, end].

    Every iteration starts over from `start`; dates are produced by testing
    each day of the range with occurs_on.
    """

    def __init__(self, rule: FrequencyRule, created: date, start: date, end: date) -> None:
        validate_rule(rule)
        self.rule = rule
        self.created = created
        self.start = start
        self.end = end

    def __iter__(self) -> Iterator[date]:
        current = max(self.start, self.created)
        while current <= self.end:
            if occurs_on(self.rule, self.created, current):
                yield current
            current += timedelta(days=1)

    def __repr__(self) -> str:
        return f"OccurrenceRange({self.rule}, {self.start.isoformat()}..{self.end.isoformat()})"


def enumerate_occurrences(
    rule: FrequencyRule,
    ritual_created_date: date,
    start: date,
    end: date,
) -> OccurrenceRange:
    """Occurrences of the rule between start and end (inclusive)."""
    return OccurrenceRange(rule, ritual_created_date, start, end)


def next_occurrence(
    rule: FrequencyRule,
    ritual_created_date: date,
    after: date,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> Optional[date]:
    """First occurrence strictly after `after`, looking at most horizon_days ahead."""
    start = after + timedelta(days=1)
    end = after + timedelta(days=horizon_days)
    for occurrence in enumerate_occurrences(rule, ritual_created_date, start, end):
        return occurrence
    return None
