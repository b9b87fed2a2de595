"""
Lender Matching Engine
Scores a lender catalog against a borrower's selected criteria and derives
the per-criterion match badges shown on the lender detail card
"""

import math

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any, Iterable, Mapping, Union

from ontology import NATIONWIDE, FILTER_FIELDS, CRITERIA_TYPES
from ranges import parse_debt_range, ranges_overlap, derive_debt_range, round_half_up

# Compact currency units: (divisor, suffix)
COMPACT_UNITS = ((1, ''), (1e3, 'K'), (1e6, 'M'), (1e9, 'B'), (1e12, 'T'))

# ============================================================================
# MODELS
# ============================================================================

class PreferenceScope(BaseModel):
    """Per-dimension mismatch penalty: 1.0 eliminates the lender, 0.0 never penalizes"""
    asset_types: float = 0.0
    deal_types: float = 0.0
    capital_types: float = 0.0
    locations: float = 0.0
    deal_size: float = 0.0


class LenderProfile(BaseModel):
    """A lender's lending criteria as supplied by the catalog. Unknown fields are kept."""
    model_config = ConfigDict(extra='allow')

    lender_id: Optional[int] = None
    name: str = ""
    asset_types: List[str] = []
    deal_types: List[str] = []
    capital_types: List[str] = []
    locations: List[str] = []
    debt_ranges: Optional[List[str]] = None
    min_deal_size: float = 0
    max_deal_size: float = 0
    preference_scope: PreferenceScope = Field(default_factory=PreferenceScope)
    description: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None


class LenderWithScore(LenderProfile):
    """Lender profile plus its score for the current filters"""
    match_score: float


class UserFilters(BaseModel):
    """Borrower's selections; an empty or missing dimension is not scored"""
    asset_types: Optional[List[str]] = None
    deal_types: Optional[List[str]] = None
    capital_types: Optional[List[str]] = None
    debt_ranges: Optional[List[str]] = None
    locations: Optional[List[str]] = None
    requested_amount: Optional[float] = None  # not used by scoring yet


FiltersInput = Union[UserFilters, Mapping[str, Any], None]
LenderInput = Union[LenderProfile, Mapping[str, Any]]

# ============================================================================
# SCORING ENGINE
# ============================================================================

def normalize_filters(filters: FiltersInput = None) -> UserFilters:
    """Return a copy of the filters with every dimension present as a list"""
    if filters is None:
        filters = UserFilters()
    elif not isinstance(filters, UserFilters):
        filters = UserFilters(**filters)

    values = {field: list(getattr(filters, field) or []) for field in FILTER_FIELDS}
    return UserFilters(**values, requested_amount=filters.requested_amount)


def has_active_filters(filters: FiltersInput = None) -> bool:
    """True if any scoring dimension has a selection"""
    safe = normalize_filters(filters)
    return any(getattr(safe, field) for field in FILTER_FIELDS)


def any_shared(selected: Iterable[str], offered: Iterable[str]) -> bool:
    offered = set(offered)
    return any(value in offered for value in selected)


def location_matches(lender_locations: List[str], selected: List[str]) -> bool:
    return NATIONWIDE in lender_locations or any_shared(lender_locations, selected)


def lender_debt_ranges(lender: LenderProfile) -> List[str]:
    """Explicit debt ranges, or one derived from min/max deal size"""
    if lender.debt_ranges:
        return list(lender.debt_ranges)
    return [derive_debt_range(lender.min_deal_size, lender.max_deal_size)]


def debt_range_matches(lender: LenderProfile, selected: List[str]) -> bool:
    """Any selected band overlapping any of the lender's bands"""
    filter_ranges = [r for r in (parse_debt_range(s) for s in selected) if r]
    lender_ranges = [r for r in (parse_debt_range(s) for s in lender_debt_ranges(lender)) if r]

    return any(
        ranges_overlap(f, l)
        for f in filter_ranges
        for l in lender_ranges
    )


def score_lender(lender: LenderProfile, filters: UserFilters) -> LenderWithScore:
    """
    Score one lender against normalized filters.

    Each selected dimension the lender fails multiplies the score by
    (1 - preference_scope[dimension]), so mismatches compound. All five
    checks run every time. Expects filters from normalize_filters().
    """
    scope = lender.preference_scope
    match_score = 1.0

    # 1. Asset types
    if filters.asset_types and not any_shared(filters.asset_types, lender.asset_types):
        match_score *= (1 - scope.asset_types)

    # 2. Deal types
    if filters.deal_types and not any_shared(filters.deal_types, lender.deal_types):
        match_score *= (1 - scope.deal_types)

    # 3. Capital types
    if filters.capital_types and not any_shared(filters.capital_types, lender.capital_types):
        match_score *= (1 - scope.capital_types)

    # 4. Locations (nationwide lenders match everywhere)
    if filters.locations and not location_matches(lender.locations, filters.locations):
        match_score *= (1 - scope.locations)

    # 5. Debt range
    if filters.debt_ranges and not debt_range_matches(lender, filters.debt_ranges):
        match_score *= (1 - scope.deal_size)

    return LenderWithScore(
        **lender.model_dump(exclude={'match_score'}),
        match_score=max(0.0, match_score),
    )


def calculate_match_scores(lenders: Iterable[LenderInput], filters: FiltersInput = None) -> List[LenderWithScore]:
    """
    Calculate match scores for lenders based on the borrower's filters.

    Returns new LenderWithScore objects in the same order as the input;
    the input lenders are left untouched.
    """
    safe_filters = normalize_filters(filters)
    return [score_lender(as_profile(lender), safe_filters) for lender in lenders]


def rank_lenders(lenders: Iterable[LenderInput], filters: FiltersInput = None,
                 limit: Optional[int] = None) -> List[LenderWithScore]:
    """Score, then order best match first. Ties keep catalog order."""
    scored = calculate_match_scores(lenders, filters)
    scored.sort(key=lambda l: l.match_score, reverse=True)
    if limit is not None:
        return scored[:limit]
    return scored


def as_profile(lender: LenderInput) -> LenderProfile:
    if isinstance(lender, LenderProfile):
        return lender
    return LenderProfile.model_validate(lender)

# ============================================================================
# CRITERIA COMPARATOR
# ============================================================================

def criteria_matches(lender_criteria: List[str], form_criteria: List[str],
                     criteria_type: str) -> Optional[bool]:
    """
    Match state of one criterion for the lender detail card.

    None means nothing was selected for this criterion (show the lender's
    raw values instead of a badge). Display only: preference scopes do not
    apply here.
    """
    if not form_criteria:
        return None

    if criteria_type == "locations" and NATIONWIDE in lender_criteria:
        return True

    return any(item in lender_criteria for item in form_criteria)


def criteria_badges(lender: LenderInput, filters: FiltersInput = None) -> Dict[str, Optional[bool]]:
    """Match state for every criterion on the detail card, keyed by criteria type"""
    profile = as_profile(lender)
    safe_filters = normalize_filters(filters)
    return {
        criteria_type: criteria_matches(
            getattr(profile, field) or [],
            getattr(safe_filters, field),
            criteria_type,
        )
        for criteria_type, field in CRITERIA_TYPES.items()
    }

# ============================================================================
# DISPLAY HELPERS
# ============================================================================

def match_percentage(match_score: Optional[float]) -> int:
    """0.456 -> 46"""
    return int(math.floor((match_score or 0) * 100 + 0.5))


def format_criteria(criteria: List[str]) -> str:
    return ", ".join(item.replace('_', ' ') for item in criteria)


def format_currency(amount: float) -> str:
    """
    Compact USD: 2000000 -> "$2M", 1250000 -> "$1.3M", 999950 -> "$1M".

    One decimal at most, halves rounded up; a value that rounds to 1000
    moves to the next unit.
    """
    sign = '-' if amount < 0 else ''
    magnitude = abs(amount)
    if not math.isfinite(magnitude):
        return f"{sign}${'NaN' if math.isnan(magnitude) else '∞'}"

    unit = 0
    for i, (threshold, _) in enumerate(COMPACT_UNITS):
        if magnitude >= threshold:
            unit = i

    value = round_half_up(magnitude / COMPACT_UNITS[unit][0], 1)
    if value >= 1000 and unit + 1 < len(COMPACT_UNITS):
        unit += 1
        value = round_half_up(magnitude / COMPACT_UNITS[unit][0], 1)

    text = f"{value:f}".rstrip('0').rstrip('.')
    return f"{sign}${text}{COMPACT_UNITS[unit][1]}"
