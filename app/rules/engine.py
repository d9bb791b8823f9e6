# app/rules/engine.py

from __future__ import annotations
import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import List, Optional, Sequence, Tuple

from schemas import HeirInput
from app.rules.classifier import CategorizedHeirs

logger = logging.getLogger(__name__)

HALF = Fraction(1, 2)
THIRD = Fraction(1, 3)
QUARTER = Fraction(1, 4)
TWO_THIRDS = Fraction(2, 3)
SIXTH = Fraction(1, 6)
EIGHTH = Fraction(1, 8)

FIXED = "fixed"
ASABAH = "asabah"
RADD = "radd"


def format_fraction(value: Fraction) -> str:
    if value.denominator == 1:
        return str(value.numerator)
    return f"{value.numerator}/{value.denominator}"


# =========================
# Facts derived once per call
# =========================
@dataclass(frozen=True)
class HeirFacts:
    has_descendants: bool
    has_male_ascendants: bool
    has_multiple_siblings: bool
    sibling_count: int
    maternal_sibling_count: int

    @classmethod
    def from_categorized(cls, heirs: CategorizedHeirs) -> "HeirFacts":
        has_descendants = bool(heirs.sons or heirs.daughters or heirs.grandsons or heirs.granddaughters)
        has_male_ascendants = heirs.father is not None or heirs.grandfather is not None
        sibling_count = heirs.sibling_count
        return cls(
            has_descendants=has_descendants,
            has_male_ascendants=has_male_ascendants,
            has_multiple_siblings=sibling_count >= 2,
            sibling_count=sibling_count,
            maternal_sibling_count=len(heirs.maternal_siblings),
        )


# =========================
# One allocated share (exact)
# =========================
@dataclass(frozen=True)
class AllocatedShare:
    heir: HeirInput
    fraction: Fraction
    explanation: str
    kind: str = FIXED


def _give(shares: List[AllocatedShare], heir: HeirInput, fraction: Fraction, reason: str) -> Fraction:
    shares.append(AllocatedShare(heir=heir, fraction=fraction, explanation=reason))
    return fraction


def _split(shares: List[AllocatedShare], group: Sequence[HeirInput], fraction: Fraction,
           label: str, plural: str) -> Fraction:
    """Split `fraction` evenly (per capita) across `group`; returns the whole fraction."""
    n = len(group)
    each = fraction / n
    others = n - 1
    for heir in group:
        reason = (f"{label} shares {format_fraction(fraction)} equally with "
                  f"{others} other {plural}")
        shares.append(AllocatedShare(heir=heir, fraction=each, explanation=reason))
    return fraction


# =========================
# Fixed-share rule engine
# =========================
def apply_fixed_shares(heirs: CategorizedHeirs,
                       notes: Optional[List[str]] = None) -> Tuple[List[AllocatedShare], Fraction]:
    """
    Evaluate every fixed-share (fard) rule in table order.

    Each rule is gated on its own heir category, so at most one rule fires per
    category; the order only decides the order of the returned shares.
    Returns (shares, total_allocated). Nothing matching is a valid empty result.
    Grandsons never take a fixed share; they only count as descendants.
    """
    notes = notes if notes is not None else []
    shares: List[AllocatedShare] = []
    total = Fraction(0)

    facts = HeirFacts.from_categorized(heirs)
    desc = facts.has_descendants
    male_asc = facts.has_male_ascendants
    sons, daughters = len(heirs.sons), len(heirs.daughters)
    grandsons, granddaughters = len(heirs.grandsons), len(heirs.granddaughters)
    full_brothers, full_sisters = len(heirs.full_brothers), len(heirs.full_sisters)
    paternal_brothers, paternal_sisters = len(heirs.paternal_brothers), len(heirs.paternal_sisters)
    # sisters take a fixed share only when nothing above them blocks it
    full_sisters_open = full_brothers == 0 and not male_asc and not desc
    paternal_sisters_open = (paternal_brothers == 0 and full_brothers == 0
                             and full_sisters == 0 and not male_asc and not desc)

    logger.debug("Faraid facts: %s", facts)
    notes.append(
        f"Descendants: {'yes' if desc else 'no'}; father/grandfather: {'yes' if male_asc else 'no'}; "
        f"siblings: {facts.sibling_count}"
    )

    # -----------------------
    # 1/2
    # -----------------------
    if heirs.husband is not None and not desc:
        total += _give(shares, heirs.husband, HALF, "Husband receives 1/2 as there are no descendants")

    if daughters == 1 and sons == 0:
        total += _give(shares, heirs.daughters[0], HALF, "A single daughter receives 1/2 when there are no sons")

    if granddaughters == 1 and grandsons == 0 and sons == 0 and daughters == 0:
        total += _give(shares, heirs.granddaughters[0], HALF,
                       "A single granddaughter receives 1/2 when there are no children or grandsons")

    if full_sisters == 1 and full_sisters_open:
        total += _give(shares, heirs.full_sisters[0], HALF,
                       "A single full sister receives 1/2 with no descendants, "
                       "father/grandfather or full brother")

    if paternal_sisters == 1 and paternal_sisters_open:
        total += _give(shares, heirs.paternal_sisters[0], HALF,
                       "A single paternal sister receives 1/2 with no descendants, "
                       "father/grandfather, brother or full sister")

    # -----------------------
    # 1/3
    # -----------------------
    if heirs.mother is not None and not desc and not facts.has_multiple_siblings:
        total += _give(shares, heirs.mother, THIRD,
                       "Mother receives 1/3 as there are no descendants and fewer than 2 siblings")

    if facts.maternal_sibling_count >= 2 and not desc and not male_asc:
        total += _split(shares, heirs.maternal_siblings, THIRD, "Maternal sibling", "maternal sibling(s)")

    # -----------------------
    # 1/4
    # -----------------------
    if heirs.husband is not None and desc:
        total += _give(shares, heirs.husband, QUARTER, "Husband receives 1/4 as there are descendants")

    if heirs.wife is not None and not desc:
        total += _give(shares, heirs.wife, QUARTER, "Wife receives 1/4 as there are no descendants")

    # -----------------------
    # 2/3
    # -----------------------
    if daughters >= 2 and sons == 0:
        total += _split(shares, heirs.daughters, TWO_THIRDS, "Daughter", "daughter(s)")

    if granddaughters >= 2 and grandsons == 0 and sons == 0 and daughters == 0:
        total += _split(shares, heirs.granddaughters, TWO_THIRDS, "Granddaughter", "granddaughter(s)")

    if full_sisters >= 2 and full_sisters_open:
        total += _split(shares, heirs.full_sisters, TWO_THIRDS, "Full sister", "full sister(s)")

    if paternal_sisters >= 2 and paternal_sisters_open:
        total += _split(shares, heirs.paternal_sisters, TWO_THIRDS, "Paternal sister", "paternal sister(s)")

    # -----------------------
    # 1/6
    # -----------------------
    if heirs.father is not None and desc:
        total += _give(shares, heirs.father, SIXTH, "Father receives 1/6 as there are descendants")

    if heirs.mother is not None and (desc or facts.has_multiple_siblings):
        total += _give(shares, heirs.mother, SIXTH,
                       "Mother receives 1/6 as there are descendants or multiple siblings")

    if (heirs.grandfather is not None and desc and heirs.father is None
            and full_brothers + full_sisters + paternal_brothers + paternal_sisters == 0):
        total += _give(shares, heirs.grandfather, SIXTH,
                       "Grandfather receives 1/6 in place of the father as there are descendants")

    if (heirs.grandmother is not None and heirs.mother is None
            and (heirs.father is None or heirs.grandmother_is_maternal)):
        total += _give(shares, heirs.grandmother, SIXTH,
                       "Grandmother receives 1/6 as there is no mother")

    if daughters == 1 and sons == 0 and grandsons == 0 and granddaughters >= 1:
        total += _split(shares, heirs.granddaughters, SIXTH, "Granddaughter", "granddaughter(s)")

    if (full_sisters == 1 and paternal_sisters >= 1 and not desc and not male_asc
            and full_brothers == 0 and paternal_brothers == 0):
        total += _split(shares, heirs.paternal_sisters, SIXTH, "Paternal sister", "paternal sister(s)")

    if facts.maternal_sibling_count == 1 and not desc and not male_asc:
        total += _give(shares, heirs.maternal_siblings[0], SIXTH,
                       "A single maternal sibling receives 1/6 with no descendants or father/grandfather")

    # -----------------------
    # 1/8
    # -----------------------
    if heirs.wife is not None and desc:
        total += _give(shares, heirs.wife, EIGHTH, "Wife receives 1/8 as there are descendants")

    for share in shares:
        notes.append(f"{share.heir.full_name} ({share.heir.relationship}): "
                     f"{format_fraction(share.fraction)} - {share.explanation}")
    logger.debug("Fixed shares allocated %s across %d heir(s)", total, len(shares))
    return shares, total
