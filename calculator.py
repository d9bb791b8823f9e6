# calculator.py

from __future__ import annotations
import logging
from fractions import Fraction
from typing import Iterable, List, Optional, Tuple

import schemas
from app.rules.classifier import CategorizedHeirs, classify, partition_family_members
from app.rules.engine import (
    ASABAH,
    RADD,
    AllocatedShare,
    apply_fixed_shares,
    format_fraction,
)

logger = logging.getLogger(__name__)

# --------------------------
# Calculation status
# --------------------------
STATUS_NO_ELIGIBLE_HEIRS = "no_eligible_heirs"
STATUS_ADIL = "adil"                  # fixed shares cover exactly the whole estate
STATUS_ASABAH = "asabah"              # father or children took the remainder
STATUS_RADD = "radd"                  # remainder returned proportionally
STATUS_UNDISTRIBUTED = "undistributed"
STATUS_AWL_REQUIRED = "awl_required"  # fixed shares exceed the estate, not reduced

RADD_SUFFIX = " + remainder distributed proportionally (Radd)"


# --------------------------
# Residual distribution (Asabah / Radd)
# --------------------------
def distribute_residual(shares: List[AllocatedShare],
                        total_allocated: Fraction,
                        heirs: CategorizedHeirs,
                        notes: Optional[List[str]] = None) -> List[AllocatedShare]:
    """
    Hand out whatever the fixed shares left over. First matching case wins:

      1) father, no descendants, no fixed share yet -> father takes the remainder.
      2) at least one son -> sons and daughters split it 2:1.
      3) non-spouse shares exist -> Radd: those shares are scaled up in proportion
         until the estate is covered; spouses keep their fixed share.
      4) otherwise the remainder stays undistributed.

    The input list is never modified; a new list is returned. With
    total_allocated >= 1 nothing happens ('awl is left to the caller).
    """
    notes = notes if notes is not None else []
    if total_allocated >= 1:
        if total_allocated > 1:
            notes.append(f"Fixed shares total {format_fraction(total_allocated)}, no remainder to distribute")
        return list(shares)

    remainder = 1 - total_allocated
    desc = bool(heirs.sons or heirs.daughters or heirs.grandsons or heirs.granddaughters)
    father_has_share = heirs.father is not None and any(s.heir.id == heirs.father.id for s in shares)

    # 1) Father as residuary heir
    if heirs.father is not None and not desc and not father_has_share:
        logger.debug("Residual case 1: father takes %s", remainder)
        notes.append(f"Father takes the remainder {format_fraction(remainder)} as Asabah")
        return list(shares) + [AllocatedShare(
            heir=heirs.father,
            fraction=remainder,
            explanation="Father receives the remaining portion as there are no descendants (Asabah)",
            kind=ASABAH,
        )]

    # 2) Sons (with daughters) 2:1
    if heirs.sons:
        units = 2 * len(heirs.sons) + len(heirs.daughters)
        unit = remainder / units
        logger.debug("Residual case 2: %s over %d unit(s)", remainder, units)
        notes.append(
            f"Children take the remainder {format_fraction(remainder)} as Asabah: "
            f"{units} part(s), son = 2 parts, daughter = 1 part"
        )
        out = list(shares)
        if heirs.daughters:
            son_reason = "Son receives twice the share of a daughter from the remainder (Asabah)"
        else:
            son_reason = "Son shares the remaining portion equally with other sons (Asabah)"
        for son in heirs.sons:
            out.append(AllocatedShare(heir=son, fraction=2 * unit, explanation=son_reason, kind=ASABAH))
        for daughter in heirs.daughters:
            out.append(AllocatedShare(
                heir=daughter,
                fraction=unit,
                explanation="Daughter receives half the share of a son from the remainder (Asabah)",
                kind=ASABAH,
            ))
        return out

    # 3) Radd, spouses keep their fixed share
    spouse_ids = {h.id for h in (heirs.husband, heirs.wife) if h is not None}
    radd_base = sum((s.fraction for s in shares if s.heir.id not in spouse_ids), Fraction(0))
    if radd_base > 0:
        logger.debug("Residual case 3: Radd of %s over base %s", remainder, radd_base)
        notes.append(f"Remainder {format_fraction(remainder)} returned proportionally to non-spouse heirs (Radd)")
        return [
            s if s.heir.id in spouse_ids else AllocatedShare(
                heir=s.heir,
                fraction=s.fraction + (s.fraction / radd_base) * remainder,
                explanation=s.explanation + RADD_SUFFIX,
                kind=RADD,
            )
            for s in shares
        ]

    # 4) Nothing to hand the remainder to
    logger.debug("Residual case 4: %s left undistributed", remainder)
    return list(shares)


def to_result(share: AllocatedShare, asset_value: float) -> schemas.FaraidResult:
    portion = float(share.fraction)
    return schemas.FaraidResult(
        heir_id=share.heir.id,
        full_name=share.heir.full_name,
        relationship=share.heir.relationship,
        share=portion * asset_value,
        percentage=portion * 100,
        fraction=format_fraction(share.fraction),
        explanation=share.explanation,
    )


def _solve(family_members: Iterable[schemas.HeirInput],
           owner_gender: schemas.OwnerGender,
           notes: List[str]) -> Tuple[List[AllocatedShare], Fraction]:
    heirs = classify(family_members, owner_gender)
    shares, total_allocated = apply_fixed_shares(heirs, notes)
    shares = distribute_residual(shares, total_allocated, heirs, notes)
    return shares, total_allocated


# ============================================================
#                    MAIN ENTRY POINTS
# ============================================================
def calculate_faraid(family_members: Iterable[schemas.HeirInput],
                     asset_value: float,
                     owner_gender: schemas.OwnerGender = schemas.OwnerGender.MALE) -> List[schemas.FaraidResult]:
    """
    Faraid shares for one asset value.

    Pure: unrecognized relationships are ignored, an empty list means no
    eligible heirs, and the asset value is not validated here.
    """
    shares, _ = _solve(family_members, schemas.OwnerGender(owner_gender), [])
    return [to_result(s, asset_value) for s in shares]


def _status(shares: List[AllocatedShare], total_allocated: Fraction) -> str:
    if not shares:
        return STATUS_NO_ELIGIBLE_HEIRS
    if total_allocated > 1:
        return STATUS_AWL_REQUIRED
    if total_allocated == 1:
        return STATUS_ADIL
    kinds = {s.kind for s in shares}
    if ASABAH in kinds:
        return STATUS_ASABAH
    if RADD in kinds:
        return STATUS_RADD
    return STATUS_UNDISTRIBUTED


def calculate_distribution(
    calculation_input: schemas.CalculationInput,
    default_owner_gender: schemas.OwnerGender = schemas.OwnerGender.MALE,
) -> schemas.CalculationResult:
    """Run `calculate_faraid` and add totals, status, notes and the eligible split."""
    owner_gender = schemas.OwnerGender(calculation_input.owner_gender or default_owner_gender)
    members = calculation_input.family_members
    asset_value = calculation_input.asset_value
    eligible, non_eligible = partition_family_members(members, owner_gender)

    notes: List[str] = [f"Estate owner is {owner_gender.value}; {len(eligible)} eligible heir(s)"]
    if non_eligible:
        notes.append("Not eligible for Faraid: " + ", ".join(
            f"{m.full_name} ({m.relationship})" for m in non_eligible))

    shares, total_allocated = _solve(members, owner_gender, notes)
    results = [to_result(s, asset_value) for s in shares]

    distributed = sum((s.fraction for s in shares), Fraction(0))
    total_percentage = sum(r.percentage for r in results)
    unallocated = max(Fraction(0), 1 - distributed)
    status = _status(shares, total_allocated)

    if status == STATUS_NO_ELIGIBLE_HEIRS:
        notes.append("No eligible heirs for Faraid distribution")
    elif distributed > 1:
        notes.append("Total distribution exceeds 100%. This requires 'Awl (proportional reduction).")
    elif unallocated > 0:
        notes.append(
            f"The remaining {float(unallocated) * 100:.2f}% is distributed according to additional Faraid rules."
        )

    logger.info("Faraid calculation: %d member(s), %d result(s), status=%s",
                len(members), len(results), status)
    return schemas.CalculationResult(
        asset_value=asset_value,
        owner_gender=owner_gender,
        total_percentage=total_percentage,
        unallocated_percentage=float(unallocated) * 100,
        status=status,
        notes=notes,
        results=results,
        eligible=eligible,
        non_eligible=non_eligible,
    )
