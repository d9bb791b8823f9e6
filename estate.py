# estate.py

import logging
from typing import Dict, List

from calculator import calculate_distribution
from schemas import (
    AssetDistribution,
    CalculationInput,
    EstateInput,
    EstateResult,
    HeirTotal,
    OwnerGender,
)

logger = logging.getLogger(__name__)


def calculate_estate(estate_input: EstateInput,
                     default_owner_gender: OwnerGender = OwnerGender.MALE) -> EstateResult:
    """
    Run one Faraid calculation per asset for the same family, then sum each
    heir's shares across assets (heirs listed in first-seen order).
    """
    seen_ids = set()
    for asset in estate_input.assets:
        if asset.id in seen_ids:
            raise ValueError(f"Duplicate asset id: {asset.id}")
        seen_ids.add(asset.id)

    distributions: List[AssetDistribution] = []
    totals: Dict[str, HeirTotal] = {}
    total_value = 0.0

    for asset in estate_input.assets:
        calc_input = CalculationInput(
            family_members=estate_input.family_members,
            asset_value=asset.value,
            owner_gender=estate_input.owner_gender,
        )
        result = calculate_distribution(calc_input, default_owner_gender)
        logger.info("Asset %s (%s): value=%.2f status=%s", asset.id, asset.name, asset.value, result.status)
        distributions.append(AssetDistribution(asset=asset, distribution=result))
        total_value += asset.value

        for r in result.results:
            current = totals.get(r.heir_id)
            if current is None:
                totals[r.heir_id] = HeirTotal(
                    heir_id=r.heir_id,
                    full_name=r.full_name,
                    relationship=r.relationship,
                    total_share=r.share,
                    percentage=0.0,
                )
            else:
                totals[r.heir_id] = current.model_copy(update={"total_share": current.total_share + r.share})

    heir_totals = [
        t.model_copy(update={"percentage": (t.total_share / total_value * 100) if total_value else 0.0})
        for t in totals.values()
    ]
    return EstateResult(total_value=total_value, assets=distributions, heir_totals=heir_totals)
