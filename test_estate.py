"""Tests for the multi-asset estate calculation."""

import pytest

from calculator import STATUS_ASABAH
from estate import calculate_estate
from schemas import Asset, EstateInput, HeirInput, OwnerGender

FAMILY = [
    HeirInput(id="w", full_name="Aisyah", relationship="wife"),
    HeirInput(id="s", full_name="Ahmad", relationship="son"),
    HeirInput(id="c", full_name="Farid", relationship="cousin"),
]


def test_each_asset_is_calculated_and_totals_summed():
    result = calculate_estate(EstateInput(
        family_members=FAMILY,
        owner_gender=OwnerGender.MALE,
        assets=[Asset(id="house", name="House", value=800), Asset(id="car", name="Car", value=1600)],
    ))
    assert result.total_value == 2400
    assert [a.asset.id for a in result.assets] == ["house", "car"]
    assert all(a.distribution.status == STATUS_ASABAH for a in result.assets)

    totals = {t.heir_id: t for t in result.heir_totals}
    assert list(totals) == ["w", "s"]
    assert totals["w"].total_share == pytest.approx(300)
    assert totals["s"].total_share == pytest.approx(2100)
    assert totals["w"].percentage == pytest.approx(12.5)
    assert totals["s"].percentage == pytest.approx(87.5)


def test_default_owner_gender_applies_to_every_asset():
    family = [HeirInput(id="h", full_name="Hassan", relationship="husband"),
              HeirInput(id="d", full_name="Dina", relationship="daughter")]
    result = calculate_estate(
        EstateInput(family_members=family, assets=[Asset(id="a", name="Savings", value=100)]),
        default_owner_gender=OwnerGender.FEMALE,
    )
    shares = {r.heir_id: r.share for r in result.assets[0].distribution.results}
    assert shares["h"] == pytest.approx(25)
    assert shares["d"] == pytest.approx(75)


def test_no_assets():
    result = calculate_estate(EstateInput(family_members=FAMILY, owner_gender="male", assets=[]))
    assert result.total_value == 0
    assert result.assets == []
    assert result.heir_totals == []


def test_zero_value_assets_give_zero_percentages():
    result = calculate_estate(EstateInput(
        family_members=FAMILY, owner_gender="male", assets=[Asset(id="a", name="Empty", value=0)]))
    assert all(t.percentage == 0 for t in result.heir_totals)


def test_duplicate_asset_ids_rejected():
    with pytest.raises(ValueError, match="Duplicate asset id"):
        calculate_estate(EstateInput(
            family_members=FAMILY,
            owner_gender="male",
            assets=[Asset(id="a", name="One", value=1), Asset(id="a", name="Two", value=2)],
        ))
