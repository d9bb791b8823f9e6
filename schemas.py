# schemas.py

from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class OwnerGender(str, Enum):
    MALE = "male"
    FEMALE = "female"


# --- Family member as supplied by the caller ---
class HeirInput(BaseModel):
    id: str
    full_name: str = Field(validation_alias=AliasChoices("full_name", "fullName"))
    relationship: str             # free-form label, e.g. "Maternal Brother"
    ic: Optional[str] = None      # identity card number, passed through untouched
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# --- Input for a single calculation ---
class CalculationInput(BaseModel):
    family_members: List[HeirInput] = Field(
        validation_alias=AliasChoices("family_members", "familyMembers"))
    asset_value: float = Field(ge=0, allow_inf_nan=False,
                               validation_alias=AliasChoices("asset_value", "assetValue"))
    owner_gender: Optional[OwnerGender] = Field(
        default=None, validation_alias=AliasChoices("owner_gender", "ownerGender"))
    model_config = ConfigDict(populate_by_name=True)


# --- Output per heir ---
class FaraidResult(BaseModel):
    heir_id: str
    full_name: str
    relationship: str
    share: float               # currency units (fraction x asset value)
    percentage: float          # fraction x 100
    fraction: str              # exact share, e.g. "7/16"
    explanation: str           # rule citation


# --- Main output of a single calculation ---
class CalculationResult(BaseModel):
    asset_value: float
    owner_gender: OwnerGender
    total_percentage: float
    unallocated_percentage: float
    status: str                # no_eligible_heirs, adil, asabah, radd, undistributed, awl_required
    notes: List[str]
    results: List[FaraidResult]
    eligible: List[HeirInput]
    non_eligible: List[HeirInput]


# --- Eligible / non-eligible split ---
class PartitionInput(BaseModel):
    family_members: List[HeirInput] = Field(
        validation_alias=AliasChoices("family_members", "familyMembers"))
    owner_gender: Optional[OwnerGender] = Field(
        default=None, validation_alias=AliasChoices("owner_gender", "ownerGender"))
    model_config = ConfigDict(populate_by_name=True)


class PartitionResult(BaseModel):
    eligible: List[HeirInput]
    non_eligible: List[HeirInput]


# --- Quranic references ---
class FaraidReference(BaseModel):
    title: str
    reference: str
    text: str
    explanation: str


# --- Multi-asset estate ---
class Asset(BaseModel):
    id: str
    name: str
    value: float = Field(ge=0, allow_inf_nan=False)


class EstateInput(BaseModel):
    family_members: List[HeirInput] = Field(
        validation_alias=AliasChoices("family_members", "familyMembers"))
    owner_gender: Optional[OwnerGender] = Field(
        default=None, validation_alias=AliasChoices("owner_gender", "ownerGender"))
    assets: List[Asset]
    model_config = ConfigDict(populate_by_name=True)


class AssetDistribution(BaseModel):
    asset: Asset
    distribution: CalculationResult


class HeirTotal(BaseModel):
    heir_id: str
    full_name: str
    relationship: str
    total_share: float         # summed over all assets
    percentage: float          # of the estate total value


class EstateResult(BaseModel):
    total_value: float
    assets: List[AssetDistribution]
    heir_totals: List[HeirTotal]
