# app/rules/classifier.py

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from schemas import HeirInput, OwnerGender

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\s_\-]+")


# =========================
# Relationship roles (closed set)
# =========================
class RelationshipRole(str, Enum):
    SON = "son"
    DAUGHTER = "daughter"
    FATHER = "father"
    MOTHER = "mother"
    GRANDFATHER = "grandfather"
    GRANDMOTHER = "grandmother"
    MATERNAL_GRANDMOTHER = "maternalgrandmother"
    PATERNAL_GRANDMOTHER = "paternalgrandmother"
    HUSBAND = "husband"
    WIFE = "wife"
    BROTHER = "brother"
    SISTER = "sister"
    MATERNAL_BROTHER = "maternalbrother"
    MATERNAL_SISTER = "maternalsister"
    PATERNAL_BROTHER = "paternalbrother"
    PATERNAL_SISTER = "paternalsister"
    GRANDSON = "grandson"
    GRANDDAUGHTER = "granddaughter"


def normalize_relationship(label: Optional[str]) -> str:
    """'Maternal_Brother', ' maternal brother ' -> 'maternalbrother'."""
    return _SEPARATORS.sub("", (label or "").strip().lower())


def parse_relationship(label: Optional[str]) -> Optional[RelationshipRole]:
    """Parse a free-form label once; unknown labels give None, never an error."""
    try:
        return RelationshipRole(normalize_relationship(label))
    except ValueError:
        return None


def _spouse_allowed(role: RelationshipRole, owner_gender: OwnerGender) -> bool:
    # a male owner leaves a wife, a female owner a husband
    if role is RelationshipRole.HUSBAND:
        return owner_gender == OwnerGender.FEMALE
    if role is RelationshipRole.WIFE:
        return owner_gender == OwnerGender.MALE
    return True


def is_valid_faraid_relationship(label: Optional[str],
                                 owner_gender: Optional[OwnerGender] = None) -> bool:
    role = parse_relationship(label)
    if role is None:
        return False
    if owner_gender is None:
        return True
    return _spouse_allowed(role, OwnerGender(owner_gender))


def partition_family_members(
    members: Iterable[HeirInput],
    owner_gender: Optional[OwnerGender] = None,
) -> Tuple[List[HeirInput], List[HeirInput]]:
    """Split members into (eligible, non_eligible) for display, keeping input order."""
    eligible: List[HeirInput] = []
    non_eligible: List[HeirInput] = []
    for member in members:
        if is_valid_faraid_relationship(member.relationship, owner_gender):
            eligible.append(member)
        else:
            non_eligible.append(member)
    return eligible, non_eligible


# =========================
# Classified heirs
# =========================
@dataclass
class CategorizedHeirs:
    father: Optional[HeirInput] = None
    mother: Optional[HeirInput] = None
    grandfather: Optional[HeirInput] = None
    grandmother: Optional[HeirInput] = None
    grandmother_is_maternal: bool = False
    husband: Optional[HeirInput] = None
    wife: Optional[HeirInput] = None
    sons: List[HeirInput] = field(default_factory=list)
    daughters: List[HeirInput] = field(default_factory=list)
    # same father and mother
    full_brothers: List[HeirInput] = field(default_factory=list)
    full_sisters: List[HeirInput] = field(default_factory=list)
    # same mother only
    maternal_brothers: List[HeirInput] = field(default_factory=list)
    maternal_sisters: List[HeirInput] = field(default_factory=list)
    # same father only
    paternal_brothers: List[HeirInput] = field(default_factory=list)
    paternal_sisters: List[HeirInput] = field(default_factory=list)
    grandsons: List[HeirInput] = field(default_factory=list)
    granddaughters: List[HeirInput] = field(default_factory=list)

    @property
    def maternal_siblings(self) -> List[HeirInput]:
        return self.maternal_brothers + self.maternal_sisters

    @property
    def sibling_count(self) -> int:
        return (
            len(self.full_brothers) + len(self.full_sisters)
            + len(self.maternal_brothers) + len(self.maternal_sisters)
            + len(self.paternal_brothers) + len(self.paternal_sisters)
        )

    def members(self) -> List[HeirInput]:
        """Every classified heir, singles first then lists."""
        singles = [self.father, self.mother, self.grandfather, self.grandmother,
                   self.husband, self.wife]
        out = [h for h in singles if h is not None]
        for group in (self.sons, self.daughters, self.full_brothers, self.full_sisters,
                      self.maternal_brothers, self.maternal_sisters,
                      self.paternal_brothers, self.paternal_sisters,
                      self.grandsons, self.granddaughters):
            out.extend(group)
        return out


_LIST_SLOTS = {
    RelationshipRole.SON: "sons",
    RelationshipRole.DAUGHTER: "daughters",
    RelationshipRole.BROTHER: "full_brothers",
    RelationshipRole.SISTER: "full_sisters",
    RelationshipRole.MATERNAL_BROTHER: "maternal_brothers",
    RelationshipRole.MATERNAL_SISTER: "maternal_sisters",
    RelationshipRole.PATERNAL_BROTHER: "paternal_brothers",
    RelationshipRole.PATERNAL_SISTER: "paternal_sisters",
    RelationshipRole.GRANDSON: "grandsons",
    RelationshipRole.GRANDDAUGHTER: "granddaughters",
}

_SINGLE_SLOTS = {
    RelationshipRole.FATHER: "father",
    RelationshipRole.MOTHER: "mother",
    RelationshipRole.GRANDFATHER: "grandfather",
    RelationshipRole.GRANDMOTHER: "grandmother",
    RelationshipRole.MATERNAL_GRANDMOTHER: "grandmother",
    RelationshipRole.PATERNAL_GRANDMOTHER: "grandmother",
    RelationshipRole.HUSBAND: "husband",
    RelationshipRole.WIFE: "wife",
}


def classify(heirs: Iterable[HeirInput], owner_gender: OwnerGender) -> CategorizedHeirs:
    """
    Group heirs into Faraid roles.

    - Unrecognized labels are skipped, never an error.
    - 'husband' is kept only for a female owner, 'wife' only for a male owner.
    - Single slots (father, mother, grandfather, grandmother, husband, wife) keep the
      first heir seen; later duplicates are dropped with a WARNING.
    """
    owner_gender = OwnerGender(owner_gender)
    categorized = CategorizedHeirs()

    for heir in heirs:
        role = parse_relationship(heir.relationship)
        if role is None:
            logger.debug("Heir %s dropped: relationship %r is not a Faraid role",
                         heir.id, heir.relationship)
            continue
        if not _spouse_allowed(role, owner_gender):
            logger.debug("Heir %s dropped: %s cannot inherit from a %s owner",
                         heir.id, role.value, owner_gender.value)
            continue

        if role in _LIST_SLOTS:
            getattr(categorized, _LIST_SLOTS[role]).append(heir)
            continue

        slot = _SINGLE_SLOTS[role]
        if getattr(categorized, slot) is not None:
            logger.warning("Heir %s dropped: %s slot already taken by heir %s",
                           heir.id, slot, getattr(categorized, slot).id)
            continue
        setattr(categorized, slot, heir)
        if role is RelationshipRole.MATERNAL_GRANDMOTHER:
            categorized.grandmother_is_maternal = True

    return categorized
