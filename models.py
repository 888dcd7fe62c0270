"""
Member and relationship records consumed by the family tree engine.
Records arrive from the external API as dicts; parsing accepts both the API's
camelCase keys and snake_case keys.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

# --- ТИПИ ЗВ'ЯЗКІВ ---
REL_PARENT = 'parent'
REL_CHILD = 'child'
REL_SPOUSE = 'spouse'
REL_SIBLING = 'sibling'
REL_GRANDPARENT = 'grandparent'
REL_GRANDCHILD = 'grandchild'
REL_AUNT = 'aunt'
REL_UNCLE = 'uncle'
REL_AUNT_UNCLE = 'aunt-uncle'
REL_NIECE_NEPHEW = 'niece-nephew'
REL_NEPHEW_NIECE = 'nephew/niece'
REL_COUSIN = 'cousin'
REL_OTHER = 'other'


def _pick(record: Dict[str, Any], *keys: str, default=None):
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


@dataclass(frozen=True)
class FamilyMember:
    id: str
    first_name: str = ''
    last_name: str = ''
    date_of_birth: Optional[str] = None
    date_of_death: Optional[str] = None
    gender: Optional[str] = None
    is_deceased: bool = False
    photo_url: Optional[str] = None
    location: Optional[str] = None
    email: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> 'FamilyMember':
        """Builds a member from an API record. Raises ValueError without an id."""
        member_id = _pick(record, 'id')
        if member_id is None or member_id == '':
            raise ValueError(f"Member record has no id: {record!r}")

        return cls(
            id=str(member_id),
            first_name=str(_pick(record, 'firstName', 'first_name', default='')),
            last_name=str(_pick(record, 'lastName', 'last_name', default='')),
            date_of_birth=_pick(record, 'dateOfBirth', 'date_of_birth'),
            date_of_death=_pick(record, 'dateOfDeath', 'date_of_death'),
            gender=_pick(record, 'gender'),
            is_deceased=bool(_pick(record, 'isDeceased', 'is_deceased', default=False)),
            photo_url=_pick(record, 'photoUrl', 'photo_url'),
            location=_pick(record, 'location'),
            email=_pick(record, 'email'),
        )


@dataclass(frozen=True)
class Relationship:
    """Directed record `from_id -> to_id`; `parent` means from_id is the parent of to_id."""
    id: str
    from_id: str
    to_id: str
    relationship_type: str
    specific_label: Optional[str] = None

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> 'Relationship':
        from_id = _pick(record, 'fromUserId', 'fromId', 'from_id')
        to_id = _pick(record, 'toUserId', 'toId', 'to_id')
        if from_id is None or to_id is None:
            raise ValueError(f"Relationship record has no endpoints: {record!r}")

        rel_type = _pick(record, 'relationshipType', 'relationship_type', 'type', default=REL_OTHER)
        return cls(
            id=str(_pick(record, 'id', default=f"{from_id}-{rel_type}-{to_id}")),
            from_id=str(from_id),
            to_id=str(to_id),
            relationship_type=str(rel_type),
            specific_label=_pick(record, 'specificLabel', 'specific_label') or None,
        )
