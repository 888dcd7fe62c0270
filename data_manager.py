"""
Data Manager for Family Tree.
Holds one snapshot of members/relationships fetched from the API and
recomputes the tree, layout and statistics from it as a single unit.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from layout_engine import LayoutConfig, LayoutEngine, Position
from models import (FamilyMember, Relationship, REL_PARENT, REL_SPOUSE, REL_SIBLING)
from relationship_path import RelationshipPath, RelationshipPathFinder
from tree_builder import TreeNode, build_tree
from tree_statistics import TreeStatistics, calculate_tree_statistics
from utils.logger_service import LoggerService


@dataclass
class TreeSnapshot:
    root: Optional[TreeNode]
    positions: Dict[str, Position] = field(default_factory=dict)
    statistics: TreeStatistics = field(default_factory=lambda: TreeStatistics(0, 0))


def search_members(members: Sequence[FamilyMember], query: str) -> List[str]:
    """Ids of members whose first or last name contains query, case-insensitive."""
    if not query or not query.strip():
        return []
    needle = query.lower()
    return [
        m.id for m in members
        if needle in str(m.first_name or '').lower() or needle in str(m.last_name or '').lower()
    ]


class DataManager:
    def __init__(self, username: str, log_file: Optional[str] = None,
                 layout_config: Optional[LayoutConfig] = None):
        self.username = username
        self.members: List[FamilyMember] = []
        self.relationships: List[Relationship] = []
        self.root_id: Optional[str] = None
        self.layout_engine = LayoutEngine(layout_config)
        self.logger = LoggerService(log_file=log_file, user=username)
        self._path_finder: Optional[RelationshipPathFinder] = None
        self._snapshot: Optional[TreeSnapshot] = None

    def load(self, member_records: Iterable[dict], relationship_records: Iterable[dict]) -> int:
        """
        Replaces the snapshot with parsed API records. Malformed records are
        logged and skipped. Returns the number of records skipped.
        """
        members, relationships, skipped = [], [], 0

        for record in member_records or []:
            try:
                members.append(FamilyMember.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                skipped += 1
                self.logger.log("SKIP_MEMBER", str(e))

        for record in relationship_records or []:
            try:
                relationships.append(Relationship.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                skipped += 1
                self.logger.log("SKIP_RELATIONSHIP", str(e))

        self.set_data(members, relationships)
        self.logger.log("LOAD", f"User {self.username} loaded {len(members)} members, "
                                f"{len(relationships)} relationships ({skipped} skipped)")
        return skipped

    def set_data(self, members: Sequence[FamilyMember], relationships: Sequence[Relationship]):
        self.members = list(members)
        self.relationships = list(relationships)
        if self.get_member(self.root_id) is None:
            # Старий корінь зник після перезавантаження
            self.root_id = self.members[0].id if self.members else None
        self._invalidate()

    def set_root(self, member_id: str) -> bool:
        if self.get_member(member_id) is None:
            self.logger.log("SET_ROOT", f"Unknown member ID {member_id}")
            return False
        self.root_id = member_id
        self._snapshot = None
        self.logger.log("SET_ROOT", f"Root set to ID {member_id}")
        return True

    def _invalidate(self):
        # Повний перерахунок при кожній зміні даних
        self._snapshot = None
        self._path_finder = None

    def rebuild(self) -> TreeSnapshot:
        root = build_tree(self.members, self.relationships, self.root_id)
        positions = self.layout_engine.calculate_layout(root)
        statistics = calculate_tree_statistics(self.members, root)
        self._snapshot = TreeSnapshot(root=root, positions=positions, statistics=statistics)

        self.logger.log("REBUILD", f"Root {self.root_id}: {statistics.member_count} members, "
                                   f"{statistics.generation_count} generations, "
                                   f"{len(positions)} placed")
        return self._snapshot

    @property
    def snapshot(self) -> TreeSnapshot:
        if self._snapshot is None:
            return self.rebuild()
        return self._snapshot

    def trace_path(self, start_id: str, target_id: str) -> RelationshipPath:
        if self._path_finder is None:
            self._path_finder = RelationshipPathFinder(self.relationships, self.members)
        result = self._path_finder.find_path(start_id, target_id)
        self.logger.log("TRACE_PATH", f"{start_id} -> {target_id}: {result.description}")
        return result

    def search(self, query: str) -> List[str]:
        return search_members(self.members, query)

    def get_member(self, member_id: str) -> Optional[FamilyMember]:
        for m in self.members:
            if m.id == member_id:
                return m
        return None

    def create_test_data(self):
        people = [
            ("1", "Adam", "First", "1900-01-01"),
            ("2", "Eve", "First", "1902-05-12"),
            ("3", "Cain", "First", "1925-03-03"),
            ("4", "Abel", "First", "1927-07-07"),
            ("5", "Seth", "First", "1930-10-10"),
            ("6", "Enosh", "First", "1955-02-02"),
        ]
        members = [FamilyMember(id=i, first_name=f, last_name=l, date_of_birth=d) for i, f, l, d in people]
        relationships = [
            Relationship("r1", "1", "2", REL_SPOUSE),
            Relationship("r2", "1", "3", REL_PARENT, "Father"),
            Relationship("r3", "2", "3", REL_PARENT, "Mother"),
            Relationship("r4", "1", "4", REL_PARENT, "Father"),
            Relationship("r5", "2", "4", REL_PARENT, "Mother"),
            Relationship("r6", "1", "5", REL_PARENT, "Father"),
            Relationship("r7", "2", "5", REL_PARENT, "Mother"),
            Relationship("r8", "3", "4", REL_SIBLING, "Brother"),
            Relationship("r9", "5", "6", REL_PARENT),
        ]
        self.set_data(members, relationships)
