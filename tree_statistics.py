"""
Статистика дерева: кількість людей та поколінь.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from models import FamilyMember, Relationship
from tree_builder import TreeNode, build_tree, nodes_by_level


@dataclass(frozen=True)
class TreeStatistics:
    member_count: int
    generation_count: int
    oldest_member: Optional[FamilyMember] = None
    youngest_member: Optional[FamilyMember] = None
    largest_generation: Optional[int] = None


def _birth_date(member: FamilyMember) -> Optional[date]:
    if not member.date_of_birth:
        return None
    try:
        return date.fromisoformat(str(member.date_of_birth)[:10])
    except ValueError:
        return None


def _oldest_and_youngest(members: Sequence[FamilyMember]):
    oldest = youngest = None
    oldest_date = youngest_date = None
    for member in members:
        born = _birth_date(member)
        if born is None:
            continue
        if oldest_date is None or born < oldest_date:
            oldest, oldest_date = member, born
        if youngest_date is None or born > youngest_date:
            youngest, youngest_date = member, born
    return oldest, youngest


def calculate_tree_statistics(members: Sequence[FamilyMember],
                              root: Optional[TreeNode]) -> TreeStatistics:
    """
    member_count counts every member, connected or not. generation_count is the
    number of distinct levels reachable from root (0 without a root).
    """
    members = members or []
    oldest, youngest = _oldest_and_youngest(members)

    generation_count = 0
    largest_generation = None
    if root is not None:
        by_level = nodes_by_level(root)
        generation_count = len(by_level)
        largest_generation = max(len(nodes) for nodes in by_level.values())

    return TreeStatistics(
        member_count=len(members),
        generation_count=generation_count,
        oldest_member=oldest,
        youngest_member=youngest,
        largest_generation=largest_generation,
    )


def tree_statistics(members: Sequence[FamilyMember],
                    relationships: Sequence[Relationship],
                    root_id: str) -> TreeStatistics:
    """Full rebuild from raw records; never patched incrementally."""
    if not members:
        return TreeStatistics(member_count=0, generation_count=0)
    root = build_tree(members, relationships, root_id)
    return calculate_tree_statistics(members, root)


def format_member_count(count: int) -> str:
    return f"{count} Member" if count == 1 else f"{count} Members"


def format_generation_count(count: int) -> str:
    return f"{count} Generation" if count == 1 else f"{count} Generations"
