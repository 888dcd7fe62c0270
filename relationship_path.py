"""
Пошук ланцюжка родинних зв'язків між двома людьми.
Breadth-first search over the bidirectional relationship graph; the first
shortest chain found is described hop by hop ("Parent → Sibling → Child").
"""

from collections import deque
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

import networkx as nx

from family_graph import build_adjacency, find_edge, get_neighbors
from models import FamilyMember, Relationship

SAME_PERSON = 'Same person'
NOT_CONNECTED = 'Not connected'
CONNECTED = 'Connected'
PATH_SEPARATOR = ' → '

RELATIONSHIP_LABELS = {
    'parent': 'Parent',
    'child': 'Child',
    'spouse': 'Spouse',
    'sibling': 'Sibling',
    'grandparent': 'Grandparent',
    'grandchild': 'Grandchild',
    'aunt': 'Aunt',
    'uncle': 'Uncle',
    'aunt-uncle': 'Aunt/Uncle',
    'niece-nephew': 'Niece/Nephew',
    'cousin': 'Cousin',
    'nephew/niece': 'Nephew/Niece',
    'other': 'Relative',
}


@dataclass(frozen=True)
class PathStep:
    member: FamilyMember
    relationship: str


@dataclass(frozen=True)
class RelationshipPath:
    path: List[PathStep] = field(default_factory=list)
    description: str = ''
    connected: bool = False
    member_ids: List[str] = field(default_factory=list)


def _detached(result: RelationshipPath) -> RelationshipPath:
    # Кеш віддає копії списків, щоб зміни у виклику не псували кеш
    return replace(result, path=list(result.path), member_ids=list(result.member_ids))


def format_relationship_type(relationship_type: str) -> str:
    return RELATIONSHIP_LABELS.get(relationship_type, relationship_type)


def _shortest_id_path(graph: nx.MultiDiGraph, start_id: str, target_id: str) -> Optional[List[str]]:
    """
    BFS over queued id paths. The target is accepted as soon as it shows up
    among a node's neighbours, so ties go to the neighbour order of the graph.
    """
    queue = deque([[start_id]])
    visited = {start_id}

    while queue:
        path = queue.popleft()
        current_id = path[-1]

        for neighbor_id in get_neighbors(graph, current_id):
            if neighbor_id == target_id:
                return path + [target_id]
            if neighbor_id not in visited:
                visited.add(neighbor_id)
                queue.append(path + [neighbor_id])

    return None


class RelationshipPathFinder:
    """
    Holds the adjacency for one snapshot of relationships so repeated lookups
    (the relationship explorer) do not rebuild it.
    """

    def __init__(self, relationships: Sequence[Relationship], members: Sequence[FamilyMember]):
        self.graph = build_adjacency(relationships)
        self.member_map: Dict[str, FamilyMember] = {m.id: m for m in members}
        self.path_cache: Dict[Tuple[str, str], RelationshipPath] = {}

    def clear_cache(self):
        self.path_cache.clear()

    def find_member_ids(self, start_id: str, target_id: str) -> Optional[List[str]]:
        """Bare id chain start..target, [start_id] for the same person, None if not connected."""
        if start_id == target_id:
            return [start_id]
        return _shortest_id_path(self.graph, start_id, target_id)

    def find_path(self, start_id: str, target_id: str) -> RelationshipPath:
        if start_id == target_id:
            return RelationshipPath(path=[], description=SAME_PERSON, connected=True,
                                    member_ids=[start_id])

        cache_key = (start_id, target_id)
        if cache_key in self.path_cache:
            return _detached(self.path_cache[cache_key])

        path_ids = _shortest_id_path(self.graph, start_id, target_id)
        if path_ids is None:
            result = RelationshipPath(path=[], description=NOT_CONNECTED, connected=False)
        else:
            result = self._describe(path_ids)

        self.path_cache[cache_key] = result
        return _detached(result)

    def _describe(self, path_ids: List[str]) -> RelationshipPath:
        steps = []
        for from_id, to_id in zip(path_ids, path_ids[1:]):
            from_member = self.member_map.get(from_id)
            to_member = self.member_map.get(to_id)
            edge = find_edge(self.graph, from_id, to_id)

            # Кроки з невідомими людьми пропускаємо
            if from_member is None or to_member is None or edge is None:
                continue

            label = edge.specific_label or format_relationship_type(edge.relationship_type)
            steps.append(PathStep(member=to_member, relationship=label))

        description = PATH_SEPARATOR.join(
            f"{step.member.first_name} {step.member.last_name} ({step.relationship})"
            for step in steps
        )
        return RelationshipPath(path=steps, description=description or CONNECTED,
                                connected=True, member_ids=list(path_ids))


def find_relationship_path(start_id: str, target_id: str,
                           relationships: Sequence[Relationship],
                           members: Sequence[FamilyMember]) -> RelationshipPath:
    return RelationshipPathFinder(relationships, members).find_path(start_id, target_id)


def find_member_path(start_id: str, target_id: str,
                     relationships: Sequence[Relationship]) -> Optional[List[str]]:
    return RelationshipPathFinder(relationships, []).find_member_ids(start_id, target_id)
