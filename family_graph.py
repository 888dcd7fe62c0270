"""
Побудова графа родинних зв'язків.
Turns the flat relationship list into a bidirectional networkx multigraph:
every record is stored as a forward edge plus a synthesized reverse edge
carrying the inverse relationship type.
"""

import networkx as nx
from typing import Iterable, List, NamedTuple, Optional

from models import (Relationship, REL_PARENT, REL_CHILD, REL_SPOUSE, REL_SIBLING,
                    REL_GRANDPARENT, REL_GRANDCHILD, REL_AUNT, REL_UNCLE,
                    REL_AUNT_UNCLE, REL_NIECE_NEPHEW, REL_NEPHEW_NIECE,
                    REL_COUSIN, REL_OTHER)

DIRECTION_FORWARD = 'forward'
DIRECTION_REVERSE = 'reverse'

INVERSE_RELATIONSHIPS = {
    REL_PARENT: REL_CHILD,
    REL_CHILD: REL_PARENT,
    REL_SPOUSE: REL_SPOUSE,
    REL_SIBLING: REL_SIBLING,
    REL_GRANDPARENT: REL_GRANDCHILD,
    REL_GRANDCHILD: REL_GRANDPARENT,
    REL_AUNT: REL_NEPHEW_NIECE,
    REL_UNCLE: REL_NEPHEW_NIECE,
    REL_AUNT_UNCLE: REL_NIECE_NEPHEW,
    REL_NIECE_NEPHEW: REL_AUNT_UNCLE,
    REL_COUSIN: REL_COUSIN,
    REL_OTHER: REL_OTHER,
}


class Edge(NamedTuple):
    member_id: str
    relationship_type: str
    specific_label: Optional[str]
    direction: str


def get_inverse_relationship(relationship_type: str) -> str:
    """Unknown types are their own inverse."""
    return INVERSE_RELATIONSHIPS.get(relationship_type, relationship_type)


def build_adjacency(relationships: Iterable[Relationship]) -> nx.MultiDiGraph:
    """
    Builds the adjacency graph. Only members that take part in at least one
    relationship become nodes; callers treat a missing node as "no known relationships".
    """
    graph = nx.MultiDiGraph()

    for rel in relationships:
        graph.add_edge(rel.from_id, rel.to_id,
                       relationship_type=rel.relationship_type,
                       specific_label=rel.specific_label,
                       direction=DIRECTION_FORWARD)
        graph.add_edge(rel.to_id, rel.from_id,
                       relationship_type=get_inverse_relationship(rel.relationship_type),
                       specific_label=rel.specific_label,
                       direction=DIRECTION_REVERSE)

    return graph


def get_edges(graph: nx.MultiDiGraph, member_id: str) -> List[Edge]:
    """
    Outgoing edges of a member. Neighbours come back in the order they were first
    linked to the member, parallel edges to one neighbour in insertion order.
    """
    if not graph.has_node(member_id):
        return []
    return [
        Edge(v, a.get('relationship_type'), a.get('specific_label'), a.get('direction'))
        for _, v, a in graph.out_edges(member_id, data=True)
    ]


def get_neighbors(graph: nx.MultiDiGraph, member_id: str) -> List[str]:
    if not graph.has_node(member_id):
        return []
    return list(graph.successors(member_id))


def find_edge(graph: nx.MultiDiGraph, from_id: str, to_id: str) -> Optional[Edge]:
    """First edge stored from one member to another, or None."""
    if not graph.has_edge(from_id, to_id):
        return None
    edges = graph.get_edge_data(from_id, to_id)
    a = edges[min(edges)]
    return Edge(to_id, a.get('relationship_type'), a.get('specific_label'), a.get('direction'))
