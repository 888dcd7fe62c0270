"""
Побудова структури дерева від обраного кореня.
Builds one TreeNode per member, links parents/children/spouse/siblings and
assigns generation levels relative to the root.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Set

from family_graph import get_inverse_relationship
from models import FamilyMember, Relationship, REL_PARENT, REL_CHILD, REL_SPOUSE, REL_SIBLING


@dataclass(eq=False)
class TreeNode:
    """
    Per-member view of the tree. Link fields point at nodes of the same build and
    may form cycles, so they are kept out of repr and nodes compare by identity.
    """
    member: FamilyMember
    parents: List['TreeNode'] = field(default_factory=list, repr=False)
    children: List['TreeNode'] = field(default_factory=list, repr=False)
    spouse: Optional['TreeNode'] = field(default=None, repr=False)
    siblings: List['TreeNode'] = field(default_factory=list, repr=False)
    level: int = 0
    position: tuple = (0.0, 0.0)

    @property
    def member_id(self) -> str:
        return self.member.id

    def linked_nodes(self) -> List['TreeNode']:
        """Nodes the level traversal follows: parents, then children, then spouse."""
        linked = list(self.parents) + list(self.children)
        if self.spouse is not None:
            linked.append(self.spouse)
        return linked


def _add_unique(nodes: List[TreeNode], node: TreeNode):
    if node not in nodes:
        nodes.append(node)


def _link_parent(parent: TreeNode, child: TreeNode):
    _add_unique(child.parents, parent)
    _add_unique(parent.children, child)


def _apply_relationship(from_node: TreeNode, to_node: TreeNode, rel_type: str):
    if rel_type == REL_PARENT:
        _link_parent(from_node, to_node)
    elif rel_type == REL_CHILD:
        # child(A->B) is parent(B->A)
        _apply_relationship(to_node, from_node, get_inverse_relationship(rel_type))
    elif rel_type == REL_SPOUSE:
        # Один партнер на людину: останній запис перемагає
        from_node.spouse = to_node
        to_node.spouse = from_node
    elif rel_type == REL_SIBLING:
        _add_unique(from_node.siblings, to_node)
        _add_unique(to_node.siblings, from_node)


def build_tree(members: Sequence[FamilyMember],
               relationships: Sequence[Relationship],
               root_id: str) -> Optional[TreeNode]:
    """
    Builds the node graph and returns the root node, or None when there are no
    members or the root is not among them.

    Relationships whose endpoints are not members are ignored. Types other than
    parent/child/spouse/sibling do not create links.
    """
    if not members:
        return None

    node_map: Dict[str, TreeNode] = {m.id: TreeNode(member=m) for m in members}

    for rel in relationships:
        from_node = node_map.get(rel.from_id)
        to_node = node_map.get(rel.to_id)
        if from_node is None or to_node is None:
            continue
        _apply_relationship(from_node, to_node, rel.relationship_type)

    root = node_map.get(root_id)
    if root is None:
        return None

    _assign_levels(root)
    return root


def _assign_levels(root: TreeNode):
    """
    Depth-first from the root: parents get level-1, children level+1, spouse the
    same level. Each node keeps the level of the path that reaches it first.
    """
    visited: Set[str] = set()
    stack = [(root, 0)]

    while stack:
        node, level = stack.pop()
        if node.member_id in visited:
            continue
        visited.add(node.member_id)
        node.level = level

        pending = [(p, level - 1) for p in node.parents]
        pending += [(c, level + 1) for c in node.children]
        if node.spouse is not None:
            pending.append((node.spouse, level))
        # Стек: у зворотному порядку, щоб обхід збігався з рекурсивним
        stack.extend(reversed(pending))


def walk_tree(root: Optional[TreeNode]) -> Iterator[TreeNode]:
    """Yields every node reachable from root once, in the same order levels were assigned."""
    if root is None:
        return
    visited: Set[str] = set()
    stack = [root]

    while stack:
        node = stack.pop()
        if node.member_id in visited:
            continue
        visited.add(node.member_id)
        yield node
        stack.extend(reversed(node.linked_nodes()))


def nodes_by_level(root: Optional[TreeNode]) -> Dict[int, List[TreeNode]]:
    by_level: Dict[int, List[TreeNode]] = {}
    for node in walk_tree(root):
        by_level.setdefault(node.level, []).append(node)
    return by_level
