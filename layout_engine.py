"""
Рушій компонування сімейного дерева.
Places fixed-size cards row by row: one row per generation level, each row
centered about x=0.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, NamedTuple, Optional

from tree_builder import TreeNode, nodes_by_level

# --- РОЗМІРИ ЗА ЗАМОВЧУВАННЯМ ---
CARD_WIDTH = 200
CARD_HEIGHT = 120
HORIZONTAL_SPACING = 40
VERTICAL_SPACING = 80


class Position(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class LayoutConfig:
    card_width: float = CARD_WIDTH
    card_height: float = CARD_HEIGHT
    horizontal_spacing: float = HORIZONTAL_SPACING
    vertical_spacing: float = VERTICAL_SPACING

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> 'LayoutConfig':
        """Reads UI-supplied sizes; camelCase or snake_case keys, missing keys keep defaults."""
        aliases = {
            'card_width': ('cardWidth', 'card_width'),
            'card_height': ('cardHeight', 'card_height'),
            'horizontal_spacing': ('horizontalSpacing', 'horizontal_spacing'),
            'vertical_spacing': ('verticalSpacing', 'vertical_spacing'),
        }
        kwargs = {}
        for name, keys in aliases.items():
            for key in keys:
                if key in values:
                    kwargs[name] = float(values[key])
                    break
        return cls(**kwargs)


class LayoutEngine:
    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    @property
    def column_step(self) -> float:
        return self.config.card_width + self.config.horizontal_spacing

    @property
    def row_step(self) -> float:
        return self.config.card_height + self.config.vertical_spacing

    def level_width(self, count: int) -> float:
        if count <= 0:
            return 0.0
        return count * self.column_step - self.config.horizontal_spacing

    def calculate_layout(self, root: Optional[TreeNode]) -> Dict[str, Position]:
        """
        Returns absolute card positions for every node reachable from root and
        stores each one on node.position. Unreachable members are simply absent.
        """
        positions: Dict[str, Position] = {}
        if root is None:
            return positions

        by_level = nodes_by_level(root)

        for level in sorted(by_level):
            nodes = by_level[level]
            start_x = -self.level_width(len(nodes)) / 2
            # Пропуски між рівнями дають порожні ряди, це нормально
            y = level * self.row_step

            for index, node in enumerate(nodes):
                pos = Position(start_x + index * self.column_step, y)
                positions[node.member_id] = pos
                node.position = pos

        return positions
