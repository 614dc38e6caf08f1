"""
Topology Layout
===============

Presentation model for the CI topology map: one central configuration item
surrounded by its directly related items on a single ring.

Everything here is derived and transient. A layout is recomputed from the
current CI and relationship data on every request and never persisted.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from cmdb.inventory.domain.entities import ConfigurationItem, CIRelationship

DEFAULT_CENTER: Tuple[float, float] = (300.0, 200.0)
DEFAULT_RADIUS = 120.0

MIN_ZOOM = 0.5
MAX_ZOOM = 2.0
ZOOM_STEP = 0.2


@dataclass
class TopologyNode:
    id: str
    ci: ConfigurationItem
    x: float
    y: float
    level: int  # 0 for the central CI, 1 for its neighbours


@dataclass
class TopologyLink:
    source: str
    target: str
    type: str

    @property
    def label(self) -> str:
        return self.type.replace("_", " ", 1)

    @property
    def is_dashed(self) -> bool:
        return self.type == "depends_on"


@dataclass
class TopologyLayout:
    """Nodes with coordinates plus the links between them."""

    nodes: List[TopologyNode] = field(default_factory=list)
    links: List[TopologyLink] = field(default_factory=list)

    def __post_init__(self):
        self._index: Dict[str, TopologyNode] = {node.id: node for node in self.nodes}

    def node(self, node_id: str) -> Optional[TopologyNode]:
        return self._index.get(node_id)

    def drawable_links(self) -> List[Tuple[TopologyLink, TopologyNode, TopologyNode]]:
        """Links whose endpoints are both present in the layout."""
        drawable = []
        for link in self.links:
            source = self.node(link.source)
            target = self.node(link.target)
            if source is None or target is None:
                continue
            drawable.append((link, source, target))
        return drawable


def calculate_layout(
    central: ConfigurationItem,
    related: Iterable[ConfigurationItem] = (),
    relationships: Iterable[CIRelationship] = (),
    center: Tuple[float, float] = DEFAULT_CENTER,
    radius: float = DEFAULT_RADIUS,
) -> TopologyLayout:
    """
    Place the central CI at ``center`` and the N related CIs evenly on a
    circle of ``radius`` around it, the i-th at angle 2*pi*i/N.

    Related items repeating the central CI or each other are dropped.
    With no related items the layout is a single node and no links.
    """
    center_x, center_y = center

    neighbours: List[ConfigurationItem] = []
    seen = {central.id}
    for ci in related:
        if ci.id in seen:
            continue
        seen.add(ci.id)
        neighbours.append(ci)

    nodes = [TopologyNode(id=central.id, ci=central, x=center_x, y=center_y, level=0)]
    count = len(neighbours)
    for index, ci in enumerate(neighbours):
        angle = (2 * math.pi * index) / count
        nodes.append(TopologyNode(
            id=ci.id,
            ci=ci,
            x=center_x + radius * math.cos(angle),
            y=center_y + radius * math.sin(angle),
            level=1,
        ))

    links = [
        TopologyLink(source=rel.source_id, target=rel.target_id, type=rel.relationship_type)
        for rel in relationships
    ]

    return TopologyLayout(nodes=nodes, links=links)


class TopologyView:
    """
    View state for a rendered topology: zoom level, selected node and
    whether the detail panel is shown.
    """

    def __init__(
        self,
        layout: TopologyLayout,
        on_select: Optional[Callable[[ConfigurationItem], None]] = None,
        zoom_level: float = 1.0,
    ):
        self.layout = layout
        self._on_select = on_select
        self.zoom_level = self._clamp(zoom_level)
        self.selected_node_id: Optional[str] = None
        self.show_details = False

    @staticmethod
    def _clamp(level: float) -> float:
        return round(min(max(level, MIN_ZOOM), MAX_ZOOM), 2)

    def zoom_in(self) -> float:
        self.zoom_level = self._clamp(self.zoom_level + ZOOM_STEP)
        return self.zoom_level

    def zoom_out(self) -> float:
        self.zoom_level = self._clamp(self.zoom_level - ZOOM_STEP)
        return self.zoom_level

    def set_zoom(self, level: float) -> float:
        self.zoom_level = self._clamp(level)
        return self.zoom_level

    def select(self, node_id: str) -> ConfigurationItem:
        """
        Select a node and hand its CI to the ``on_select`` callback.

        Raises:
            ValueError: If the node is not part of the layout
        """
        node = self.layout.node(node_id)
        if node is None:
            raise ValueError(f"Unknown topology node: {node_id}")
        self.selected_node_id = node_id
        if self._on_select is not None:
            self._on_select(node.ci)
        return node.ci

    def toggle_details(self) -> bool:
        self.show_details = not self.show_details
        return self.show_details

    @property
    def selected_node(self) -> Optional[TopologyNode]:
        if self.selected_node_id is None:
            return None
        return self.layout.node(self.selected_node_id)

    def position(self, node: TopologyNode) -> Tuple[float, float]:
        """Screen position of a node at the current zoom."""
        return node.x * self.zoom_level, node.y * self.zoom_level

    def details(self) -> Optional[Dict[str, str]]:
        """Attributes for the detail panel, or None when it is hidden."""
        node = self.selected_node
        if not self.show_details or node is None:
            return None

        ci = node.ci
        panel = {
            "Name": ci.name,
            "Type": ci.type,
            "Status": ci.status,
            "Location": ci.location,
            "Environment": ci.environment,
        }
        if ci.hostname:
            panel["Hostname"] = ci.hostname
        if ci.ip_address:
            panel["IP"] = ci.ip_address
        return panel
