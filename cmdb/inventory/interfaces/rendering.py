"""
Topology SVG Rendering
======================

Renders a TopologyView to a standalone SVG document.

Edges sit in a group scaled by the zoom level; node groups are translated
to their zoomed position and scaled by the same factor, so lines and nodes
stay aligned at every zoom.
"""

import xml.etree.ElementTree as ET
from typing import Dict

from cmdb.config import CIType
from cmdb.inventory.domain import TopologyNode, TopologyView

CANVAS_WIDTH = 600
CANVAS_HEIGHT = 400
DETAIL_PANEL_HEIGHT = 130
NODE_WIDTH = 120
NODE_HEIGHT = 76

EDGE_COLOR = "#cbd5e1"
LABEL_COLOR = "#64748b"
SELECTED_COLOR = "#2563eb"
WARNING_COLOR = "#ca8a04"

# 24x24 outline icons
TYPE_ICONS: Dict[str, str] = {
    CIType.SERVER.lower(): "M3 3h18v7H3z M3 14h18v7H3z M7 6.5h.01 M7 17.5h.01",
    CIType.VM.lower(): "M3 4h18v12H3z M8 20h8 M12 16v4",
    CIType.DATABASE.lower(): "M4 6c0-1.7 3.6-3 8-3s8 1.3 8 3-3.6 3-8 3-8-1.3-8-3z M4 6v12c0 1.7 3.6 3 8 3s8-1.3 8-3V6 M4 12c0 1.7 3.6 3 8 3s8-1.3 8-3",
    CIType.NETWORK.lower(): "M9 2h6v6H9z M2 16h6v6H2z M16 16h6v6h-6z M12 8v4 M5 16v-4h14v4",
}

# status -> (border, fill)
STATUS_COLORS: Dict[str, tuple] = {
    "active": ("#22c55e", "#f0fdf4"),
    "maintenance": ("#eab308", "#fefce8"),
    "inactive": ("#ef4444", "#fef2f2"),
    "decommissioned": ("#ef4444", "#fef2f2"),
}
DEFAULT_STATUS_COLORS = ("#d1d5db", "#f9fafb")


def icon_path(ci_type: str) -> str:
    return TYPE_ICONS.get(ci_type.lower(), TYPE_ICONS[CIType.SERVER.lower()])


def status_colors(status: str) -> tuple:
    return STATUS_COLORS.get(status.lower(), DEFAULT_STATUS_COLORS)


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


class TopologySVGRenderer:
    """Builds the SVG element tree for a topology view."""

    def __init__(self, view: TopologyView):
        self.view = view

    def render(self) -> str:
        return ET.tostring(self.build(), encoding="unicode")

    def build(self) -> ET.Element:
        zoom = self.view.zoom_level
        details = self.view.details()

        height = CANVAS_HEIGHT * zoom + (DETAIL_PANEL_HEIGHT if details else 0)
        svg = ET.Element("svg", {
            "xmlns": "http://www.w3.org/2000/svg",
            "width": _fmt(CANVAS_WIDTH * zoom),
            "height": _fmt(height),
            "data-testid": "ci-topology-map",
        })

        self._edges(svg, zoom)
        for node in self.view.layout.nodes:
            self._node(svg, node, zoom)
        if details:
            self._details(svg, details, CANVAS_HEIGHT * zoom)

        return svg

    def _edges(self, parent: ET.Element, zoom: float) -> None:
        group = ET.SubElement(parent, "g", {
            "class": "links",
            "transform": f"scale({_fmt(zoom)})",
        })
        for link, source, target in self.view.layout.drawable_links():
            edge = ET.SubElement(group, "g", {"class": "link", "data-type": link.type})
            ET.SubElement(edge, "line", {
                "x1": _fmt(source.x),
                "y1": _fmt(source.y),
                "x2": _fmt(target.x),
                "y2": _fmt(target.y),
                "stroke": EDGE_COLOR,
                "stroke-width": "2",
                "stroke-dasharray": "5,5" if link.is_dashed else "none",
            })
            label = ET.SubElement(edge, "text", {
                "x": _fmt((source.x + target.x) / 2),
                "y": _fmt((source.y + target.y) / 2 - 10),
                "fill": LABEL_COLOR,
                "font-size": "10",
                "font-family": "monospace",
                "text-anchor": "middle",
            })
            label.text = link.label

    def _node(self, parent: ET.Element, node: TopologyNode, zoom: float) -> None:
        ci = node.ci
        x, y = self.view.position(node)
        border, fill = status_colors(ci.status)
        selected = node.id == self.view.selected_node_id

        group = ET.SubElement(parent, "g", {
            "class": "node selected" if selected else "node",
            "data-id": node.id,
            "data-testid": f"topology-node-{ci.name}",
            "transform": f"translate({_fmt(x)},{_fmt(y)}) scale({_fmt(zoom)})",
        })
        ET.SubElement(group, "rect", {
            "x": _fmt(-NODE_WIDTH / 2),
            "y": _fmt(-NODE_HEIGHT / 2),
            "width": str(NODE_WIDTH),
            "height": str(NODE_HEIGHT),
            "rx": "8",
            "fill": fill,
            "stroke": SELECTED_COLOR if selected else border,
            "stroke-width": "3" if selected else "2",
        })
        ET.SubElement(group, "path", {
            "class": "icon",
            "d": icon_path(ci.type),
            "transform": "translate(-12,-34)",
            "fill": "none",
            "stroke": SELECTED_COLOR,
            "stroke-width": "1.5",
        })

        name = ET.SubElement(group, "text", {
            "y": "4", "font-size": "11", "font-weight": "600", "text-anchor": "middle",
        })
        name.text = ci.name

        badge = ET.SubElement(group, "g", {"class": "badge"})
        ET.SubElement(badge, "rect", {
            "x": "-34", "y": "11", "width": "68", "height": "16", "rx": "8",
            "fill": "none", "stroke": border,
        })
        status = ET.SubElement(badge, "text", {
            "y": "23", "font-size": "9", "text-anchor": "middle",
        })
        status.text = ci.status

        if not ci.is_active:
            warning = ET.SubElement(group, "path", {
                "class": "warning",
                "d": "M50 -34 l6 11 h-12 z",
                "fill": WARNING_COLOR,
            })
            title = ET.SubElement(warning, "title")
            title.text = f"{ci.name} is {ci.status}"

    def _details(self, parent: ET.Element, details: Dict[str, str], top: float) -> None:
        group = ET.SubElement(parent, "g", {
            "class": "details",
            "data-testid": "topology-details",
            "transform": f"translate(16,{_fmt(top + 16)})",
        })
        heading = ET.SubElement(group, "text", {"font-size": "13", "font-weight": "600"})
        heading.text = f"{details['Name']} Details"

        rows = [(key, value) for key, value in details.items() if key != "Name"]
        for index, (key, value) in enumerate(rows):
            column, row = index % 2, index // 2
            line = ET.SubElement(group, "text", {
                "x": str(column * 260),
                "y": str(22 + row * 18),
                "font-size": "11",
            })
            line.text = f"{key}: {value}"


def render_topology_svg(view: TopologyView) -> str:
    return TopologySVGRenderer(view).render()
