"""
Link graph visualization for the note being viewed.

Converts the site's note-link graph into a force-directed layout around the
current note and draws it as a small SVG: one clickable marker and label per
note, one line per link. The visualizer owns its simulation, frame loop and
drag controller; two visualizers never share state.
"""
import logging
import random
from html import escape
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import networkx as nx
from bs4 import BeautifulSoup, Tag

from gardennav.config import NavConfig, get_config
from gardennav.constants import CURRENT_NODE_CLASS, NOTE_HREF_TEMPLATE
from gardennav.drag import DragController
from gardennav.errors import GraphDataError
from gardennav.labels import fit_label, last_path_segment
from gardennav.scheduler import TickLoop
from gardennav.simulation import SimulationState, build_simulation, run_until_idle

logger = logging.getLogger(__name__)

GraphInput = Union[Mapping[str, Any], nx.Graph]


def _parse_mapping(data: Mapping[str, Any]) -> Tuple[List[str], List[Tuple[str, str]]]:
    """Validate a {"nodes": [...], "edges": [[a, b], ...]} mapping."""
    if not isinstance(data, Mapping):
        raise GraphDataError(f"Graph must be a mapping, got {type(data).__name__}")

    nodes = data.get("nodes", [])
    raw_edges = data.get("edges", [])
    if isinstance(nodes, (str, bytes)) or not isinstance(nodes, (list, tuple)):
        raise GraphDataError("Graph 'nodes' must be a list of note paths")
    if not isinstance(raw_edges, (list, tuple)):
        raise GraphDataError("Graph 'edges' must be a list of [source, target] pairs")

    edges = []
    for edge in raw_edges:
        if not isinstance(edge, (list, tuple)) or len(edge) != 2:
            raise GraphDataError(f"Malformed edge {edge!r}")
        edges.append((str(edge[0]), str(edge[1])))
    return [str(n) for n in nodes], edges


def _split_graph(graph: GraphInput) -> Tuple[List[str], List[Tuple[str, str]]]:
    if isinstance(graph, nx.Graph):
        return [str(n) for n in graph.nodes], [(str(u), str(v)) for u, v, *_ in graph.edges]
    return _parse_mapping(graph)


def graph_from_mapping(data: Mapping[str, Any]) -> nx.MultiDiGraph:
    """
    Build a directed multigraph from the site's graph description.

    Edges naming an unknown note are dropped with a warning rather than
    creating phantom nodes.
    """
    nodes, edges = _parse_mapping(data)
    graph = nx.MultiDiGraph()
    graph.add_nodes_from(nodes)
    for source, target in edges:
        if source not in graph or target not in graph:
            logger.warning(f"Dropping edge {source!r} -> {target!r}: endpoint not in graph")
            continue
        graph.add_edge(source, target)
    return graph


def graph_to_mapping(graph: nx.Graph) -> Dict[str, list]:
    """Inverse of graph_from_mapping."""
    return {
        "nodes": list(graph.nodes),
        "edges": [[u, v] for u, v, *_ in graph.edges],
    }


def local_graph(graph: nx.MultiDiGraph, path: str, max_depth: Optional[int] = None) -> nx.MultiDiGraph:
    """
    Neighbourhood of a note along outgoing links.

    Nodes up to max_depth hops from path are expanded: their outgoing links
    (one per distinct target) and the notes they reach are included. An
    unknown path yields an empty graph.

    Args:
        graph: Whole-site link graph
        path: Note to centre on
        max_depth: Expansion depth (config default if None)

    Returns:
        New MultiDiGraph holding the neighbourhood
    """
    if max_depth is None:
        max_depth = get_config().local_graph_depth

    local = nx.MultiDiGraph()
    if path not in graph:
        logger.debug(f"Note {path!r} not in graph; local graph is empty")
        return local

    local.add_node(path)
    seen = {path}
    frontier = [path]

    for _ in range(max_depth + 1):
        next_frontier = []
        for node in frontier:
            for succ in graph.successors(node):
                if not local.has_edge(node, succ):
                    local.add_edge(node, succ)
                if succ not in seen:
                    seen.add(succ)
                    next_frontier.append(succ)
        frontier = next_frontier
        if not frontier:
            break

    return local


class GraphVisualizer:
    """
    Force-directed link graph around the current note.

    Usage::

        viz = render_graph("notes/python", graph_data)
        viz.settle()            # or: viz.start() inside a running event loop
        svg = viz.to_svg()
        viz.stop()              # on page teardown
    """

    def __init__(
        self,
        current_path: str,
        graph: GraphInput,
        config: Optional[NavConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.current_path = str(current_path)
        self.graph = graph
        self.config = config or get_config()
        self.rng = rng
        self.state: Optional[SimulationState] = None
        self.drag: Optional[DragController] = None
        self.loop: Optional[TickLoop] = None

    def render(self) -> "GraphVisualizer":
        """Build a fresh layout; replaces and stops any previous one."""
        self.stop()
        nodes, edges = _split_graph(self.graph)
        self.state = build_simulation(self.current_path, nodes, edges, self.config, self.rng)
        self.drag = DragController(self.state)
        logger.debug(
            f"Graph for {self.current_path!r}: {len(self.state.nodes)} nodes, "
            f"{len(self.state.edges)} edges"
        )
        return self

    def _require_state(self) -> SimulationState:
        if self.state is None:
            self.render()
        return self.state

    def start(self, on_tick=None) -> TickLoop:
        """
        Run the layout on the current asyncio event loop.

        Calling again reuses the running loop; a new on_tick replaces the old one.
        """
        state = self._require_state()
        if self.loop is None:
            self.loop = TickLoop(state, on_tick=on_tick)
            self.drag.on_reheat = self.loop.wake
        elif on_tick is not None:
            self.loop.on_tick = on_tick
        self.loop.start()
        return self.loop

    def stop(self):
        if self.loop is not None:
            self.loop.stop()
            self.loop = None
        if self.drag is not None:
            self.drag.on_reheat = None

    def settle(self, max_ticks: Optional[int] = None) -> int:
        """Run the layout to rest synchronously."""
        return run_until_idle(self._require_state(), max_ticks)

    def positions(self) -> Dict[str, Tuple[float, float]]:
        """Drawn position of each note."""
        state = self._require_state()
        result = {}
        for node in state.nodes:
            if node.fixed:
                result[node.path] = (node.fx, node.fy)
            else:
                result[node.path] = (node.x, node.y)
        return result

    def to_svg(self) -> str:
        """Draw the current layout as an SVG fragment."""
        state = self._require_state()
        config = self.config
        positions = self.positions()

        svg_parts = []
        svg_parts.append(
            f'<svg width="{config.width}" height="{config.height}" xmlns="http://www.w3.org/2000/svg">'
        )

        svg_parts.append('<g class="links">')
        for edge in state.edges:
            x1, y1 = positions[state.nodes[edge.source].path]
            x2, y2 = positions[state.nodes[edge.target].path]
            svg_parts.append(
                f'<line x1="{x1:.2f}" y1="{y1:.2f}" x2="{x2:.2f}" y2="{y2:.2f}"/>'
            )
        svg_parts.append('</g>')

        svg_parts.append('<g class="nodes">')
        for node in state.nodes:
            x, y = positions[node.path]
            href = escape(NOTE_HREF_TEMPLATE.format(path=node.path))
            label = escape(fit_label(last_path_segment(node.path), config.label_max_width))
            dy = config.current_label_offset if node.is_current else config.label_offset
            css = f' class="{CURRENT_NODE_CLASS}"' if node.is_current else ""
            svg_parts.append(
                f'<a{css} href="{href}" transform="translate({x:.2f}, {y:.2f})">'
                f'<circle r="{node.radius:g}"/>'
                f'<text dy="{dy}">{label}</text>'
                f'</a>'
            )
        svg_parts.append('</g>')

        svg_parts.append('</svg>')
        return '\n'.join(svg_parts)


def render_graph(
    current_path: str,
    graph: GraphInput,
    config: Optional[NavConfig] = None,
    rng: Optional[random.Random] = None,
) -> GraphVisualizer:
    """Create a visualizer for the current note and build its layout."""
    return GraphVisualizer(current_path, graph, config=config, rng=rng).render()


def mount_graph(visualizer: GraphVisualizer, container: Tag) -> Tag:
    """Append the visualizer's SVG to a page container."""
    fragment = BeautifulSoup(visualizer.to_svg(), "html.parser")
    svg = fragment.find("svg")
    container.append(svg)
    return svg
