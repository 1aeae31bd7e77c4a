"""
Force-directed layout for the note link graph.

Positions graph nodes by iterating a small physical simulation: a weak
centering pull, pairwise charge repulsion, spring forces along links and
circle collision. Each call to tick() advances exactly one step, so the
layout can be driven by a frame scheduler, by drag interaction, or run to
rest synchronously.

The force model follows d3-force: velocities accumulate the forces scaled
by the decaying temperature alpha, then decay by a fixed fraction before
being added to positions. Pinned nodes ignore forces entirely.
"""
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from gardennav.config import NavConfig, get_config

logger = logging.getLogger(__name__)


@dataclass
class GraphNode:
    """A note in the layout."""
    path: str
    is_current: bool
    x: float
    y: float
    radius: float
    vx: float = 0.0
    vy: float = 0.0
    fx: Optional[float] = None
    fy: Optional[float] = None
    dragged: bool = False

    @property
    def fixed(self) -> bool:
        return self.fx is not None and self.fy is not None

    def pin(self, x: float, y: float):
        self.fx = x
        self.fy = y

    def unpin(self):
        self.fx = None
        self.fy = None


@dataclass
class GraphEdge:
    """Undirected link between two node indices."""
    source: int
    target: int


@dataclass
class SimulationState:
    """
    Everything one layout owns: nodes, edges, temperature and parameters.

    A state belongs to a single visualizer and is never shared.
    """
    nodes: List[GraphNode]
    edges: List[GraphEdge]
    config: NavConfig
    rng: random.Random = field(default_factory=random.Random)
    alpha: float = 1.0
    tick_count: int = 0

    @property
    def idle(self) -> bool:
        return self.alpha <= self.config.alpha_min

    @property
    def current(self) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.is_current:
                return node
        return None


def build_simulation(
    current_path: str,
    nodes: Sequence[str],
    edges: Iterable[Tuple[str, str]],
    config: Optional[NavConfig] = None,
    rng: Optional[random.Random] = None,
) -> SimulationState:
    """
    Create a fresh layout for a graph seen from the current note.

    Nodes start at uniform random positions within the canvas; the current
    note is pinned at the canvas centre and drawn larger. Edges naming a
    path that is not a node are dropped with a warning.

    Args:
        current_path: Path of the note being viewed
        nodes: Unique note paths
        edges: (source, target) path pairs; parallel edges are kept
        config: Layout parameters (global config if None)
        rng: Random source for initial placement; seed it for reproducible layouts

    Returns:
        SimulationState at alpha_start
    """
    if config is None:
        config = get_config()
    if rng is None:
        rng = random.Random()

    cx, cy = config.center
    graph_nodes: List[GraphNode] = []
    index: dict = {}

    for path in nodes:
        if path in index:
            logger.warning(f"Duplicate graph node {path!r}; keeping the first")
            continue
        is_current = path == current_path
        node = GraphNode(
            path=path,
            is_current=is_current,
            x=rng.uniform(0, config.width),
            y=rng.uniform(0, config.height),
            radius=config.current_radius if is_current else config.node_radius,
        )
        if is_current:
            node.pin(cx, cy)
            node.x, node.y = cx, cy
        index[path] = len(graph_nodes)
        graph_nodes.append(node)

    if current_path not in index:
        logger.debug(f"Current note {current_path!r} is not part of the graph")

    graph_edges: List[GraphEdge] = []
    for source, target in edges:
        if source not in index or target not in index:
            logger.warning(f"Dropping edge {source!r} -> {target!r}: endpoint not in graph")
            continue
        graph_edges.append(GraphEdge(index[source], index[target]))

    return SimulationState(
        nodes=graph_nodes,
        edges=graph_edges,
        config=config,
        rng=rng,
        alpha=config.alpha_start,
    )


def _jiggle(rng: random.Random) -> float:
    return (rng.random() - 0.5) * 1e-6


def apply_centering(state: SimulationState, alpha: float):
    """Pull every node toward the canvas centre on each axis."""
    cx, cy = state.config.center
    strength = state.config.centering_strength * alpha
    for node in state.nodes:
        node.vx += (cx - node.x) * strength
        node.vy += (cy - node.y) * strength


def apply_charge(state: SimulationState, alpha: float):
    """Inverse-distance repulsion between every pair of nodes."""
    strength = state.config.charge_strength * alpha
    distance_min2 = state.config.charge_distance_min ** 2
    nodes = state.nodes
    for node in nodes:
        for other in nodes:
            if other is node:
                continue
            x = other.x - node.x
            y = other.y - node.y
            if x == 0:
                x = _jiggle(state.rng)
            if y == 0:
                y = _jiggle(state.rng)
            l = x * x + y * y
            if l < distance_min2:
                l = math.sqrt(distance_min2 * l)
            node.vx += x * strength / l
            node.vy += y * strength / l


def apply_collision(state: SimulationState, alpha: float):
    """Push apart overlapping circles along the line between their centres."""
    strength = state.config.collision_strength
    nodes = state.nodes
    for i, node in enumerate(nodes):
        ri = node.radius
        ri2 = ri * ri
        xi = node.x + node.vx
        yi = node.y + node.vy
        for other in nodes[i + 1:]:
            rj = other.radius
            r = ri + rj
            x = xi - other.x - other.vx
            y = yi - other.y - other.vy
            l = x * x + y * y
            if l >= r * r:
                continue
            if x == 0:
                x = _jiggle(state.rng)
                l += x * x
            if y == 0:
                y = _jiggle(state.rng)
                l += y * y
            l = math.sqrt(l)
            l = (r - l) / l * strength
            x *= l
            y *= l
            rj2 = rj * rj
            share = rj2 / (ri2 + rj2)
            node.vx += x * share
            node.vy += y * share
            other.vx -= x * (1 - share)
            other.vy -= y * (1 - share)


def apply_links(state: SimulationState, alpha: float):
    """
    Spring force along each edge toward the configured rest length.

    Link strength is 1 / min(degree) of its endpoints and the correction is
    split by degree, so hubs move less than leaves. Parallel edges each
    contribute; self-loops are ignored.
    """
    distance = state.config.link_distance
    nodes = state.nodes
    links = [e for e in state.edges if e.source != e.target]

    count = [0] * len(nodes)
    for edge in links:
        count[edge.source] += 1
        count[edge.target] += 1

    for edge in links:
        source = nodes[edge.source]
        target = nodes[edge.target]
        bias = count[edge.source] / (count[edge.source] + count[edge.target])
        strength = 1 / min(count[edge.source], count[edge.target])

        x = target.x + target.vx - source.x - source.vx
        y = target.y + target.vy - source.y - source.vy
        if x == 0:
            x = _jiggle(state.rng)
        if y == 0:
            y = _jiggle(state.rng)
        l = math.sqrt(x * x + y * y)
        l = (l - distance) / l * alpha * strength
        x *= l
        y *= l
        target.vx -= x * bias
        target.vy -= y * bias
        source.vx += x * (1 - bias)
        source.vy += y * (1 - bias)


FORCES = (apply_centering, apply_charge, apply_collision, apply_links)


def tick(state: SimulationState) -> SimulationState:
    """
    Advance the simulation by one step, in place.

    Alpha decays geometrically first, then the forces run at the new
    temperature and positions are integrated. Pinned nodes are placed at
    their fixed position with zero velocity.
    """
    state.alpha *= 1 - state.config.alpha_decay
    alpha = state.alpha

    for force in FORCES:
        force(state, alpha)

    keep = 1 - state.config.velocity_decay
    for node in state.nodes:
        if node.fixed:
            node.x = node.fx
            node.y = node.fy
            node.vx = 0.0
            node.vy = 0.0
        else:
            node.vx *= keep
            node.vy *= keep
            node.x += node.vx
            node.y += node.vy

    state.tick_count += 1
    return state


def run_until_idle(state: SimulationState, max_ticks: Optional[int] = None) -> int:
    """
    Tick until alpha drops to alpha_min.

    Returns:
        Number of ticks taken
    """
    ticks = 0
    while not state.idle:
        if max_ticks is not None and ticks >= max_ticks:
            break
        tick(state)
        ticks += 1
    logger.debug(f"Layout settled after {ticks} ticks (alpha={state.alpha:.5f})")
    return ticks


def reheat(state: SimulationState, alpha: Optional[float] = None) -> bool:
    """
    Raise the temperature so the layout starts moving again.

    Never lowers alpha.

    Returns:
        True if alpha was raised
    """
    if alpha is None:
        alpha = state.config.reheat_alpha
    if state.alpha >= alpha:
        return False
    state.alpha = alpha
    return True
