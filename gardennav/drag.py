"""
Pointer drag interaction for graph nodes.

A single pointer moves at most one node at a time. The dragged node is
pinned to the pointer; on release the current note snaps back to the
canvas centre and any other note is released to the forces.
"""
import logging
from enum import Enum
from typing import Callable, Optional

from gardennav.simulation import GraphNode, SimulationState, reheat

logger = logging.getLogger(__name__)


class DragPhase(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DragController:
    """Drag state machine bound to one simulation."""

    def __init__(self, state: SimulationState, on_reheat: Optional[Callable[[], None]] = None):
        self.state = state
        self.on_reheat = on_reheat
        self.phase = DragPhase.IDLE
        self.index: Optional[int] = None

    @property
    def active(self) -> bool:
        return self.phase is DragPhase.DRAGGING

    @property
    def node(self) -> Optional[GraphNode]:
        if self.index is None:
            return None
        return self.state.nodes[self.index]

    def node_at(self, x: float, y: float) -> Optional[int]:
        """Index of the topmost node whose circle contains the point."""
        for i in range(len(self.state.nodes) - 1, -1, -1):
            node = self.state.nodes[i]
            px, py = (node.fx, node.fy) if node.fixed else (node.x, node.y)
            if (x - px) ** 2 + (y - py) ** 2 <= node.radius ** 2:
                return i
        return None

    def _reheat_if_idle(self):
        if self.state.idle and reheat(self.state):
            logger.debug(f"Reheated layout to alpha={self.state.alpha}")
            if self.on_reheat is not None:
                self.on_reheat()

    def pointer_down(self, index: int, x: Optional[float] = None, y: Optional[float] = None) -> bool:
        """
        Start dragging a node.

        The node is pinned where it is (or at the pointer when given).

        Returns:
            True if a drag started
        """
        if self.active:
            logger.debug(f"Ignoring pointer down on node {index}: drag already active")
            return False
        if not 0 <= index < len(self.state.nodes):
            return False

        node = self.state.nodes[index]
        self.phase = DragPhase.DRAGGING
        self.index = index
        node.dragged = True
        node.pin(node.x if x is None else x, node.y if y is None else y)
        self._reheat_if_idle()
        return True

    def pointer_move(self, x: float, y: float):
        node = self.node
        if not self.active or node is None:
            return
        node.pin(x, y)
        self._reheat_if_idle()

    def pointer_up(self):
        node = self.node
        if not self.active or node is None:
            return
        node.dragged = False
        if node.is_current:
            node.pin(*self.state.config.center)
        else:
            node.x, node.y = node.fx, node.fy
            node.vx = node.vy = 0.0
            node.unpin()
        self.phase = DragPhase.IDLE
        self.index = None
