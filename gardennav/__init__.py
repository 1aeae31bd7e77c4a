"""
gardennav - navigation widgets for note-based static sites

Adds two widgets to pages rendered from a vault of notes:
- an outline (table of contents) rebuilt from the page's headings
- a force-directed graph of the notes linked around the current one

Example Usage:
    >>> from bs4 import BeautifulSoup
    >>> from gardennav import enhance_page
    >>> soup = BeautifulSoup(html, "html.parser")
    >>> enhance_page(soup, "notes/python", {"nodes": [...], "edges": [...]})
    >>> str(soup)
"""

__version__ = "0.1.0"

# Configuration
from gardennav.config import NavConfig, get_config, init_config, configure_logging

# Errors
from gardennav.errors import NavError, ConfigError, GraphDataError

# Outline
from gardennav.outline import (
    HeadingRecord,
    OutlineNode,
    extract_headings,
    is_note_title,
    build_outline,
    render_outline,
    mount_outline,
)

# Graph
from gardennav.labels import fit_label, last_path_segment
from gardennav.simulation import GraphNode, GraphEdge, SimulationState, build_simulation, tick
from gardennav.drag import DragController, DragPhase
from gardennav.scheduler import TickLoop
from gardennav.graph import (
    GraphVisualizer,
    render_graph,
    mount_graph,
    graph_from_mapping,
    graph_to_mapping,
    local_graph,
)

# Page lifecycle
from gardennav.page import enhance_page, PageEnhancement

__all__ = [
    # Config
    "NavConfig",
    "get_config",
    "init_config",
    "configure_logging",
    # Errors
    "NavError",
    "ConfigError",
    "GraphDataError",
    # Outline
    "HeadingRecord",
    "OutlineNode",
    "extract_headings",
    "is_note_title",
    "build_outline",
    "render_outline",
    "mount_outline",
    # Graph
    "fit_label",
    "last_path_segment",
    "GraphNode",
    "GraphEdge",
    "SimulationState",
    "build_simulation",
    "tick",
    "DragController",
    "DragPhase",
    "TickLoop",
    "GraphVisualizer",
    "render_graph",
    "mount_graph",
    "graph_from_mapping",
    "graph_to_mapping",
    "local_graph",
    # Page
    "enhance_page",
    "PageEnhancement",
]
