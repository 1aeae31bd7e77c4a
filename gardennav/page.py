"""
Page lifecycle hook: add the outline and link graph to a rendered note.

The two widgets are independent. A failure in one is logged and recorded,
never raised, so a broken graph cannot take the outline (or the page) down
with it.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import networkx as nx
from bs4 import BeautifulSoup

from gardennav.config import NavConfig, get_config
from gardennav.graph import (
    GraphInput,
    GraphVisualizer,
    graph_from_mapping,
    local_graph,
    mount_graph,
    render_graph,
)
from gardennav.outline import OutlineNode, build_outline, extract_headings, mount_outline

logger = logging.getLogger(__name__)


@dataclass
class PageEnhancement:
    """What enhance_page did to a page."""
    outline: List[OutlineNode] = field(default_factory=list)
    outline_mounted: bool = False
    graph: Optional[GraphVisualizer] = None
    graph_mounted: bool = False
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def _add_outline(soup: BeautifulSoup, config: NavConfig, result: PageEnhancement):
    article = soup.select_one(config.article_selector) or soup
    result.outline = build_outline(extract_headings(article))

    container = soup.select_one(config.outline_selector)
    if container is None:
        logger.debug(f"No outline container matching {config.outline_selector!r}")
        return
    result.outline_mounted = mount_outline(result.outline, container, config.hide_class)


def _add_graph(
    soup: BeautifulSoup,
    current_path: str,
    graph: GraphInput,
    config: NavConfig,
    rng: Optional[random.Random],
    local_depth: Optional[int],
    settle: bool,
    result: PageEnhancement,
):
    if local_depth is not None:
        if not isinstance(graph, nx.Graph):
            graph = graph_from_mapping(graph)
        graph = local_graph(graph, current_path, local_depth)

    viz = render_graph(current_path, graph, config=config, rng=rng)
    result.graph = viz
    if settle:
        viz.settle()

    container = soup.select_one(config.graph_selector)
    if container is None:
        logger.debug(f"No graph container matching {config.graph_selector!r}")
        return
    mount_graph(viz, container)
    result.graph_mounted = True


def enhance_page(
    soup: BeautifulSoup,
    current_path: str,
    graph: Optional[GraphInput] = None,
    config: Optional[NavConfig] = None,
    rng: Optional[random.Random] = None,
    local_depth: Optional[int] = None,
    settle: bool = True,
) -> PageEnhancement:
    """
    Mount the outline and the link graph on a rendered note page.

    Args:
        soup: Parsed page, modified in place
        current_path: Path of the note the page renders
        graph: Site link graph; the graph widget is skipped when None
        config: Layout and selector settings (global config if None)
        rng: Random source for the initial graph layout
        local_depth: Restrict the graph to this neighbourhood depth around the note
        settle: Run the layout to rest before drawing

    Returns:
        PageEnhancement describing what was mounted and what failed
    """
    if config is None:
        config = get_config()
    result = PageEnhancement()

    try:
        _add_outline(soup, config, result)
    except Exception as e:
        logger.exception(f"Outline failed for {current_path!r}")
        result.errors["outline"] = str(e)

    if graph is not None:
        try:
            _add_graph(soup, current_path, graph, config, rng, local_depth, settle, result)
        except Exception as e:
            logger.exception(f"Graph failed for {current_path!r}")
            result.errors["graph"] = str(e)

    return result
