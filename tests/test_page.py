"""
Tests for gardennav/page.py

The page hook must mount both widgets and keep their failures apart.
"""
import logging
from unittest.mock import patch

from bs4 import BeautifulSoup

from gardennav.page import enhance_page


class TestEnhancePage:
    """Test mounting both widgets on a rendered note."""

    def test_mounts_outline_and_graph(self, sample_page, config, rng, garden_graph):
        result = enhance_page(sample_page, "notes/python", garden_graph, config=config, rng=rng)

        assert result.ok
        assert result.outline_mounted
        assert result.graph_mounted

        toc = sample_page.find(id="toc")
        assert "hide" not in toc.get("class")
        assert [a["href"] for a in toc.find_all("a")] == [
            "#Getting started",
            "#Install",
            "#Hello world",
            "#Reference",
            "#Builtins",
        ]

        graph = sample_page.find(id="graph")
        assert graph.find("svg") is not None
        assert len(graph.find_all("a")) == 5
        assert result.graph.state.idle

    def test_anchors_written(self, sample_page, config):
        enhance_page(sample_page, "notes/python", config=config)
        assert sample_page.find("h3")["id"] == "Install"
        assert not sample_page.find("h1").has_attr("id")

    def test_no_graph_given(self, sample_page, config):
        result = enhance_page(sample_page, "notes/python", config=config)
        assert result.graph is None
        assert sample_page.find(id="graph").find("svg") is None

    def test_page_without_headings_keeps_outline_hidden(self, config, rng, two_note_graph):
        soup = BeautifulSoup(
            '<nav id="toc" class="hide"></nav><article><p>x</p></article><div id="graph"></div>',
            "html.parser",
        )
        result = enhance_page(soup, "a", two_note_graph, config=config, rng=rng)

        assert result.ok
        assert not result.outline_mounted
        assert soup.find(id="toc").get("class") == ["hide"]
        assert result.graph_mounted

    def test_missing_containers(self, config, rng, two_note_graph):
        soup = BeautifulSoup("<article><h2>A</h2></article>", "html.parser")
        result = enhance_page(soup, "a", two_note_graph, config=config, rng=rng)

        assert result.ok
        assert [n.text for n in result.outline] == ["A"]
        assert not result.outline_mounted
        assert not result.graph_mounted

    def test_local_depth(self, sample_page, config, rng, garden_graph):
        result = enhance_page(
            sample_page, "notes/python", garden_graph, config=config, rng=rng, local_depth=0
        )
        paths = {n.path for n in result.graph.state.nodes}
        assert paths == {
            "notes/python",
            "notes/rust",
            "notes/a rather long note title that will not fit in a label",
        }

    def test_unsettled_layout(self, sample_page, config, rng, two_note_graph):
        result = enhance_page(
            sample_page, "a", two_note_graph, config=config, rng=rng, settle=False
        )
        assert not result.graph.state.idle
        assert result.graph_mounted

    def test_custom_selectors(self, config, rng, two_note_graph):
        config.outline_selector = ".toc"
        config.graph_selector = "aside"
        soup = BeautifulSoup(
            '<div class="toc hide"></div><article><h2>A</h2></article><aside></aside>',
            "html.parser",
        )
        result = enhance_page(soup, "a", two_note_graph, config=config, rng=rng)
        assert result.outline_mounted
        assert soup.find("aside").find("svg") is not None


class TestFailureIsolation:
    """A failing widget never blocks the other or the page."""

    def test_graph_failure_keeps_outline(self, sample_page, config, garden_graph, caplog):
        with patch("gardennav.page.render_graph", side_effect=RuntimeError("layout exploded")):
            with caplog.at_level(logging.ERROR, logger="gardennav.page"):
                result = enhance_page(sample_page, "notes/python", garden_graph, config=config)

        assert result.outline_mounted
        assert result.errors == {"graph": "layout exploded"}
        assert not result.ok
        assert "Graph failed" in caplog.text

    def test_outline_failure_keeps_graph(self, sample_page, config, rng, garden_graph):
        with patch("gardennav.page.build_outline", side_effect=ValueError("bad headings")):
            result = enhance_page(
                sample_page, "notes/python", garden_graph, config=config, rng=rng
            )

        assert result.errors == {"outline": "bad headings"}
        assert result.graph_mounted
        assert sample_page.find(id="toc").find("ul") is None

    def test_malformed_graph_data(self, sample_page, config):
        result = enhance_page(sample_page, "x", {"nodes": "oops"}, config=config)
        assert "graph" in result.errors
        assert result.outline_mounted

    def test_dangling_edge_is_not_an_error(self, sample_page, config, rng):
        result = enhance_page(
            sample_page, "a", {"nodes": ["a"], "edges": [["a", "ghost"]]}, config=config, rng=rng
        )
        assert result.ok
        assert result.graph.state.edges == []
