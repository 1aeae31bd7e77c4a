import os
import random

import pytest
from bs4 import BeautifulSoup

import gardennav.config
from gardennav.config import NavConfig


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep the global config and GARDENNAV_* variables out of each test."""
    for key in list(os.environ):
        if key.startswith("GARDENNAV_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(gardennav.config, "_config", NavConfig())
    yield


@pytest.fixture
def config():
    """Default configuration."""
    return NavConfig()


@pytest.fixture
def rng():
    """Seeded random source for reproducible layouts."""
    return random.Random(42)


@pytest.fixture
def two_note_graph():
    """Two notes linked to each other once."""
    return {"nodes": ["a", "b"], "edges": [["a", "b"]]}


@pytest.fixture
def garden_graph():
    """A small vault with folders, a hub note and a dangling edge."""
    return {
        "nodes": [
            "index",
            "notes/python",
            "notes/rust",
            "notes/a rather long note title that will not fit in a label",
            "journal/2024-01-01",
        ],
        "edges": [
            ["index", "notes/python"],
            ["index", "notes/rust"],
            ["notes/python", "notes/rust"],
            ["notes/python", "notes/a rather long note title that will not fit in a label"],
            ["journal/2024-01-01", "index"],
            ["journal/2024-01-01", "missing/note"],
        ],
    }


@pytest.fixture
def sample_page_html():
    """A rendered note page with outline and graph containers."""
    return """
    <html>
    <body>
        <nav id="toc" class="sidebar hide"></nav>
        <article>
            <h1 class="note-title">Python</h1>
            <p>Intro.</p>
            <h2>Getting started</h2>
            <h3>Install</h3>
            <h3>Hello <em>world</em></h3>
            <h2>Reference</h2>
            <h4>Builtins</h4>
            <h5>Not collected</h5>
        </article>
        <div id="graph"></div>
    </body>
    </html>
    """


@pytest.fixture
def sample_page(sample_page_html):
    """Parsed sample page."""
    return BeautifulSoup(sample_page_html, "html.parser")
