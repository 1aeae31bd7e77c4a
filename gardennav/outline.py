"""
Outline (table of contents) reconstruction for rendered notes.

Turns the flat, document-ordered stream of a page's headings into a nested
outline, writes anchor ids back onto the heading elements, and renders the
outline as a nested list for the page's outline container.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from bs4 import BeautifulSoup, Tag

from gardennav.constants import (
    HEADING_TAGS,
    MAX_HEADING_LEVEL,
    MIN_HEADING_LEVEL,
    NOTE_TITLE_CLASS,
)

logger = logging.getLogger(__name__)


@dataclass
class HeadingRecord:
    """A heading of the page, in document order."""
    level: int
    text: str
    source: Optional[Tag] = None


@dataclass
class OutlineNode:
    """An entry of the outline tree."""
    level: int
    text: str
    anchor_id: str
    children: List["OutlineNode"] = field(default_factory=list)

    @property
    def href(self) -> str:
        return f"#{self.anchor_id}"


def extract_headings(article: Tag) -> List[HeadingRecord]:
    """
    Collect the h1-h4 elements of an article in document order.

    Args:
        article: Parsed page region holding the note body

    Returns:
        List of HeadingRecord referencing the original elements
    """
    headings = []
    for element in article.find_all(HEADING_TAGS):
        text = " ".join(element.get_text().split())
        headings.append(HeadingRecord(level=int(element.name[1]), text=text, source=element))
    return headings


def is_note_title(record: HeadingRecord) -> bool:
    """True for the page's own title heading."""
    if record.source is None:
        return False
    return NOTE_TITLE_CLASS in (record.source.get("class") or [])


def _valid_level(level) -> bool:
    return (
        isinstance(level, int)
        and not isinstance(level, bool)
        and MIN_HEADING_LEVEL <= level <= MAX_HEADING_LEVEL
    )


def build_outline(
    headings: List[HeadingRecord],
    exclude: Optional[Callable[[HeadingRecord], bool]] = is_note_title,
) -> List[OutlineNode]:
    """
    Build the outline tree in a single pass over the headings.

    The stack holds the chain of open ancestors ending at the previous
    node. A heading pops entries until the top has a strictly lower level
    and is inserted as its child, or at the root when the stack empties.
    This covers the three cases: equal level gives a sibling, a deeper
    level nests under the previous node (skipped levels attach directly,
    nothing is synthesized), a shallower level ascends.

    Each kept heading's text becomes its anchor id, written to the source
    element's id and name attributes. Duplicate texts share an id and the
    last one wins.

    Args:
        headings: Page headings in document order
        exclude: Predicate for headings to skip entirely (no node, no anchor)

    Returns:
        Root-level outline nodes; empty when no heading is eligible
    """
    roots: List[OutlineNode] = []
    stack: List[OutlineNode] = []

    for heading in headings:
        if exclude is not None and exclude(heading):
            continue

        anchor_id = heading.text
        if heading.source is not None:
            heading.source["name"] = anchor_id
            heading.source["id"] = anchor_id

        if not _valid_level(heading.level):
            logger.warning(f"Heading {heading.text!r} has invalid level {heading.level!r}; placing at root")
            roots.append(OutlineNode(level=heading.level, text=heading.text, anchor_id=anchor_id))
            stack = []
            continue

        node = OutlineNode(level=heading.level, text=heading.text, anchor_id=anchor_id)

        while stack and stack[-1].level >= node.level:
            stack.pop()

        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)
        stack.append(node)

    return roots


def outline_depth(nodes: List[OutlineNode]) -> int:
    """Number of nesting levels in the outline (0 when empty)."""
    if not nodes:
        return 0
    return 1 + max(outline_depth(node.children) for node in nodes)


def render_outline(nodes: List[OutlineNode], soup: Optional[BeautifulSoup] = None) -> Optional[Tag]:
    """
    Render the outline as nested <ul> lists.

    Returns:
        The root <ul>, or None for an empty outline
    """
    if not nodes:
        return None
    if soup is None:
        soup = BeautifulSoup("", "html.parser")

    def render_list(items: List[OutlineNode]) -> Tag:
        ul = soup.new_tag("ul")
        for item in items:
            li = soup.new_tag("li")
            a = soup.new_tag("a", href=item.href)
            a.string = item.text
            li.append(a)
            if item.children:
                li.append(render_list(item.children))
            ul.append(li)
        return ul

    return render_list(nodes)


def mount_outline(nodes: List[OutlineNode], container: Tag, hide_class: str = "hide") -> bool:
    """
    Insert the rendered outline into its container and reveal it.

    An empty outline leaves the container hidden and unchanged.

    Returns:
        True if the outline was mounted
    """
    ul = render_outline(nodes)
    if ul is None:
        logger.debug("No eligible headings; outline stays hidden")
        return False

    classes = [c for c in (container.get("class") or []) if c != hide_class]
    if classes:
        container["class"] = classes
    elif container.has_attr("class"):
        del container["class"]

    container.append(ul)
    return True
