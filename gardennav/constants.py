"""
Constants for gardennav.

Layout and drawing defaults live in the config system; these are the fixed
markers of the page contract.
"""

# Heading elements collected for the outline, and their accepted levels
HEADING_TAGS = ["h1", "h2", "h3", "h4"]
MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 4

# Class marking the page's own title heading
NOTE_TITLE_CLASS = "note-title"

# Appended to truncated labels
ELLIPSIS = "…"

# Class applied to the current note's marker
CURRENT_NODE_CLASS = "current"

# Link target for a note path
NOTE_HREF_TEMPLATE = "/{path}.html"
