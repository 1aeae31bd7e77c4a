"""
Label fitting for graph node captions.
"""
from gardennav.constants import ELLIPSIS


def fit_label(text: str, max_width: int) -> str:
    """
    Shorten text to whole words within max_width, ending in an ellipsis.

    Each kept word consumes its length plus one for the separating space.
    Words are never split, so a first word that does not fit yields the
    ellipsis alone.

    Args:
        text: Label to fit
        max_width: Display budget in characters

    Returns:
        The text unchanged if it fits, otherwise the truncated label
    """
    if len(text) <= max_width:
        return text

    wrapped = []
    current_length = 0
    for word in text.split():
        current_length += len(word) + 1
        if current_length >= max_width:
            break
        wrapped.append(word)
    wrapped.append(ELLIPSIS)

    return " ".join(wrapped)


def last_path_segment(path: str) -> str:
    """Return the final '/'-separated component of a note path."""
    return path.rsplit("/", 1)[-1]
