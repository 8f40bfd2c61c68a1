"""
Annotated source snippets: labels drawn under the text they refer to.
"""

from typing import Optional, Sequence, Union

from .label import Label
from .linelighter import LineHighlighter, LitLine
from .renderer import LabelRenderer, sort_labels


def render_labels(
    source: Union[str, bytes],
    labels: Sequence[Label],
    source_name: Optional[str] = None,
    *,
    context_lines: int = 2,
    max_width: Optional[int] = None,
    color: bool = True,
) -> str:
    """Render ``labels`` over ``source``; see ``LabelRenderer``."""
    renderer = LabelRenderer(
        source,
        source_name,
        context_lines=context_lines,
        max_width=max_width,
    )
    return renderer.render(labels, color=color)


__all__ = [
    "Label",
    "LabelRenderer",
    "LineHighlighter",
    "LitLine",
    "render_labels",
    "sort_labels",
]
