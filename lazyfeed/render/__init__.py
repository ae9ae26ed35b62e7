"""Rendering for the split list/detail feed view.

Pane content, word wrapping, and the dirty-flag pipeline that batches one
terminal write per pass.
"""

from .panes import (
    DetailPane,
    ListPane,
    Pane,
    PaneKind,
    PaneSlot,
    RenderView,
    StatusPane,
    status_text,
)
from .pipeline import RenderPipeline
from .wrap import wrap_text

__all__ = [
    "DetailPane",
    "ListPane",
    "Pane",
    "PaneKind",
    "PaneSlot",
    "RenderPipeline",
    "RenderView",
    "StatusPane",
    "status_text",
    "wrap_text",
]
