"""Output formatting for the terminal."""

from aiexplain.output.renderers import (
    access_type_style,
    render_context,
    render_json,
    render_plan,
    render_table,
)

__all__ = [
    "access_type_style",
    "render_context",
    "render_json",
    "render_plan",
    "render_table",
]
