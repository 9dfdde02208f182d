"""Arcade views and rendering."""

from levitas.views.float_view import FloatView
from levitas.views.render_sink import ArcadeRenderSink

__all__ = ["ArcadeRenderSink", "FloatView"]
