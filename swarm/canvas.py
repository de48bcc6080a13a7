"""Swarm canvas: QPainter rendering of the pendulum population.

Draws each body's fading trace and, while requested, the pendulums
themselves, plus a small text overlay with the key bindings and the
frame counters. Holds no simulation state of its own.
"""

from PyQt6.QtCore import Qt, QPointF
from PyQt6.QtGui import QPainter, QPen, QBrush, QColor, QFont, QPolygonF
from PyQt6.QtWidgets import QWidget

from swarm.coloring import build_palette
from swarm.trace_bands import trace_bands


class SwarmCanvas(QWidget):
    """Custom widget that draws the whole population using QPainter."""

    BACKGROUND = QColor.fromRgbF(0.95, 0.95, 0.95, 1.0)
    TEXT_COLOR = QColor(0, 0, 0)

    TRACE_WIDTH = 10.0
    TRACE_DECAY = 0.99   # width multiplier per older segment
    TRACE_BANDS = 8      # polylines per body, one width each
    BOB_RADIUS = 8.0
    LINK_WIDTH = 7.0

    def __init__(self, population, parent=None):
        super().__init__(parent)
        self.population = population
        self.show_pendulums = False
        self.fps = 0
        self.frame = 0
        self._colors = []
        self.refresh_colors()
        self.setMinimumSize(400, 400)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

    def refresh_colors(self):
        """Rebuild the per-body palette, e.g. after the population changed."""
        palette = build_palette(len(self.population))
        self._colors = [QColor(int(r), int(g), int(b), int(a))
                        for r, g, b, a in palette]

    def set_counters(self, fps, frame):
        self.fps = fps
        self.frame = frame

    def _draw_traces(self, painter):
        bands = trace_bands(
            self.population.trace_offsets(), self.population.origin,
            self.TRACE_WIDTH, self.TRACE_DECAY, self.TRACE_BANDS,
        )
        if not bands:
            return

        painter.setBrush(Qt.BrushStyle.NoBrush)
        rows = [(width, points.tolist()) for width, points in bands]
        for i, color in enumerate(self._colors):
            pen = QPen(color)
            pen.setCapStyle(Qt.PenCapStyle.RoundCap)
            pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
            # Newest band first, each older one slightly thinner
            for width, points in rows:
                pen.setWidthF(width)
                painter.setPen(pen)
                painter.drawPolyline(
                    QPolygonF([QPointF(x, y) for x, y in points[i]])
                )

    def _draw_pendulums(self, painter):
        ox, oy = self.population.origin
        pivot = QPointF(ox, oy)
        for color, (dx1, dy1, dx2, dy2) in zip(
            self._colors, self.population.endpoints(),
        ):
            bob1 = QPointF(ox + dx1, oy + dy1)
            bob2 = QPointF(ox + dx2, oy + dy2)

            link_pen = QPen(color)
            link_pen.setWidthF(self.LINK_WIDTH)
            painter.setPen(link_pen)
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawLine(pivot, bob1)
            painter.drawLine(bob1, bob2)

            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(color))
            for point in (pivot, bob1, bob2):
                painter.drawEllipse(point, self.BOB_RADIUS, self.BOB_RADIUS)

    def _draw_overlay(self, painter):
        font = QFont()
        font.setPixelSize(16)
        painter.setFont(font)
        painter.setPen(self.TEXT_COLOR)
        lines = [
            "R to restart",
            "SHIFT to show pendulum",
            f"FPS: {self.fps}",
            f"Frame: {self.frame}",
        ]
        for row, text in enumerate(lines):
            painter.drawText(QPointF(10, 20 + 20 * row), text)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        painter.fillRect(self.rect(), self.BACKGROUND)

        self._draw_traces(painter)
        if self.show_pendulums:
            self._draw_pendulums(painter)
        self._draw_overlay(painter)

        painter.end()
