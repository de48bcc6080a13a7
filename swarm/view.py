"""Swarm view: orchestrates the population, the canvas, and the frame loop.

One QTimer tick is one simulation frame: the measured wall-clock time
since the previous tick is handed to Population.step() unchanged, so
stalls longer than MAX_TIMESTEP show up as dropped frames.
"""

import logging

from PyQt6.QtCore import Qt, QTimer, QElapsedTimer
from PyQt6.QtWidgets import QWidget, QVBoxLayout

from swarm.canvas import SwarmCanvas
from swarm.fps import FpsCounter
from swarm.population import Population, SimulationConfig

logger = logging.getLogger(__name__)


class SwarmView(QWidget):
    """Complete simulation mode: canvas + frame loop + key bindings.

    Keys: R rebuilds the population, Shift (held) draws the pendulums.
    """

    FPS = 60

    def __init__(self, config=None, parent=None):
        super().__init__(parent)

        self.population = Population(config or SimulationConfig())
        self.fps_counter = FpsCounter()
        self.canvas = SwarmCanvas(self.population)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.canvas)

        self._clock = QElapsedTimer()

        # Timer
        self.timer = QTimer()
        self.timer.setInterval(int(1000 / self.FPS))
        self.timer.timeout.connect(self._on_timer)

    # -- Public interface --

    def start(self):
        self._clock.start()
        self.timer.start()
        self.canvas.setFocus()

    def stop(self):
        self.timer.stop()

    def restart(self):
        """Throw away every body and trace and start over."""
        self.population.reset()
        self.fps_counter = FpsCounter()
        self.canvas.refresh_colors()
        self._clock.restart()
        logger.info("Restarted simulation with %d pendulums",
                    len(self.population))
        self.canvas.update()

    # -- Frame loop --

    def _elapsed_seconds(self):
        """Seconds since the previous tick; restarts the clock."""
        elapsed = self._clock.nsecsElapsed() / 1e9
        self._clock.restart()
        return elapsed

    def _on_timer(self):
        try:
            dt = self._elapsed_seconds()
            self.fps_counter.update()
            self.population.step(dt)
            self.canvas.set_counters(self.fps_counter.fps(),
                                     self.fps_counter.frame)
            self.canvas.update()
        except Exception:
            logger.exception("Simulation tick failed; stopping frame loop")
            self.timer.stop()

    # -- Keys --

    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key.Key_R and not event.isAutoRepeat():
            self.restart()
        elif key == Qt.Key.Key_Shift:
            self.canvas.show_pendulums = True
            self.canvas.update()
        else:
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.canvas.show_pendulums = False
            self.canvas.update()
        else:
            super().keyReleaseEvent(event)
