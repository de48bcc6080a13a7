"""App window: hosts the swarm view at the simulation's native size."""

import logging

from PyQt6.QtWidgets import QMainWindow

from swarm.population import SimulationConfig
from swarm.view import SwarmView

logger = logging.getLogger(__name__)


class AppWindow(QMainWindow):
    """Top-level window around a single SwarmView."""

    WIDTH = 600
    HEIGHT = 600

    def __init__(self, config=None):
        super().__init__()
        self.setWindowTitle("Double Pendulum")
        self.resize(self.WIDTH, self.HEIGHT)

        config = config or SimulationConfig()
        self.swarm_view = SwarmView(config)
        self.setCentralWidget(self.swarm_view)

        logger.info(
            "Window %dx%d, %d pendulums anchored at (%.0f, %.0f)",
            self.WIDTH, self.HEIGHT, config.count, *config.origin,
        )

    def showEvent(self, event):
        super().showEvent(event)
        self.swarm_view.start()

    def closeEvent(self, event):
        self.swarm_view.stop()
        super().closeEvent(event)
