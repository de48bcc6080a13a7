"""Entry point for the Chaos Swarm application.

Opens a window with a few hundred double pendulums released from almost
the same position and lets them diverge. R restarts, Shift shows the
pendulums on top of their traces.
"""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from app_window import AppWindow


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    app = QApplication(sys.argv)
    window = AppWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
