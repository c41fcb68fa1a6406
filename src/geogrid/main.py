"""
Application Initialization
==========================
Starts the GeoGrid demo: a Qt window with a PyVista map and the grid.

Why is this file needed?
------------------------
It acts as the composition root. It:
1. Configures logging.
2. Creates the Qt application.
3. Creates the main window, which wires the map and the grid together.
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from geogrid.logging_config import setup_logging
from geogrid.view.main_window import MainWindow, VISIBLE_APP_NAME


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="geogrid", description="Geographic grid demo.")
    parser.add_argument("--debug", action="store_true", help="Log every recomputation.")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file.")
    args, qt_args = parser.parse_known_args(sys.argv[1:] if argv is None else argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # 2. Create the Qt Application
    app = QApplication([sys.argv[0], *qt_args])
    app.setApplicationName(VISIBLE_APP_NAME)

    # 3. Initialize the Main Window
    window = MainWindow()
    window.show()

    # 4. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
