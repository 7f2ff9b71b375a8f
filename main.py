from __future__ import annotations

from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.bootstrap import build_session
from app.views.main_window import MainWindow
from infrastructure.exif_service import PIL_HEIF_AVAILABLE
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def main() -> int:
    settings = JsonSettings(BASE_DIR / "settings.json", required=False)
    log_path = init_logging(
        settings.get("logging.dir"), level=str(settings.get("logging.level", "INFO"))
    )
    logger.info("Photo Annotate starting; logs in {}", log_path)
    logger.info("HEIC support: {}", PIL_HEIF_AVAILABLE)

    app = QApplication(sys.argv)
    session = build_session(settings)
    win = MainWindow(session=session, log_dir=str(log_path))

    # Optional folder argument: python main.py <folder>
    if len(sys.argv) > 1:
        session.load_folder(sys.argv[1])

    win.statusBar().showMessage("Ready", 2000)
    win.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
