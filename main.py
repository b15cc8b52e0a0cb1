from __future__ import annotations

from pathlib import Path
import sys

from PySide6.QtCore import QThreadPool
from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.search_vm import SearchVM
from app.views.main_window import MainWindow
from app.views.tasks import QtTaskRunner
from infrastructure.http_fetcher import HttpFetcher
from infrastructure.image_service import ImageService
from infrastructure.logging import get_log_directory, init_logging
from infrastructure.manifest_repository import ManifestRepository
from infrastructure.save_service import SaveService
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def main() -> int:
    settings = JsonSettings(BASE_DIR / "settings.json")
    log_dir = init_logging(
        settings.get_path("logging.directory", get_log_directory()),
        level=str(settings.get("logging.level", "INFO")),
    )

    app = QApplication(sys.argv)

    timeout = settings.get_float("network.timeout_seconds", 20.0)
    user_agent = str(settings.get("network.user_agent", "FamilyPhotoSearch/1.0"))
    repo = ManifestRepository(timeout=timeout, user_agent=user_agent)
    fetcher = HttpFetcher(timeout=timeout, user_agent=user_agent)
    saver = SaveService(settings.get_path("downloads.directory", Path.home() / "Downloads"))
    img = ImageService(fetcher, settings)
    runner = QtTaskRunner()
    # Downloads run on their own bounded pool, apart from thumbnails
    download_pool = QThreadPool()
    download_pool.setMaxThreadCount(max(1, settings.get_int("downloads.max_parallel", 2)))
    download_runner = QtTaskRunner(download_pool)

    vm = SearchVM(repo, str(settings.get("manifest.url", "")))
    logger.info("Manifest source: {}", vm.manifest_source)

    win = MainWindow(
        vm=vm,
        runner=runner,
        image_service=img,
        saver=saver,
        fetcher=fetcher,
        settings=settings,
        download_runner=download_runner,
        log_dir=str(log_dir),
    )
    win.show()
    win.start_manifest_load()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
