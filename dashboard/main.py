"""
Точка входа приложения
Запуск GUI дашборда обогащения
"""

import logging
import sys

from PySide6.QtWidgets import QApplication

from dashboard import __version__
from dashboard.config import settings
from dashboard.gui.main_window import MainWindow
from dashboard.logging_config import setup_logging


def main():
    """
    Главная функция - точка входа в приложение
    """
    setup_logging()

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info(f"Instagram Enrichment Dashboard {__version__} - запуск приложения")
    logger.info(f"Бэкенд: {settings.api_base_url}, уровень логирования: {settings.log_level}")
    logger.info("=" * 60)

    try:
        app = QApplication(sys.argv)
        app.setStyle("Fusion")
        logger.info("Qt приложение инициализировано")

        window = MainWindow()
        window.show()
        logger.info("Главное окно открыто")

        exit_code = app.exec()
        logger.info(f"Приложение завершено с кодом: {exit_code}")
        sys.exit(exit_code)

    except Exception as e:
        logger.critical(f"Критическая ошибка при запуске приложения: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
