import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

from dropship_manager.config.settings import LOG_DIR

LOGGER_NAME = "dropship_manager"


def setup_logger(level: int = logging.INFO, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Paket logger'ını kurar: konsol + günlük dönen dosya.

    Birden fazla çağrıda handler tekrar eklenmez.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    log_dir = log_dir or LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = TimedRotatingFileHandler(
        filename=log_dir / "dropship.log",
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    # Konsolda yalnızca uyarılar; CLI çıktısı print ile
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.debug("Logger initialized (daily rotation enabled)")
    return logger
