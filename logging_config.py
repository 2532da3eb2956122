"""
Central loggningskonfiguration för löparruttplaneraren.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

ROOT_LOGGER_NAME = "runplanner"


def setup_logging(log_level: str = "INFO", log_to_file: bool = False) -> logging.Logger:
    """
    Konfigurera loggning för hela applikationen

    Args:
        log_level: Loggnivå (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Logga även till fil under logs/

    Returns:
        Konfigurerad rotlogger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper()))

    # Streamlit kör om skriptet vid varje interaktion
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_to_file:
        log_dir = Path("logs")
        log_dir.mkdir(exist_ok=True)
        log_file = log_dir / f"runplanner_{datetime.now().strftime('%Y%m%d')}.log"
        try:
            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            logger.info(f"Loggar till fil: {log_file}")
        except OSError as e:
            logger.warning(f"Kunde inte sätta upp filloggning: {e}")

    logger.debug(f"Loggnivå satt till: {log_level}")
    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Hämta logger för en modul

    Args:
        name: Loggernamn (oftast __name__)

    Returns:
        Barnlogger under runplanner
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
