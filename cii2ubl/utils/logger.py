# cii2ubl/utils/logger.py
from __future__ import annotations
import logging
import os
from logging import Logger
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

ROOT_LOGGER_NAME = "cii2ubl"
LOG_FILE_NAME = "cii2ubl.log"


def _package_logger() -> Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        # Handler para consola
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        root.addHandler(stream_handler)
        root.setLevel(logging.INFO)
    return root


def configure_logging(level: str = "INFO", log_dir: Optional[Union[str, os.PathLike]] = None) -> Logger:
    """
    Nivel del logger del paquete y, si se indica log_dir, handler de archivo.

    Args:
        level: Nivel para todos los loggers de cii2ubl
        log_dir: Directorio del archivo cii2ubl.log (opcional)

    Returns:
        Logger raíz del paquete
    """
    root = _package_logger()
    root.setLevel(level.upper() if isinstance(level, str) else level)

    if log_dir:
        log_file = os.path.abspath(os.path.join(log_dir, LOG_FILE_NAME))
        already = any(
            isinstance(handler, logging.FileHandler) and handler.baseFilename == log_file
            for handler in root.handlers
        )
        if not already:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
            root.addHandler(file_handler)
    return root


def get_logger(name: str = ROOT_LOGGER_NAME, level: Optional[str] = None) -> Logger:
    """
    Logger con nombre bajo "cii2ubl" (p. ej. "cii2ubl.Config"). Comparte los
    handlers del logger del paquete; sin level hereda su nivel.
    """
    _package_logger()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


# default module logger
logger = get_logger()
