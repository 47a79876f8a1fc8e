"""
Configuracion de sinks de loguru.
"""
import sys
from typing import Optional

from loguru import logger

from seatable_nodes.core.config import settings


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Reemplaza el sink por defecto de loguru.

    Args:
        level: Nivel minimo (por defecto settings.effective_log_level)
        log_file: Archivo con rotacion; cadena vacia lo desactiva
            (por defecto settings.LOG_FILE)
    """
    level = (level or settings.effective_log_level).upper()
    log_file = settings.LOG_FILE if log_file is None else log_file

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}",
    )

    if log_file:
        logger.add(
            log_file,
            rotation="500 MB",
            retention="10 days",
            level=level,
        )

    logger.debug(f"Logging configurado: level={level}, file={log_file or '-'}")
