# guidari/logging_config.py
"""
Configuración de logging estructurado (JSON).
Los mensajes del registro operativo también se reflejan aquí.
"""

import logging
import sys
from pythonjsonlogger import jsonlogger


def setup_logging(level: int = logging.INFO):
    """Configura logging estructurado en formato JSON"""

    logHandler = logging.StreamHandler(sys.stdout)

    formatter = jsonlogger.JsonFormatter(
        fmt='%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d',
        datefmt='%Y-%m-%dT%H:%M:%S'
    )

    logHandler.setFormatter(formatter)

    logger = logging.getLogger()
    # Evitar handlers duplicados si se llama más de una vez (tests, reload)
    if not any(getattr(h, "_guidari", False) for h in logger.handlers):
        logHandler._guidari = True
        logger.addHandler(logHandler)
    logger.setLevel(level)

    # Reducir verbosidad de librerías externas
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logger


logger = logging.getLogger("guidari")
