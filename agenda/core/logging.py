import logging
import sys
from typing import Optional
from pythonjsonlogger import jsonlogger


def setup_logging(level: int | str = logging.INFO, log_file: Optional[str] = None) -> None:
    logger = logging.getLogger()
    logger.setLevel(level)

    fmt = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(pathname)s %(lineno)d"
    )

    # JSON para stdout
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(fmt)

    # Erros legíveis em stderr
    err_fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.ERROR)
    stderr_handler.setFormatter(err_fmt)

    file_handler = None
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(fmt)
        except OSError:
            logging.getLogger(__name__).warning("Could not open log file %s", log_file)

    logger.handlers = []
    logger.addHandler(stream_handler)
    logger.addHandler(stderr_handler)
    if file_handler:
        logger.addHandler(file_handler)

    # Mensagens do uvicorn passam pelos handlers da raiz
    for name in ("uvicorn", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers = []
        uv_logger.propagate = True

    uv_access = logging.getLogger("uvicorn.access")
    uv_access.setLevel(level)
    uv_access.propagate = False

    # SQL echo só quando pedido explicitamente
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
