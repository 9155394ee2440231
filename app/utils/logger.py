import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from app.utils.prometheus_metrics import record_log

BASE_DIR = Path(__file__).resolve().parent.parent
LOG_DIR = BASE_DIR / "logs"
LOG_FILE = LOG_DIR / "app.log"

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class _MetricsHandler(logging.Handler):
    """Conta mensagens de log por nível nas métricas Prometheus."""

    def emit(self, record: logging.LogRecord):
        record_log(record.levelname)


def _build_logger() -> logging.Logger:
    log = logging.getLogger("app")
    if log.handlers:
        return log

    log.setLevel(logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    log.addHandler(console)

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)
    except OSError as e:
        # Sistema de arquivos somente leitura: segue só com console
        log.warning(f"Não foi possível abrir arquivo de log {LOG_FILE}: {e}")

    log.addHandler(_MetricsHandler())
    return log


logger = _build_logger()
