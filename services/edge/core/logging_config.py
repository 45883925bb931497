from services.common.core.logging_config import configure_queue_logging
from services.common.core.logging_config import setup_logging as common_setup_logging

from ..config import config


def setup_logging():
    """
    Load the YAML config and initialize logging.
    Also configure async log delivery to VictoriaLogs when a URL is configured.
    """
    common_setup_logging(config.LOG_CONFIG_PATH, log_level=config.LOG_LEVEL)

    vl_url = config.VICTORIALOGS_URL
    if vl_url and not vl_url.endswith("/insert/jsonline"):
        vl_url = f"{vl_url.rstrip('/')}/insert/jsonline"
    configure_queue_logging(service_name="edge-router", vl_url=vl_url)
