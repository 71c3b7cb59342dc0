import logging
import os

NOISY_LOGGERS = ("urllib3", "requests", "streamlit.watcher", "tornado.access")


def configure_logging(env_var="DASHBOARD_LOG_LEVEL"):
    level_name = os.getenv(env_var, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return level
