from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from .container import Container, build_container
from .settings import get_settings_module

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_service() -> Container:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    api_config = {
        "base_url": getattr(settings, "API_BASE_URL"),
        "token": getattr(settings, "API_TOKEN", None),
        "timeout": getattr(settings, "REQUEST_TIMEOUT", 10),
        "page_size": getattr(settings, "HISTORY_PAGE_SIZE", 20),
        "warning_threshold": getattr(settings, "ATTENDANCE_WARNING_THRESHOLD", 75),
    }
    if getattr(settings, "DEBUG", False):
        logger.debug("[club-attendance] settings=%s api=%s", settings_module, api_config["base_url"])
    if not api_config["token"]:
        logger.warning("API_TOKEN is not set; authenticated endpoints will fail with AuthError")

    return build_container(api_config=api_config)
