"""Build snapshot consumers from presentation configuration."""

from typing import Optional, TextIO

import structlog

from ..config.defaults import PresentationParams
from .base import BaseSnapshotConsumer
from .live_status_file import LiveStatusFileWriter
from .stdout_presenter import StdoutPresenter

logger = structlog.get_logger(__name__)


def create_consumers(params: PresentationParams,
                     stream: Optional[TextIO] = None) -> list[BaseSnapshotConsumer]:
    """Instantiate every consumer the configuration enables."""
    consumers: list[BaseSnapshotConsumer] = []

    if params.stdout_enabled:
        consumers.append(StdoutPresenter(format=params.stdout_format, stream=stream))

    if params.live_status_path:
        consumers.append(LiveStatusFileWriter(params.live_status_path))

    for consumer in consumers:
        logger.info("Initialized snapshot consumer", consumer=consumer.name)

    return consumers
