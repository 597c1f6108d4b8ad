import logging
import logging.config
import importlib.resources
import yaml
from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.traceback import Traceback

_LOGGER = logging.getLogger(__name__)


class ConditionalRichHandler(RichHandler):
    """
    Class that uses 'show_level=True' only if the message level is WARNING or higher.
    """

    def handle(self, record):
        if record.levelno >= logging.WARNING:
            self.show_level = True
        else:
            self.show_level = False
        return super().handle(record)

    def render(self, *, record: logging.LogRecord,
               traceback: Traceback | None,
               message_renderable: ConsoleRenderable) -> ConsoleRenderable:
        # if level is WARNING or higher, add the level column
        self._log_render.show_level = record.levelno >= logging.WARNING
        try:
            return super().render(record=record, traceback=traceback, message_renderable=message_renderable)
        finally:
            self._log_render.show_level = False


def load_cmdline_logging_config(level: int | str | None = None) -> None:
    """Configure logging for the command line tools from the packaged ``logging_cmdline.yaml``.

    Args:
        level: Optional level overriding the one of the ``cytomine`` logger.
    """
    config_text = importlib.resources.files('cytomine').joinpath('logging_cmdline.yaml').read_text(encoding='utf-8')
    config = yaml.safe_load(config_text)
    logging.config.dictConfig(config)
    if level is not None:
        logging.getLogger('cytomine').setLevel(level)
    _LOGGER.debug("Command line logging configured.")
