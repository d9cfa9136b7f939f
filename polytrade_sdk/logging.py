import logging
from typing import Any, MutableMapping


class FieldsAdapter(logging.LoggerAdapter):
    """Logger adapter accepting ``logger.info("event", key=value)`` calls.

    Keyword fields are rendered after the event name as ``key=value`` pairs.
    The standard ``exc_info``/``stack_info``/``extra`` keywords keep their
    usual meaning.
    """

    _PASSTHROUGH = ("exc_info", "stack_info", "stacklevel", "extra")

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        passthrough = {k: kwargs.pop(k) for k in self._PASSTHROUGH if k in kwargs}
        if kwargs:
            fields = " ".join(f"{key}={value}" for key, value in kwargs.items())
            msg = f"{msg} {fields}"
        msg, passthrough = self.process(msg, passthrough)
        self.logger.log(level, msg, *args, **passthrough)

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return msg, kwargs


def get_logger(name: str) -> FieldsAdapter:
    """
    Get a logger that accepts structured keyword fields.

    Args:
        name: Logger name (usually module or component name)

    Returns:
        Logger adapter writing through a standard library logger
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return FieldsAdapter(logger, {})
