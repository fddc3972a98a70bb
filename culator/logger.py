import logging
import sys


class _StderrHandler(logging.StreamHandler):
    """StreamHandler that always writes to the current sys.stderr."""

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


class DiagnosticLogger:

    def __init__(self, name):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.WARNING)

        # Prevent double handlers when modules reload
        if not self.logger.handlers:
            handler = _StderrHandler()
            formatter = logging.Formatter("%(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

        self.logger.propagate = False

    def set_debug(self, enabled):
        self.logger.setLevel(logging.DEBUG if enabled else logging.WARNING)

    def debug(self, msg):
        self.logger.debug(msg)

    def warn(self, msg):
        self.logger.warning(msg)

    def error(self, msg, exc: Exception = None):
        if exc is not None and self.logger.isEnabledFor(logging.DEBUG):
            self.logger.error(msg, exc_info=exc)
        else:
            self.logger.error(msg)


LOGGER = DiagnosticLogger("culator")
