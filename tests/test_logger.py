"""
Tests for the logging setup.
"""

import logging

import pytest

from ideaforge.utils import logger as logger_module


class TestLogger:
    """Tests for the ideaforge logger configuration."""

    def test_dedicated_handler(self):
        ideaforge_logger = logging.getLogger("ideaforge")
        assert ideaforge_logger.handlers == [logger_module.ideaforge_handler]
        assert ideaforge_logger.propagate is False

    def test_logs_go_to_stderr_stream(self):
        """Command output (including --json) owns stdout."""
        assert logger_module.ideaforge_handler.stream is logger_module.LOG_STREAM
        assert logger_module.LOG_STREAM is not logger_module.sys.stdout

    @pytest.mark.parametrize("name", ["httpx", "httpcore", "openai", "google_genai", "pymongo"])
    def test_sdk_loggers_quieted(self, name):
        assert logging.getLogger(name).level == logging.WARNING

    def test_module_logger_is_a_child(self):
        assert logger_module.logger.name == "ideaforge.utils.logger"
        assert logger_module.logger.getEffectiveLevel() == logging.getLogger("ideaforge").level


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
