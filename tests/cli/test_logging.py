import logging

from pitch_counter.cli._logging import configure_logging


class TestConfigureLogging:
    def test_default_is_info(self) -> None:
        configure_logging()
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_verbose_is_debug_and_lets_libraries_through(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("werkzeug").level == logging.NOTSET

    def test_repeated_calls_do_not_stack_handlers(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1
