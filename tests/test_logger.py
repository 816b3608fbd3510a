# ---------- tests/test_logger.py ----------
import logging

from todoapp.logger import ColoredFormatter, setup_logger


def test_setup_logger_adds_one_handler():
    """Setting up the same logger twice keeps a single handler."""
    first = setup_logger("todoapp.test.handlers", logging.DEBUG)
    second = setup_logger("todoapp.test.handlers", logging.DEBUG)

    assert first is second
    assert len(second.handlers) == 1
    assert isinstance(second.handlers[0].formatter, ColoredFormatter)
    assert second.level == logging.DEBUG


def test_colored_formatter_wraps_level_colour():
    formatter = ColoredFormatter('%(levelname)s - %(message)s')
    record = logging.LogRecord("todoapp", logging.ERROR, __file__, 1, "boom", None, None)

    output = formatter.format(record)

    assert output.startswith(ColoredFormatter.COLORS['ERROR'])
    assert output.endswith(ColoredFormatter.COLORS['RESET'])
    assert "ERROR - boom" in output
