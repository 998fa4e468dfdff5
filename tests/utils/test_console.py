"""
Tests for the rich-backed logging helpers.
"""

import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from visit_transform.utils import console as console_mod


@pytest.fixture
def recording_console():
  rec = Console(record=True, width=200)
  console_mod.set_console(rec)
  yield rec
  logger = console_mod.get_logger()
  for handler in list(logger.handlers):
    logger.removeHandler(handler)
  logger.setLevel(logging.NOTSET)


def test_messages_reach_the_active_console(recording_console):
  console_mod.log_info("processing unit")
  console_mod.log_success("all done")
  console_mod.log_warning("skipped one")
  console_mod.log_error("it broke")

  text = recording_console.export_text()
  assert "processing unit" in text
  assert "all done" in text
  assert "SUCCESS" in text
  assert "skipped one" in text
  assert "it broke" in text


def test_configure_logging_does_not_stack_handlers(recording_console):
  console_mod.configure_logging()
  console_mod.configure_logging(logging.DEBUG)

  logger = console_mod.get_logger()
  rich_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
  assert len(rich_handlers) == 1
  assert logger.level == logging.DEBUG


def test_root_logger_is_untouched(recording_console):
  root = logging.getLogger()
  assert not any(
    isinstance(h, RichHandler) and h.console is recording_console for h in root.handlers
  )


def test_get_console_returns_active_console(recording_console):
  assert console_mod.get_console() is recording_console
