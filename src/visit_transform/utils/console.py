"""
Logging and Console Utilities.

Routes the package's host-side messages (pipeline progress, skipped units)
through the standard ``logging`` library, rendered by ``rich``.

The transformer core never logs; only the pipeline and configuration loader
report through here. Handlers are installed on the ``visit_transform``
logger, not on the root logger, so embedding applications keep control of
their own logging setup.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Between INFO and WARNING
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

LOGGER_NAME = "visit_transform"

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
  }
)

_console: Optional[Console] = None


def get_logger() -> logging.Logger:
  """Returns the package logger."""
  return logging.getLogger(LOGGER_NAME)


def get_console() -> Console:
  """
  Retrieves the active console, creating a themed stderr console on first use.

  Returns:
      Console: The active Rich Console.
  """
  global _console
  if _console is None:
    _console = Console(theme=_THEME, stderr=True)
  return _console


def set_console(new_console: Console, level: int = logging.INFO) -> None:
  """
  Redirects package logging to a specific console (e.g. a recording one in tests).

  Args:
      new_console (Console): The Rich console to write to.
      level (int): Minimum level forwarded to the console.
  """
  global _console
  _console = new_console
  configure_logging(level)


def configure_logging(level: int = logging.INFO) -> None:
  """
  Installs a single RichHandler bound to the active console on the package logger.

  Calling it again replaces the previous handler instead of stacking a new one.

  Args:
      level (int): Minimum level to emit.
  """
  logger = get_logger()
  for handler in list(logger.handlers):
    if isinstance(handler, RichHandler):
      logger.removeHandler(handler)

  rich_handler = RichHandler(
    console=get_console(),
    show_time=False,
    omit_repeated_times=False,
    show_path=False,
    markup=True,
    rich_tracebacks=True,
  )
  logger.setLevel(level)
  logger.addHandler(rich_handler)


def log_info(msg: str) -> None:
  """Logs an informational message."""
  get_logger().info(msg, extra={"markup": True})


def log_success(msg: str) -> None:
  """Logs a success message at the custom SUCCESS level."""
  get_logger().log(SUCCESS_LEVEL_NUM, msg, extra={"markup": True})


def log_warning(msg: str) -> None:
  """Logs a warning message."""
  get_logger().warning(msg, extra={"markup": True})


def log_error(msg: str) -> None:
  """Logs an error message."""
  get_logger().error(msg, extra={"markup": True})
