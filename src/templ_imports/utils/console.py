"""
Log Output.

Everything templ-imports reports goes through the ``templ_imports`` logger and
is rendered by a ``rich`` handler. The handler is bound to whichever Console
``console`` currently wraps; tests rebind it to a recording Console with
``set_console`` and read the output back with ``console.export_text()``.
"""

import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

LOGGER_NAME = "templ_imports"

# Files rewritten by --write; between INFO and WARNING.
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

STYLES = Theme(
  {
    "logging.level.success": "green",
    "path": "bold blue",
    "code": "bold magenta",
  }
)

logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)
logger.propagate = False


def _stderr_console() -> Console:
  return Console(theme=STYLES, stderr=True)


class _OutputConsole:
  """
  Stable handle on the Console that receives log records.

  Rebinding swaps the logger's rich handler along with the Console, so
  modules that imported ``console`` or the ``log_*`` helpers never go stale.
  """

  def __init__(self, backend: Optional[Console] = None) -> None:
    self.bind(backend or _stderr_console())

  def bind(self, backend: Console) -> None:
    self._backend = backend
    for handler in [h for h in logger.handlers if isinstance(h, RichHandler)]:
      logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=backend, show_time=False, show_path=False, markup=True))

  @property
  def backend(self) -> Console:
    return self._backend

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _OutputConsole()


def set_console(new_console: Console) -> None:
  """
  Routes all further log output to ``new_console``.

  Args:
      new_console (Console): e.g. ``Console(file=io.StringIO(), record=True)``.
  """
  console.bind(new_console)


def reset_console() -> None:
  console.bind(_stderr_console())


def set_verbosity(verbose: bool) -> None:
  """
  Switches between debug and info logging.

  Args:
      verbose (bool): True to show per-fragment debug messages.
  """
  logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def log_debug(msg: str) -> None:
  logger.debug(msg, extra={"markup": True})


def log_info(msg: str) -> None:
  """
  Logs an informational message.

  Args:
      msg (str): The message. Rich markup such as ``[path]...[/path]`` is rendered.
  """
  logger.info(msg, extra={"markup": True})


def log_success(msg: str) -> None:
  logger.log(SUCCESS_LEVEL_NUM, msg, extra={"markup": True})


def log_warning(msg: str) -> None:
  logger.warning(msg, extra={"markup": True})


def log_error(msg: str) -> None:
  logger.error(msg, extra={"markup": True})
