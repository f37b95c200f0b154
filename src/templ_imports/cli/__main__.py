"""
Main Entry Point for the templ-imports CLI.

Reads a templ document from a file or stdin, updates its header imports, and
writes the result to stdout or back to the file.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from templ_imports import __version__
from templ_imports.config import ImportsConfig, parse_cli_key_values
from templ_imports.core.process import process
from templ_imports.errors import TemplImportsError
from templ_imports.utils.console import log_error, log_success, log_warning, set_verbosity

EXIT_OK = 0
EXIT_CHANGED = 1
EXIT_ERROR = 2

# Anchor used for module resolution when reading stdin.
STDIN_NAME = "stdin.templ"


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: 0 on success, 1 when ``--check`` finds changes, 2 on errors.
  """
  parser = argparse.ArgumentParser(description="templ-imports: automatic import management for templ documents")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("path", nargs="?", default="-", help="Input document (default: stdin)")
  mode = parser.add_mutually_exclusive_group()
  mode.add_argument("-w", "--write", action="store_true", help="Rewrite the file in place instead of printing")
  mode.add_argument("--check", action="store_true", help="Exit with status 1 if the file would change")
  parser.add_argument(
    "--config",
    nargs="*",
    help="Configuration overrides in key=value format (e.g. resolve_installed=true)",
  )
  parser.add_argument("-v", "--verbose", action="store_true", help="Log every resolved fragment")

  args = parser.parse_args(argv)
  set_verbosity(args.verbose)

  from_stdin = args.path == "-"
  if from_stdin and args.write:
    parser.error("--write requires a file path")

  try:
    overrides = parse_cli_key_values(args.config)
    config = ImportsConfig.load(search_path=None if from_stdin else Path(args.path).resolve().parent, overrides=overrides)
  except ValueError as e:
    log_error(f"Invalid configuration: {e}")
    return EXIT_ERROR

  if from_stdin:
    anchor = str(Path.cwd() / STDIN_NAME)
    source = sys.stdin.read()
  else:
    anchor = str(Path(args.path).resolve())
    try:
      source = Path(args.path).read_text(encoding="utf-8")
    except OSError as e:
      log_error(f"Cannot read [path]{args.path}[/path]: {e}")
      return EXIT_ERROR

  try:
    document = process(anchor, source, config)
  except TemplImportsError as e:
    log_error(f"Failed to process [path]{args.path}[/path]: {e}")
    return EXIT_ERROR

  result = document.to_source()

  if args.check:
    if result == source:
      return EXIT_OK
    log_warning(f"[path]{args.path}[/path] would be rewritten")
    return EXIT_CHANGED

  if args.write:
    if result != source:
      Path(args.path).write_text(result, encoding="utf-8")
      log_success(f"Updated [path]{args.path}[/path]")
    return EXIT_OK

  sys.stdout.write(result)
  return EXIT_OK


if __name__ == "__main__":
  sys.exit(main())
