"""
CLI — Command-line interface for retro

Quiet reviewer: analyzes what changed, remembers what it said,
stays out of the way otherwise.

    retro analyze src/app.ts          # review new/changed scopes now
    retro watch src/app.ts            # review after edits settle
    retro show src/app.ts --line 12   # what was said about line 12
    retro clear [src/app.ts]          # forget suggestions
    retro config --set llm.model=claude-sonnet-4-5
"""

import argparse
import logging
import os
from pathlib import Path
from typing import Optional

from . import __version__
from .commands.analyze import AnalyzeCommand
from .commands.clear import ClearCommand
from .commands.config_cmd import ConfigCommand
from .commands.show import ShowCommand
from .commands.watch import WatchCommand
from .config import ConfigManager
from .errors import RetroError
from .presentation.symbols import get_symbols
from .session import Session


class RetroCLI:
    """Holds the resources every command shares."""

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir).resolve()
        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()
        self.symbols = get_symbols(self.config.display.symbols)
        self._session: Optional[Session] = None

        self._analyze_cmd = AnalyzeCommand(self)
        self._watch_cmd = WatchCommand(self)
        self._show_cmd = ShowCommand(self)
        self._clear_cmd = ClearCommand(self)
        self._config_cmd = ConfigCommand(self)

    @property
    def session(self) -> Session:
        """Analysis session, built on first use (config-only commands never need one)."""
        if self._session is None:
            self._session = Session(self.project_dir, config=self.config)
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.shutdown()


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging once for the CLI process."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main(argv=None) -> int:
    """
    Main entry point for the retro CLI.

    Parser definitions and dispatch live in the individual command modules.
    """
    parser = argparse.ArgumentParser(
        description="retro -- Incremental AI code review",
        epilog="Reviews what changed. Remembers what it said."
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("RETRO_PROJECT_PATH", "."),
        help='Project directory (default: RETRO_PROJECT_PATH or current)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log pipeline decisions (debug level)'
    )
    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'retro {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    from .commands import register_all, dispatch
    register_all(subparsers)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    cli = RetroCLI(Path(args.project))
    try:
        result = dispatch(args.command, cli, args)
    except KeyError as e:
        print(f"Error: {e}")
        parser.print_help()
        return 2
    except (RetroError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    finally:
        cli.close()

    return 1 if result else 0


if __name__ == '__main__':
    raise SystemExit(main())
