"""
WatchCommand — Feed file edits into the debounced scheduler

Polls file modification times. Every change becomes a fresh Document
snapshot handed to the Change Scheduler, so saving repeatedly in quick
succession still produces a single review pass. Ctrl-C stops.
"""

import logging
import time
from pathlib import Path
from typing import Dict, List, Optional

from ..commands.base import BaseCommand
from ..presentation.formatters import format_document
from ..presentation.symbols import safe_print

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.5


class WatchCommand(BaseCommand):
    """Watch files and re-analyze them as they change."""

    def __init__(self, cli):
        super().__init__(cli)
        self._versions: Dict[Path, int] = {}

    def snapshot(self, paths: List[Path]) -> Dict[Path, Optional[float]]:
        """Modification time per path (None if missing)."""
        mtimes: Dict[Path, Optional[float]] = {}
        for path in paths:
            try:
                mtimes[path] = path.stat().st_mtime
            except OSError:
                mtimes[path] = None
        return mtimes

    def poll(self, paths: List[Path], previous: Dict[Path, Optional[float]]) -> List[Path]:
        """
        Notify the scheduler about every file whose mtime moved.

        Updates previous in place and returns the changed paths.
        """
        changed = []
        for path, mtime in self.snapshot(paths).items():
            if mtime == previous.get(path):
                continue
            previous[path] = mtime
            if mtime is None:
                continue
            try:
                self._notify(path)
            except OSError as e:
                # Replaced or deleted since the stat; retry next tick
                logger.debug("Could not read %s: %s", path, e)
                previous.pop(path, None)
                continue
            changed.append(path)
        return changed

    def _notify(self, path: Path) -> None:
        version = self._versions.get(path, 0) + 1
        self._versions[path] = version
        self.session.document_changed(self.session.open_document(path, version=version))

    def watch(self, paths: List[str], interval: float = DEFAULT_POLL_INTERVAL) -> int:
        symbols = self.symbols
        session = self.session

        targets = []
        for raw_path in paths:
            path = Path(raw_path)
            path = (path if path.is_absolute() else self.project_dir / path).resolve()
            if not session.is_supported(path):
                print(f"{symbols.check_warn} {raw_path}: unsupported file type, skipping")
                continue
            targets.append(path)

        if not targets:
            print("Nothing to watch.")
            return 1

        uris = {session.document_uri(path): path for path in targets}

        def on_refresh():
            for uri, path in uris.items():
                suggestions = session.suggestions(uri)
                if suggestions:
                    safe_print(f"{symbols.reviewed} {path.name}")
                    safe_print(format_document(suggestions, symbols))

        remove = session.on_refresh(on_refresh)

        delay = session.config.analysis.debounce_seconds
        print(f"Watching {len(targets)} file(s); reviewing {delay:g}s after edits stop. Ctrl-C to stop.")

        # Every watched file starts as "just opened"
        previous: Dict[Path, Optional[float]] = {}
        self.poll(targets, previous)
        try:
            while True:
                time.sleep(interval)
                self.poll(targets, previous)
        except KeyboardInterrupt:
            print("\nStopping...")
        finally:
            remove()
            session.shutdown()
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register watch command parser."""
    p = subparsers.add_parser('watch', help='Re-analyze files as they change')
    p.add_argument('files', nargs='+', help='Files to watch')
    p.add_argument('--interval', type=float, default=DEFAULT_POLL_INTERVAL,
                   help=f'Polling interval in seconds (default: {DEFAULT_POLL_INTERVAL})')
    return p


def handle(cli, args):
    """Handle watch command dispatch."""
    return cli._watch_cmd.watch(args.files, interval=args.interval)
