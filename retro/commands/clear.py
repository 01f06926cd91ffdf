"""
ClearCommand — Explicit, user-triggered eviction
"""

from ..commands.base import BaseCommand


class ClearCommand(BaseCommand):
    """Clear one document's suggestions, or all of them."""

    def clear(self, path: str = None) -> int:
        symbols = self.symbols

        if path is None:
            count = len(self.cache.documents())
            self.session.clear()
            print(f"{symbols.check_pass} Cleared suggestions for {count} document(s)")
            return 0

        if self.session.clear(self.session.document_uri(path)):
            print(f"{symbols.check_pass} Cleared suggestions for {path}")
        else:
            print(f"No suggestions stored for {path}")
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register clear command parser."""
    p = subparsers.add_parser('clear', help='Clear cached suggestions')
    p.add_argument('file', nargs='?', help='Only clear this file (default: everything)')
    return p


def handle(cli, args):
    """Handle clear command dispatch."""
    return cli._clear_cmd.clear(args.file)
