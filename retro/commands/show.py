"""
ShowCommand — Read suggestions back out of the durable cache

No analysis happens here: this is the read path the hover and gutter
use, pointed at a line (0-based, editor convention) or a whole file.
"""

from ..commands.base import BaseCommand
from ..presentation.formatters import format_document, format_suggestions
from ..presentation.symbols import safe_print


class ShowCommand(BaseCommand):
    """Show cached suggestions for a file or a line."""

    def show(self, path: str, line: int = None, full: bool = False) -> int:
        uri = self.session.document_uri(path)
        symbols = self.symbols

        if line is None:
            suggestions = self.cache.get(uri)
            if not suggestions:
                print(f"No suggestions for {path}. Run: retro analyze {path}")
                return 0
            safe_print(format_document(suggestions, symbols, full=full))
            return 0

        suggestions = self.cache.get_for_line(uri, line)
        if not suggestions:
            print(f"No suggestions on line {line} of {path}.")
            return 0
        safe_print(format_suggestions(suggestions, symbols, language=self.session.language_for(path)))
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register show command parser."""
    p = subparsers.add_parser('show', help='Show cached suggestions')
    p.add_argument('file', help='File to show suggestions for')
    p.add_argument('--line', '-l', type=int, help='Only suggestions spanning this 0-based line')
    p.add_argument('--full', action='store_true', help='Do not truncate titles')
    return p


def handle(cli, args):
    """Handle show command dispatch."""
    return cli._show_cmd.show(args.file, line=args.line, full=args.full)
