"""
AnalyzeCommand — One immediate analysis pass per file

Runs the full pipeline synchronously (no debounce), then prints the
pass summary and the document's suggestions.
"""

from pathlib import Path
from typing import List

from ..commands.base import BaseCommand
from ..presentation.formatters import format_document, format_report
from ..presentation.symbols import safe_print


class AnalyzeCommand(BaseCommand):
    """Analyze files now and print what the reviewer said."""

    def analyze(self, paths: List[str], full: bool = False) -> int:
        """
        Returns:
            Number of files that could not be analyzed
        """
        symbols = self.symbols
        problems = 0

        for raw_path in paths:
            path = Path(raw_path)
            resolved = path if path.is_absolute() else self.project_dir / path
            if not resolved.is_file():
                print(f"{symbols.check_fail} {raw_path}: no such file")
                problems += 1
                continue
            if not self.session.is_supported(resolved):
                print(f"{symbols.check_warn} {raw_path}: unsupported file type")
                problems += 1
                continue

            document = self.session.open_document(resolved)
            report = self.session.analyze(document)
            print(format_report(report, symbols, label=raw_path))
            if not report.extracted:
                print(f"  {symbols.check_warn} Could not read symbols; cached suggestions kept")

            suggestions = self.session.suggestions(document.uri)
            if suggestions:
                safe_print(format_document(suggestions, symbols, full=full))
            print()

        return problems


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register analyze command parser."""
    p = subparsers.add_parser('analyze', help='Review changed scopes in files now')
    p.add_argument('files', nargs='+', help='Files to analyze')
    p.add_argument('--full', action='store_true', help='Do not truncate titles')
    return p


def handle(cli, args):
    """Handle analyze command dispatch."""
    return cli._analyze_cmd.analyze(args.files, full=args.full)
