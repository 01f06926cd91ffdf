"""
ConfigCommand — View and change configuration

Covers model selection (llm.model), provider choice and analysis
tuning. Credentials are never written: the command only reports
whether the provider's API key variable is set.
"""

from ..commands.base import BaseCommand
from ..services.providers import get_provider_status


class ConfigCommand(BaseCommand):
    """Configuration display and modification."""

    def show_config(self) -> int:
        print(self.config_manager.display())
        print()
        print(f"Reviewer: {get_provider_status(self.config)}")
        return 0

    def set_config(self, assignment: str, scope: str = "project") -> int:
        symbols = self.symbols

        if "=" not in assignment:
            print(f"{symbols.check_fail} Use KEY=VALUE (e.g., llm.model=claude-sonnet-4-5)")
            return 1

        key, value = assignment.split("=", 1)
        key, value = key.strip(), value.strip()
        error = self.config_manager.set(key, value, scope)
        if error:
            print(f"{symbols.check_fail} {error}")
            return 1

        path = (self.config_manager.project_config_path if scope == "project"
                else self.config_manager.user_config_path)
        print(f"{symbols.check_pass} Set {key} = {value}")
        print(f"  Saved to {path}")
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register config command parser."""
    p = subparsers.add_parser('config', help='View or set configuration')
    p.add_argument('--set', metavar='KEY=VALUE',
                   help='Set config value (e.g., llm.model=claude-sonnet-4-5)')
    p.add_argument('--user', action='store_true',
                   help='Apply to user config instead of project')
    return p


def handle(cli, args):
    """Handle config command dispatch."""
    if args.set:
        return cli._config_cmd.set_config(args.set, scope="user" if args.user else "project")
    return cli._config_cmd.show_config()
