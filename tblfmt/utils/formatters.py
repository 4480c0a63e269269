from __future__ import annotations
import argparse
import os
import shutil
import sys

_TERM_WIDTH = shutil.get_terminal_size((100, 20)).columns


class EnhancedHelpFormatter(argparse.RawDescriptionHelpFormatter):
    """
    Help formatter with wider output that keeps the hand-laid-out epilog
    (grammar tables for mappings, layouts, widths and sort keys) verbatim.
    """

    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=32, width=_TERM_WIDTH)

    def _format_action_invocation(self, action: argparse.Action) -> str:
        # "-c, --columns MAP" instead of "-c MAP, --columns MAP"
        if not action.option_strings or action.nargs == 0:
            return super()._format_action_invocation(action)
        metavar = self._format_args(action, self._get_default_metavar_for_optional(action))
        return ", ".join(action.option_strings) + " " + metavar


class CustomArgumentParser(argparse.ArgumentParser):
    """
    ArgumentParser that prints usage before reporting an error, with the
    message highlighted when stderr is a terminal.
    """

    def __init__(self, *args, **kwargs) -> None:
        kwargs.setdefault("formatter_class", EnhancedHelpFormatter)
        super().__init__(*args, **kwargs)

    def error(self, message: str) -> None:
        use_color = sys.stderr.isatty() and os.getenv("NO_COLOR") is None
        red = "\033[31m" if use_color else ""
        reset = "\033[0m" if use_color else ""
        self.print_usage(sys.stderr)
        self.exit(2, f"{red}Error: {message}{reset}\n")
