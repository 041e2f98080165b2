"""Output formatting utilities for the Dodgem CLI."""

from rich.console import Console
from rich.syntax import Syntax

# Default console for output
console = Console()


def print_syntax(content: str, lexer: str, console_instance: Console | None = None) -> None:
    """Print already-formatted text with syntax highlighting."""
    (console_instance or console).print(Syntax(content, lexer, theme="monokai"))


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format.

    Example:
        format_duration(12.34)  # Returns "12.3s"
        format_duration(90)  # Returns "1m 30s"
        format_duration(3661)  # Returns "1h 1m"
    """
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        return f"{hours}h {minutes}m"
