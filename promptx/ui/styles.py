"""
ui/styles.py
Theme and panel factories for the PromptX console output.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.style import Style
from rich.theme import Theme

PROMPTX_THEME = Theme(
    {
        "promptx.text": "grey85",
        "promptx.border": "medium_purple3",
        "promptx.accent": Style(color="turquoise2", bold=True),
        "role.system": "medium_purple3",
        "role.user": "bright_cyan",
        "role.assistant": "chartreuse1",
        # Usage status (matches get_context_status_color)
        "green": "bright_green",
        "yellow": Style(color="gold1", bold=True),
        "red": Style(color="red3", bold=True),
        "error": Style(color="red3", bold=True),
        "dim": "grey50",
    }
)

console = Console(theme=PROMPTX_THEME)
error_console = Console(theme=PROMPTX_THEME, stderr=True)


def create_summary_panel(content, title="Conversation Summary"):
    """Frame for the generated summary text."""
    return Panel(
        content,
        title=f"[promptx.border]{title}[/]",
        title_align="left",
        border_style="promptx.border",
        box=box.ROUNDED,
        padding=(1, 2),
    )
