from rich.console import Console
from rich.theme import Theme

custom_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "red",
        "logging.level.info": "cyan",
        "logging.level.warning": "yellow",
        "logging.level.error": "red",
    }
)
console = Console(log_path=False, stderr=True, theme=custom_theme)
