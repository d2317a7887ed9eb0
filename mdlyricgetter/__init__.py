from .const import PROGNAME, VERSION

__all__ = [
    'PROGNAME',
    'VERSION',
]
