"""Print Porytiles command lines from settings stored in a name-value JSON archive."""

__version__ = "0.1.0"

__all__ = [
    "cli",
    "command_generator",
    "context",
    "json_input",
    "json_output",
    "serialize",
    "settings",
    "stdtypes",
]