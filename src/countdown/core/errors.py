"""Exception hierarchy shared by the countdown core and CLI."""


class CountdownError(Exception):
    """Base class for errors reported to the user by the CLI."""


class ParseError(CountdownError, ValueError):
    """Raised when a duration string cannot be parsed."""


class TerminalError(CountdownError):
    """Raised when the terminal cannot be set up or queried."""
