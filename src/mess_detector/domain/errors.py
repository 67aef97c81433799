"""Domain exceptions."""


class MessDetectorError(Exception):
    """Base class for every error raised by mess_detector."""


class NavigationError(MessDetectorError):
    """Requested tree structure does not exist. Rules guard against it."""


class NoParentError(NavigationError):
    """parent() was called on the tree root."""


class NodeIndexError(NavigationError, IndexError):
    """child(i) was called with a position that has no child."""


class NodeNotFoundError(NavigationError, LookupError):
    """No descendant of the requested kind exists."""


class TreeLoadError(MessDetectorError):
    """An upstream tree dump could not be turned into a SyntaxTree."""

    def __init__(self, file_path: str, message: str) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.message = message


class UnknownRuleError(MessDetectorError, KeyError):
    """A rule name is not present in the rule catalog."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
