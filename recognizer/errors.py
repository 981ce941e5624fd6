# recognizer/errors.py


class RecognizerError(Exception):
    """Base class for errors raised by the recognizer package."""


class ConfigError(RecognizerError, ValueError):
    pass


class PatternFileError(RecognizerError, ValueError):
    """A pattern record or pattern file could not be read."""

    def __init__(self, message, path=None, line=None):
        self.path = path
        self.line = line
        where = ""
        if path is not None:
            where = f"{path}:{line}: " if line is not None else f"{path}: "
        super().__init__(f"{where}{message}")


class ModelLoadError(RecognizerError, OSError):
    pass


class ReviewError(RecognizerError, ValueError):
    pass
