"""
Exceptions raised by the transpiler and its collaborators
"""


class TranspileError(Exception):
    """Base class for every error the transpiler raises"""


class SourceParseError(TranspileError):
    """Source could not be read or parsed; the message is the front-end's own"""

    def __init__(self, message: str, filename: str = "<source>", lineno: int = None):
        self.filename = filename
        self.lineno = lineno
        super().__init__(message)


class ManifestUpdateError(TranspileError):
    """plutus.json could not be read, updated or written"""
