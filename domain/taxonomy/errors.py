"""Build-time errors raised while constructing a taxonomy graph."""


class TaxonomyError(ValueError):
    """Base class for corpus problems that prevent a graph from being built."""


class MalformedDocumentError(TaxonomyError):
    """A document descriptor is missing required structure (identifier, topic, group)."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed document {path!r}: {reason}")


class DuplicateIdentifierError(TaxonomyError):
    """Two documents in the same topic declare the same canonical identifier."""

    def __init__(self, topic: str, identifier: str, paths: list[str]) -> None:
        self.topic = topic
        self.identifier = identifier
        self.paths = list(paths)
        super().__init__(
            f"Duplicate identifier {identifier!r} in topic {topic!r}: declared by {', '.join(self.paths)}"
        )
