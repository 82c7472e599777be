"""Exceptions raised while reading post front matter"""


class FrontmatterError(ValueError):
    """The leading YAML block is missing, unparsable, or not a mapping."""


class MetadataError(ValueError):
    """Front matter parsed, but one or more fields are missing or mistyped."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))
