"""Errors raised while parsing column, layout, width and sort-key strings."""


class SpecError(ValueError):
    """Base error for a malformed column, layout, width or sort specifier."""


class InvalidCharacter(SpecError):
    """Raised when a layout string contains a character outside its alphabet."""

    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"Invalid character: {char}")


class InvalidLayout(SpecError):
    """Raised for an empty layout string."""


class InvalidListSyntax(SpecError):
    """Raised when a ';'-separated column list has a non-integer member."""


class InvalidColumnSpecifier(SpecError):
    """Raised when a column mapping is neither an index, a list nor a range."""


class MissingRangeEnd(SpecError):
    """Raised for an inclusive range ('..=') without an end index."""


class InvalidWidthSpecifier(SpecError):
    pass


class EllipsisWidthTooSmall(SpecError):
    pass


class InvalidSortKey(SpecError):
    pass
