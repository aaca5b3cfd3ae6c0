"""Identifier case conversions for snake_case database names."""

__all__ = [
    "to_upper_snake",
    "to_upper_camel",
    "to_lower_camel",
    "decapitalize",
    "is_number",
    "underline",
]


def _title(segment: str) -> str:
    """Uppercase the first character, leave the rest alone."""
    return segment[:1].upper() + segment[1:]


def to_upper_snake(name: str) -> str:
    """foo_bar -> FOO_BAR"""
    return "_".join(segment.upper() for segment in name.split("_"))


def to_upper_camel(name: str) -> str:
    """foo_bar_coo -> FooBarCoo"""
    return "".join(_title(segment) for segment in name.split("_"))


def to_lower_camel(name: str) -> str:
    """foo_bar -> fooBar"""
    segments = name.split("_")
    return segments[0].lower() + "".join(_title(s) for s in segments[1:])


def decapitalize(name: str) -> str:
    """Convert to normal Java variable capitalization.

    The first character is lower-cased, except when the name is empty,
    shorter than two characters, or starts with two uppercase characters
    (``URL`` stays ``URL``).
    """
    if not name or len(name) < 2 or _starts_with_two_uppercase(name):
        return name
    return name[0].lower() + name[1:]


def _starts_with_two_uppercase(name: str) -> bool:
    return len(name) > 1 and name[0].isupper() and name[1].isupper()


def is_number(value: str) -> bool:
    """Check if a value parses as an int or float literal."""
    try:
        int(value)
        return True
    except ValueError:
        pass
    try:
        float(value)
        return True
    except ValueError:
        return False


def underline(text: str, char: str = "=") -> str:
    """Repeat char to the length of text, for reStructuredText headings."""
    return char * len(text)
