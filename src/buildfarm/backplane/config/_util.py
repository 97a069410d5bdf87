"""
Utilities for converting raw configuration values into more useful types.

Raw values are either strings (from INI-style files) or already-typed values
(from YAML documents), so every converter accepts both.
"""
import json
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple, Type, TypeVar

DEFAULT_TRUE_SET = frozenset((
    '1', 'yes', 'true', 'on'
))
"""Default set of string values which should treated as boolean True."""

DEFAULT_FALSE_SET = frozenset((
    '0', 'no', 'false', 'off'
))
"""Default set of string values which should treated as boolean False."""


def str2bool(
        string: Any,
        true_values: Optional[Iterable[str]] = None,
        false_values: Optional[Iterable[str]] = None
) -> bool:
    """
    Converts a raw value into a boolean value. Booleans are passed through, other
    values are compared (as strings) with two sets of allowed keywords, one for True
    values and one for False. Comparison is done normalised (lower-case and stripped
    whitespace).

    :param string:
                The raw value to convert.
    :param true_values:
                A set of values to consider boolean True. None for the default set.
    :param false_values:
                A set of values to consider boolean False. None for the default set.
    :return:
                The converted value.
    :raises ValueError:
                If the normalised string is not in either the true- or false-values.
    """
    if isinstance(string, bool):
        return string

    # Normalise the given true values into a set, or default
    true_set = (
        frozenset(map(normalise, true_values)) if true_values is not None
        else DEFAULT_TRUE_SET
    )

    # Normalise the given false values into a set, or default
    false_set = (
        frozenset(map(normalise, false_values)) if false_values is not None
        else DEFAULT_FALSE_SET
    )

    # Normalise the value to convert
    normalised_string = normalise(str(string))

    # Find which boolean set the value is in, or raise if in neither
    if normalised_string in true_set:
        return True
    elif normalised_string in false_set:
        return False
    else:
        raise ValueError(
            f"String '{normalised_string}' (normalised from '{string}') not found in either bool-set\n"
            f"True-set: {true_set}\n"
            f"False-set: {false_set}"
        )


def normalise(string: str) -> str:
    """
    Normalises a string for case-insensitive, stripped comparison.

    :param string:
                The string to normalise.
    :return:
                The normalised string.
    """
    return string.lower().strip()


def string(value: Any) -> str:
    """
    Converts a raw value into a string. Only strings and numbers are accepted,
    so a list or mapping given in place of a string is reported rather than
    turned into its text representation.
    """
    if isinstance(value, str):
        return value

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Expected a string, got {type(value).__name__}")

    return str(value)


def integer(value: Any) -> int:
    """
    Converts a raw value into an integer, rejecting booleans and fractional numbers.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError(f"Expected an integer, got {value!r}")

    return int(value)


ElementType = TypeVar('ElementType')
"""The type of elements in a list."""


def list_of(
        convert: Callable[[Any], ElementType],
        sep: Optional[str] = None
) -> Callable[[Any], Tuple[ElementType, ...]]:
    """
    Creates a convert function for lists of values.

    :param convert:
                The function to use to convert each element of the list.
    :param sep:
                The separator of sub-strings in a raw string list.
    :return:
                A function which takes either a [sep]-separated string of strings,
                or a sequence of raw values, and converts it into a tuple of
                converted elements.
    """
    def convert_list(
            value: Any
    ) -> Tuple[ElementType, ...]:
        if isinstance(value, str):
            elements = [element.strip() for element in value.split(sep)]
            elements = [element for element in elements if element != '']
        elif isinstance(value, (list, tuple)):
            elements = value
        else:
            raise ValueError(f"Expected a list, got {type(value).__name__}")

        return tuple(
            convert(element)
            for element in elements
        )

    return convert_list


EnumType = TypeVar('EnumType', bound=Enum)
"""The type of an enumeration."""


def enum_member(
        enum_type: Type[EnumType]
) -> Callable[[Any], EnumType]:
    """
    Creates a convert function which parses the (case-insensitive) name of
    a member of an enumeration.

    :param enum_type:
                The enumeration to parse members of.
    :return:
                Function which converts the raw value into the named member.
    """
    def convert_enum(
            value: Any
    ) -> EnumType:
        if isinstance(value, enum_type):
            return value

        name = normalise(str(value)).upper()
        if name not in enum_type.__members__:
            raise ValueError(
                f"'{value}' is not one of:\n"
                f"{tuple(enum_type.__members__)}"
            )

        return enum_type[name]

    return convert_enum


def records(value: Any) -> Tuple[Mapping[str, Any], ...]:
    """
    Converts a raw value into a tuple of read-only records. The records
    themselves are opaque; only their shape (a list of mappings) is checked.
    Strings are parsed as JSON.

    :param value:
                The raw value, a list of mappings or a JSON string encoding one.
    :return:
                The records.
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON: {exc}") from exc

    if not isinstance(value, (list, tuple)):
        raise ValueError(f"Expected a list of records, got {type(value).__name__}")

    for index, record in enumerate(value):
        if not isinstance(record, Mapping):
            raise ValueError(f"Record {index} is not a mapping: {record!r}")

    return tuple(
        freeze(record)
        for record in value
    )


def freeze(value: Any) -> Any:
    """
    Recursively converts mappings into read-only mappings and lists into tuples.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    elif isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """
    Reverses freeze(), for handing values to serialisers.
    """
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    elif isinstance(value, (list, tuple)):
        return [thaw(item) for item in value]
    return value


def read_text_file(path: str) -> str:
    """
    Reads the full contents of a text file. Errors opening or reading
    the file are propagated to the caller.

    :param path:
                The path to the file.
    :return:
                The contents of the file.
    """
    with open(path, "r", encoding="utf-8") as file:
        return file.read()
