from typing import Any, Callable, Generic, Optional, TYPE_CHECKING, Type, TypeVar

if TYPE_CHECKING:
    from ._ConfigSection import ConfigSection


ValueType = TypeVar('ValueType')
"""
The type of value that the property converts its raw input into.
"""


class ConfigProperty(Generic[ValueType]):
    """
    A single property of a section in a configuration file. Decorator-class which
    manages conversion from raw values, property-optionality/defaults, and
    type-safe, read-only retrieval.

    The key the property is read from is derived from the attribute name it is
    declared under: leading underscores are dropped and the remaining snake_case
    name is converted to camelCase (e.g. '_redis_password' reads 'redisPassword').
    """
    def __init__(
            self,
            convert: Callable[[Any], ValueType],
            default: Optional[ValueType] = None,
            optional: bool = False,
            secret: bool = False
    ):
        """
        :param convert:
                    Converter from raw values to the property's value-type.
        :param default:
                    A default value for properties which are not specified.
        :param optional:
                    Whether the property may be left unspecified without a default,
                    in which case its value is None.
        :param secret:
                    Whether the property's value must be redacted when displayed.
        """
        self._name: Optional[str] = None
        self._key: Optional[str] = None
        self._owner: Optional[Type[ConfigSection]] = None
        self._convert = convert
        self._default = default
        self._optional = optional
        self._secret = secret

    @property
    def name(self) -> Optional[str]:
        """The attribute name the property is declared under."""
        return self._name

    @property
    def key(self) -> Optional[str]:
        """The key the property is read from in the configuration file."""
        return self._key

    @property
    def secret(self) -> bool:
        return self._secret

    def convert(self, value: Any) -> Optional[ValueType]:
        """
        Converts the raw value to the property's value-type, or provides
        the default if no value is given.

        :param value:
                    The raw value to convert.
        :return:
                    The converted value.
        :raises Exception:
                    If no value is given and this is not an optional property.
        """
        # If a value is given, convert it
        if value is not None:
            return self._convert(value)

        # If this property is required, raise the fact that no value was given
        if self._default is None and not self._optional:
            raise Exception(f"No value specified for non-optional property '{self._key}'")

        return self._default

    def __get__(self, instance: 'ConfigSection', owner: Type['ConfigSection']) -> ValueType:
        """
        Gets the (converted) value of this property from the parsed section instance.

        :param instance:
                    The parsed configuration section.
        :param owner:
                    The configuration section class that owns this property.
        :return:
                    The converted or default value of this property for the instance.
        """
        # Decorator access rules require that we return the decorator itself when instance is None
        if instance is None:
            return self

        # Make sure the instance is an instance of the property's owning class
        if not isinstance(instance, self._owner):
            raise Exception(f"Instance-type for ConfigProperty should be {self._owner}, got {type(instance)}")

        return instance[self._name]

    def __set__(self, instance: 'ConfigSection', value: Any):
        # Loaded sections are read-only
        raise AttributeError(f"Configuration property '{self._key}' is read-only")

    def __set_name__(self, owner: Type['ConfigSection'], name: str):
        """
        Saves the name/owning-class of this property, so that it can't be reused.

        :param owner:
                    The configuration section class that owns this property.
        :param name:
                    The name of this property.
        """
        # Make sure we haven't already been claimed
        if self._name is not None:
            raise Exception(f"ConfigProperty already registered under name '{self._name}'")

        self._name = name
        self._key = camel_case(name)
        self._owner = owner


def camel_case(name: str) -> str:
    """
    Converts a (possibly underscore-prefixed) snake_case attribute name into
    the camelCase key used in configuration files.

    :param name:
                The attribute name.
    :return:
                The configuration key.
    """
    first, *rest = name.lstrip('_').split('_')
    return first + ''.join(word.capitalize() for word in rest)
