from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ._ConfigProperty import ConfigProperty

REDACTED = "<HIDDEN>"
"""The marker shown in place of secret values."""


class ConfigSection:
    """
    Base class for sections of a buildfarm configuration file.
    """
    SECTION_NAME: str = ""
    """The name of the section in the configuration file."""

    def __init__(
            self,
            name: str,
            raw: Mapping[str, Mapping[str, Any]],
            source_filename: Optional[str] = None
    ):
        """
        :param name:
                    The section's name.
        :param raw:
                    The raw parsed config-file, a mapping from section names to
                    mappings of keys to raw values (a ConfigParser or a YAML document).
        :param source_filename:
                    The filename of the parsed config-file (for error messages). None to exclude.
        """
        self._name = name
        self._values = MappingProxyType(self._check(name, raw, source_filename))

    @classmethod
    def from_values(
            cls,
            values: Optional[Mapping[str, Any]] = None,
            name: Optional[str] = None
    ) -> 'ConfigSection':
        """
        Creates a section directly from a mapping of configuration keys to raw values.

        :param values:
                    The raw values, keyed as in a configuration file. None for all defaults.
        :param name:
                    The section's name. None for the class' default section name.
        :return:
                    The parsed section.
        """
        if name is None:
            name = cls.SECTION_NAME

        return cls(name, {name: values if values is not None else {}})

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_display_dict()})"

    def __getitem__(self, item: str) -> Any:
        return self._values[item]

    def to_display_dict(self) -> Dict[str, Any]:
        """
        Gets the values of this section keyed by their configuration keys,
        with the values of secret properties redacted.
        """
        return {
            property.key: (
                REDACTED if property.secret and self[attr_name] is not None
                else self[attr_name]
            )
            for attr_name, property in sorted(
                self._config_properties().items(),
                key=lambda item: item[1].key
            )
        }

    @classmethod
    def _check(
            cls,
            section_name: str,
            raw: Mapping[str, Mapping[str, Any]],
            source_filename: Optional[str]
    ) -> Dict[str, Any]:
        """
        Checks a section of the raw parsed config-file for correctness, and parses the raw values
        into their converted data-types.

        :param section_name:
                    The name of the section to check.
        :param raw:
                    The raw parsed config-file.
        :param source_filename:
                    The filename of the parsed config-file (for error messages). None to exclude.
        :return:
                    A dictionary of property names to converted/defaulted property values.
        """
        # Format an error header based on whether the source filename was given
        header = (
            f"Error in config file '{source_filename}'" if source_filename is not None
            else "Error"
        )

        # Check the section is in the raw config-file
        if section_name not in raw:
            raise Exception(f"{header}: missing section '{section_name}'")

        section_values = raw[section_name]
        if section_values is None:
            section_values = {}
        elif not isinstance(section_values, Mapping):
            raise Exception(f"{header}: section '{section_name}' is not a mapping")

        converted_values: Dict[str, Any] = {}

        # Locate and convert each of our properties
        for property_name, property in cls._config_properties().items():
            # Get the raw value from the section, if it is defined
            raw_property_value: Any = section_values.get(property.key)

            # Attempt to convert it
            try:
                converted_values[property_name] = property.convert(raw_property_value)
            except Exception as e:
                # Never echo the raw value of a secret
                shown_value = REDACTED if property.secret else raw_property_value
                raise ValueError(
                    f"{header}: error converting value '{shown_value}' "
                    f"for property '{property.key}' "
                    f"of section '{section_name}':\n"
                    f"{e}"
                ) from e

        return converted_values

    @classmethod
    def _config_properties(cls) -> Dict[str, ConfigProperty]:
        """
        Gets all the properties of this section.
        """
        return {
            attr_name: attr
            for attr_name in dir(cls)
            for attr in (getattr(cls, attr_name),)
            if isinstance(attr, ConfigProperty)
        }
