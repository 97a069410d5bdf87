"""
Base classes for implementing parsing of the buildfarm's configuration file format.
"""
from ._ConfigProperty import ConfigProperty, camel_case
from ._ConfigSection import ConfigSection, REDACTED
