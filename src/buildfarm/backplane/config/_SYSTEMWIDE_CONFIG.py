SYSTEMWIDE_CONFIG = "/etc/buildfarm/config.yml"
"""The configuration file used when no other is given."""
