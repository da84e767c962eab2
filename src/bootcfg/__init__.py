"""bootcfg — network boot and provisioning configuration service."""

__version__ = "0.1.0"
