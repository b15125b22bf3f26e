"""
F5OS Client - Resource Modules

This package contains the F5OS resource operations organized by feature area.
Each module exposes plain async functions that take a ``Session`` first.
"""

from . import (
    config_backup,
    file_transfer,
    images,
    interfaces,
    lag,
    license,
    partitions,
    system,
    tenants,
    vlans,
)

__all__ = [
    "config_backup",
    "file_transfer",
    "images",
    "interfaces",
    "lag",
    "license",
    "partitions",
    "system",
    "tenants",
    "vlans",
]
