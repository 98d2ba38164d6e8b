"""Area state, access roles, command extensions and master-server advertising for an Attorney Online 2 server."""

__version__ = "1.7.0"

__all__ = [
    "acl_roles",
    "command_extension",
    "advertiser",
    "area_types",
    "testimony",
    "area_data",
]