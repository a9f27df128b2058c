"""Exporters for earthquake responses."""

from quake_relay.exporters.json_export import export_json

__all__ = ["export_json"]
