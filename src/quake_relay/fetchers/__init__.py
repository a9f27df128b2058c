"""Fetchers for the JMA earthquake feed."""

from quake_relay.fetchers.jma import fetch_detail, fetch_details, fetch_index

__all__ = ["fetch_detail", "fetch_details", "fetch_index"]
