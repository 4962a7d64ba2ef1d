"""
geoingest - points-of-interest ingestion for the destination catalogue.

Pulls lodging, dining, attraction and sports facility records from the
Overpass (OpenStreetMap) API, normalizes them into typed entities and loads
them into the datastore with pending moderation status.
"""

__version__ = "0.1.0"
