"""
Ingestion Layer for the destination catalogue.

This package handles fetching, normalization, snapshotting and loading of
points-of-interest from the Overpass geodata API.

Key Components:
- OverpassAdapter: Source client for the Overpass interpreter endpoint
- normalization: Category builders turning tagged records into entities
- BatchLoader: Deduplicating, failure-isolating datastore writer
- RunOrchestrator: Sequences the categories for the three run modes
"""
