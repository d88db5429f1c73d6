"""
Release import orchestration.

Modules:
    release_importer - Fetch, map and persist one release
    import_ledger - SQLite claims that keep imports unique per release
"""

from .import_ledger import ImportLedger
from .release_importer import ReleaseImporter

__all__ = ['ImportLedger', 'ReleaseImporter']
