"""
Storage key constants.

This module contains all key-value store keys and related constants.
Keys match the ones the mobile app persisted, so existing data files load
unchanged.
"""


class StorageKeys:
    """Key-value store keys for each persisted collection."""

    BLOOM_ENTRIES = "bloom_entries"
    ABORTION_ENTRIES = "abortion_entries"
    HARVEST_ENTRIES = "harvest_entries"
    SETTINGS = "app_settings"

    # Keys removed by a full data reset (settings survive)
    EVENT_COLLECTIONS = (BLOOM_ENTRIES, ABORTION_ENTRIES, HARVEST_ENTRIES)


class StorageConstants:
    """File backend configuration constants."""

    FILE_SUFFIX = ".json"
    TEMP_SUFFIX = ".tmp"
    ENCODING = "utf-8"
