"""
Services Package

The identity store, the reading store and the deletion log.
"""

from weather_api.services import deletion_log, identity, readings

__all__ = ['deletion_log', 'identity', 'readings']
