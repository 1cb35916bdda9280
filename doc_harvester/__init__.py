# doc_harvester/__init__.py
"""
DocHarvester package initializer.
Defines package version; the CLI lives in :mod:`doc_harvester.cli`.
"""
__version__ = "0.1.0"
