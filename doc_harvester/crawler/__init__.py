# doc_harvester/crawler/__init__.py
"""Robots gate, crawl engine and the models they exchange."""
