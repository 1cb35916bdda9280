# doc_harvester/parser/__init__.py
