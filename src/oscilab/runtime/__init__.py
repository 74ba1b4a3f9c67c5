# src/oscilab/runtime/__init__.py
