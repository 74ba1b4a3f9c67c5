# src/oscilab/compiler/__init__.py
