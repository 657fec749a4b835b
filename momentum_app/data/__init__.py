"""
Routine definition input.

Turns raw task definitions (dicts from YAML files or any consumer) into the
immutable task list a run is started with.
"""
