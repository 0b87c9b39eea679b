"""Hash-reference engine - fingerprints, tables, staleness and patch assembly.

Import submodules directly::

    from hashline.engine.batch import resolve_batch
    from hashline.engine.lifecycle import Lifecycle
"""
