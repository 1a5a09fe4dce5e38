"""
Lounge Discord Bot - Core Package
=================================

Configuration, logging, storage, error types and the command tree.

DESIGN:
    Core modules expose global or singleton instances so every handler
    sees the same state:
    - get_config() returns the same Config instance
    - logger is a global TreeLogger instance
    - Storage is created once per bot and reached through bot.storage

    Import submodules directly (lounge.core.config, ...) to keep
    import order free of cycles.
"""
