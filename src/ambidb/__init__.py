"""
ambidb core package.

Two small console programs around a "database":
- A flat-file record manager (`ambidb.records`) driven by an interactive
  numbered menu (`ambidb console`)
- A thin SQL wrapper over an embedded SQLite database (`ambidb.database`)
  exposed as `ambidb sql ...` and the standalone `ambidb-sql` program

Configuration:
- Shared filesystem anchors and defaults live in `ambidb.global_config`.
"""

__version__ = "0.1.0"
