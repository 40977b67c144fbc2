"""Care planning for autism-support programs.

Modules:
- config: load and validate configuration (YAML or JSON)
- domain: SQLAlchemy models, repositories and core value records
- services: time arithmetic and constraint checks
- engine: greedy timetable generator, greedy staff allocator, orchestrator
- io: CSV import/export
- narrative: narrative text client with cached/offline fallbacks
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "domain",
    "services",
    "engine",
    "io",
    "narrative",
    "cli",
]
