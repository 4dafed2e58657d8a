"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskRow, Priority, id sentinels)
- task_mapper.py: row <-> domain conversion
- task_store.py: SQLite-backed storage with live queries
- task_repository.py: async repository over the store, domain objects only
"""
