"""
Task subsystem.

Components:
- task_models.py: Task dataclass + strict JSON decode of one task
- task_store.py: date-partitioned TaskStore persisted through a key-value port
- dates.py: date keys in the reference time zone, day navigation
"""
