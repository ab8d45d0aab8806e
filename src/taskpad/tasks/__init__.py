"""
Task subsystem.

Components:
- task_models.py: the Task record and id/clock defaults
- task_codec.py: JSON blob encoding of the task list
- task_store.py: in-memory task list with write-through persistence
"""
