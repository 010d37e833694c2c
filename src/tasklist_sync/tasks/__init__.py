"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, DiffStat)
- merge.py: default merge engine (last modified wins per task)
- task_store.py: local JSON copy of the task list
"""
