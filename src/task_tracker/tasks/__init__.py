"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskFilter, TaskSort)
- task_errors.py: ValidationError / NotFoundError / StorageError
- task_store.py: JSON-file storage of the whole collection
- task_manager.py: in-memory collection + view parameters (search/filter/sort)
"""
