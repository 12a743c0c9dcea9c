"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, Category) and the creation path
- task_store.py: in-memory ordered store + query helpers
- task_codec.py: JSON line-per-record file format (load/save)
- errors.py: exception taxonomy shared by the store, codec and CLI
"""
