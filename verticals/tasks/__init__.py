"""Tasks vertical — the task query-and-validation pipeline.

- SQLAlchemy Task model owned by a user
- Validation rules for create/update (pure functions)
- Query builder turning list parameters into a bounded descriptor
- Owner-scoped repository and the TaskService orchestrating them
- FastAPI router for /tasks
- Client-side task list state machine
"""
