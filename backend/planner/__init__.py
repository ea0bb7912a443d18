# backend/planner/__init__.py
"""Study planner: students, subjects, tasks and a deadline dashboard."""
