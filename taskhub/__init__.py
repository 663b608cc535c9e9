"""
Task manager REST API: projects, tasks, users and notifications.
"""

__version__ = "1.0.0"
