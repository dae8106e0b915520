"""
Background Tasks Package

Contains Celery tasks for audit processing:
- audit_tasks: on-demand and scheduled accessibility audits
"""

from accesswatch.tasks.audit_tasks import *
