"""
Audit orchestration, comparison, trend and scheduling services.
"""
