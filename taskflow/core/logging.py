import logging
from datetime import datetime
from typing import Any, Optional

# Audit trail for engine side effects; handlers are installed by setup_logging()
logger = logging.getLogger("taskflow.audit")

def log_rule_applied(rule_id: str, rule_name: str, trigger: str, task_id: Any = None):
    """Log an automation rule that fired for a task"""
    logger.info(f"Rule {rule_id} ({rule_name}) applied on {trigger} for task {task_id or ''}")

def log_occurrences_generated(template_id: str, count: int, last_generated_at: Optional[datetime] = None):
    """Log a recurring template catch-up pass"""
    stamp = last_generated_at.isoformat() if last_generated_at else "-"
    logger.info(f"Template {template_id} generated {count} occurrence(s), last at {stamp}")
