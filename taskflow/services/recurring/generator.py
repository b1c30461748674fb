"""
Catch-up generation of recurring task instances.

Each enabled template is walked forward from its last generated date
until the next occurrence lies in the future (or the pattern runs out).
"""
import logging
from datetime import datetime
from typing import Iterable, Optional

from taskflow.core.config import settings
from taskflow.core.logging import log_occurrences_generated
from taskflow.schemas.recurring.recurring_template_schema import (
    GenerationResult,
    RecurringTemplateRecord,
)
from taskflow.schemas.task.task_schema import TaskRecord
from taskflow.services.recurring.recurrence import calculate_next_occurrence
from taskflow.utils.date_utils import start_of_day, to_naive_utc
from taskflow.utils.time_parsing import parse_duration

logger = logging.getLogger(__name__)


def template_in_scope(template: RecurringTemplateRecord, board_id: Optional[str]) -> bool:
    if not template.enabled:
        return False
    return not template.board_id or template.board_id == board_id


def generate_due(
    templates: Iterable[RecurringTemplateRecord],
    board_id: Optional[str],
    now: datetime,
) -> GenerationResult:
    """Materialize every occurrence due at or before `now`.

    Returns the new tasks plus copies of the templates whose bookkeeping
    (occurrence_count, last_generated_at) changed. Inputs are untouched.
    """
    now = to_naive_utc(now)
    result = GenerationResult()

    for template in templates:
        if not template_in_scope(template, board_id):
            continue

        cursor = start_of_day(to_naive_utc(template.last_generated_at or template.created_at))
        count = template.occurrence_count
        generated = 0

        next_date = calculate_next_occurrence(template.recurrence, cursor, count)
        while next_date is not None and next_date <= now:
            cursor = next_date
            result.generated_tasks.append(build_occurrence(template, cursor))
            count += 1
            generated += 1
            next_date = calculate_next_occurrence(template.recurrence, cursor, count)

        if generated:
            result.updated_templates.append(template.model_copy(update={
                "occurrence_count": count,
                "last_generated_at": cursor,
                "updated_at": now,
            }))
            log_occurrences_generated(template.id, generated, cursor)

    return result


def build_occurrence(template: RecurringTemplateRecord, occurrence: datetime) -> TaskRecord:
    """Task instance for one occurrence of a template"""
    skeleton = template.task_template
    data = skeleton.model_dump(exclude={"due_date", "time_estimate"})
    data.update(
        id=f"{template.id}-{occurrence:%Y%m%d}",
        board_id=template.board_id,
        status=skeleton.status or settings.DEFAULT_TASK_STATUS,
        labels=list(skeleton.labels),
        due_date=occurrence_due_date(template, occurrence),
        time_estimate=parse_duration(skeleton.time_estimate),
        created_at=occurrence,
        is_recurring=True,
        recurring_template_id=template.id,
    )
    return TaskRecord(**data)


def occurrence_due_date(template: RecurringTemplateRecord, occurrence: datetime) -> datetime:
    """Keep the template's due-date offset relative to each occurrence.

    The offset is measured from midnight of the template's creation day
    to its nominal due date, so a template created on the 1st and due on
    the 3rd at 17:00 yields instances due two days after each occurrence
    at 17:00. Without a nominal due date an instance is due on its
    occurrence date.
    """
    nominal = template.task_template.due_date
    if nominal is None:
        return occurrence
    offset = to_naive_utc(nominal) - start_of_day(to_naive_utc(template.created_at))
    return occurrence + offset
