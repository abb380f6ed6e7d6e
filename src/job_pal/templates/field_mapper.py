"""Map a generation result onto the flat slot map a .docx template consumes."""

from __future__ import annotations

from datetime import date

from job_pal.models.generation import CoverLetterResult, GenerationResult, ResumeResult
from job_pal.models.records import Job, Profile
from job_pal.templates.slot_schema import (
    COVER_LETTER_SLOT_SCHEMA,
    RESUME_SLOT_SCHEMA,
    SlotSchema,
)

TemplateSlotMap = dict[str, str]


def format_date(day: date) -> str:
    """Format like "October 19, 2026"."""
    return f"{day:%B} {day.day}, {day.year}"


def schema_for(result: GenerationResult) -> SlotSchema:
    if isinstance(result, ResumeResult):
        return RESUME_SLOT_SCHEMA
    if isinstance(result, CoverLetterResult):
        return COVER_LETTER_SLOT_SCHEMA
    raise TypeError(f"No slot schema for {type(result).__name__}")


def _pick(values: list[str], index: int) -> str:
    return values[index] if index < len(values) else ""


def map_to_slots(
    profile: Profile,
    job: Job,
    result: GenerationResult,
    today: date | None = None,
    schema: SlotSchema | None = None,
) -> TemplateSlotMap:
    """Build the ordered slot map for ``result``.

    Total over the schema: every slot name is present, defaulting to "".
    Entries beyond a group's capacity are dropped.
    """
    schema = schema or schema_for(result)
    today = today or date.today()
    slots: TemplateSlotMap = dict.fromkeys(schema.slot_names(), "")

    header = {
        "name": profile.name,
        "email": profile.email,
        "phone": profile.phone,
        "location": profile.location,
        "title": profile.title,
        "website": profile.website,
        "company": job.company,
        "job_title": job.title,
        "date": format_date(today),
    }
    for name in schema.header:
        slots[name] = header.get(name) or ""

    for name, attr in schema.text.items():
        slots[name] = getattr(result, attr, "") or ""

    if schema.skills and isinstance(result, ResumeResult):
        for group in schema.skills:
            values = getattr(result.skills, group.category, [])
            for i, name in enumerate(group.slot_names()):
                slots[name] = _pick(values, i)

    if schema.experience is not None and isinstance(result, ResumeResult):
        exp_slots = schema.experience
        for n, budget in enumerate(exp_slots.bullet_budgets, start=1):
            if n <= len(result.experiences):
                entry = result.experiences[n - 1]
            else:
                entry = None
            for field_name in exp_slots.fields:
                value = getattr(entry, field_name, "") if entry else ""
                slots[exp_slots.field_slot(n, field_name)] = value or ""
            bullets = entry.bullets if entry else []
            for b in range(1, budget + 1):
                slots[exp_slots.bullet_slot(n, b)] = _pick(bullets, b - 1)

    return slots
