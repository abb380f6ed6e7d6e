"""Declared placeholder schema for the .docx resume and cover letter templates.

A template may use any subset of these ``{{slot}}`` names. The mapper always
produces every name in the schema, so unused or unfilled slots become empty
strings rather than missing keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field

HEADER_SLOTS: tuple[str, ...] = (
    "name",
    "email",
    "phone",
    "location",
    "title",
    "website",
    "company",
    "job_title",
    "date",
)


@dataclass(frozen=True)
class SkillSlots:
    """Numbered slots ``{prefix}_1 .. {prefix}_{capacity}`` for one skill category."""

    category: str  # attribute on SkillGroups
    prefix: str
    capacity: int = 6

    def slot_names(self) -> list[str]:
        return [f"{self.prefix}_{i}" for i in range(1, self.capacity + 1)]


@dataclass(frozen=True)
class ExperienceSlots:
    """Experience blocks ``exp{n}_*``; bullet budget shrinks for later blocks."""

    bullet_budgets: tuple[int, ...] = (4, 3, 3, 2)
    fields: tuple[str, ...] = ("title", "company", "location", "dates")

    @property
    def capacity(self) -> int:
        return len(self.bullet_budgets)

    def field_slot(self, n: int, name: str) -> str:
        return f"exp{n}_{name}"

    def bullet_slot(self, n: int, b: int) -> str:
        return f"exp{n}_bullet{b}"

    def slot_names(self) -> list[str]:
        names: list[str] = []
        for n, budget in enumerate(self.bullet_budgets, start=1):
            names.extend(self.field_slot(n, f) for f in self.fields)
            names.extend(self.bullet_slot(n, b) for b in range(1, budget + 1))
        return names


@dataclass(frozen=True)
class SlotSchema:
    header: tuple[str, ...] = HEADER_SLOTS
    # slot name -> attribute on the generation result
    text: dict[str, str] = field(default_factory=dict)
    skills: tuple[SkillSlots, ...] = ()
    experience: ExperienceSlots | None = None

    def slot_names(self) -> list[str]:
        names = list(self.header) + list(self.text)
        for group in self.skills:
            names.extend(group.slot_names())
        if self.experience is not None:
            names.extend(self.experience.slot_names())
        return names


RESUME_SLOT_SCHEMA = SlotSchema(
    text={"resume_content": "resume", "summary": "summary"},
    skills=(
        SkillSlots(category="management", prefix="mgmt"),
        SkillSlots(category="design", prefix="design"),
        SkillSlots(category="tools", prefix="tools"),
    ),
    experience=ExperienceSlots(),
)

COVER_LETTER_SLOT_SCHEMA = SlotSchema(
    text={"cover_letter_content": "cover_letter"},
)
