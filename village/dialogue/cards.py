"""
Island cards - resume entries turned into static display cards.

Each known house kind has an entry model; anything else (unknown kind,
or an entry that does not fit its kind's model) becomes a RawEntry that
shows the entry as JSON.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


logger = logging.getLogger(__name__)


class SectionKind(str, Enum):
    """House kinds with a dedicated card layout."""
    ABOUT_ME = "aboutMe"
    EDUCATION = "education"
    WORK_EXPERIENCE = "workExperience"

    @classmethod
    def parse(cls, key: Optional[str]) -> Optional[SectionKind]:
        try:
            return cls(key)
        except ValueError:
            return None


@dataclass(frozen=True)
class IslandCard:
    """
    One rendered entry.

    Attributes:
        heading: Bold first line
        subtitle: Secondary line under the heading
        body: Paragraph text
        bullets: Bulleted list
        raw: True for the JSON fallback
    """
    heading: str = ""
    subtitle: str = ""
    body: str = ""
    bullets: tuple[str, ...] = ()
    raw: bool = False


class _Entry(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    def to_card(self) -> IslandCard:
        raise NotImplementedError


class AboutMeEntry(_Entry):
    title: str = ""
    description: str = ""

    def to_card(self) -> IslandCard:
        return IslandCard(heading=self.title, body=self.description)


class EducationEntry(_Entry):
    degree: str = ""
    institution: str = ""
    year: str = ""
    details: str = ""

    @field_validator("year", mode="before")
    @classmethod
    def _year_as_text(cls, value: Any) -> Any:
        # "2019" and 2019 both show up in resume data
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_card(self) -> IslandCard:
        return IslandCard(
            heading=self.degree,
            subtitle=f"{self.institution} - {self.year}",
            body=self.details,
        )


class WorkEntry(_Entry):
    role: str = ""
    company: str = ""
    period: str = ""
    highlights: list[str] = Field(default_factory=list)

    def to_card(self) -> IslandCard:
        return IslandCard(
            heading=self.role,
            subtitle=f"{self.company} | {self.period}",
            bullets=tuple(self.highlights),
        )


@dataclass(frozen=True)
class RawEntry:
    """Fallback for entries without a known shape."""
    data: Any

    def to_card(self) -> IslandCard:
        return IslandCard(body=json.dumps(self.data, ensure_ascii=False), raw=True)


Entry = Union[AboutMeEntry, EducationEntry, WorkEntry, RawEntry]

ENTRY_MODELS: dict[SectionKind, type[_Entry]] = {
    SectionKind.ABOUT_ME: AboutMeEntry,
    SectionKind.EDUCATION: EducationEntry,
    SectionKind.WORK_EXPERIENCE: WorkEntry,
}


def parse_entry(section_key: Optional[str], data: Any) -> Entry:
    """Parse one entry for a house, falling back to RawEntry."""
    kind = SectionKind.parse(section_key)
    if kind is None or not isinstance(data, dict):
        return RawEntry(data)

    try:
        return ENTRY_MODELS[kind].model_validate(data)
    except ValidationError as e:
        logger.debug("Malformed %s entry shown raw: %s", kind.value, e)
        return RawEntry(data)


def build_cards(section_key: Optional[str], entries: list[Any]) -> tuple[IslandCard, ...]:
    """Cards for every entry of a house, in order."""
    return tuple(parse_entry(section_key, entry).to_card() for entry in entries)
