"""Registry of uploaded .docx templates, holding at most one active entry per kind."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from job_pal.exceptions import ReferenceNotFound, ValidationFailed
from job_pal.models.generation import GenerationKind
from job_pal.models.records import TemplateEntry
from job_pal.storage.json_store import DEFAULT_DATA_DIR, JsonFile
from job_pal.templates.docx_renderer import list_docx_placeholders

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """Keyed registry ``kind -> TemplateEntry`` backed by document-templates.json.

    Registering a template for a kind supersedes (and deletes) the previous
    one for that kind.
    """

    def __init__(self, data_dir: str | Path = DEFAULT_DATA_DIR):
        self.data_dir = Path(data_dir)
        self.templates_dir = self.data_dir / "templates"
        self.templates_dir.mkdir(parents=True, exist_ok=True)
        self._file = JsonFile(self.data_dir / "document-templates.json", {})

    def _load(self) -> dict[GenerationKind, TemplateEntry]:
        raw = self._file.load()
        return {GenerationKind(kind): TemplateEntry(**entry) for kind, entry in raw.items()}

    def _save(self, entries: dict[GenerationKind, TemplateEntry]) -> None:
        self._file.save({kind.value: e.model_dump(mode="json") for kind, e in entries.items()})

    def find_active(self, kind: GenerationKind) -> TemplateEntry | None:
        return self._load().get(kind)

    def template_path(self, entry: TemplateEntry) -> Path:
        return self.templates_dir / entry.filename

    def list_templates(self) -> list[TemplateEntry]:
        return list(self._load().values())

    def register(
        self,
        kind: GenerationKind,
        source_path: str | Path,
        original_name: str | None = None,
    ) -> TemplateEntry:
        """Copy ``source_path`` into the registry as the active template for ``kind``."""
        source_path = Path(source_path)
        if not source_path.is_file():
            raise ValidationFailed(f"Template file does not exist: {source_path}")

        entry = TemplateEntry(
            kind=kind,
            original_name=original_name or source_path.name,
            filename="",
        )
        entry.filename = f"{kind.value}-{entry.id}{source_path.suffix or '.docx'}"
        target = self.template_path(entry)
        shutil.copyfile(source_path, target)

        try:
            entry.placeholders = list_docx_placeholders(target)
        except Exception:
            # Scanning is informational only; an unreadable template still registers.
            logger.warning("Could not scan placeholders in %s", source_path, exc_info=True)

        entries = self._load()
        previous = entries.get(kind)
        entries[kind] = entry
        self._save(entries)

        if previous is not None:
            self.template_path(previous).unlink(missing_ok=True)
            logger.info("Template %s superseded by %s", previous.id, entry.id)
        logger.info("Registered %s template %s (%d placeholders)", kind.value, entry.id, len(entry.placeholders))
        return entry

    def remove(self, template_id: str) -> TemplateEntry:
        entries = self._load()
        for kind, entry in entries.items():
            if entry.id == template_id:
                del entries[kind]
                self._save(entries)
                self.template_path(entry).unlink(missing_ok=True)
                return entry
        raise ReferenceNotFound("template", template_id)
