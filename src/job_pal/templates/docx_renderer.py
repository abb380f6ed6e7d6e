"""DOCX output renderer: placeholder fill plus separator-artifact repair."""

from __future__ import annotations

import logging
import os
import re
import tempfile
import uuid
from pathlib import Path
from typing import TYPE_CHECKING

from docx import Document
from docx.oxml.ns import qn

from job_pal.models.generation import GenerationKind

if TYPE_CHECKING:
    from job_pal.storage.template_registry import TemplateRegistry

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\{\{(.+?)\}\}")
# Characters that only ever appear as punctuation around optional slots.
SEPARATOR_CHARS = re.compile(r"[\s\-–—•·|]")


# ---------------------------------------------------------------------------
# Placeholder substitution
# ---------------------------------------------------------------------------

def _iter_paragraphs(container):
    """Yield paragraphs of a document/cell/header, descending into tables."""
    yield from container.paragraphs
    for table in container.tables:
        for row in table.rows:
            seen: set[int] = set()
            for cell in row.cells:
                # Merged cells repeat in row.cells
                if id(cell._tc) in seen:
                    continue
                seen.add(id(cell._tc))
                yield from _iter_paragraphs(cell)


def _iter_all_paragraphs(doc):
    yield from _iter_paragraphs(doc)
    for section in doc.sections:
        for part in (section.header, section.footer):
            if not part.is_linked_to_previous:
                yield from _iter_paragraphs(part)


def _lookup(slots: dict[str, str], key: str) -> str | None:
    key = key.strip()
    if key in slots:
        return slots[key]
    lowered = key.lower()
    for name, value in slots.items():
        if name.lower() == lowered:
            return value
    return None


def _substitute(text: str, slots: dict[str, str]) -> str:
    def repl(match: re.Match) -> str:
        value = _lookup(slots, match.group(1))
        return match.group(0) if value is None else value

    return PLACEHOLDER.sub(repl, text)


def _has_known_placeholder(text: str, slots: dict[str, str]) -> bool:
    return any(_lookup(slots, m.group(1)) is not None for m in PLACEHOLDER.finditer(text))


def _replace_in_paragraph(para, slots: dict[str, str]) -> None:
    """Replace {{key}} placeholders in a paragraph, preserving formatting.

    Placeholders contained in a single run are replaced in that run. Word
    sometimes splits a marker across runs ("{{", "exp1_title", "}}"); those
    are handled by collapsing the paragraph text into its first run.
    """
    if "{{" not in para.text:
        return

    for run in para.runs:
        if "{{" in run.text:
            run.text = _substitute(run.text, slots)

    full_text = "".join(run.text for run in para.runs)
    if not _has_known_placeholder(full_text, slots):
        return

    runs = para.runs
    runs[0].text = _substitute(full_text, slots)
    for run in runs[1:]:
        run.text = ""


def list_docx_placeholders(template_path: str | Path) -> list[str]:
    """Scan a .docx template and return all {{placeholder}} keys found."""
    doc = Document(str(template_path))
    placeholders = set()
    for para in _iter_all_paragraphs(doc):
        for m in PLACEHOLDER.finditer(para.text):
            placeholders.add(m.group(1).strip())
    return sorted(placeholders)


# ---------------------------------------------------------------------------
# Repair pass
# ---------------------------------------------------------------------------

def _visible_text(p_element) -> str:
    return "".join(t.text or "" for t in p_element.iter(qn("w:t")))


def is_separator_only(text: str) -> bool:
    """True when ``text`` is non-empty but holds nothing besides separators."""
    return bool(text.strip()) and not SEPARATOR_CHARS.sub("", text)


# Containers that must keep at least one paragraph.
_PARAGRAPH_REQUIRED = (qn("w:tc"), qn("w:hdr"), qn("w:ftr"))


def _repair_roots(doc):
    roots = [doc.element.body]
    for section in doc.sections:
        for part in (section.header, section.footer):
            if not part.is_linked_to_previous:
                roots.append(part._element)
    seen = set()
    for root in roots:
        if id(root) not in seen:
            seen.add(id(root))
            yield root


def remove_separator_paragraphs(doc) -> int:
    """Delete paragraphs whose visible text is only separator punctuation.

    These are left behind when every slot on a line such as
    "{{exp4_title}} — {{exp4_company}}" rendered empty. The body and every
    unlinked header and footer are repaired. A table cell, header or footer
    must keep at least one paragraph, so its last paragraph is emptied
    instead of removed. Returns the number of paragraphs repaired.
    """
    repaired = 0
    for root in _repair_roots(doc):
        targets = [p for p in root.iter(qn("w:p")) if is_separator_only(_visible_text(p))]
        for p in targets:
            parent = p.getparent()
            if parent.tag in _PARAGRAPH_REQUIRED and len(parent.findall(qn("w:p"))) == 1:
                for t in p.iter(qn("w:t")):
                    t.text = ""
            else:
                parent.remove(p)
        repaired += len(targets)

    if repaired:
        logger.debug("Repair pass removed %d separator-only paragraph(s)", repaired)
    return repaired


# ---------------------------------------------------------------------------
# Render
# ---------------------------------------------------------------------------

def fill_docx_template(
    template_path: str | Path,
    slots: dict[str, str],
    output_path: str | Path,
) -> Path:
    """Fill a .docx template from ``slots``, repair it and save to ``output_path``.

    The file is written to a temporary name beside ``output_path`` and moved
    into place only once complete.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = Document(str(template_path))
    for para in _iter_all_paragraphs(doc):
        _replace_in_paragraph(para, slots)
    remove_separator_paragraphs(doc)

    fd, tmp_name = tempfile.mkstemp(dir=output_path.parent, suffix=".docx.tmp")
    os.close(fd)
    try:
        doc.save(tmp_name)
        os.replace(tmp_name, output_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return output_path


class DocxRenderer:
    """Renders generated content into the active template for its kind."""

    def __init__(self, registry: TemplateRegistry, output_dir: str | Path):
        self.registry = registry
        self.output_dir = Path(output_dir)

    def render(self, kind: GenerationKind, slots: dict[str, str]) -> Path | None:
        """Return the path of the rendered document, or None.

        None means either no template is registered for ``kind`` or
        rendering failed; failures are logged and never raised, since the
        textual artifact is usable without a document.
        """
        template = self.registry.find_active(kind)
        if template is None:
            logger.debug("No active %s template, skipping document", kind.value)
            return None

        template_path = self.registry.template_path(template)
        if not template_path.exists():
            logger.warning("Template file missing for %s: %s", kind.value, template_path)
            return None

        output_path = self.output_dir / f"{kind.value}-{uuid.uuid4()}.docx"
        try:
            return fill_docx_template(template_path, slots, output_path)
        except Exception:
            logger.warning("Document generation failed for %s", kind.value, exc_info=True)
            return None
