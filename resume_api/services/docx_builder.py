from io import BytesIO
from typing import Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from resume_api.schemas import ResumeDocument, SkillsSection

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

FONT_FAMILY = "Calibri"
CONTACT_SEPARATOR = " | "
SKILL_SEPARATOR = " • "
ABOUT_HEADING = "ABOUT ME"

# run styles; sizes in points, colors as hex
RUN_STYLES = {
    "name": {"size": 28, "bold": True},
    "title": {"size": 12, "color": "555555"},
    "contact": {"size": 11},
    "separator": {"size": 11, "color": "AAAAAA"},
    "section_heading": {"size": 12, "bold": True, "all_caps": True},
    "body": {"size": 11},
    "item_heading": {"size": 11, "bold": True},
    "item_subheading": {"size": 11, "italic": True, "color": "555555"},
}

# (space_before, space_after) in points
SPACING = {
    "title": (0, 5),
    "contact": (0, 15),
    "section_heading": (15, 7.5),
    "summary": (0, 15),
    "item_heading": (10, 0),
    "item_description": (0, 10),
    "letter": (0, 10),
}


def _add_paragraph(document, spacing: Optional[str] = None, centered: bool = False):
    paragraph = document.add_paragraph()
    if centered:
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    if spacing:
        before, after = SPACING[spacing]
        paragraph.paragraph_format.space_before = Pt(before)
        paragraph.paragraph_format.space_after = Pt(after)
    return paragraph


def _add_run(paragraph, text: str, style: str):
    spec = RUN_STYLES[style]
    run = paragraph.add_run(text)
    font = run.font
    font.name = FONT_FAMILY
    font.size = Pt(spec["size"])
    font.bold = spec.get("bold", False)
    font.italic = spec.get("italic", False)
    if spec.get("all_caps"):
        font.all_caps = True
    if spec.get("color"):
        font.color.rgb = RGBColor.from_string(spec["color"])
    return run


def _set_paragraph_bottom_border(paragraph) -> None:
    p_pr = paragraph._p.get_or_add_pPr()
    p_bdr = p_pr.find(qn("w:pBdr"))
    if p_bdr is None:
        p_bdr = OxmlElement("w:pBdr")
        p_pr.append(p_bdr)
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), "6")
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), "auto")
    p_bdr.append(bottom)


def _add_section_heading(document, text: str) -> None:
    paragraph = _add_paragraph(document, "section_heading")
    _add_run(paragraph, text, "section_heading")
    _set_paragraph_bottom_border(paragraph)


def _new_document():
    document = Document()
    normal = document.styles["Normal"]
    normal.font.name = FONT_FAMILY
    normal.font.size = Pt(RUN_STYLES["body"]["size"])
    return document


def _to_buffer(document) -> BytesIO:
    buf = BytesIO()
    document.save(buf)
    buf.seek(0)
    return buf


def build_resume_docx(doc: ResumeDocument) -> BytesIO:
    """
    Assemble the resume as a .docx.

    Order is fixed: name, title, contact line, ABOUT ME + summary, then each
    section in document order. Detail items always produce three paragraphs
    (heading, subheading, description), empty or not.
    """
    document = _new_document()

    _add_run(_add_paragraph(document, centered=True), doc.name, "name")
    _add_run(_add_paragraph(document, "title", centered=True), doc.title, "title")

    contact = _add_paragraph(document, "contact", centered=True)
    parts = [p for p in (doc.contact.phone, doc.contact.email, doc.contact.address) if p]
    for i, part in enumerate(parts):
        if i:
            _add_run(contact, CONTACT_SEPARATOR, "separator")
        _add_run(contact, part, "contact")

    _add_section_heading(document, ABOUT_HEADING)
    _add_run(_add_paragraph(document, "summary"), doc.summary, "body")

    for section in doc.sections:
        _add_section_heading(document, section.title)
        if isinstance(section, SkillsSection):
            paragraph = _add_paragraph(document)
            last = len(section.items) - 1
            for i, skill in enumerate(section.items):
                _add_run(paragraph, skill + (SKILL_SEPARATOR if i < last else ""), "body")
            continue

        for item in section.items:
            _add_run(_add_paragraph(document, "item_heading"), item.heading, "item_heading")
            _add_run(_add_paragraph(document), item.subheading, "item_subheading")
            _add_run(_add_paragraph(document, "item_description"), item.description, "body")

    return _to_buffer(document)


def build_cover_letter_docx(text: str) -> BytesIO:
    document = _new_document()
    for line in text.splitlines():
        if not line.strip():
            continue
        _add_run(_add_paragraph(document, "letter"), line.strip(), "body")
    return _to_buffer(document)
