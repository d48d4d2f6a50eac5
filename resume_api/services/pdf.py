from io import BytesIO

from reportlab.lib.pagesizes import LETTER
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas

from resume_api.schemas import ResumeDocument, SkillsSection


def render_resume_pdf(doc: ResumeDocument) -> BytesIO:
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=LETTER)
    c.setTitle(f"{doc.name} - Resume" if doc.name else "Resume")
    width, height = LETTER

    # margins
    left = 0.75 * inch
    right = 0.75 * inch
    top = 0.75 * inch
    bottom = 0.75 * inch

    # typography
    font_body = "Helvetica"
    font_bold = "Helvetica-Bold"
    font_italic = "Helvetica-Oblique"
    body_size = 10.5
    header_size = 12.5
    name_size = 20
    leading = 13.5

    # layout
    y = height - top
    max_width = width - left - right

    def new_page():
        nonlocal y
        c.showPage()
        y = height - top

    def ensure_space(lines_needed: float = 1):
        nonlocal y
        if y - (leading * lines_needed) <= bottom:
            new_page()

    def wrap_text(text: str, font: str, size: float, avail_width: float) -> list[str]:
        words = text.split()
        if not words:
            return [""]
        lines: list[str] = []
        cur = words[0]
        for w in words[1:]:
            test = cur + " " + w
            if c.stringWidth(test, font, size) <= avail_width:
                cur = test
            else:
                lines.append(cur)
                cur = w
        lines.append(cur)
        return lines

    def draw_line(text: str, font: str, size: float):
        nonlocal y
        c.setFont(font, size)
        for line in wrap_text(text, font, size, max_width):
            ensure_space(1)
            c.drawString(left, y, line)
            y -= leading

    def draw_centered(text: str, font: str, size: float, gray: float = 0.0):
        nonlocal y
        if not text:
            return
        ensure_space(1.5)
        c.setFont(font, size)
        c.setFillGray(gray)
        c.drawCentredString(width / 2, y, text)
        c.setFillGray(0)
        y -= max(leading, size * 1.2)

    def draw_blank(lines: float = 1):
        nonlocal y
        ensure_space(lines)
        y -= leading * lines

    def draw_section_header(title: str):
        nonlocal y
        # extra top space between sections
        draw_blank(0.3)
        ensure_space(2)
        c.setFont(font_bold, header_size)
        c.drawString(left, y, title.strip().upper())
        y -= leading * 1.1

        # divider line
        c.setLineWidth(0.6)
        c.line(left, y + 4, width - right, y + 4)
        y -= leading * 0.5

    def draw_skills(items: list[str]):
        nonlocal y
        if not items:
            return
        # 2 columns, filled row by row so a page break moves both columns together
        col_gap = 0.4 * inch
        col_w = (max_width - col_gap) / 2
        xs = (left, left + col_w + col_gap)

        for i in range(0, len(items), 2):
            row = [wrap_text("• " + it, font_body, body_size, col_w) for it in items[i : i + 2]]
            lines_needed = max(len(wrapped) for wrapped in row)
            ensure_space(lines_needed)
            c.setFont(font_body, body_size)
            for x, wrapped in zip(xs, row):
                for n, wline in enumerate(wrapped):
                    c.drawString(x, y - leading * n, wline)
            y -= leading * lines_needed

        y -= leading * 0.3

    # Header
    draw_centered(doc.name, font_bold, name_size)
    draw_centered(doc.title, font_body, 12, gray=0.33)
    contact = " | ".join(p for p in (doc.contact.phone, doc.contact.email, doc.contact.address) if p)
    draw_centered(contact, font_body, body_size)

    draw_section_header("ABOUT ME")
    if doc.summary:
        draw_line(doc.summary, font_body, body_size)

    for section in doc.sections:
        draw_section_header(section.title)
        if isinstance(section, SkillsSection):
            draw_skills(section.items)
            continue
        for item in section.items:
            if item.heading:
                draw_line(item.heading, font_bold, body_size)
            if item.subheading:
                draw_line(item.subheading, font_italic, body_size)
            if item.description:
                draw_line(item.description, font_body, body_size)
            draw_blank(0.4)

    c.save()
    buf.seek(0)
    return buf
