from datetime import date
from typing import List, Optional

from resume_api.schemas import DetailSection, Item, ResumeDocument
from resume_api.services.preview import env

PROJECTS_TITLE = "PROJECTS"


def project_items(doc: ResumeDocument) -> List[Item]:
    section = doc.find_section(PROJECTS_TITLE)
    if isinstance(section, DetailSection):
        return section.items
    return []


def skill_items(doc: ResumeDocument) -> List[str]:
    section = doc.skills()
    return section.items if section else []


def render_portfolio_html(doc: ResumeDocument, year: Optional[int] = None) -> str:
    """
    Fill the fixed portfolio page with resume data.

    Scalar fields go into their placeholders; the SKILLS and PROJECTS
    sections become one card each inside #skillsList / #projectsList.
    An absent section renders an explicit "none listed" note instead.
    """
    return env.get_template("portfolio.html").render(
        r=doc,
        skills=skill_items(doc),
        projects=project_items(doc),
        year=year or date.today().year,
    )
