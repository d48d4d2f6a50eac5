from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from resume_api.schemas import ResumeDocument

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_resume_html(doc: ResumeDocument) -> str:
    """Render the on-screen preview fragment. Model text is always escaped."""
    return env.get_template("resume_preview.html").render(r=doc).strip()
