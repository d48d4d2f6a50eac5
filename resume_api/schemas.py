from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator


def _blank_if_none(v):
    # models emit null or bare numbers for fields they consider empty/numeric
    if v is None:
        return ""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


def _join_lines(v):
    if isinstance(v, list):
        return "\n".join(str(x) for x in v if x is not None)
    return _blank_if_none(v)


Text = Annotated[str, BeforeValidator(_blank_if_none)]
Lines = Annotated[str, BeforeValidator(_join_lines)]

SKILLS_TITLE = "SKILLS"


def section_kind(title: str) -> Literal["skills", "detail"]:
    return "skills" if (title or "").strip().upper() == SKILLS_TITLE else "detail"


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


# =========================
# Resume document
# =========================
class Contact(CamelModel):
    phone: Text = ""
    email: Text = ""
    address: Text = ""


class Item(CamelModel):
    heading: Text = ""
    subheading: Text = ""
    description: Text = ""


def _item_from_text(v):
    if isinstance(v, str):
        return {"heading": v}
    return v


class SkillsSection(CamelModel):
    kind: Literal["skills"] = "skills"
    title: Text = SKILLS_TITLE
    items: List[Text] = Field(default_factory=list)


class DetailSection(CamelModel):
    kind: Literal["detail"] = "detail"
    title: Text = ""
    items: List[Annotated[Item, BeforeValidator(_item_from_text)]] = Field(default_factory=list)


Section = Annotated[Union[SkillsSection, DetailSection], Field(discriminator="kind")]


class ResumeDocument(CamelModel):
    name: Text
    title: Text = ""
    contact: Contact = Field(default_factory=Contact)
    summary: Text = ""
    sections: List[Section]
    ats_score: Text = Field("", alias="atsScore")
    suggestions: Lines = ""

    @field_validator("contact", mode="before")
    @classmethod
    def _contact_or_empty(cls, v):
        return {} if v is None else v

    @field_validator("sections", mode="before")
    @classmethod
    def _tag_sections(cls, v):
        # the branch is decided here, from the title, and nowhere else
        if v is None:
            return []
        if not isinstance(v, list):
            return v
        tagged = []
        for raw in v:
            if isinstance(raw, dict):
                title = raw.get("title")
                raw = {**raw, "kind": section_kind(title if isinstance(title, str) else "")}
                if raw.get("items") is None:
                    raw["items"] = []
            tagged.append(raw)
        return tagged

    def find_section(self, title: str) -> Optional[Union[SkillsSection, DetailSection]]:
        wanted = title.strip().upper()
        for section in self.sections:
            if section.title.strip().upper() == wanted:
                return section
        return None

    def skills(self) -> Optional[SkillsSection]:
        for section in self.sections:
            if isinstance(section, SkillsSection):
                return section
        return None


# =========================
# Requests
# =========================
class GenerateRequest(CamelModel):
    student_data: str = Field(alias="studentData", min_length=1)
    job_description: Optional[str] = Field(None, alias="jobDescription")


class ImproveRequest(CamelModel):
    text: str = Field(min_length=1)


class CoverLetterRequest(CamelModel):
    student_data: str = Field(alias="studentData", min_length=1)
    job_description: str = Field(alias="jobDescription", min_length=1)
    resume_data: ResumeDocument = Field(alias="resumeData")


class InterviewPrepRequest(CamelModel):
    student_data: str = Field(alias="studentData", min_length=1)
    job_description: Optional[str] = Field(None, alias="jobDescription")


class ResumeDataRequest(CamelModel):
    resume_data: ResumeDocument = Field(alias="resumeData")


class CoverLetterDocxRequest(CamelModel):
    cover_letter_text: str = Field(alias="coverLetterText", min_length=1)


# =========================
# Responses
# =========================
class GenerateResponse(CamelModel):
    resume_text: str = Field(alias="resumeText")
    resume_data: ResumeDocument = Field(alias="resumeData")
    ats_score: str = Field(alias="atsScore")
    suggestions: str


class ImproveResponse(CamelModel):
    improved_text: str = Field(alias="improvedText")


class CoverLetterResponse(CamelModel):
    cover_letter_text: str = Field(alias="coverLetterText")


class InterviewPrepResponse(CamelModel):
    interview_prep_text: str = Field(alias="interviewPrepText")


class PortfolioResponse(CamelModel):
    portfolio_html: str = Field(alias="portfolioHtml")
