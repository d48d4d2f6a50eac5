from typing import Dict, Literal, Optional

from resume_api.schemas import ResumeDocument, SkillsSection

Feature = Literal["resume", "improve", "cover_letter", "interview_prep"]

RESUME_TEMPLATE = """Act as an expert resume writer. Based on the provided data, create a professional resume.
Return the entire output as a single, valid JSON object. Do not include any text or markdown formatting before or after the JSON.

The JSON object must have this exact structure:
{{
  "name": "Full Name",
  "title": "Professional Title (e.g., Professional Accountant)",
  "contact": {{
    "phone": "Phone Number",
    "email": "Email Address",
    "address": "City, State"
  }},
  "summary": "A paragraph for the 'ABOUT ME' section.",
  "sections": [
    {{
      "title": "EDUCATION",
      "items": [
        {{
          "heading": "University Name | Dates (e.g., 2026-2030)",
          "subheading": "Degree, Major",
          "description": "A single paragraph with details about coursework or achievements."
        }}
      ]
    }},
    {{
      "title": "WORK EXPERIENCE",
      "items": [
        {{
          "heading": "Company | Dates (e.g., 2033 - 2035)",
          "subheading": "Job Title",
          "description": "A single paragraph describing responsibilities and accomplishments."
        }}
      ]
    }},
    {{
      "title": "PROJECTS",
      "items": [
        {{
          "heading": "Project Name",
          "subheading": "Technologies Used",
          "description": "A single paragraph describing the project."
        }}
      ]
    }},
    {{
      "title": "SKILLS",
      "items": ["Skill 1", "Skill 2", "Skill 3", "Skill 4", "Skill 5", "Skill 6"]
    }}
  ],
  "atsScore": "An ATS score as a percentage (e.g., '91%')",
  "suggestions": "A string containing 2-3 actionable suggestions for improvement, separated by newlines."
}}

**Student's Raw Information:**
---
{STUDENT_DATA}
---

**Target Job Description:**
---
{JD}
---
"""

IMPROVE_TEMPLATE = (
    "Rewrite the following resume description to be more professional and impactful. "
    "Use strong action verbs and focus on achievements. Keep it concise. "
    "Return only the rewritten text. "
    'Original text: "{TEXT}"'
)

COVER_LETTER_TEMPLATE = """Based on the student's info, their resume, and the job description, write a professional cover letter.
Return only the letter text, without markdown formatting.

**Student Info:**
{STUDENT_DATA}

**Resume:**
{RESUME}

**Job Description:**
{JD}"""

INTERVIEW_PREP_TEMPLATE = """Act as a career coach. Based on the student's info and job description, generate 3-4 behavioral interview questions. For each, provide a sample answer using the STAR method based on their experience.

**Student Info:**
{STUDENT_DATA}

**Job Description:**
{JD}"""

PROMPT_TEMPLATES: Dict[str, str] = {
    "resume": RESUME_TEMPLATE,
    "improve": IMPROVE_TEMPLATE,
    "cover_letter": COVER_LETTER_TEMPLATE,
    "interview_prep": INTERVIEW_PREP_TEMPLATE,
}

ALLOWED_KEYS: Dict[str, set] = {
    "resume": {"STUDENT_DATA", "JD"},
    "improve": {"TEXT"},
    "cover_letter": {"STUDENT_DATA", "RESUME", "JD"},
    "interview_prep": {"STUDENT_DATA", "JD"},
}

# fallbacks when the optional job description is left blank
RESUME_JD_FALLBACK = "None provided. Generate a strong, general-purpose resume."
INTERVIEW_JD_FALLBACK = "General role in their field."


def render_prompt(feature: Feature, vars: Dict[str, str]) -> str:
    # Only allow the keys the template knows about; absent ones render empty
    allowed = ALLOWED_KEYS[feature]
    safe_vars = {k: "" for k in allowed}
    safe_vars.update({k: v for k, v in vars.items() if k in allowed and v is not None})
    return PROMPT_TEMPLATES[feature].format(**safe_vars)


def build_resume_prompt(student_data: str, jd_text: Optional[str] = None) -> str:
    return render_prompt("resume", {"STUDENT_DATA": student_data, "JD": jd_text or RESUME_JD_FALLBACK})


def build_improve_prompt(text: str) -> str:
    return render_prompt("improve", {"TEXT": text})


def build_cover_letter_prompt(student_data: str, jd_text: str, doc: ResumeDocument) -> str:
    return render_prompt(
        "cover_letter",
        {"STUDENT_DATA": student_data, "RESUME": resume_as_plain_text(doc), "JD": jd_text},
    )


def build_interview_prep_prompt(student_data: str, jd_text: Optional[str] = None) -> str:
    return render_prompt("interview_prep", {"STUDENT_DATA": student_data, "JD": jd_text or INTERVIEW_JD_FALLBACK})


def resume_as_plain_text(doc: ResumeDocument) -> str:
    """Flatten a resume into the plain-text form embedded in cover letter prompts."""
    out = f"{doc.name.upper()}\n{doc.title}\n\n"
    out += f"ABOUT ME\n{doc.summary}\n\n"
    for section in doc.sections:
        out += f"{section.title.upper()}\n"
        if isinstance(section, SkillsSection):
            if section.items:
                out += "- " + "\n- ".join(section.items) + "\n"
        else:
            for item in section.items:
                out += f"{item.heading}\n{item.subheading}\n{item.description}\n"
        out += "\n"
    return out
