import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from resume_api.core.generation import (
    generate_cover_letter,
    generate_interview_prep,
    generate_resume,
    improve_text,
)
from resume_api.errors import RelayError, RenderFailure, UpstreamFailure
from resume_api.schemas import (
    CoverLetterDocxRequest,
    CoverLetterRequest,
    CoverLetterResponse,
    GenerateRequest,
    GenerateResponse,
    ImproveRequest,
    ImproveResponse,
    InterviewPrepRequest,
    InterviewPrepResponse,
    PortfolioResponse,
    ResumeDataRequest,
)
from resume_api.services.docx_builder import DOCX_MEDIA_TYPE, build_cover_letter_docx, build_resume_docx
from resume_api.services.llm import GENERATION_FAILED, LLMClient
from resume_api.services.pdf import render_resume_pdf
from resume_api.services.portfolio import render_portfolio_html
from resume_api.services.preview import render_resume_html

logger = logging.getLogger(__name__)

router = APIRouter()


def get_llm_client(request: Request) -> LLMClient:
    return request.app.state.llm_client


def _attachment(buf, media_type: str, filename: str) -> StreamingResponse:
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return StreamingResponse(buf, media_type=media_type, headers=headers)


@router.get("/health")
def health():
    return {"ok": True}


@router.post("/api/generate", response_model=GenerateResponse)
def generate(req: GenerateRequest, client: LLMClient = Depends(get_llm_client)):
    try:
        doc = generate_resume(client, req.student_data, req.job_description)
        return GenerateResponse(
            resume_text=render_resume_html(doc),
            resume_data=doc,
            ats_score=doc.ats_score,
            suggestions=doc.suggestions,
        )
    except RelayError:
        raise
    except Exception as e:
        logger.exception("Resume generation failed")
        raise RenderFailure("Failed to generate structured resume data.") from e


@router.post("/api/improve", response_model=ImproveResponse)
def improve(req: ImproveRequest, client: LLMClient = Depends(get_llm_client)):
    try:
        return ImproveResponse(improved_text=improve_text(client, req.text))
    except RelayError:
        raise
    except Exception as e:
        logger.exception("Improve request failed")
        raise UpstreamFailure(GENERATION_FAILED) from e


@router.post("/api/generate-cover-letter", response_model=CoverLetterResponse)
def cover_letter(req: CoverLetterRequest, client: LLMClient = Depends(get_llm_client)):
    try:
        text = generate_cover_letter(client, req.student_data, req.job_description, req.resume_data)
        return CoverLetterResponse(cover_letter_text=text)
    except RelayError:
        raise
    except Exception as e:
        logger.exception("Cover letter generation failed")
        raise UpstreamFailure(GENERATION_FAILED) from e


@router.post("/api/generate-interview-prep", response_model=InterviewPrepResponse)
def interview_prep(req: InterviewPrepRequest, client: LLMClient = Depends(get_llm_client)):
    try:
        text = generate_interview_prep(client, req.student_data, req.job_description)
        return InterviewPrepResponse(interview_prep_text=text)
    except RelayError:
        raise
    except Exception as e:
        logger.exception("Interview prep generation failed")
        raise UpstreamFailure(GENERATION_FAILED) from e


@router.post("/api/generate-portfolio", response_model=PortfolioResponse)
def portfolio(req: ResumeDataRequest):
    try:
        return PortfolioResponse(portfolio_html=render_portfolio_html(req.resume_data))
    except Exception as e:
        logger.exception("Portfolio rendering failed")
        raise RenderFailure("Failed to generate the portfolio page.") from e


@router.post("/api/download-docx")
def download_docx(req: ResumeDataRequest):
    try:
        buf = build_resume_docx(req.resume_data)
    except Exception as e:
        logger.exception("Error creating resume DOCX")
        raise RenderFailure("Failed to create DOCX file.") from e
    return _attachment(buf, DOCX_MEDIA_TYPE, "resume.docx")


@router.post("/api/download-cover-letter-docx")
def download_cover_letter_docx(req: CoverLetterDocxRequest):
    try:
        buf = build_cover_letter_docx(req.cover_letter_text)
    except Exception as e:
        logger.exception("Error creating cover letter DOCX")
        raise RenderFailure("Failed to create DOCX file.") from e
    return _attachment(buf, DOCX_MEDIA_TYPE, "cover-letter.docx")


@router.post("/api/download-pdf")
def download_pdf(req: ResumeDataRequest):
    try:
        buf = render_resume_pdf(req.resume_data)
    except Exception as e:
        logger.exception("Error creating resume PDF")
        raise RenderFailure("Failed to create PDF file.") from e
    return _attachment(buf, "application/pdf", "resume.pdf")
