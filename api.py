# api.py (resume analysis backend)
import io
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from ai_analyzer import build_insight_provider
from analyzer import ResumeAnalyzer
from errors import AnalysisFailure, ExtractionError, UnsupportedFormatError

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = int(float(os.getenv("MAX_UPLOAD_MB", "10")) * 1024 * 1024)
ANALYZE_RATE_LIMIT = os.getenv("ANALYZE_RATE_LIMIT", "50/15minutes")
RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

limiter = Limiter(key_func=get_remote_address)

app = FastAPI(title="Resume Analyzer")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[os.getenv("FRONTEND_URL", "http://localhost:3000")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter

analyzer = ResumeAnalyzer(insight_provider=build_insight_provider())


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Rate limit hit for %s on %s", get_remote_address(request), request.url.path)
    return JSONResponse(status_code=429, content={"error": RATE_LIMIT_MESSAGE})


@app.get("/api/health")
async def health():
    return {"status": "OK", "timestamp": _timestamp()}


@app.post("/api/analyze-resume")
@limiter.limit(ANALYZE_RATE_LIMIT)
def analyze_resume_endpoint(
    request: Request,
    resume: Optional[UploadFile] = File(None),
    jobDescription: str = Form(""),
):
    if resume is None or not resume.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    mime_type = (resume.content_type or "").lower()
    if mime_type not in analyzer.supported_mime_types:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Only PDF and Word documents are allowed.",
        )

    try:
        payload = resume.file.read(MAX_UPLOAD_BYTES + 1)
    finally:
        resume.file.close()
    if len(payload) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size is {MAX_UPLOAD_BYTES // (1024 * 1024)}MB.",
        )

    logger.info("Analyzing %s (%s, %d bytes)", resume.filename, mime_type, len(payload))
    try:
        with io.BytesIO(payload) as buffer:
            result = analyzer.analyze_document(buffer, mime_type, jobDescription)
    except UnsupportedFormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ExtractionError as exc:
        logger.warning("Extraction failed for %s: %s", resume.filename, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except AnalysisFailure:
        raise HTTPException(status_code=500, detail="Failed to analyze resume")

    return {
        "success": True,
        "analysis": result.to_dict(),
        "timestamp": _timestamp(),
    }


def main() -> None:
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "3000")))


if __name__ == "__main__":
    main()
