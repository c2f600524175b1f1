"""Exception types shared by the extraction, analysis and API layers."""


class ResumeAnalyzerError(Exception):
    """Base class for all errors raised by the resume analyzer."""


class ExtractionError(ResumeAnalyzerError):
    """No usable text could be obtained from the uploaded resume."""


class ExtractionFailure(ExtractionError):
    """A document backend could not decode the file."""


class UnsupportedFormatError(ResumeAnalyzerError):
    def __init__(self, mime_type: str):
        super().__init__(f"Unsupported file type: {mime_type or 'unknown'}")
        self.mime_type = mime_type


class EnrichmentFailure(ResumeAnalyzerError):
    """The optional AI enrichment call failed. Never surfaced to callers."""


class AnalysisFailure(ResumeAnalyzerError):
    """Unexpected internal error while scoring a resume."""
