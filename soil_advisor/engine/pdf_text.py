import io
import logging
import pypdf
from pypdf.errors import PyPdfError
from soil_advisor.errors import PdfExtractionError

logger = logging.getLogger(__name__)

def extract_pdf_text(pdf_bytes: bytes) -> str:
    """Extract plain text from PDF bytes using pypdf."""
    if not pdf_bytes:
        raise PdfExtractionError("Failed to read PDF", "uploaded file is empty")
    try:
        reader = pypdf.PdfReader(io.BytesIO(pdf_bytes))
        pages_text = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                pages_text.append(page_text)
    except (PyPdfError, ValueError, KeyError) as exc:
        raise PdfExtractionError("Failed to read PDF", str(exc)) from exc

    text = "\n\n".join(pages_text)
    if not text.strip():
        logger.warning("No extractable text in uploaded PDF (%d pages)", len(reader.pages))
    return text
