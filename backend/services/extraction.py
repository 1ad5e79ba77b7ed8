import logging
import mimetypes

from errors import ExtractionError
from services.mock.extract import mock_extract

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = (".txt", ".md", ".csv")


def guess_content_type(file_name: str) -> str:
    content_type, _ = mimetypes.guess_type(file_name)
    return content_type or "application/pdf"


class TextExtractor:
    """Gets the contract text out of an uploaded file.

    Plain-text uploads are decoded directly. Scanned documents (PDF, images)
    read as the sample contract while mock OCR is on.
    """

    def __init__(self, mock_ocr: bool = True):
        self.mock_ocr = mock_ocr

    def extract(self, file_name: str, data: bytes) -> str:
        text = self._decode_text(file_name, data)
        if text is None:
            if not self.mock_ocr:
                raise ExtractionError("unsupported document format")
            logger.info("Mock OCR used for %s", file_name)
            text = mock_extract(file_name, data)

        text = text.strip()
        if not text:
            raise ExtractionError("no text extracted")
        return text

    @staticmethod
    def _decode_text(file_name: str, data: bytes):
        if b"\x00" in data or data.startswith(b"%PDF"):
            return None
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError:
            return None
        if file_name.lower().endswith(TEXT_EXTENSIONS) or text.isprintable() or "\n" in text:
            return text
        return None
