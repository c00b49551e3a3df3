"""PDF report rendering for approved jobs."""

import asyncio
import logging
from dataclasses import dataclass
from io import BytesIO
from xml.sax.saxutils import escape

from PIL import Image as PILImage
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Flowable, Image, Paragraph, SimpleDocTemplate, Spacer

from jobsite_reports.adapters.photo_fetcher import PhotoFetcher
from jobsite_reports.domain.errors import PhotoFetchError, ReportRenderError

logger = logging.getLogger(__name__)

PAGE_MARGIN = 40
PHOTO_WIDTH = 450
BLOCK_GAP = 20
NO_PHOTOS_TEXT = "No photos available"

# platypus frames pad their content by 6pt on every side
_FRAME_PADDING = 6
_MAX_PHOTO_HEIGHT = A4[1] - 2 * PAGE_MARGIN - 2 * _FRAME_PADDING

_NATIVE_FORMATS = {"JPEG", "PNG"}

_HEADER_STYLE = ParagraphStyle(
    "JobAddress", fontName="Helvetica-Bold", fontSize=24, leading=29
)
_PLACEHOLDER_STYLE = ParagraphStyle(
    "NoPhotos", fontName="Helvetica-Oblique", fontSize=12, leading=15
)


@dataclass(frozen=True)
class ReportPhoto:
    """A downloaded photo ready for layout."""

    url: str
    data: bytes
    width: int
    height: int

    def display_size(self) -> tuple[float, float]:
        """Return the rendered size, full width with the source aspect ratio."""
        width = float(PHOTO_WIDTH)
        height = PHOTO_WIDTH * self.height / self.width
        if height > _MAX_PHOTO_HEIGHT:
            width = width * _MAX_PHOTO_HEIGHT / height
            height = _MAX_PHOTO_HEIGHT
        return width, height


@dataclass
class ReportBuilder:
    """Builds a paginated PDF with the job address and its photos."""

    fetcher: PhotoFetcher

    async def build(self, address: str, photo_urls: list[str]) -> bytes:
        """Render the report; photos that cannot be loaded are left out."""
        if not address or not address.strip():
            raise ReportRenderError("Job address is required for PDF generation")
        logger.info("Rendering report for %s with %d photos", address, len(photo_urls))
        loaded = await asyncio.gather(*(self._load(url) for url in photo_urls))
        photos = [photo for photo in loaded if photo is not None]
        try:
            pdf_bytes = await asyncio.to_thread(render_pdf, address, photos)
        except Exception as exc:
            raise ReportRenderError(f"Failed to assemble PDF: {exc}") from exc
        logger.info(
            "Report rendered with %d of %d photos, %d bytes",
            len(photos),
            len(photo_urls),
            len(pdf_bytes),
        )
        return pdf_bytes

    async def _load(self, url: str) -> ReportPhoto | None:
        try:
            data = await self.fetcher.fetch(url)
        except PhotoFetchError as exc:
            logger.warning("Skipping photo %s: %s", url, exc)
            return None
        try:
            return decode_photo(url, data)
        except (OSError, ValueError, PILImage.DecompressionBombError) as exc:
            logger.warning("Skipping undecodable photo %s: %s", url, exc)
            return None


def decode_photo(url: str, data: bytes) -> ReportPhoto:
    """Decode image bytes, converting formats the PDF writer cannot embed."""
    with PILImage.open(BytesIO(data)) as image:
        image.load()
        width, height = image.size
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid image size {width}x{height}")
        if image.format not in _NATIVE_FORMATS:
            buffer = BytesIO()
            image.convert("RGB").save(buffer, format="PNG")
            data = buffer.getvalue()
    return ReportPhoto(url=url, data=data, width=width, height=height)


def build_story(address: str, photos: list[ReportPhoto]) -> list[Flowable]:
    """Return the flowables for a report, in page order."""
    story: list[Flowable] = [
        Paragraph(escape(address), _HEADER_STYLE),
        Spacer(1, BLOCK_GAP),
    ]
    if not photos:
        story.append(Paragraph(NO_PHOTOS_TEXT, _PLACEHOLDER_STYLE))
        return story
    for photo in photos:
        width, height = photo.display_size()
        story.append(Image(BytesIO(photo.data), width=width, height=height))
        story.append(Spacer(1, BLOCK_GAP))
    return story


def render_pdf(address: str, photos: list[ReportPhoto]) -> bytes:
    """Lay out the report on A4 pages and return the PDF bytes."""
    buffer = BytesIO()
    document = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
        title=address,
    )
    document.build(build_story(address, photos))
    return buffer.getvalue()
