"""Rasterize a rendered invoice tree into a single-page PDF.

The page is A4 wide and as tall as the content (never shorter than A4), so
long invoices stay on one page the way the on-screen preview shows them.
All layout decisions live in the renderer; this module only measures and
draws the nodes it is given.
"""

import io
import logging
from dataclasses import dataclass
from typing import Optional

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from backend.app.schemas.document import DocumentNode, RenderedDocument

logger = logging.getLogger(__name__)

PAGE_W, A4_H = A4
MARGIN = 15 * mm
GAP = 4 * mm
CELL_PAD = 2 * mm
BANNER_PAD = 7 * mm
DEFAULT_SIZE = 10.0
DEFAULT_COLOR = "#111827"
FULL_BLEED = ("banner", "ornament")


@dataclass
class ExportedInvoice:
    filename: str
    content: bytes
    media_type: str = "application/pdf"


def _font(style: dict) -> str:
    bold = style.get("bold") == "true"
    italic = style.get("italic") == "true"
    if bold and italic:
        return "Helvetica-BoldOblique"
    if bold:
        return "Helvetica-Bold"
    if italic:
        return "Helvetica-Oblique"
    return "Helvetica"


def _color(value: Optional[str], fallback: str = DEFAULT_COLOR):
    try:
        return HexColor(value or fallback)
    except ValueError:
        return HexColor(fallback)


class DocumentRasterizer:
    """Walks a DocumentNode tree. With ``pdf`` unset it only measures."""

    def __init__(self, pdf: Optional[canvas.Canvas] = None, page_height: float = A4_H):
        self.pdf = pdf
        self.page_height = page_height

    def layout(self, node: DocumentNode, x: float, top: float, width: float, inherited: dict) -> float:
        style = {**inherited, **node.style}
        handler = getattr(self, f"_layout_{node.kind}", self._layout_block)
        return handler(node, x, top, width, style)

    def _y(self, top: float) -> float:
        return self.page_height - top

    def _layout_text(self, node, x, top, width, style, prefix=""):
        size = float(style.get("font_size", DEFAULT_SIZE))
        leading = size * 1.3
        font = _font(node.style)
        lines = simpleSplit(prefix + (node.text or ""), font, size, max(width, 1)) or [""]
        if self.pdf is not None:
            self.pdf.setFont(font, size)
            self.pdf.setFillColor(_color(style.get("color")))
            align = node.style.get("align", "left")
            for index, line in enumerate(lines):
                baseline = self._y(top + index * leading + size)
                if align == "right":
                    self.pdf.drawRightString(x + width, baseline, line)
                elif align == "center":
                    self.pdf.drawCentredString(x + width / 2, baseline, line)
                else:
                    self.pdf.drawString(x, baseline, line)
        return len(lines) * leading

    def _layout_list_item(self, node, x, top, width, style):
        return self._layout_text(node, x, top, width, style, prefix="• ")

    def _stack(self, children, x, top, width, style, gap):
        height = 0.0
        for index, child in enumerate(children):
            if index:
                height += gap
            height += self.layout(child, x, top + height, width, style)
        return height

    def _layout_block(self, node, x, top, width, style):
        fraction = float(node.style.get("width", 1))
        inner_width = width * fraction
        if node.style.get("align") == "right":
            x += width - inner_width
        return self._stack(node.children, x, top, inner_width, style, gap=1.5 * mm)

    def _layout_list(self, node, x, top, width, style):
        return self._stack(node.children, x + 2 * mm, top, width - 2 * mm, style, gap=0)

    def _layout_cell(self, node, x, top, width, style):
        if node.text is not None:
            return self._layout_text(node, x, top, width, style)
        return self._stack(node.children, x, top, width, style, gap=1 * mm)

    def _layout_columns(self, node, x, top, width, style):
        count = len(node.children) or 1
        column_width = (width - GAP * (count - 1)) / count
        heights = [
            self.layout(child, x + index * (column_width + GAP), top, column_width, style)
            for index, child in enumerate(node.children)
        ]
        return max(heights, default=0.0)

    def _layout_table(self, node, x, top, width, style):
        return self._stack(node.children, x, top, width, style, gap=0)

    def _layout_table_row(self, node, x, top, width, style):
        weights = [float(cell.style.get("weight", 1)) for cell in node.children]
        total_weight = sum(weights) or 1.0
        # Measure first so the background sits under the text
        measurer = DocumentRasterizer(page_height=self.page_height)
        content = self._row_cells(measurer, node, x, top, width, style, weights, total_weight)
        height = content + 2 * CELL_PAD
        if self.pdf is not None:
            if node.style.get("background"):
                self.pdf.setFillColor(_color(node.style["background"]))
                self.pdf.rect(x, self._y(top + height), width, height, fill=1, stroke=0)
            self._row_cells(self, node, x, top, width, style, weights, total_weight)
            self.pdf.setStrokeColor(_color(style.get("border_color"), "#d1d5db"))
            self.pdf.setLineWidth(0.5)
            self.pdf.line(x, self._y(top + height), x + width, self._y(top + height))
        return height

    @staticmethod
    def _row_cells(target, node, x, top, width, style, weights, total_weight):
        cursor = x + CELL_PAD
        tallest = 0.0
        for cell, weight in zip(node.children, weights):
            cell_width = (width - 2 * CELL_PAD) * weight / total_weight
            tallest = max(tallest, target.layout(cell, cursor, top + CELL_PAD, cell_width - CELL_PAD, style))
            cursor += cell_width
        return tallest

    def _layout_rule(self, node, x, top, width, style):
        height = 3 * mm
        if self.pdf is not None:
            self.pdf.setStrokeColor(_color(node.style.get("color"), "#d1d5db"))
            self.pdf.setLineWidth(float(node.style.get("thickness", 1)))
            self.pdf.line(x, self._y(top + height / 2), x + width, self._y(top + height / 2))
        return height

    def _layout_image(self, node, x, top, width, style):
        height = float(node.style.get("height", 14)) * mm
        if self.pdf is not None and node.text:
            try:
                image = ImageReader(node.text)
                self.pdf.drawImage(
                    image, x + width - height * 2, self._y(top + height), width=height * 2, height=height,
                    preserveAspectRatio=True, anchor="e", mask="auto",
                )
            except (OSError, ValueError, RuntimeError) as exc:
                logger.warning("Skipping logo %s: %s", node.text[:80], exc)
        return height

    def _layout_banner(self, node, x, top, width, style):
        inner = width - 2 * MARGIN
        measurer = DocumentRasterizer(page_height=self.page_height)
        height = measurer._stack(node.children, x + MARGIN, top + BANNER_PAD, inner, style, gap=1.5 * mm)
        height += 2 * BANNER_PAD
        if self.pdf is not None:
            self.pdf.setFillColor(_color(node.style.get("background")))
            if node.style.get("shape") == "diagonal":
                path = self.pdf.beginPath()
                path.moveTo(x, self._y(top))
                path.lineTo(x + width, self._y(top))
                path.lineTo(x + width, self._y(top + height * 0.6))
                path.lineTo(x + width * 0.7, self._y(top + height))
                path.lineTo(x, self._y(top + height))
                path.close()
                self.pdf.drawPath(path, fill=1, stroke=0)
            else:
                self.pdf.rect(x, self._y(top + height), width, height, fill=1, stroke=0)
            self._stack(node.children, x + MARGIN, top + BANNER_PAD, inner, style, gap=1.5 * mm)
        return height

    def _layout_ornament(self, node, x, top, width, style):
        height = 12 * mm
        if self.pdf is not None:
            self.pdf.setFillColor(_color(node.style.get("color")))
            path = self.pdf.beginPath()
            path.moveTo(x + width * 0.55, self._y(top + height))
            path.lineTo(x + width, self._y(top))
            path.lineTo(x + width, self._y(top + height))
            path.close()
            self.pdf.drawPath(path, fill=1, stroke=0)
            self.pdf.rect(x, self._y(top + height), width * 0.3, 2 * mm, fill=1, stroke=0)
        return height

    def _layout_page(self, node, x, top, width, style):
        height = 0.0
        for index, child in enumerate(node.children):
            if index:
                height += GAP
            if child.kind in FULL_BLEED:
                height += self.layout(child, x, top + height, width, style)
            else:
                height += self.layout(child, x + MARGIN, top + height, width - 2 * MARGIN, style)
        return height + MARGIN


def measure_document(document: RenderedDocument) -> float:
    return DocumentRasterizer().layout(document.root, 0, 0, PAGE_W, {})


def export_invoice_pdf(document: RenderedDocument) -> ExportedInvoice:
    """Draw ``document`` onto one A4-wide page and return the PDF bytes."""
    page_height = max(A4_H, measure_document(document))
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(PAGE_W, page_height))
    pdf.setTitle(document.filename)
    pdf.setAuthor(document.template_name)
    DocumentRasterizer(pdf, page_height).layout(document.root, 0, 0, PAGE_W, {})
    pdf.showPage()
    pdf.save()
    content = buffer.getvalue()
    logger.info("Exported %s (%d bytes, %.0fpt tall)", document.filename, len(content), page_height)
    return ExportedInvoice(filename=document.filename, content=content)
