"""PDF generation for cohort progress reports."""

from io import BytesIO
from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas
from reportlab.lib.colors import black, HexColor

SUMMARY_FIELDS = [
    ("totalParticipants", "Total participants"),
    ("scoredParticipants", "Scored"),
    ("failedParticipants", "Failed to score"),
    ("fullyCompleted", "Fully completed"),
    ("avgBadges", "Average badges"),
    ("avgGames", "Average games"),
    ("overallProgress", "Overall progress %"),
    ("totalPoints", "Total points"),
]


def generate_cohort_pdf(report: dict, title: str = "Cohort Progress Report") -> bytes:
    """
    Render summary, distribution and leaderboard of a cohort report.
    Long tables continue on following pages.
    """
    buffer = BytesIO()
    doc = canvas.Canvas(buffer, pagesize=letter)
    page_width, page_height = letter
    margin = 0.75 * inch
    content_width = page_width - (margin * 2)
    cursor_y = page_height - margin

    LINE_HEIGHT = 14
    SECTION_SPACING = 20
    BAR_HEIGHT = 8

    text_dark = HexColor("#1e293b")
    text_body = HexColor("#334155")
    bar_fill = HexColor("#4285f4")
    bar_track = HexColor("#e2e8f0")

    def check_page_break(needed_height: float = 20) -> None:
        nonlocal cursor_y
        if cursor_y - needed_height < margin:
            doc.showPage()
            cursor_y = page_height - margin

    def section(header: str) -> None:
        nonlocal cursor_y
        check_page_break(45)
        cursor_y -= 6
        doc.setFont("Helvetica-Bold", 12)
        doc.setFillColor(black)
        doc.drawString(margin, cursor_y, header.upper())
        cursor_y -= 4
        doc.setStrokeColor(black)
        doc.setLineWidth(0.5)
        doc.line(margin, cursor_y, page_width - margin, cursor_y)
        cursor_y -= SECTION_SPACING

    # Title
    doc.setFont("Helvetica-Bold", 22)
    doc.setFillColor(black)
    tw = doc.stringWidth(title, "Helvetica-Bold", 22)
    doc.drawString((page_width - tw) / 2, cursor_y, title[:80])
    cursor_y -= LINE_HEIGHT + 4
    doc.setFont("Helvetica", 9)
    doc.setFillColor(text_body)
    generated = f"Generated {report.get('generatedAt', '')}"
    if report.get("testMode"):
        generated += " (test mode)"
    gw = doc.stringWidth(generated, "Helvetica", 9)
    doc.drawString((page_width - gw) / 2, cursor_y, generated)
    cursor_y -= SECTION_SPACING + 8

    # Summary
    section("Summary")
    summary = report.get("summary", {})
    for key, label in SUMMARY_FIELDS:
        check_page_break(LINE_HEIGHT)
        doc.setFont("Helvetica-Bold", 10)
        doc.setFillColor(text_dark)
        doc.drawString(margin, cursor_y, f"{label}:")
        doc.setFont("Helvetica", 10)
        doc.setFillColor(text_body)
        doc.drawString(margin + 150, cursor_y, str(summary.get(key, 0)))
        cursor_y -= LINE_HEIGHT
    cursor_y -= 6

    # Distribution
    section("Completion distribution")
    for bucket in report.get("distribution", {}).values():
        check_page_break(LINE_HEIGHT + BAR_HEIGHT + 8)
        doc.setFont("Helvetica-Bold", 10)
        doc.setFillColor(text_dark)
        doc.drawString(margin, cursor_y, bucket.get("label", ""))
        doc.setFont("Helvetica", 10)
        doc.setFillColor(text_body)
        count_text = f"{bucket.get('count', 0)} participants ({bucket.get('percentage', 0)}%)"
        cw = doc.stringWidth(count_text, "Helvetica", 10)
        doc.drawString(page_width - margin - cw, cursor_y, count_text)
        cursor_y -= BAR_HEIGHT + 4
        doc.setFillColor(bar_track)
        doc.rect(margin, cursor_y, content_width, BAR_HEIGHT, stroke=0, fill=1)
        fill_width = content_width * min(float(bucket.get("percentage", 0) or 0), 100.0) / 100
        if fill_width > 0:
            doc.setFillColor(bar_fill)
            doc.rect(margin, cursor_y, fill_width, BAR_HEIGHT, stroke=0, fill=1)
        cursor_y -= LINE_HEIGHT + 2
    cursor_y -= 6

    # Leaderboard
    section("Leaderboard")
    columns = [("#", 0), ("Name", 30), ("Badges", 270), ("Games", 330), ("Items", 390), ("Points", 450)]
    doc.setFont("Helvetica-Bold", 10)
    doc.setFillColor(text_dark)
    for label, offset in columns:
        doc.drawString(margin + offset, cursor_y, label)
    cursor_y -= LINE_HEIGHT
    doc.setFont("Helvetica", 10)
    doc.setFillColor(text_body)
    for row in report.get("leaderboard", []):
        check_page_break(LINE_HEIGHT)
        values = [
            str(row.get("rank", "")),
            str(row.get("name", ""))[:40],
            str(row.get("badges", 0)),
            str(row.get("games", 0)),
            str(row.get("totalItems", 0)),
            f"{row.get('points', 0):,}",
        ]
        for (_, offset), value in zip(columns, values):
            doc.drawString(margin + offset, cursor_y, value)
        cursor_y -= LINE_HEIGHT

    failures = report.get("failures") or []
    if failures:
        cursor_y -= 6
        section("Not scored")
        doc.setFont("Helvetica", 10)
        doc.setFillColor(text_body)
        for failure in failures:
            check_page_break(LINE_HEIGHT)
            line = f"{failure.get('name') or 'Unknown'} ({failure.get('profileId')}): {failure.get('error')}"
            doc.drawString(margin, cursor_y, line[:110])
            cursor_y -= LINE_HEIGHT

    doc.save()
    buffer.seek(0)
    return buffer.getvalue()
