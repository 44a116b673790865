"""
Transcript Service — renders a student's enrollment history as a PDF.

Dropped enrollments stay on the transcript with status DROPPED, which is
why enrollments are soft-deleted.
"""

import io
from datetime import datetime

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas

from academics.models import Enrollment, Student


NAVY = colors.HexColor('#1B2A4A')
DARK_GRAY = colors.HexColor('#333333')
LIGHT_GRAY = colors.HexColor('#888888')
RULE_GRAY = colors.HexColor('#D0D0D0')

# (header, x offset from the left margin)
COLUMNS = [
    ('YEAR', 0),
    ('SEM', 2.4 * cm),
    ('CODE', 3.6 * cm),
    ('COURSE', 5.8 * cm),
    ('GRADE', 12.4 * cm),
    ('MARKS', 13.8 * cm),
    ('STATUS', 15.4 * cm),
]

ROW_HEIGHT = 0.6 * cm


def student_transcript_enrollments(student: Student):
    """Every enrollment of the student, dropped ones included."""
    return (
        Enrollment.objects.filter(student=student)
        .select_related('course')
        .order_by('academic_year', 'semester', 'course__code', 'id')
    )


def generate_transcript_pdf(
    student: Student,
    enrollments,
    generated_at: datetime | None = None,
) -> bytes:
    """
    Generate an A4 transcript listing the given enrollments.

    Args:
        student: Student the transcript belongs to.
        enrollments: Iterable of Enrollment rows, already ordered.
        generated_at: Timestamp printed in the footer.

    Returns:
        PDF file content as bytes.
    """
    if generated_at is None:
        generated_at = datetime.now()

    buf = io.BytesIO()
    page_w, page_h = A4
    c = canvas.Canvas(buf, pagesize=A4)
    margin = 2 * cm

    def draw_header():
        y = page_h - margin
        c.setFillColor(NAVY)
        c.setFont('Helvetica-Bold', 18)
        c.drawString(margin, y, 'ACADEMIC TRANSCRIPT')

        y -= 0.9 * cm
        c.setFillColor(DARK_GRAY)
        c.setFont('Helvetica', 10)
        c.drawString(margin, y, f'Student: {student.name}')
        c.drawRightString(page_w - margin, y, f'Roll number: {student.roll_number}')
        y -= 0.5 * cm
        department = student.department.name if student.department else '-'
        c.drawString(margin, y, f'Department: {department}')

        y -= 0.9 * cm
        c.setFillColor(LIGHT_GRAY)
        c.setFont('Helvetica-Bold', 8)
        for label, offset in COLUMNS:
            c.drawString(margin + offset, y, label)

        y -= 0.25 * cm
        c.setStrokeColor(RULE_GRAY)
        c.setLineWidth(0.5)
        c.line(margin, y, page_w - margin, y)
        return y - ROW_HEIGHT

    y = draw_header()
    rows = 0
    for enrollment in enrollments:
        if y < margin + 1.5 * cm:
            c.showPage()
            y = draw_header()

        values = [
            enrollment.academic_year,
            str(enrollment.semester or '-'),
            enrollment.course.code,
            _truncate(enrollment.course.name, 40),
            enrollment.grade or '-',
            f'{enrollment.marks:.2f}' if enrollment.marks is not None else '-',
            enrollment.status,
        ]
        c.setFillColor(DARK_GRAY)
        c.setFont('Helvetica', 9)
        for (_, offset), value in zip(COLUMNS, values):
            c.drawString(margin + offset, y, value)
        y -= ROW_HEIGHT
        rows += 1

    if rows == 0:
        c.setFillColor(LIGHT_GRAY)
        c.setFont('Helvetica-Oblique', 9)
        c.drawString(margin, y, 'No enrollments on record.')

    c.setFillColor(LIGHT_GRAY)
    c.setFont('Helvetica', 7)
    c.drawCentredString(
        page_w / 2, margin / 2,
        f'Generated {generated_at.strftime("%B %d, %Y %H:%M")}',
    )

    c.save()
    buf.seek(0)
    return buf.read()


def _truncate(text: str, length: int) -> str:
    return text if len(text) <= length else text[:length - 1] + '…'
