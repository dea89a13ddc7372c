"""
PDF rendering of quotes and invoices with ReportLab.

Layout, top to bottom: entity name and document title, From / To blocks,
details table, line items, totals, notes, payment details (invoices only).
Every page gets a footer with the document number and page number.
"""

from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from apps.exchange.money import format_money

HEADER_COLOR = colors.HexColor('#1e293b')
MUTED_COLOR = colors.HexColor('#64748b')
GRID_COLOR = colors.HexColor('#cbd5e1')


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        'doc_entity',
        parent=styles['Normal'],
        fontName='Helvetica-Bold',
        fontSize=16,
        leading=20,
        textColor=HEADER_COLOR,
    ))
    styles.add(ParagraphStyle(
        'doc_title',
        parent=styles['Normal'],
        fontName='Helvetica',
        fontSize=12,
        leading=15,
        textColor=MUTED_COLOR,
    ))
    styles.add(ParagraphStyle(
        'doc_label',
        parent=styles['Normal'],
        fontName='Helvetica-Bold',
        fontSize=9,
        leading=11,
        textColor=MUTED_COLOR,
    ))
    styles.add(ParagraphStyle(
        'doc_cell',
        parent=styles['Normal'],
        fontName='Helvetica',
        fontSize=9,
        leading=11,
    ))
    return styles


def _para(text, style):
    """Escape markup characters and keep line breaks."""
    return Paragraph(escape(str(text or '')).replace('\n', '<br/>'), style)


def _party_block(title, lines, styles):
    cells = [_para(title, styles['doc_label'])]
    cells.extend(_para(line, styles['doc_cell']) for line in lines if line)
    return cells


def _from_lines(entity):
    return [
        entity.entity_name,
        entity.address,
        f"Reg. no. {entity.registration_number}" if entity.registration_number else '',
        entity.email,
        entity.phone,
        entity.website,
    ]


def _to_lines(customer):
    return [
        customer.company_contact_name,
        customer.address,
        customer.email,
        customer.phone,
        f"Customer ID {customer.public_customer_id}",
    ]


def _line_items_table(document, styles, width):
    currency = document.currency_code
    rows = [['Description', 'Qty', 'Unit Price', 'Total']]
    for item in document.line_items.all():
        rows.append([
            _para(item.description, styles['doc_cell']),
            str(item.quantity),
            format_money(item.unit_price, currency),
            format_money(item.line_total, currency),
        ])

    table = Table(rows, repeatRows=1, colWidths=[width * 0.52, width * 0.1, width * 0.19, width * 0.19])
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('LINEBELOW', (0, 1), (-1, -1), 0.5, GRID_COLOR),
        ('TOPPADDING', (0, 0), (-1, -1), 4),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
    ]))
    return table


def _totals_table(document, width):
    currency = document.currency_code
    rows = [['Subtotal', format_money(document.subtotal_amount, currency)]]
    if document.discount_amount:
        rows.append([
            f"Discount ({document.discount_percentage.normalize():f}%)",
            format_money(-document.discount_amount, currency),
        ])
    rows.append([
        f"Tax ({document.tax_percentage.normalize():f}%)",
        format_money(document.tax_amount, currency),
    ])
    rows.append(['Total', format_money(document.total_amount, currency)])

    table = Table(rows, colWidths=[width * 0.25, width * 0.19], hAlign='RIGHT')
    table.setStyle(TableStyle([
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('LINEABOVE', (0, -1), (-1, -1), 1, HEADER_COLOR),
    ]))
    return table


def _draw_footer(canvas, doc, label):
    canvas.saveState()
    canvas.setFont('Helvetica', 8)
    canvas.setFillColor(MUTED_COLOR)
    canvas.drawString(doc.leftMargin, 12 * mm, label)
    canvas.drawRightString(doc.pagesize[0] - doc.rightMargin, 12 * mm, f"Page {doc.page}")
    canvas.restoreState()


def _render(document, *, title, detail_rows, payment_source=None):
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=f"{title} {document.number}",
        topMargin=20 * mm,
        bottomMargin=22 * mm,
        leftMargin=18 * mm,
        rightMargin=18 * mm,
    )
    styles = _styles()
    width = doc.width

    elements = [
        _para(document.issuing_entity.entity_name, styles['doc_entity']),
        _para(f"{title} {document.number}", styles['doc_title']),
        Spacer(1, 8 * mm),
    ]

    parties = Table(
        [[
            _party_block('From', _from_lines(document.issuing_entity), styles),
            _party_block('To', _to_lines(document.customer), styles),
        ]],
        colWidths=[width / 2, width / 2],
    )
    parties.setStyle(TableStyle([('VALIGN', (0, 0), (-1, -1), 'TOP')]))
    elements += [parties, Spacer(1, 6 * mm)]

    details = Table(
        [[_para(label, styles['doc_label']), _para(value, styles['doc_cell'])] for label, value in detail_rows],
        colWidths=[width * 0.25, width * 0.35],
        hAlign='LEFT',
    )
    elements += [details, Spacer(1, 6 * mm)]

    elements += [
        _line_items_table(document, styles, width),
        Spacer(1, 4 * mm),
        _totals_table(document, width),
    ]

    if document.notes:
        elements += [
            Spacer(1, 6 * mm),
            _para('Notes', styles['doc_label']),
            _para(document.notes, styles['doc_cell']),
        ]

    if payment_source is not None:
        elements += [Spacer(1, 6 * mm), _para('Payment details', styles['doc_label'])]
        lines = [('Account', f"{payment_source.name} ({payment_source.currency_code})")]
        lines += payment_source.bank_detail_lines()
        if payment_source.additional_details:
            lines.append(('Details', payment_source.additional_details))
        elements.append(Table(
            [[_para(label, styles['doc_cell']), _para(value, styles['doc_cell'])] for label, value in lines],
            colWidths=[width * 0.25, width * 0.5],
            hAlign='LEFT',
        ))

    footer = f"{title} {document.number}"
    doc.build(
        elements,
        onFirstPage=lambda c, d: _draw_footer(c, d, footer),
        onLaterPages=lambda c, d: _draw_footer(c, d, footer),
    )

    pdf_bytes = buffer.getvalue()
    buffer.close()
    return pdf_bytes


def render_invoice_pdf(invoice) -> bytes:
    detail_rows = [
        ('Invoice number', invoice.invoice_number),
        ('Issue date', invoice.issue_date.isoformat()),
        ('Due date', invoice.due_date.isoformat()),
        ('Status', invoice.status),
        ('Currency', invoice.currency_code),
    ]
    return _render(
        invoice,
        title='Invoice',
        detail_rows=detail_rows,
        payment_source=invoice.payment_source,
    )


def render_quote_pdf(quote) -> bytes:
    detail_rows = [
        ('Quote number', quote.quote_number),
        ('Issue date', quote.issue_date.isoformat()),
        ('Valid until', quote.expiry_date.isoformat()),
        ('Status', quote.status),
        ('Currency', quote.currency_code),
    ]
    return _render(quote, title='Quote', detail_rows=detail_rows)
