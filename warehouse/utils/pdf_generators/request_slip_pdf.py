# warehouse/utils/pdf_generators/request_slip_pdf.py
import os
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from warehouse.models.enums.inventory_request_type import RequestType
from warehouse.schemas.inventory.inventory_request_schemas import InventoryRequestOut
from warehouse.schemas.masters.product_schemas import ProductOut
from warehouse.utils.format_location import format_location

SLIP_DIR = "generated_pdfs"


def generate_request_slip_pdf(
    request: InventoryRequestOut,
    products: dict[str, ProductOut] | None = None,
    output_dir: str = SLIP_DIR,
) -> str:
    """
    Printable pickup (inbound) or delivery (outbound) slip for a request.
    Returns the path of the written file.
    """
    products = products or {}
    is_inbound = request.type == RequestType.inbound

    os.makedirs(output_dir, exist_ok=True)
    file_path = os.path.join(output_dir, f"Request_{request.id}.pdf")

    styles = getSampleStyleSheet()
    story = []

    # -----------------------------
    # HEADER
    # -----------------------------
    title = "PICKUP SLIP" if is_inbound else "DELIVERY SLIP"
    story.append(Paragraph(f"<b>{title} #{request.id}</b>", styles["Title"]))
    story.append(Spacer(1, 8))
    story.append(Paragraph(f"Type: {request.type.value.upper()}", styles["Normal"]))
    story.append(Paragraph(f"Status: {request.status.value.upper()}", styles["Normal"]))
    story.append(Paragraph(f"Date: {request.date.strftime('%d-%m-%Y')}", styles["Normal"]))
    story.append(Paragraph(f"Merchant: {request.merchant_id}", styles["Normal"]))
    story.append(Spacer(1, 15))

    # -----------------------------
    # LOCATION
    # -----------------------------
    location = request.pickup_location if is_inbound else request.delivery_location
    heading = "Pickup Location" if is_inbound else "Delivery Location"
    story.append(Paragraph(f"<b>{heading}:</b>", styles["Heading3"]))
    story.append(Paragraph(format_location(location), styles["Normal"]))
    story.append(Spacer(1, 15))

    # -----------------------------
    # ITEMS
    # -----------------------------
    story.append(Paragraph("<b>Items:</b>", styles["Heading3"]))
    data = [["Product", "SKU", "Qty", "Unit Weight (kg)"]]

    for item in request.items:
        product = products.get(item.product_id)
        data.append([
            product.name if product else item.product_id,
            product.sku if product else "-",
            str(item.quantity),
            f"{product.weight_kg:.3f}" if product and product.weight_kg is not None else "-",
        ])

    table = Table(data, colWidths=[180, 100, 60, 110])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
        ("ALIGN", (2, 1), (-1, -1), "CENTER"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
    ]))
    story.append(table)
    story.append(Spacer(1, 20))

    # -----------------------------
    # FEE SUMMARY
    # -----------------------------
    story.append(Paragraph("<b>Fee Summary:</b>", styles["Heading3"]))
    story.append(Paragraph(f"Total Weight: {request.total_weight_kg} kg", styles["Normal"]))
    story.append(Paragraph(f"<b>Fee: ₹ {request.fee}</b>", styles["Heading2"]))
    story.append(Spacer(1, 20))

    story.append(Paragraph("Please keep this slip with the consignment.", styles["Italic"]))

    doc = SimpleDocTemplate(file_path, pagesize=A4)
    doc.build(story)

    return file_path
