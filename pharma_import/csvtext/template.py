from __future__ import annotations

from pathlib import Path

"""Downloadable CSV templates (header row + one example row)."""

__all__ = [
    "PRODUCT_TEMPLATE_NAME",
    "CHANNEL_TEMPLATE_NAME",
    "render_template",
    "render_channel_template",
    "write_template",
]

PRODUCT_TEMPLATE_NAME = "product_import_template.csv"
CHANNEL_TEMPLATE_NAME = "sales_channel_import_template.csv"

_PRODUCT_HEADER = (
    "รหัสสินค้า,บาร์โค้ด,ชื่อสินค้า,ชื่อภาษาอังกฤษ,ราคาขาย,ราคาทุน,"
    "จำนวนคงเหลือ,หน่วย,คำอธิบาย,หมวดหมู่"
)
_PRODUCT_EXAMPLE = (
    "SKU001,1234567890123,พาราเซตามอล 500mg,Paracetamol 500mg,35,20,"
    "100,เม็ด,ยาบรรเทาปวด,ยาสามัญ"
)

_CHANNEL_HEADER = (
    "รหัสสินค้า,บาร์โค้ด,ชื่อสินค้า,ขาย GRAB,ขาย LineMan,ขาย LAZADA,ขาย Shopee,"
    "ขาย Line Shopping,ขาย TikTok,ราคา GRAB,ราคา LineMan,ราคา LAZADA,ราคา Shopee,"
    "ราคา Line Shopping,ราคา TikTok"
)
_CHANNEL_EXAMPLE = "SKU001,1234567890123,พาราเซตามอล 500mg,Y,Y,N,N,Y,N,35,35,,,38,"


def render_template() -> str:
    return f"{_PRODUCT_HEADER}\n{_PRODUCT_EXAMPLE}"


def render_channel_template() -> str:
    return f"{_CHANNEL_HEADER}\n{_CHANNEL_EXAMPLE}"


def write_template(path: Path, *, channels: bool = False) -> Path:
    """Write a template as UTF-8 with BOM so spreadsheet apps detect the encoding.

    When ``path`` is a directory the default template file name is used.
    """
    if path.is_dir():
        path = path / (CHANNEL_TEMPLATE_NAME if channels else PRODUCT_TEMPLATE_NAME)
    text = render_channel_template() if channels else render_template()
    path.write_text(text, encoding="utf-8-sig")
    return path
