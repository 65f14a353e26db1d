"""
简历文件文本提取
- PDF: pdfminer.six
- DOCX: python-docx
- TXT: 直接解码
"""

import io
import re
from typing import Optional

from docx import Document
from pdfminer.high_level import extract_text as extract_pdf_text

from labor_portal.config import RESUME_TEXT_MAX_LENGTH
from labor_portal.exceptions import InputValidationError


PDF = "pdf"
DOCX = "docx"
TEXT = "text"
UNKNOWN = "unknown"

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# 简历正文中出现的提示词注入片段
INJECTION_PHRASES = (
    "ignore previous instructions",
    "new instructions:",
    "system:",
    "assistant:",
    "تجاهل التعليمات",
    "تعليمات جديدة",
)

_INJECTION_PATTERN = re.compile("|".join(re.escape(p) for p in INJECTION_PHRASES), re.IGNORECASE)


def detect_file_type(filename: Optional[str], content_type: Optional[str] = None) -> str:
    """按 MIME 类型或扩展名判断文件类型"""
    extension = (filename or "").lower().rsplit(".", 1)[-1]
    if content_type == "application/pdf" or extension == PDF:
        return PDF
    if content_type == DOCX_MIME_TYPE or extension == DOCX:
        return DOCX
    if (content_type or "").startswith("text/") or extension == "txt":
        return TEXT
    return UNKNOWN


def extract_text(data: bytes, file_type: str) -> str:
    """
    从文件字节中提取纯文本

    Args:
        data: 文件内容
        file_type: detect_file_type 的结果

    Returns:
        提取出的文本

    Raises:
        InputValidationError: 文件类型不支持或文件无法读取
    """
    if file_type == PDF:
        try:
            return extract_pdf_text(io.BytesIO(data))
        except Exception as e:
            raise InputValidationError(f"Could not read PDF file: {e}") from e

    if file_type == DOCX:
        try:
            document = Document(io.BytesIO(data))
        except Exception as e:
            raise InputValidationError(f"Could not read DOCX file: {e}") from e
        return "\n".join(p.text.strip() for p in document.paragraphs if p.text and p.text.strip())

    if file_type == TEXT:
        return data.decode("utf-8", errors="replace")

    raise InputValidationError("Unsupported file type. Upload a PDF, DOCX or TXT file")


def sanitize_resume_text(text: Optional[str]) -> str:
    """去掉提示词注入片段并限制长度"""
    if not text:
        return ""
    return _INJECTION_PATTERN.sub("", text)[:RESUME_TEXT_MAX_LENGTH]
