"""
证书域模型 - 证书表
"""

from datetime import datetime
from enum import Enum

from sqlmodel import Field

from .base import TimestampModel, new_id, utc_now


class CertificateType(str, Enum):
    """证书类型枚举"""
    SALARY_DEFINITION = "salary_definition"
    SERVICE_CERTIFICATE = "service_certificate"
    LABOR_LICENSE = "labor_license"


class Certificate(TimestampModel, table=True):
    """
    证书表
    由 active 合同快照渲染出的正文，签发后不可修改
    """
    __tablename__ = "certificates"

    id: str = Field(default_factory=new_id, primary_key=True)

    user_id: str = Field(index=True, nullable=False)

    certificate_type: CertificateType = Field(nullable=False)

    # 渲染好的证书正文
    content: str = Field(nullable=False)

    issue_date: datetime = Field(default_factory=utc_now, nullable=False)
