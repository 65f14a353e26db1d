"""
法规域模型 - 劳动法规表（只读参考数据）
"""

from sqlmodel import Field

from .base import TimestampModel, new_id


class WorkRegulation(TimestampModel, table=True):
    """劳动法规表，由 init_db 写入种子数据"""
    __tablename__ = "work_regulations"

    id: str = Field(default_factory=new_id, primary_key=True)

    title: str = Field(nullable=False)

    # 分类：如 wages、leave、end_of_service
    category: str = Field(index=True, nullable=False)

    description: str = Field(nullable=False)

    content: str = Field(nullable=False)
