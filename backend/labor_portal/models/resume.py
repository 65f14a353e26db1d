"""
简历域模型 - 简历表与课程表
"""

from datetime import date
from typing import Optional, List

from sqlmodel import Field, Column, JSON

from .base import TimestampModel, new_id


class Resume(TimestampModel, table=True):
    """
    简历表
    按用户 upsert：更新时不存在则创建，存在则原地修改
    """
    __tablename__ = "resumes"

    id: str = Field(default_factory=new_id, primary_key=True)

    user_id: str = Field(index=True, nullable=False)

    job_title: Optional[str] = Field(default=None)

    # 技能列表，JSON 存储
    skills: Optional[List[str]] = Field(default_factory=list, sa_column=Column(JSON))

    experience_years: Optional[int] = Field(default=None, ge=0)

    education: Optional[str] = Field(default=None)

    summary: Optional[str] = Field(default=None)


class ResumeCourse(TimestampModel, table=True):
    """
    简历课程表
    追加到简历上，可单独删除
    """
    __tablename__ = "resume_courses"

    id: str = Field(default_factory=new_id, primary_key=True)

    # 外键：所属简历
    resume_id: str = Field(foreign_key="resumes.id", index=True, nullable=False)

    course_name: str = Field(nullable=False)

    # 培训机构
    provider: str = Field(nullable=False)

    date_completed: date = Field(nullable=False)

    certificate_url: Optional[str] = Field(default=None)
