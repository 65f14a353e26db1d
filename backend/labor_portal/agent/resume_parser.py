"""
简历解析

用 LLM 结构化输出（with_structured_output）把简历文本解析为 ExtractedResume，
ProposedChanges 是合并后待用户确认的变更，同时用于校验客户端回传的确认内容。
"""

from typing import Any, Dict, List, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, Field

from labor_portal.agent.prompts import RESUME_PARSER_SYSTEM_PROMPT, RESUME_TEXT_TRUNCATED_NOTE
from labor_portal.config import RESUME_PARSE_MAX_CHARS


class PersonalInfo(BaseModel):
    """个人信息，对应 user_profile 表"""
    full_name: Optional[str] = Field(default=None, description="الاسم الكامل")
    email: Optional[str] = Field(default=None, description="البريد الإلكتروني")
    phone: Optional[str] = Field(default=None, description="رقم الهاتف")
    nationality: Optional[str] = Field(default=None, description="الجنسية")


class WorkExperience(BaseModel):
    """一段工作经历，确认后写入 employment_contracts"""
    company: str = Field(default="", description="اسم الشركة")
    position: str = Field(default="", description="المسمى الوظيفي")
    start_date: Optional[str] = Field(default=None, description="تاريخ البدء YYYY-MM")
    end_date: Optional[str] = Field(default=None, description="تاريخ الانتهاء YYYY-MM، فارغ إذا كان العمل حالياً")
    description: Optional[str] = Field(default=None, description="وصف مختصر")


class CourseEntry(BaseModel):
    """培训课程，确认后写入 resume_courses"""
    name: str = Field(default="", description="اسم الدورة")
    institution: str = Field(default="", description="الجهة المانحة")
    completion_date: Optional[str] = Field(default=None, description="تاريخ الإتمام YYYY-MM")


class ExtractedResume(BaseModel):
    """
    LLM 从简历文本中提取的结构化数据
    所有字段都允许为空，模型只填写文本中出现的信息
    """
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    job_title: Optional[str] = Field(default=None, description="المسمى الوظيفي الحالي أو المستهدف")
    summary: Optional[str] = Field(default=None, description="الملخص المهني")
    skills: List[str] = Field(default_factory=list, description="المهارات")
    experience_years: int = Field(default=0, ge=0, description="إجمالي سنوات الخبرة")
    education: Optional[str] = Field(default=None, description="المؤهل العلمي")
    experience: List[WorkExperience] = Field(default_factory=list)
    courses: List[CourseEntry] = Field(default_factory=list)


class ProposedChanges(BaseModel):
    """
    待确认的变更

    - profile: 资料字段 -> 新值
    - resume: 简历字段 -> 新值
    - new_experiences: 新增的工作经历
    - new_courses: 新增的课程
    """
    profile: Dict[str, str] = Field(default_factory=dict)
    resume: Dict[str, Any] = Field(default_factory=dict)
    new_experiences: List[WorkExperience] = Field(default_factory=list)
    new_courses: List[CourseEntry] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.profile or self.resume or self.new_experiences or self.new_courses)


def truncate_resume_text(text: str, limit: int = RESUME_PARSE_MAX_CHARS) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]} {RESUME_TEXT_TRUNCATED_NOTE}"


def parse_resume_text(llm: Any, resume_text: str) -> ExtractedResume:
    """
    调用 LLM 解析简历文本

    Args:
        llm: LangChain 聊天模型
        resume_text: 已清洗的简历文本

    Returns:
        ExtractedResume 对象
    """
    structured_llm = llm.with_structured_output(ExtractedResume)
    result = structured_llm.invoke([
        SystemMessage(content=RESUME_PARSER_SYSTEM_PROMPT),
        HumanMessage(content=truncate_resume_text(resume_text)),
    ])
    print(
        f"[ResumeParser] 技能 {len(result.skills)} 项，"
        f"经历 {len(result.experience)} 段，课程 {len(result.courses)} 门"
    )
    return result
