"""
用户数据看板服务
汇总用户资料、当前 active 合同和简历完成度
"""

from typing import Any, Dict, List, Optional

from sqlmodel import Session

from labor_portal.exceptions import NotFoundError
from labor_portal.models import Resume, ResumeCourse
from labor_portal.proactive.triggers import missing_resume_fields
from labor_portal.repositories import ContractRepository, ProfileRepository, ResumeRepository


# 简历完成度的检查项
RESUME_COMPLETION_STEPS = ("job_title", "summary", "education", "skills", "experience_years", "courses")


def completion_level(percentage: int) -> str:
    if percentage < 40:
        return "مبتدئ"
    if percentage < 70:
        return "متوسط"
    return "متقدم"


def resume_completion(resume: Optional[Resume], courses: List[ResumeCourse]) -> Dict[str, Any]:
    """
    计算简历完成度

    Args:
        resume: 最新简历，可能为 None
        courses: 该简历的课程

    Returns:
        {"completion_percentage", "completed_steps", "total_steps", "completion_level", "steps": {检查项: bool}}
    """
    steps = {name: False for name in RESUME_COMPLETION_STEPS}
    if resume is not None:
        missing = set(missing_resume_fields(resume))
        steps.update({
            "job_title": "job_title" not in missing,
            "summary": "summary" not in missing,
            "education": bool(resume.education),
            "skills": "skills" not in missing,
            "experience_years": "experience_years" not in missing,
            "courses": bool(courses),
        })

    completed = sum(steps.values())
    percentage = round(completed / len(RESUME_COMPLETION_STEPS) * 100)
    return {
        "completion_percentage": percentage,
        "completed_steps": completed,
        "total_steps": len(RESUME_COMPLETION_STEPS),
        "completion_level": completion_level(percentage),
        "steps": steps,
    }


class DashboardService:

    def __init__(self, session: Session):
        self.profiles = ProfileRepository(session)
        self.contracts = ContractRepository(session)
        self.resumes = ResumeRepository(session)

    def get_user_data(self, user_id: str) -> Dict[str, Any]:
        """
        看板数据

        Returns:
            {"user": UserProfile, "job": 当前职位或 None, "contract": 最新 active 合同或 None,
             "resume": Resume 或 None, "resume_completion": {...}}

        Raises:
            NotFoundError: 用户资料不存在
        """
        profile = self.profiles.get_by_user_id(user_id)
        if profile is None:
            raise NotFoundError(f"User profile not found: {user_id}")

        active = self.contracts.get_active_by_user(user_id)
        contract = active[0] if active else None

        resume = self.resumes.get_latest_by_user(user_id)
        courses = self.resumes.get_courses(resume.id) if resume else []

        return {
            "user": profile,
            "job": contract.position if contract else None,
            "contract": contract,
            "resume": resume,
            "resume_completion": resume_completion(resume, courses),
        }
