"""
简历服务
简历按用户 upsert，课程挂在简历下，可单独删除
"""

from typing import Any, Dict, List, Optional

from sqlmodel import Session

from labor_portal.exceptions import InputValidationError, NotFoundError
from labor_portal.models import Resume, ResumeCourse
from labor_portal.repositories import ResumeRepository
from labor_portal.services.utils import is_missing, parse_date


# 允许写入的简历字段
RESUME_FIELDS = ("job_title", "skills", "experience_years", "education", "summary")


def clean_resume_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    只保留已知简历字段，并规范化 skills 和 experience_years
    未提供（None）的字段不参与更新
    """
    cleaned: Dict[str, Any] = {}
    for key in RESUME_FIELDS:
        if key not in data or data[key] is None:
            continue
        value = data[key]
        if key == "skills":
            if isinstance(value, str):
                value = [item.strip() for item in value.split(",") if item.strip()]
            elif not isinstance(value, list):
                raise InputValidationError("skills must be a list of strings")
        elif key == "experience_years":
            try:
                value = int(value)
            except (TypeError, ValueError):
                raise InputValidationError(f"Invalid experience_years: {value!r}")
            if value < 0:
                raise InputValidationError("experience_years must not be negative")
        cleaned[key] = value
    return cleaned


class ResumeService:
    """
    简历服务
    """

    def __init__(self, session: Session):
        self.repo = ResumeRepository(session)

    def get_resume(self, user_id: str) -> Optional[Resume]:
        return self.repo.get_latest_by_user(user_id)

    def get_resume_with_courses(self, user_id: str) -> Dict[str, Any]:
        """
        获取简历及其课程

        Returns:
            {"resume": Resume 或 None, "courses": [ResumeCourse, ...]}
        """
        resume = self.get_resume(user_id)
        courses = self.repo.get_courses(resume.id) if resume else []
        return {"resume": resume, "courses": courses}

    def create_resume(self, user_id: str, data: Dict[str, Any]) -> Resume:
        resume = self.repo.create(user_id, clean_resume_data(data))
        print(f"[ResumeService] 创建简历: {resume.id}")
        return resume

    def update_resume(self, user_id: str, data: Dict[str, Any]) -> Resume:
        """
        更新简历：不存在则创建，存在则原地修改
        只修改 data 中提供的字段

        Args:
            user_id: 用户 UUID
            data: 简历字段

        Returns:
            保存后的 Resume 对象
        """
        existing = self.get_resume(user_id)
        if existing is None:
            return self.create_resume(user_id, data)

        resume = self.repo.update(existing, clean_resume_data(data))
        print(f"[ResumeService] 更新简历: {resume.id}")
        return resume

    def get_courses(self, resume_id: str) -> List[ResumeCourse]:
        return self.repo.get_courses(resume_id)

    def add_course(
        self,
        resume_id: str,
        course_name: str,
        provider: str,
        date_completed: Any,
        certificate_url: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> ResumeCourse:
        """
        为简历添加课程
        提供 user_id 时简历必须属于该用户

        Raises:
            InputValidationError: 缺少课程名或机构、日期格式错误
            NotFoundError: 简历不存在或不属于该用户
        """
        if is_missing(course_name) or is_missing(provider):
            raise InputValidationError("course_name and provider are required")
        completed = parse_date(date_completed, "date_completed")

        resume = self.repo.get_by_id(resume_id)
        if resume is None or (user_id is not None and resume.user_id != user_id):
            raise NotFoundError(f"Resume not found: {resume_id}")

        course = self.repo.add_course(ResumeCourse(
            resume_id=resume_id,
            course_name=course_name,
            provider=provider,
            date_completed=completed,
            certificate_url=certificate_url
        ))
        print(f"[ResumeService] 添加课程: {course.course_name} -> 简历 {resume_id}")
        return course

    def delete_course(self, course_id: str) -> bool:
        return self.repo.delete_course(course_id)
