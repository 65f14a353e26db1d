"""
简历 Repository
提供 resumes 和 resume_courses 的增删改查操作
"""

from typing import List, Optional, Dict, Any

from sqlmodel import Session, select, col

from labor_portal.models import Resume, ResumeCourse


class ResumeRepository:
    """
    简历数据访问对象
    封装所有与 resumes 和 resume_courses 表相关的数据库操作
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    # ==================== Resume 操作 ====================

    def create(self, user_id: str, data: Dict[str, Any]) -> Resume:
        """
        创建新简历

        Args:
            user_id: 用户 UUID
            data: 简历字段

        Returns:
            创建的 Resume 对象
        """
        resume = Resume(user_id=user_id, **data)
        self.session.add(resume)
        self.session.commit()
        self.session.refresh(resume)
        return resume

    def get_by_id(self, resume_id: str) -> Optional[Resume]:
        return self.session.get(Resume, resume_id)

    def get_latest_by_user(self, user_id: str) -> Optional[Resume]:
        """
        获取用户最新的简历

        Args:
            user_id: 用户 UUID

        Returns:
            Resume 对象，不存在则返回 None
        """
        statement = (
            select(Resume)
            .where(Resume.user_id == user_id)
            .order_by(col(Resume.created_at).desc())
        )
        return self.session.exec(statement).first()

    def list_all(self) -> List[Resume]:
        return self.session.exec(select(Resume)).all()

    def update(self, resume: Resume, data: Dict[str, Any]) -> Resume:
        """
        原地更新简历，只修改 data 中出现的字段

        Args:
            resume: 已存在的 Resume 对象
            data: 要更新的字段

        Returns:
            更新后的 Resume 对象
        """
        for key, value in data.items():
            setattr(resume, key, value)
        self.session.add(resume)
        self.session.commit()
        self.session.refresh(resume)
        return resume

    # ==================== ResumeCourse 操作 ====================

    def add_course(self, course: ResumeCourse) -> ResumeCourse:
        self.session.add(course)
        self.session.commit()
        self.session.refresh(course)
        return course

    def get_courses(self, resume_id: str) -> List[ResumeCourse]:
        """
        获取简历的所有课程，最近完成的在前

        Args:
            resume_id: 简历 ID

        Returns:
            ResumeCourse 对象列表
        """
        statement = (
            select(ResumeCourse)
            .where(ResumeCourse.resume_id == resume_id)
            .order_by(col(ResumeCourse.date_completed).desc())
        )
        return self.session.exec(statement).all()

    def delete_course(self, course_id: str) -> bool:
        """
        删除课程

        Args:
            course_id: 课程 ID

        Returns:
            删除成功返回 True，不存在返回 False
        """
        course = self.session.get(ResumeCourse, course_id)
        if course is None:
            return False
        self.session.delete(course)
        self.session.commit()
        return True
