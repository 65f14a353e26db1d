"""
劳动法规服务（只读）
"""

from typing import List

from sqlmodel import Session

from labor_portal.models import WorkRegulation
from labor_portal.repositories import RegulationRepository


class RegulationService:

    def __init__(self, session: Session):
        self.repo = RegulationRepository(session)

    def get_regulations(self) -> List[WorkRegulation]:
        return self.repo.get_all()

    def get_regulations_by_category(self, category: str) -> List[WorkRegulation]:
        return self.repo.get_by_category(category)

    def search_regulations(self, query: str) -> List[WorkRegulation]:
        """
        按标题、描述、正文做大小写不敏感的子串搜索
        空查询返回全部法规
        """
        needle = (query or "").strip().lower()
        regulations = self.repo.get_all()
        if not needle:
            return regulations
        return [
            regulation for regulation in regulations
            if needle in regulation.title.lower()
            or needle in regulation.description.lower()
            or needle in regulation.content.lower()
        ]
