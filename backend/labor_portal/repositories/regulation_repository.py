"""
劳动法规 Repository
法规为只读参考数据
"""

from typing import List

from sqlmodel import Session, select, col

from labor_portal.models import WorkRegulation


class RegulationRepository:
    """
    法规数据访问对象
    """

    def __init__(self, session: Session):
        self.session = session

    def get_all(self) -> List[WorkRegulation]:
        statement = select(WorkRegulation).order_by(col(WorkRegulation.title).asc())
        return self.session.exec(statement).all()

    def get_by_category(self, category: str) -> List[WorkRegulation]:
        statement = select(WorkRegulation).where(WorkRegulation.category == category)
        return self.session.exec(statement).all()
