"""
家政劳工申请 Repository
"""

from typing import List, Optional

from sqlmodel import Session, select, col

from labor_portal.models import DomesticLaborRequest


class DomesticRepository:
    """
    家政劳工申请数据访问对象
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def create(self, request: DomesticLaborRequest) -> DomesticLaborRequest:
        self.session.add(request)
        self.session.commit()
        self.session.refresh(request)
        return request

    def get_by_id(self, request_id: str) -> Optional[DomesticLaborRequest]:
        return self.session.get(DomesticLaborRequest, request_id)

    def get_by_user(self, user_id: str) -> List[DomesticLaborRequest]:
        statement = (
            select(DomesticLaborRequest)
            .where(DomesticLaborRequest.user_id == user_id)
            .order_by(col(DomesticLaborRequest.created_at).desc())
        )
        return self.session.exec(statement).all()

    def update(self, request: DomesticLaborRequest) -> DomesticLaborRequest:
        self.session.add(request)
        self.session.commit()
        self.session.refresh(request)
        return request
