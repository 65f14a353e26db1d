"""
工单 Repository
"""

from typing import List, Optional

from sqlmodel import Session, select, col

from labor_portal.models import Ticket, TicketStatus


class TicketRepository:
    """
    工单数据访问对象
    """

    def __init__(self, session: Session):
        self.session = session

    def create(self, ticket: Ticket) -> Ticket:
        self.session.add(ticket)
        self.session.commit()
        self.session.refresh(ticket)
        return ticket

    def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        return self.session.get(Ticket, ticket_id)

    def get_by_number(self, ticket_number: str) -> Optional[Ticket]:
        statement = select(Ticket).where(Ticket.ticket_number == ticket_number)
        return self.session.exec(statement).first()

    def get_by_user(self, user_id: str) -> List[Ticket]:
        """
        获取用户的所有工单，最新创建的在前

        Args:
            user_id: 用户 UUID

        Returns:
            Ticket 对象列表
        """
        statement = (
            select(Ticket)
            .where(Ticket.user_id == user_id)
            .order_by(col(Ticket.created_at).desc())
        )
        return self.session.exec(statement).all()

    def list_open(self) -> List[Ticket]:
        """获取所有 open 状态的工单（工单跟进触发器使用）"""
        statement = select(Ticket).where(Ticket.status == TicketStatus.OPEN)
        return self.session.exec(statement).all()

    def update(self, ticket: Ticket) -> Ticket:
        self.session.add(ticket)
        self.session.commit()
        self.session.refresh(ticket)
        return ticket
