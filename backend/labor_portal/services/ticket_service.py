"""
工单服务
状态流转：open -> closed，关闭后不可重开
"""

from typing import List

from sqlmodel import Session

from labor_portal.exceptions import InputValidationError, DomainStateError, NotFoundError
from labor_portal.models import Ticket, TicketStatus, new_id
from labor_portal.repositories import TicketRepository
from labor_portal.services.utils import is_missing


def make_ticket_number(ticket_id: str) -> str:
    """对用户展示的工单编号，取自工单 ID 前 8 位"""
    return f"TKT-{ticket_id[:8].upper()}"


class TicketService:
    """
    工单服务：查询、开单、关单
    """

    def __init__(self, session: Session):
        self.repo = TicketRepository(session)

    def get_tickets(self, user_id: str) -> List[Ticket]:
        return self.repo.get_by_user(user_id)

    def open_ticket(self, user_id: str, title: str, category: str) -> Ticket:
        """
        开新工单

        Args:
            user_id: 用户 UUID
            title: 标题
            category: 分类

        Returns:
            创建的 Ticket 对象
        """
        if is_missing(title) or is_missing(category):
            raise InputValidationError("title and category are required")

        ticket_id = new_id()
        ticket = self.repo.create(Ticket(
            id=ticket_id,
            user_id=user_id,
            ticket_number=make_ticket_number(ticket_id),
            title=title,
            category=category,
            status=TicketStatus.OPEN
        ))
        print(f"[TicketService] 新工单: {ticket.ticket_number}")
        return ticket

    def close_ticket(self, user_id: str, ticket_id: str) -> Ticket:
        """
        关闭工单
        ticket_id 可以是工单 ID，也可以是工单编号

        Raises:
            NotFoundError: 工单不存在或不属于该用户
            DomainStateError: 工单已关闭
        """
        ticket = self.repo.get_by_id(ticket_id) or self.repo.get_by_number(ticket_id)
        if ticket is None or ticket.user_id != user_id:
            raise NotFoundError(f"Ticket not found: {ticket_id}")
        if ticket.status == TicketStatus.CLOSED:
            raise DomainStateError("Ticket already closed")

        ticket.status = TicketStatus.CLOSED
        ticket = self.repo.update(ticket)
        print(f"[TicketService] 关闭工单: {ticket.ticket_number}")
        return ticket
