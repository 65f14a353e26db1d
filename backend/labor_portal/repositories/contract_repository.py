"""
劳动合同 Repository
提供 employment_contracts 的增删改查操作
"""

from typing import List, Optional

from sqlmodel import Session, select, col

from labor_portal.models import EmploymentContract, ContractStatus


class ContractRepository:
    """
    劳动合同数据访问对象
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def create(self, contract: EmploymentContract) -> EmploymentContract:
        """
        保存新合同

        Args:
            contract: 未持久化的 EmploymentContract 对象

        Returns:
            持久化后的 EmploymentContract 对象
        """
        self.session.add(contract)
        self.session.commit()
        self.session.refresh(contract)
        return contract

    def get_by_id(self, contract_id: str) -> Optional[EmploymentContract]:
        return self.session.get(EmploymentContract, contract_id)

    def get_by_user(self, user_id: str) -> List[EmploymentContract]:
        """
        获取用户的所有合同，最新创建的在前

        Args:
            user_id: 用户 UUID

        Returns:
            EmploymentContract 对象列表
        """
        statement = (
            select(EmploymentContract)
            .where(EmploymentContract.user_id == user_id)
            .order_by(col(EmploymentContract.created_at).desc())
        )
        return self.session.exec(statement).all()

    def get_active_by_user(self, user_id: str) -> List[EmploymentContract]:
        """
        获取用户的所有 active 合同，最新创建的在前

        Args:
            user_id: 用户 UUID

        Returns:
            EmploymentContract 对象列表
        """
        statement = (
            select(EmploymentContract)
            .where(
                EmploymentContract.user_id == user_id,
                EmploymentContract.status == ContractStatus.ACTIVE
            )
            .order_by(col(EmploymentContract.created_at).desc())
        )
        return self.session.exec(statement).all()

    def list_active_with_end_date(self) -> List[EmploymentContract]:
        """获取所有填写了结束日期的 active 合同（合同到期触发器使用）"""
        statement = select(EmploymentContract).where(
            EmploymentContract.status == ContractStatus.ACTIVE,
            col(EmploymentContract.end_date).is_not(None)
        )
        return self.session.exec(statement).all()

    def update(self, contract: EmploymentContract) -> EmploymentContract:
        self.session.add(contract)
        self.session.commit()
        self.session.refresh(contract)
        return contract
