"""
劳动合同服务
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlmodel import Session

from labor_portal.exceptions import InputValidationError, DomainStateError, NotFoundError
from labor_portal.models import EmploymentContract, ContractStatus, utc_now
from labor_portal.repositories import ContractRepository
from labor_portal.services.utils import require_fields, parse_date, parse_optional_date


class ContractService:
    """
    合同服务：查询、创建、终止
    合同状态只能 active -> ended
    """

    REQUIRED_FIELDS = ("user_id", "employer_name", "position", "salary", "start_date")

    def __init__(self, session: Session, clock: Callable[[], datetime] = utc_now):
        self.repo = ContractRepository(session)
        self.clock = clock

    def get_contracts(self, user_id: str) -> List[EmploymentContract]:
        return self.repo.get_by_user(user_id)

    def get_contract_by_id(self, contract_id: str) -> Optional[EmploymentContract]:
        return self.repo.get_by_id(contract_id)

    def create_contract(self, data: Dict[str, Any]) -> EmploymentContract:
        """
        创建合同，状态默认为 active

        Args:
            data: 合同字段，必填 user_id、employer_name、position、salary、start_date

        Returns:
            创建的 EmploymentContract 对象
        """
        require_fields(data, self.REQUIRED_FIELDS)
        try:
            salary = float(data["salary"])
        except (TypeError, ValueError):
            raise InputValidationError(f"Invalid salary: {data['salary']!r}")
        if salary < 0:
            raise InputValidationError("salary must not be negative")

        status = data.get("status") or ContractStatus.ACTIVE
        try:
            status = ContractStatus(status)
        except ValueError:
            raise InputValidationError(f"Invalid contract status: {status}")

        contract = EmploymentContract(
            user_id=data["user_id"],
            employer_name=data["employer_name"],
            position=data["position"],
            salary=salary,
            contract_type=data.get("contract_type"),
            start_date=parse_date(data["start_date"], "start_date"),
            end_date=parse_optional_date(data.get("end_date"), "end_date"),
            status=status
        )
        contract = self.repo.create(contract)
        print(f"[ContractService] 创建合同: {contract.id} (user {contract.user_id})")
        return contract

    def end_contract(self, contract_id: str, user_id: Optional[str] = None) -> EmploymentContract:
        """
        终止合同，结束日期写入当天
        提供 user_id 时只能终止该用户自己的合同

        Raises:
            NotFoundError: 合同不存在或不属于该用户
            DomainStateError: 合同已终止
        """
        contract = self.repo.get_by_id(contract_id)
        if contract is None or (user_id is not None and contract.user_id != user_id):
            raise NotFoundError(f"Contract not found: {contract_id}")
        if contract.status == ContractStatus.ENDED:
            raise DomainStateError("Contract already ended")

        contract.status = ContractStatus.ENDED
        contract.end_date = self.clock().date()
        contract = self.repo.update(contract)
        print(f"[ContractService] 终止合同: {contract.id}")
        return contract
