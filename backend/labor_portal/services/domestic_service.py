"""
家政劳工申请服务
"""

from typing import Any, Dict, List, Optional

from sqlmodel import Session

from labor_portal.exceptions import InputValidationError, NotFoundError
from labor_portal.models import DomesticLaborRequest, DomesticRequestStatus
from labor_portal.repositories import DomesticRepository
from labor_portal.services.utils import is_missing


class DomesticService:
    """
    家政劳工申请服务：查询、提交、更新状态
    """

    def __init__(self, session: Session):
        self.repo = DomesticRepository(session)

    def get_domestic_requests(self, user_id: str) -> List[DomesticLaborRequest]:
        return self.repo.get_by_user(user_id)

    def create_domestic_request(
        self,
        user_id: str,
        request_type: str,
        worker_nationality: str,
        request_details: Optional[Dict[str, Any]] = None
    ) -> DomesticLaborRequest:
        """
        提交申请，状态为 pending

        Args:
            user_id: 用户 UUID
            request_type: 申请类型（如 "استقدام عاملة منزلية"）
            worker_nationality: 劳工国籍
            request_details: 附加信息（可选）

        Returns:
            创建的 DomesticLaborRequest 对象
        """
        if is_missing(request_type) or is_missing(worker_nationality):
            raise InputValidationError("request_type and worker_nationality are required")
        if request_details is not None and not isinstance(request_details, dict):
            raise InputValidationError("request_details must be an object")

        request = self.repo.create(DomesticLaborRequest(
            user_id=user_id,
            request_type=request_type,
            worker_nationality=worker_nationality,
            request_details=request_details or {},
            status=DomesticRequestStatus.PENDING
        ))
        print(f"[DomesticService] 提交申请: {request.id}")
        return request

    def update_request_status(self, request_id: str, status: str) -> DomesticLaborRequest:
        try:
            new_status = DomesticRequestStatus(status)
        except ValueError:
            raise InputValidationError(f"Invalid domestic request status: {status}")

        request = self.repo.get_by_id(request_id)
        if request is None:
            raise NotFoundError(f"Domestic request not found: {request_id}")

        request.status = new_status
        return self.repo.update(request)
