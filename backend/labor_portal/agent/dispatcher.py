"""
智能体动作分发器

流程：
1. 查表：未知动作 -> UnknownActionError
2. 校验：必填字段缺失（缺省、None、空字符串）或 user_id 格式错误 -> InputValidationError
3. 调用服务
4. 无论成功失败都写一条 agent_actions_log，失败时先回滚未提交的修改，写完日志再抛出
"""

from typing import Any, Dict, Optional

from sqlmodel import Session

from labor_portal.agent.actions import ACTION_REGISTRY, AgentAction, ActionSpec, available_actions
from labor_portal.exceptions import InputValidationError, UnknownActionError
from labor_portal.repositories import ActionLogRepository
from labor_portal.services.utils import is_missing, is_valid_uuid, to_jsonable


class ActionDispatcher:
    """
    动作分发器

    使用示例：
        dispatcher = ActionDispatcher(session)
        result = dispatcher.dispatch("book_appointment", {...})
    """

    def __init__(self, session: Session):
        """
        Args:
            session: SQLModel 数据库会话，服务调用和审计日志共用
        """
        self.session = session
        self.log_repo = ActionLogRepository(session)

    @staticmethod
    def available_actions():
        return available_actions()

    def _resolve(self, action: str) -> ActionSpec:
        try:
            return ACTION_REGISTRY[AgentAction(action)]
        except ValueError:
            raise UnknownActionError(action)

    @staticmethod
    def _validate(spec: ActionSpec, payload: Dict[str, Any]) -> None:
        missing = [name for name in spec.required if is_missing(payload.get(name))]
        if missing:
            raise InputValidationError(f"Missing required fields: {', '.join(missing)}")

        user_id = payload.get("user_id")
        if not is_missing(user_id) and not is_valid_uuid(user_id):
            raise InputValidationError(f"Invalid user_id format: {user_id}")

    def _log(self, action: str, payload: Dict[str, Any], output: Any, success: bool) -> None:
        user_id = payload.get("user_id")
        self.log_repo.append(
            action_type=action,
            input_json=to_jsonable(payload),
            output_json=output,
            success=success,
            user_id=user_id if isinstance(user_id, str) and is_valid_uuid(user_id) else None
        )

    def dispatch(self, action: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """
        执行动作并写审计日志

        Args:
            action: 动作名
            payload: 动作参数

        Returns:
            可 JSON 序列化的处理结果

        Raises:
            UnknownActionError: 未知动作
            InputValidationError: 参数校验失败
            LaborPortalError: 服务层抛出的其他业务异常
        """
        payload = dict(payload or {})
        action_name = action.value if isinstance(action, AgentAction) else str(action)
        print(f"[ActionDispatcher] 执行动作: {action_name}")

        try:
            spec = self._resolve(action)
            self._validate(spec, payload)
            result = to_jsonable(spec.handler(self.session, payload))
        except Exception as e:
            # 丢弃失败动作可能残留的未提交修改，保证审计日志能写入
            self.session.rollback()
            print(f"[ActionDispatcher] 动作失败: {action_name} - {e}")
            self._log(action_name, payload, {"error": str(e)}, success=False)
            raise

        self._log(action_name, payload, result, success=True)
        return result
