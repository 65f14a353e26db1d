"""
异常体系

- InputValidationError：缺少/格式错误的字段、非法用户 ID（HTTP 400）
- UnknownActionError：未知的智能体动作名（HTTP 400）
- DomainStateError：当前状态不允许该操作，如重复取消（HTTP 500）
- NotFoundError：前置记录不存在，属于 DomainStateError（HTTP 500）
- UpstreamError：数据库或外部 API 失败，附带提供方错误文本（HTTP 500）
"""


class LaborPortalError(Exception):
    """所有业务异常的基类"""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputValidationError(LaborPortalError):
    """输入校验失败"""

    status_code = 400


class UnknownActionError(LaborPortalError):
    """未知的智能体动作"""

    status_code = 400

    def __init__(self, action: str):
        super().__init__(f"Unknown agent action: {action}")
        self.action = action


class DomainStateError(LaborPortalError):
    """领域状态错误"""


class NotFoundError(DomainStateError):
    """记录不存在"""


class UpstreamError(LaborPortalError):
    """外部服务失败"""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider} error: {message}")
        self.provider = provider
