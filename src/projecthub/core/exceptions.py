"""ProjectHub 异常体系

三类错误：
1. 需要身份（未登录）-- 该操作直接终止
2. 数据存储错误 -- 记录日志并上报，不致命
3. 输入校验错误 -- 在写入之前拦截
"""


class ProjectHubError(Exception):
    """ProjectHub 基础异常"""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 用户重试或修改输入后是否可能成功
        """
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable


class AuthenticationRequiredError(ProjectHubError):
    """当前操作需要已登录身份"""

    code = "AUTHENTICATION_REQUIRED"

    def __init__(self, message: str = "User not authenticated") -> None:
        super().__init__(message, recoverable=False)


class StoreError(ProjectHubError):
    """数据存储读写失败

    原始异常保存在 original_error，内存中的既有状态保持不变。
    """

    code = "STORE_ERROR"

    def __init__(self, operation: str, original_error: Exception) -> None:
        """
        Args:
            operation: 失败的操作名（如 create_task）
            original_error: 原始异常
        """
        super().__init__(
            f"{operation} failed: {type(original_error).__name__}",
            recoverable=True,
        )
        self.operation = operation
        self.original_error = original_error


class FormValidationError(ProjectHubError):
    """输入校验失败（如必填字段为空）"""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, recoverable=True)
        self.field = field


class NotFoundError(ProjectHubError):
    """目标记录不存在"""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} with id {entity_id} does not exist")
        self.code = f"{entity.upper()}_NOT_FOUND"
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(ProjectHubError):
    """与已有数据冲突（如重复邀请）"""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
