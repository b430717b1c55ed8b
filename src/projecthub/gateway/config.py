"""GatewayConfig -- HTTP 服务配置加载

从环境变量加载，非法的整数值记录警告后回退到默认值，不阻塞启动。
"""

import os

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()


class GatewayConfig(BaseModel):
    """Gateway 配置 -- 从环境变量加载

    环境变量:
        PROJECTHUB_PUBLIC_BASE_URL: 附件公开 URL 前缀（默认 http://localhost:8000）
        PROJECTHUB_SESSION_TTL_HOURS: 访问令牌有效期（小时，默认 168）
        PROJECTHUB_MAX_UPLOAD_BYTES: 单个上传文件大小上限（默认 10 MiB）
    """

    public_base_url: str = Field(
        default="http://localhost:8000",
        description="附件公开 URL 前缀",
    )
    session_ttl_hours: int = Field(
        default=24 * 7,
        ge=1,
        description="访问令牌有效期（小时）",
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="单个上传文件大小上限（字节）",
    )


def _int_from_env(env_var: str, field: str, kwargs: dict) -> None:
    val = os.environ.get(env_var)
    if not val:
        return
    try:
        kwargs[field] = int(val)
    except ValueError:
        log.warning(
            "invalid_int_config",
            env_var=env_var,
            value=val,
            fallback=GatewayConfig.model_fields[field].default,
        )


def load_gateway_config() -> GatewayConfig:
    """从环境变量加载 Gateway 配置

    Returns:
        GatewayConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("PROJECTHUB_PUBLIC_BASE_URL"):
        kwargs["public_base_url"] = val

    _int_from_env("PROJECTHUB_SESSION_TTL_HOURS", "session_ttl_hours", kwargs)
    _int_from_env("PROJECTHUB_MAX_UPLOAD_BYTES", "max_upload_bytes", kwargs)

    return GatewayConfig(**kwargs)
