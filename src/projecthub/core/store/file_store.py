"""FileStore 文件系统实现

按路径保存上传文件，并给出公开访问 URL（由 gateway 以静态文件方式提供）。
"""

import hashlib
from pathlib import Path


def compute_hash_and_size(content: bytes) -> tuple[str, int]:
    """计算 SHA-256 hash 和内容大小

    Args:
        content: 原始内容字节

    Returns:
        (sha256_hex, size_bytes) 元组
    """
    return hashlib.sha256(content).hexdigest(), len(content)


class LocalFileStore:
    """FileStore 的本地文件系统实现"""

    def __init__(self, files_dir: Path, public_base_url: str) -> None:
        self._files_dir = files_dir
        self._public_base_url = public_base_url.rstrip("/")

    @property
    def files_dir(self) -> Path:
        return self._files_dir

    async def upload(self, path: str, content: bytes) -> tuple[str, int]:
        """在 path 下保存文件，已存在时覆盖

        Returns:
            (sha256_hex, size_bytes) 元组
        """
        file_path = self._resolve(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(content)
        return compute_hash_and_size(content)

    def get_public_url(self, path: str) -> str:
        """path 对应的公开 URL"""
        self._resolve(path)
        return f"{self._public_base_url}/files/{path.lstrip('/')}"

    async def download(self, path: str) -> bytes | None:
        """读取文件内容，不存在时返回 None"""
        file_path = self._resolve(path)
        if not file_path.is_file():
            return None
        return file_path.read_bytes()

    def _resolve(self, path: str) -> Path:
        """将相对路径解析到 files_dir 之下，拒绝越界路径"""
        base = self._files_dir.resolve()
        file_path = (base / path.lstrip("/")).resolve()
        if not file_path.is_relative_to(base) or file_path == base:
            raise ValueError(f"invalid file path: {path}")
        return file_path
