"""SQLite 数据库初始化

PRAGMA 配置 + 九张表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# profiles 表 DDL（id 即身份提供方的用户 ID）
_PROFILES_DDL = """
CREATE TABLE IF NOT EXISTS profiles (
    id          TEXT PRIMARY KEY,
    email       TEXT NOT NULL,
    full_name   TEXT,
    avatar_url  TEXT,
    created_at  TEXT,
    updated_at  TEXT
);
"""

# sessions 表 DDL（本地身份提供方签发的访问令牌）
_SESSIONS_DDL = """
CREATE TABLE IF NOT EXISTS sessions (
    token       TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL,
    created_at  TEXT NOT NULL,
    expires_at  TEXT NOT NULL,

    FOREIGN KEY (user_id) REFERENCES profiles(id)
);
"""

# projects 表 DDL
_PROJECTS_DDL = """
CREATE TABLE IF NOT EXISTS projects (
    id           TEXT PRIMARY KEY,
    title        TEXT NOT NULL,
    description  TEXT NOT NULL DEFAULT '',
    goals        TEXT NOT NULL DEFAULT '',
    deadline     TEXT,
    status       TEXT NOT NULL DEFAULT 'todo',
    created_by   TEXT NOT NULL,
    owner_id     TEXT NOT NULL,
    created_at   TEXT NOT NULL,
    updated_at   TEXT NOT NULL
);
"""

# project_members 表 DDL
_MEMBERS_DDL = """
CREATE TABLE IF NOT EXISTS project_members (
    id          TEXT PRIMARY KEY,
    project_id  TEXT NOT NULL,
    user_id     TEXT NOT NULL,
    role        TEXT NOT NULL DEFAULT 'member',
    joined_at   TEXT NOT NULL,

    FOREIGN KEY (project_id) REFERENCES projects(id),
    FOREIGN KEY (user_id) REFERENCES profiles(id)
);
"""

# project_invitations 表 DDL
_INVITATIONS_DDL = """
CREATE TABLE IF NOT EXISTS project_invitations (
    id           TEXT PRIMARY KEY,
    project_id   TEXT NOT NULL,
    email        TEXT NOT NULL,
    role         TEXT NOT NULL DEFAULT 'member',
    status       TEXT NOT NULL DEFAULT 'pending',
    invited_by   TEXT NOT NULL,
    invited_at   TEXT NOT NULL,
    expires_at   TEXT,
    accepted_at  TEXT,

    FOREIGN KEY (project_id) REFERENCES projects(id)
);
"""

# tasks 表 DDL
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id               TEXT PRIMARY KEY,
    project_id       TEXT NOT NULL,
    title            TEXT NOT NULL,
    description      TEXT NOT NULL DEFAULT '',
    deadline         TEXT,
    priority         TEXT DEFAULT 'medium',
    status           TEXT NOT NULL DEFAULT 'todo',
    file_url         TEXT,
    file_name        TEXT,
    created_by       TEXT NOT NULL,
    created_by_name  TEXT NOT NULL,
    created_at       TEXT NOT NULL,
    updated_at       TEXT NOT NULL,

    FOREIGN KEY (project_id) REFERENCES projects(id)
);
"""

# comments 表 DDL（project_id 与 task_id 恰好其一非空）
_COMMENTS_DDL = """
CREATE TABLE IF NOT EXISTS comments (
    id               TEXT PRIMARY KEY,
    project_id       TEXT,
    task_id          TEXT,
    content          TEXT NOT NULL,
    created_by       TEXT NOT NULL,
    created_by_name  TEXT NOT NULL,
    created_at       TEXT NOT NULL,

    CHECK ((project_id IS NULL) <> (task_id IS NULL)),
    FOREIGN KEY (project_id) REFERENCES projects(id),
    FOREIGN KEY (task_id) REFERENCES tasks(id)
);
"""

# comment_read_status 表 DDL
_READ_STATUS_DDL = """
CREATE TABLE IF NOT EXISTS comment_read_status (
    user_id     TEXT NOT NULL,
    comment_id  TEXT NOT NULL,
    read_at     TEXT NOT NULL,
    created_at  TEXT NOT NULL,

    PRIMARY KEY (user_id, comment_id),
    FOREIGN KEY (comment_id) REFERENCES comments(id)
);
"""

# activity_logs 表 DDL
_ACTIVITY_LOGS_DDL = """
CREATE TABLE IF NOT EXISTS activity_logs (
    id          TEXT PRIMARY KEY,
    project_id  TEXT NOT NULL,
    user_id     TEXT NOT NULL,
    user_name   TEXT NOT NULL,
    action      TEXT NOT NULL,
    details     TEXT NOT NULL DEFAULT '',
    created_at  TEXT NOT NULL,

    FOREIGN KEY (project_id) REFERENCES projects(id)
);
"""

_INDEXES = [
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_profiles_email ON profiles(email);",
    "CREATE INDEX IF NOT EXISTS idx_sessions_user_id ON sessions(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_projects_created_at ON projects(created_at DESC);",
    (
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_members_project_user "
        "ON project_members(project_id, user_id);"
    ),
    # 同一项目同一邮箱最多一条 pending 邀请
    (
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_invitations_pending "
        "ON project_invitations(project_id, email) WHERE status = 'pending';"
    ),
    "CREATE INDEX IF NOT EXISTS idx_tasks_project_id ON tasks(project_id);",
    "CREATE INDEX IF NOT EXISTS idx_comments_project_id ON comments(project_id);",
    "CREATE INDEX IF NOT EXISTS idx_comments_task_id ON comments(task_id);",
    (
        "CREATE INDEX IF NOT EXISTS idx_activity_logs_project_ts "
        "ON activity_logs(project_id, created_at);"
    ),
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表（按外键依赖顺序）
    for ddl in (
        _PROFILES_DDL,
        _SESSIONS_DDL,
        _PROJECTS_DDL,
        _MEMBERS_DDL,
        _INVITATIONS_DDL,
        _TASKS_DDL,
        _COMMENTS_DDL,
        _READ_STATUS_DDL,
        _ACTIVITY_LOGS_DDL,
    ):
        await conn.execute(ddl)

    # 创建索引
    for idx_sql in _INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
