"""NotificationReconciler 单元测试

测试内容：
1. 5 条评论（本人 2 条、他人 3 条）-> 未读 3；标记一条后 -> 2
2. 已读回执幂等
3. 任意数据状态下 refresh 结果等于 {他人评论} - {已读}
4. 查询失败保留旧值；写入失败抛出 StoreError 且计数不变
5. close() 之后的刷新结果被丢弃
6. watch() 订阅作用域内的新评论并推送新计数
"""

import asyncio
import random

import aiosqlite
import pytest
import pytest_asyncio
from projecthub.core.exceptions import AuthenticationRequiredError, StoreError
from projecthub.core.models import Session
from projecthub.core.notifications import NotificationReconciler
from projecthub.gateway.services.comment_service import CommentService
from projecthub.gateway.services.project_service import ProjectService
from projecthub.gateway.services.task_service import TaskService


@pytest_asyncio.fixture
async def project(backend, alice):
    return await ProjectService(backend, alice).create_project("通知测试项目")


@pytest_asyncio.fixture
async def other_project(backend, alice):
    return await ProjectService(backend, alice).create_project("另一个项目")


async def add_comments(backend, session: Session, project_id: str, n: int) -> list:
    service = CommentService(backend, session)
    return [await service.add_project_comment(project_id, f"评论 {i}") for i in range(n)]


class TestRefresh:
    """未读数重算"""

    async def test_documented_scenario(self, backend, alice, bob, project):
        await add_comments(backend, bob, project.id, 2)
        others = await add_comments(backend, alice, project.id, 3)

        async with NotificationReconciler(backend, bob, project.id) as reconciler:
            assert await reconciler.refresh() == 3
            await reconciler.mark_as_read(others[0].id)
            assert reconciler.unread_count == 2
            # 重算结果与乐观减一一致
            assert await reconciler.refresh() == 2

    async def test_scope_includes_task_comments(self, backend, alice, bob, project):
        task = await TaskService(backend, alice).create_task(project.id, "任务")
        await CommentService(backend, alice).add_task_comment(task.id, "任务评论")
        await add_comments(backend, alice, project.id, 1)

        async with NotificationReconciler(backend, bob, project.id) as reconciler:
            assert await reconciler.refresh() == 2

    async def test_project_scope_excludes_other_projects(
        self, backend, alice, bob, project, other_project
    ):
        await add_comments(backend, alice, project.id, 1)
        await add_comments(backend, alice, other_project.id, 2)

        async with NotificationReconciler(backend, bob, project.id) as scoped:
            assert await scoped.refresh() == 1
        async with NotificationReconciler(backend, bob) as everything:
            assert await everything.refresh() == 3

    @pytest.mark.parametrize("seed", [1, 7, 42])
    async def test_matches_brute_force_count(self, backend, alice, bob, project, seed):
        rng = random.Random(seed)
        comments = []
        for i in range(12):
            author = rng.choice([alice, bob])
            comments.extend(await add_comments(backend, author, project.id, 1))

        async with NotificationReconciler(backend, bob, project.id) as reconciler:
            read = [c for c in comments if rng.random() < 0.4]
            for comment in read:
                await reconciler.mark_as_read(comment.id)
            read_ids = {c.id for c in read}
            expected = sum(
                1 for c in comments if c.created_by != bob.user_id and c.id not in read_ids
            )
            assert await reconciler.refresh() == expected

    async def test_without_session_is_zero(self, backend, alice, project):
        await add_comments(backend, alice, project.id, 2)
        async with NotificationReconciler(backend, None, project.id) as reconciler:
            assert await reconciler.refresh() == 0

    async def test_refresh_failure_keeps_previous_value(
        self, backend, alice, bob, project, monkeypatch
    ):
        await add_comments(backend, alice, project.id, 2)
        async with NotificationReconciler(backend, bob, project.id) as reconciler:
            assert await reconciler.refresh() == 2

            async def broken(*args, **kwargs):
                raise aiosqlite.OperationalError("database is locked")

            monkeypatch.setattr(
                backend.stores.comment_store, "list_comments_in_scope", broken
            )
            assert await reconciler.refresh() == 2
            assert reconciler.unread_count == 2

    async def test_results_after_close_are_ignored(self, backend, alice, bob, project):
        await add_comments(backend, alice, project.id, 1)
        reconciler = NotificationReconciler(backend, bob, project.id)
        assert await reconciler.refresh() == 1
        await reconciler.close()

        await add_comments(backend, alice, project.id, 3)
        assert await reconciler.refresh() == 1
        assert reconciler.closed


class TestMarkAsRead:
    """标记已读"""

    async def test_idempotent_receipt(self, backend, alice, bob, project):
        (comment,) = await add_comments(backend, alice, project.id, 1)
        async with NotificationReconciler(backend, bob, project.id) as reconciler:
            await reconciler.mark_as_read(comment.id)
            await reconciler.mark_as_read(comment.id)
        count = await backend.stores.read_status_store.count_read_receipts(
            bob.user_id, comment.id
        )
        assert count == 1

    async def test_count_never_negative(self, backend, alice, bob, project):
        (comment,) = await add_comments(backend, alice, project.id, 1)
        async with NotificationReconciler(backend, bob, project.id) as reconciler:
            await reconciler.mark_as_read(comment.id)
            await reconciler.mark_as_read(comment.id)
            assert reconciler.unread_count == 0

    async def test_requires_session(self, backend, alice, project):
        (comment,) = await add_comments(backend, alice, project.id, 1)
        async with NotificationReconciler(backend, None) as reconciler:
            with pytest.raises(AuthenticationRequiredError):
                await reconciler.mark_as_read(comment.id)

    async def test_store_failure_leaves_count(
        self, backend, alice, bob, project, monkeypatch
    ):
        (comment,) = await add_comments(backend, alice, project.id, 1)
        async with NotificationReconciler(backend, bob, project.id) as reconciler:
            await reconciler.refresh()

            async def broken(*args, **kwargs):
                raise aiosqlite.OperationalError("disk I/O error")

            monkeypatch.setattr(backend.stores.read_status_store, "upsert_read_status", broken)
            with pytest.raises(StoreError) as exc_info:
                await reconciler.mark_as_read(comment.id)
            assert exc_info.value.recoverable is True
            assert reconciler.unread_count == 1


class TestWatch:
    """订阅新评论"""

    async def test_pushes_new_count_on_comment(self, backend, alice, bob, project):
        updates: asyncio.Queue[int] = asyncio.Queue()

        async def on_change(count: int) -> None:
            await updates.put(count)

        async with NotificationReconciler(backend, bob, project.id) as reconciler:
            await reconciler.watch(on_change)
            await add_comments(backend, alice, project.id, 1)
            assert await asyncio.wait_for(updates.get(), timeout=2.0) == 1
            await add_comments(backend, alice, project.id, 1)
            assert await asyncio.wait_for(updates.get(), timeout=2.0) == 2

    async def test_ignores_other_projects(
        self, backend, alice, bob, project, other_project
    ):
        updates: asyncio.Queue[int] = asyncio.Queue()

        async def on_change(count: int) -> None:
            await updates.put(count)

        async with NotificationReconciler(backend, bob, project.id) as reconciler:
            await reconciler.watch(on_change)
            await add_comments(backend, alice, other_project.id, 1)
            await add_comments(backend, alice, project.id, 1)
            # 只收到本项目评论触发的一次更新
            assert await asyncio.wait_for(updates.get(), timeout=2.0) == 1
            assert updates.empty()

    async def test_callback_error_does_not_stop_watch(self, backend, alice, bob, project):
        calls: list[int] = []
        second = asyncio.Event()

        async def on_change(count: int) -> None:
            calls.append(count)
            if len(calls) == 1:
                raise RuntimeError("render failed")
            second.set()

        async with NotificationReconciler(backend, bob, project.id) as reconciler:
            await reconciler.watch(on_change)
            await add_comments(backend, alice, project.id, 1)
            await add_comments(backend, alice, project.id, 1)
            await asyncio.wait_for(second.wait(), timeout=2.0)
        assert calls[-1] == 2

    async def test_close_releases_subscription(self, backend, bob, project):
        reconciler = NotificationReconciler(backend, bob, project.id)
        subscription = await reconciler.watch()
        assert backend.feed.subscriber_count == 1

        await reconciler.close()
        await reconciler.close()
        assert subscription.closed
        assert backend.feed.subscriber_count == 0

    async def test_closing_subscription_stops_watch(self, backend, bob, project):
        reconciler = NotificationReconciler(backend, bob, project.id)
        subscription = await reconciler.watch()
        subscription.close()
        await asyncio.sleep(0)
        assert backend.feed.subscriber_count == 0
        await reconciler.close()
