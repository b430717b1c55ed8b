"""任务与附件接口测试

测试内容：
1. 任务创建、空标题 422、未知项目 404
2. 列表排序 + 过期标记 + 未读评论数
3. 状态更新写入 task_status_updated 日志
4. 附件两步流程：上传 -> 创建任务时引用 url
5. 上传限制：空文件、超过大小上限
"""

from httpx import AsyncClient


class TestTasks:
    async def test_create_and_get(self, client: AsyncClient, alice_headers, project_id):
        resp = await client.post(
            f"/api/projects/{project_id}/tasks",
            json={"title": "写文案", "priority": "high", "deadline": "2030-03-01"},
            headers=alice_headers,
        )
        assert resp.status_code == 201
        task = resp.json()
        assert task["status"] == "todo"
        assert task["created_by_name"] == "Alice"
        assert task["file_url"] is None

        resp = await client.get(f"/api/tasks/{task['id']}", headers=alice_headers)
        assert resp.status_code == 200
        assert resp.json()["title"] == "写文案"

    async def test_blank_title_rejected(self, client: AsyncClient, alice_headers, project_id):
        resp = await client.post(
            f"/api/projects/{project_id}/tasks", json={"title": ""}, headers=alice_headers
        )
        assert resp.status_code == 422

        resp = await client.get(f"/api/projects/{project_id}/tasks", headers=alice_headers)
        assert resp.json()["tasks"] == []

    async def test_unknown_project_is_404(self, client: AsyncClient, alice_headers):
        resp = await client.post(
            "/api/projects/01JNONEXISTENT0000000000/tasks",
            json={"title": "孤儿任务"},
            headers=alice_headers,
        )
        assert resp.status_code == 404

    async def test_unknown_task_is_404(self, client: AsyncClient, alice_headers):
        resp = await client.get("/api/tasks/01JNONEXISTENT0000000000", headers=alice_headers)
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "TASK_NOT_FOUND"

    async def test_list_flags_and_unread(
        self, client: AsyncClient, alice_headers, bob_headers, project_id
    ):
        overdue = (
            await client.post(
                f"/api/projects/{project_id}/tasks",
                json={"title": "已过期", "deadline": "2020-01-01"},
                headers=alice_headers,
            )
        ).json()
        await client.post(
            f"/api/projects/{project_id}/tasks",
            json={"title": "无截止"},
            headers=alice_headers,
        )
        await client.post(
            f"/api/tasks/{overdue['id']}/comments",
            json={"content": "进度？"},
            headers=alice_headers,
        )

        tasks = (
            await client.get(f"/api/projects/{project_id}/tasks", headers=bob_headers)
        ).json()["tasks"]
        assert [t["title"] for t in tasks] == ["已过期", "无截止"]
        assert tasks[0]["overdue"] is True
        assert tasks[0]["days_left"] < 0
        assert tasks[0]["unread_comments"] == 1
        assert tasks[0]["status_label"] == "To Do"
        assert tasks[0]["priority_label"] == "Medium"
        assert tasks[1]["overdue"] is False
        assert tasks[1]["days_left"] is None

        # 作者本人的评论不算未读
        tasks = (
            await client.get(f"/api/projects/{project_id}/tasks", headers=alice_headers)
        ).json()["tasks"]
        assert tasks[0]["unread_comments"] == 0

    async def test_update_status(self, client: AsyncClient, alice_headers, project_id):
        task = (
            await client.post(
                f"/api/projects/{project_id}/tasks",
                json={"title": "部署"},
                headers=alice_headers,
            )
        ).json()

        resp = await client.post(
            f"/api/tasks/{task['id']}/status",
            json={"status": "done"},
            headers=alice_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "done"

        logs = (
            await client.get(
                "/api/activity", params={"project_id": project_id}, headers=alice_headers
            )
        ).json()
        assert logs["logs"][0]["action"] == "task_status_updated"
        assert logs["logs"][0]["details"] == 'Updated task "部署" status to done'


class TestAttachments:
    async def test_upload_then_attach(self, client: AsyncClient, alice_headers, project_id):
        resp = await client.post(
            f"/api/projects/{project_id}/files",
            params={"filename": "brief.v2.pdf"},
            content=b"%PDF-1.4 test",
            headers=alice_headers,
        )
        assert resp.status_code == 201
        attachment = resp.json()
        assert attachment["path"].startswith(f"task-files/{project_id}/")
        assert attachment["path"].endswith(".pdf")
        assert attachment["url"] == f"http://test/files/{attachment['path']}"
        assert attachment["size"] == len(b"%PDF-1.4 test")

        resp = await client.get(f"/files/{attachment['path']}")
        assert resp.status_code == 200
        assert resp.content == b"%PDF-1.4 test"

        resp = await client.post(
            f"/api/projects/{project_id}/tasks",
            json={
                "title": "审阅简报",
                "file_url": attachment["url"],
                "file_name": attachment["file_name"],
            },
            headers=alice_headers,
        )
        assert resp.status_code == 201
        assert resp.json()["file_url"] == attachment["url"]
        assert resp.json()["file_name"] == "brief.v2.pdf"

    async def test_empty_upload_rejected(self, client: AsyncClient, alice_headers, project_id):
        resp = await client.post(
            f"/api/projects/{project_id}/files",
            params={"filename": "empty.txt"},
            content=b"",
            headers=alice_headers,
        )
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_oversized_upload_rejected(
        self, app, client: AsyncClient, alice_headers, project_id
    ):
        app.state.gateway_config = app.state.gateway_config.model_copy(
            update={"max_upload_bytes": 4}
        )
        resp = await client.post(
            f"/api/projects/{project_id}/files",
            params={"filename": "big.bin"},
            content=b"12345",
            headers=alice_headers,
        )
        assert resp.status_code == 422

    async def test_upload_requires_sign_in(self, client: AsyncClient, project_id):
        resp = await client.post(
            f"/api/projects/{project_id}/files",
            params={"filename": "a.txt"},
            content=b"data",
        )
        assert resp.status_code == 401
