"""成员与邀请接口测试

测试内容：
1. 创建者自动成为 owner 成员
2. 邀请：邮箱归一化为小写，写入 member_invited 日志
3. 409 ALREADY_MEMBER / INVITATION_PENDING
4. 取消邀请后可以重新邀请；重复取消 409
5. owner 角色不可邀请
"""

from httpx import AsyncClient


class TestMembers:
    async def test_owner_is_member(self, client: AsyncClient, alice_headers, project_id):
        resp = await client.get(f"/api/projects/{project_id}/members", headers=alice_headers)
        members = resp.json()["members"]
        assert len(members) == 1
        assert members[0]["role"] == "owner"
        assert members[0]["role_label"] == "Owner"
        assert members[0]["profile"]["email"] == "alice@example.com"


class TestInvitations:
    async def test_invite(self, client: AsyncClient, alice_headers, project_id):
        resp = await client.post(
            f"/api/projects/{project_id}/invitations",
            json={"email": "Carol@Example.com", "role": "admin"},
            headers=alice_headers,
        )
        assert resp.status_code == 201
        invitation = resp.json()
        assert invitation["email"] == "carol@example.com"
        assert invitation["role"] == "admin"
        assert invitation["status"] == "pending"
        assert invitation["expires_at"] is not None

        listed = (
            await client.get(f"/api/projects/{project_id}/invitations", headers=alice_headers)
        ).json()["invitations"]
        assert [i["id"] for i in listed] == [invitation["id"]]
        assert listed[0]["role_label"] == "Admin"
        assert listed[0]["status_label"] == "Pending"

        logs = (
            await client.get(
                "/api/activity", params={"project_id": project_id}, headers=alice_headers
            )
        ).json()
        assert logs["logs"][0]["action"] == "member_invited"
        assert logs["logs"][0]["category"] == "member"

    async def test_invite_existing_member_conflicts(
        self, client: AsyncClient, alice_headers, project_id
    ):
        resp = await client.post(
            f"/api/projects/{project_id}/invitations",
            json={"email": "alice@example.com"},
            headers=alice_headers,
        )
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "ALREADY_MEMBER"

    async def test_duplicate_pending_conflicts(
        self, client: AsyncClient, alice_headers, project_id
    ):
        url = f"/api/projects/{project_id}/invitations"
        first = await client.post(url, json={"email": "dan@example.com"}, headers=alice_headers)
        assert first.status_code == 201

        second = await client.post(url, json={"email": "DAN@example.com"}, headers=alice_headers)
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "INVITATION_PENDING"

    async def test_cancel_then_reinvite(self, client: AsyncClient, alice_headers, project_id):
        url = f"/api/projects/{project_id}/invitations"
        invitation = (
            await client.post(url, json={"email": "erin@example.com"}, headers=alice_headers)
        ).json()

        resp = await client.post(
            f"/api/invitations/{invitation['id']}/cancel", headers=alice_headers
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "declined"

        resp = await client.post(
            f"/api/invitations/{invitation['id']}/cancel", headers=alice_headers
        )
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "INVITATION_NOT_PENDING"

        resp = await client.post(url, json={"email": "erin@example.com"}, headers=alice_headers)
        assert resp.status_code == 201

    async def test_owner_role_not_invitable(
        self, client: AsyncClient, alice_headers, project_id
    ):
        resp = await client.post(
            f"/api/projects/{project_id}/invitations",
            json={"email": "frank@example.com", "role": "owner"},
            headers=alice_headers,
        )
        assert resp.status_code == 422

    async def test_cancel_unknown_invitation_is_404(self, client: AsyncClient, alice_headers):
        resp = await client.post(
            "/api/invitations/01JNONEXISTENT0000000000/cancel", headers=alice_headers
        )
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "INVITATION_NOT_FOUND"

    async def test_invite_requires_sign_in(self, client: AsyncClient, project_id):
        resp = await client.post(
            f"/api/projects/{project_id}/invitations", json={"email": "x@example.com"}
        )
        assert resp.status_code == 401
