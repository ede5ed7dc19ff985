import uuid


class TestOneOnOneChat:
    def test_creates_chat_with_both_participants(self, client, make_user, auth_headers):
        alice, bob = make_user(), make_user()

        response = client.post(f"/v1/chats/c/{bob.id}", headers=auth_headers(alice))

        assert response.status_code == 200
        body = response.json()
        assert body["is_group_chat"] is False
        assert body["admins"] == []
        assert {p["id"] for p in body["participants"]} == {str(alice.id), str(bob.id)}

    def test_returns_existing_chat_from_either_side(self, client, make_user, auth_headers):
        alice, bob = make_user(), make_user()

        first = client.post(f"/v1/chats/c/{bob.id}", headers=auth_headers(alice)).json()
        second = client.post(f"/v1/chats/c/{alice.id}", headers=auth_headers(bob)).json()

        assert first["id"] == second["id"]

    def test_cannot_chat_with_yourself(self, client, make_user, auth_headers):
        alice = make_user()

        response = client.post(f"/v1/chats/c/{alice.id}", headers=auth_headers(alice))

        assert response.status_code == 400

    def test_unknown_receiver(self, client, make_user, auth_headers):
        response = client.post(
            f"/v1/chats/c/{uuid.uuid4()}", headers=auth_headers(make_user())
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Receiver does not exist"


class TestGroupChat:
    def test_creator_becomes_admin(self, client, make_user, auth_headers):
        alice, bob, carol = make_user(), make_user(), make_user()

        response = client.post(
            "/v1/chats/group",
            json={
                "name": "Weekend plans",
                "participant_ids": [str(bob.id), str(carol.id)],
                "group_type": "adminOnly",
            },
            headers=auth_headers(alice),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_group_chat"] is True
        assert body["group_type"] == "adminOnly"
        assert body["admins"] == [str(alice.id)]
        assert len(body["participants"]) == 3

    def test_defaults_to_everyone_can_post(self, client, make_user, auth_headers):
        alice, bob, carol = make_user(), make_user(), make_user()

        response = client.post(
            "/v1/chats/group",
            json={"name": "Team", "participant_ids": [str(bob.id), str(carol.id)]},
            headers=auth_headers(alice),
        )

        assert response.json()["group_type"] == "everyone"

    def test_needs_two_other_members(self, client, make_user, auth_headers):
        alice, bob = make_user(), make_user()

        response = client.post(
            "/v1/chats/group",
            json={
                "name": "Too small",
                "participant_ids": [str(bob.id), str(bob.id), str(alice.id)],
            },
            headers=auth_headers(alice),
        )

        assert response.status_code == 400

    def test_unknown_member(self, client, make_user, auth_headers):
        alice, bob = make_user(), make_user()

        response = client.post(
            "/v1/chats/group",
            json={"name": "Team", "participant_ids": [str(bob.id), str(uuid.uuid4())]},
            headers=auth_headers(alice),
        )

        assert response.status_code == 404


class TestReadChats:
    def test_lists_only_own_chats(self, client, make_user, auth_headers, direct_chat):
        alice, bob, carol = make_user(), make_user(), make_user()
        mine = direct_chat(alice, bob)
        direct_chat(bob, carol)

        response = client.get("/v1/chats/", headers=auth_headers(alice))

        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["id"] == str(mine.id)

    def test_read_single_chat(self, client, make_user, auth_headers, direct_chat):
        alice, bob, eve = make_user(), make_user(), make_user()
        chat = direct_chat(alice, bob)

        assert client.get(f"/v1/chats/{chat.id}", headers=auth_headers(bob)).status_code == 200
        assert client.get(f"/v1/chats/{chat.id}", headers=auth_headers(eve)).status_code == 400
        assert (
            client.get(f"/v1/chats/{uuid.uuid4()}", headers=auth_headers(eve)).status_code
            == 404
        )
