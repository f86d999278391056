"""Tests for the WebSocket event channel and status endpoint."""

import json

import pytest
from fastapi.testclient import TestClient

from backend.web.main import create_app
from config.schema import GatewaySettings
from core.command.base import ExecuteResult
from core.command.intents import IntentKind
from core.command.privileged import PrivilegedExecutor
from tests.fakes.executor import FakeExecutor

LISTING = "total 0\n7 -rw-r--r-- 1 root root 0 Jan  1 00:00 a.txt\n"


def make_client(executor, **settings):
    app = create_app()
    app.state.settings = GatewaySettings(
        root=settings.pop("root", "/mount/fs"),
        logs={"poll_interval": 0},
        login={"user": "op", "password": "1234"},
        **settings,
    )
    app.state.executor = executor
    return TestClient(app)


@pytest.fixture
def executor():
    return FakeExecutor({IntentKind.LIST_DIR: ExecuteResult(0, LISTING, "")})


class TestEventChannel:
    def test_create_file_then_listing(self, executor):
        with make_client(executor) as client, client.websocket_connect("/ws") as ws:
            ws.send_json({"event": "create-file", "args": ["a.txt"], "request_id": "r1"})
            assert ws.receive_json() == {"event": "success", "data": "a.txt created successfully.", "request_id": "r1"}
            assert ws.receive_json() == {"event": "dir-updated", "data": LISTING, "request_id": "r1"}

        assert executor.commands[0].argv == ("touch", "--", "/mount/fs/a.txt")

    def test_object_payload_events(self, executor):
        with make_client(executor) as client, client.websocket_connect("/ws") as ws:
            ws.send_json({"event": "write-file", "data": {"fileName": "a.txt", "content": "hi"}})
            assert ws.receive_json() == {"event": "success", "data": "Written to a.txt successfully."}

            ws.send_json({"event": "deleteDirectory", "data": {"name": "d"}})
            assert ws.receive_json()["data"] == "Directory 'd' deleted successfully."
            assert ws.receive_json()["event"] == "dir-updated"

    def test_link_arguments(self, executor):
        with make_client(executor) as client, client.websocket_connect("/ws") as ws:
            ws.send_json({"event": "create-symlink", "args": ["a", "b"]})
            assert ws.receive_json()["data"] == "Symbolic link b created successfully."
            ws.receive_json()

        assert executor.commands[0].argv == ("ln", "-s", "--", "/mount/fs/a", "/mount/fs/b")

    def test_empty_name_is_rejected_without_executing(self, executor):
        with make_client(executor) as client, client.websocket_connect("/ws") as ws:
            ws.send_json({"event": "create-dir", "args": [""], "request_id": "r9"})
            frame = ws.receive_json()

        assert frame["event"] == "error"
        assert frame["kind"] == "validation"
        assert frame["data"] == "Error: name cannot be empty"
        assert frame["request_id"] == "r9"
        assert executor.commands == []

    def test_malformed_frames_keep_connection_open(self, executor):
        with make_client(executor) as client, client.websocket_connect("/ws") as ws:
            ws.send_text("not json")
            assert ws.receive_json()["kind"] == "validation"

            ws.send_json({"event": "format-disk"})
            frame = ws.receive_json()
            assert frame["data"] == "Error: Unknown event: format-disk"

            ws.send_json({"event": "deleteFile", "data": {}})
            assert ws.receive_json()["kind"] == "validation"

            ws.send_json({"event": "refresh-dir"})
            assert ws.receive_json() == {"event": "dir-updated", "data": LISTING}

    def test_binary_frames_do_not_close_connection(self, executor):
        with make_client(executor) as client, client.websocket_connect("/ws") as ws:
            ws.send_bytes(b'{"event": "refresh-dir"}')
            assert ws.receive_json() == {"event": "dir-updated", "data": LISTING}

            ws.send_bytes(b"\xff\xfe")
            frame = ws.receive_json()
            assert frame["event"] == "error"
            assert frame["kind"] == "validation"

            ws.send_json({"event": "refresh-dir"})
            assert ws.receive_json() == {"event": "dir-updated", "data": LISTING}

    def test_login_ack(self, executor):
        with make_client(executor) as client, client.websocket_connect("/ws") as ws:
            ws.send_json({"event": "login", "data": {"user": "op", "pass": "1234"}, "ack": 1})
            assert ws.receive_json() == {"event": "ack", "ack": 1, "data": {"success": True}}

            ws.send_json({"event": "login", "data": {"user": "op", "pass": "nope"}, "ack": 2})
            assert ws.receive_json() == {"event": "ack", "ack": 2, "data": {"success": False}}

    def test_error_carries_kind(self):
        executor = FakeExecutor({IntentKind.READ_FILE: ExecuteResult(1, "", "cat: /mount/fs/x: Is a directory\n")})
        with make_client(executor) as client, client.websocket_connect("/ws") as ws:
            ws.send_json({"event": "read-file", "args": ["x"]})
            frame = ws.receive_json()
        assert frame == {"event": "error", "data": "Error: cat: /mount/fs/x: Is a directory", "kind": "wrong_type"}

    def test_listing_broadcast_to_other_sessions(self, executor):
        with make_client(executor) as client:
            with client.websocket_connect("/ws") as watcher, client.websocket_connect("/ws") as actor:
                actor.send_json({"event": "create-dir", "args": ["x"]})
                assert actor.receive_json()["event"] == "success"
                assert actor.receive_json()["event"] == "dir-updated"
                assert watcher.receive_json() == {"event": "dir-updated", "data": LISTING}


class TestEndToEnd:
    def test_real_executor_read_write(self, tmp_path):
        root = tmp_path / "fs"
        root.mkdir()
        with make_client(PrivilegedExecutor(wrapper=()), root=str(root)) as client:
            with client.websocket_connect("/ws") as ws:
                ws.send_json({"event": "create-file", "args": ["notes.txt"]})
                assert ws.receive_json()["event"] == "success"
                assert "notes.txt" in ws.receive_json()["data"]

                ws.send_json({"event": "write-file", "data": {"fileName": "notes.txt", "content": 'say "hi"'}})
                assert ws.receive_json()["event"] == "success"

                ws.send_json({"event": "read-file", "args": ["notes.txt"]})
                assert ws.receive_json() == {
                    "event": "file-read",
                    "data": {"fileName": "notes.txt", "content": 'say "hi"'},
                }

        assert (root / "notes.txt").read_text() == 'say "hi"'


class TestStatus:
    def test_status(self, executor):
        with make_client(executor) as client:
            response = client.get("/api/status")
        assert response.status_code == 200
        assert json.loads(response.text) == {"root": "/mount/fs", "sessions": 0, "log_poll_interval": 0.0}
