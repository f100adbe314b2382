"""Pytest fixtures for ChatGPT Notes tests."""

import json

import pytest

from chatgpt_notes.actions import Workspace
from chatgpt_notes.documents import VaultDocumentStore
from chatgpt_notes.state import PairStateStore


def _node(node_id, parent, children, role=None, content="", create_time=1700000000.0):
    """Build a single mapping node; role=None builds a tombstoned node."""
    message = None
    if role is not None:
        message = {
            "id": f"msg-{node_id}",
            "author": {"role": role, "name": None, "metadata": {}},
            "create_time": create_time,
            "content": {"content_type": "text", "parts": [content]},
            "status": "finished_successfully",
            "metadata": {},
        }
    return {"id": node_id, "message": message, "parent": parent, "children": children}


@pytest.fixture
def make_node():
    """Factory for raw export mapping nodes."""
    return _node


@pytest.fixture
def sample_conversation():
    """A conversation with a regenerated answer and a blank trailing message."""
    nodes = [
        _node("root", None, ["sys"]),
        _node("sys", "root", ["u1"], role="system", content=""),
        _node("u1", "sys", ["a1", "a1-alt"], role="user", content="What is Python?",
              create_time=1700000010.0),
        _node("a1", "u1", ["u2"], role="assistant", content="Python is a programming language.",
              create_time=1700000020.0),
        _node("a1-alt", "u1", [], role="assistant", content="ALTERNATE ANSWER",
              create_time=1700000025.0),
        _node("u2", "a1", ["a2"], role="user", content="Show me an example",
              create_time=1700000030.0),
        _node("a2", "u2", ["a3"], role="assistant", content="print('hello')",
              create_time=1700000040.0),
        _node("a3", "a2", [], role="assistant", content="   \n  ", create_time=1700000050.0),
    ]
    return {
        "title": "Test Conversation",
        "create_time": 1700000000.0,
        "update_time": 1700000050.0,
        "mapping": {n["id"]: n for n in nodes},
        "conversation_id": "conv-1",
        "id": "conv-1",
    }


@pytest.fixture
def degenerate_conversation():
    """A conversation with no system-rooted user message."""
    nodes = [
        _node("root", None, ["u1"]),
        _node("u1", "root", ["a1"], role="user", content="Hi"),
        _node("a1", "u1", [], role="assistant", content="Hello"),
    ]
    return {
        "title": "Degenerate",
        "create_time": 1700001000.0,
        "update_time": 1700001000.0,
        "mapping": {n["id"]: n for n in nodes},
        "id": "conv-2",
    }


@pytest.fixture
def export_file(tmp_path, sample_conversation, degenerate_conversation):
    """A conversations.json with both sample conversations."""
    path = tmp_path / "conversations.json"
    with open(path, "w") as f:
        json.dump([sample_conversation, degenerate_conversation], f)
    return path


@pytest.fixture
def vault(tmp_path):
    """An empty vault on disk."""
    root = tmp_path / "vault"
    root.mkdir()
    return VaultDocumentStore(root)


@pytest.fixture
def state_store(vault):
    """A pair state store backed by the vault."""
    return PairStateStore(vault)


@pytest.fixture
def workspace(vault):
    """A workspace over the vault with empty pair state."""
    return Workspace(vault)
