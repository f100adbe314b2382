"""Tests for Pydantic models."""

import json

import pytest
from pydantic import ValidationError

from chatgpt_notes.models import (
    ConversationThread,
    ExportConversation,
    ExportContent,
    ExportNode,
    Message,
    NoteOptions,
    PairRecord,
    PairState,
    PairStore,
    Role,
)


class TestExportModels:
    """Tests for the raw export models."""

    def test_content_text_joins_strings(self):
        """Test string parts are joined with newlines."""
        content = ExportContent(parts=["a", "b"])
        assert content.text == "a\nb"

    def test_content_text_without_parts(self):
        """Test missing parts give empty text."""
        assert ExportContent(content_type="code").text == ""

    def test_node_defaults(self):
        """Test a bare node has no message, parent or children."""
        node = ExportNode(id="n")
        assert node.message is None
        assert node.parent is None
        assert node.children == []

    def test_invalid_role(self):
        """Test unknown roles are rejected."""
        with pytest.raises(ValidationError):
            ExportNode.model_validate(
                {"id": "n", "message": {"id": "m", "author": {"role": "narrator"}}}
            )

    def test_conversation_id_alias(self):
        """Test either id key is accepted."""
        assert ExportConversation.model_validate({"id": "a"}).id == "a"
        assert ExportConversation.model_validate({"conversation_id": "b"}).id == "b"

    def test_extra_fields_ignored(self):
        """Test unrelated export fields do not fail validation."""
        conv = ExportConversation.model_validate(
            {"id": "a", "moderation_results": [], "current_node": "x"}
        )
        assert conv.mapping == {}


class TestConversationThread:
    """Tests for ConversationThread."""

    def test_assistant_count(self):
        thread = ConversationThread(
            conversation_id="c",
            title="t",
            messages=[
                Message(id="1", role=Role.USER, content="q"),
                Message(id="2", role=Role.ASSISTANT, content="a"),
                Message(id="3", role=Role.TOOL, content="x"),
                Message(id="4", role=Role.ASSISTANT, content="b"),
            ],
        )
        assert thread.assistant_count == 2

    def test_empty(self):
        assert ConversationThread(conversation_id="c", title="t").assistant_count == 0


class TestPairRecord:
    """Tests for the persisted pair record."""

    def test_serializes_camel_case(self):
        """Test records are written with camelCase keys."""
        record = PairRecord(
            pair_id="p",
            content_hash="h",
            conversation_id="c",
            state=PairState.SAVED,
            last_modified=1,
            prompt_preview="q",
            response_preview="a",
        )
        assert record.model_dump(mode="json", by_alias=True) == {
            "pairId": "p",
            "contentHash": "h",
            "conversationId": "c",
            "state": "saved",
            "lastModified": 1,
            "promptPreview": "q",
            "responsePreview": "a",
        }

    def test_reads_camel_case(self):
        """Test a serialized record validates back to the same record."""
        data = {
            "pairId": "p",
            "contentHash": "h",
            "conversationId": "c",
            "state": "ignored",
            "lastModified": 5,
        }
        record = PairRecord.model_validate(data)
        assert record.state == PairState.IGNORED
        assert record.prompt_preview == ""


class TestPairStore:
    """Tests for the persisted store document."""

    def test_document_shape(self):
        """Test the store serializes under qaPairs and lastUpdated."""
        store = PairStore(last_updated=10)
        assert json.loads(store.model_dump_json(by_alias=True)) == {
            "qaPairs": {},
            "lastUpdated": 10,
        }

    def test_missing_last_updated(self):
        """Test lastUpdated is optional on read."""
        assert PairStore.model_validate({"qaPairs": {}}).last_updated == 0


class TestNoteOptions:
    """Tests for NoteOptions."""

    def test_defaults_include_everything(self):
        options = NoteOptions()
        assert options.include_timestamps is True
        assert options.include_user_prompt is True
        assert options.include_tags is True
