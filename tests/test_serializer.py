"""Tests for note rendering."""

from chatgpt_notes.models import NoteOptions
from chatgpt_notes.serializer import parse_tags, render_note

# 2022-01-01T00:00:00Z
NEW_YEAR = 1640995200


class TestParseTags:
    """Tests for tag parsing."""

    def test_split_and_trim(self):
        assert parse_tags("chatgpt, ai ,  notes") == ["chatgpt", "ai", "notes"]

    def test_drops_empty(self):
        assert parse_tags(" , chatgpt,, ") == ["chatgpt"]

    def test_empty_string(self):
        assert parse_tags("") == []


class TestRenderNote:
    """Tests for the note body."""

    def test_full_note(self):
        """Test the complete layout with every section."""
        note = render_note(
            "Test Note",
            "test, chatgpt",
            "What is a test question?",
            "This is a test response from ChatGPT.",
            "Test Conversation",
            NEW_YEAR,
        )
        assert note == (
            "---\n"
            'title: "Test Note"\n'
            'tags: ["test", "chatgpt"]\n'
            "created: 2022-01-01\n"
            "source: ChatGPT\n"
            'conversation: "Test Conversation"\n'
            "---\n"
            "\n"
            "## User Prompt\n"
            "\n"
            "What is a test question?\n"
            "\n"
            "## Response\n"
            "\n"
            "This is a test response from ChatGPT."
        )

    def test_without_prompt(self):
        """Test a missing prompt omits the prompt section."""
        note = render_note("T", "a", None, "Answer", "C", NEW_YEAR)
        assert "## User Prompt" not in note
        assert note.endswith("## Response\n\nAnswer")

    def test_prompt_disabled(self):
        """Test the prompt section can be switched off."""
        options = NoteOptions(include_user_prompt=False)
        note = render_note("T", "a", "Question", "Answer", "C", NEW_YEAR, options)
        assert "Question" not in note
        assert "## User Prompt" not in note

    def test_timestamps_disabled(self):
        """Test date, source and conversation lines can be switched off."""
        options = NoteOptions(include_timestamps=False)
        note = render_note("T", "a", "Q", "A", "C", NEW_YEAR, options)
        assert "created:" not in note
        assert "source:" not in note
        assert "conversation:" not in note
        assert note.startswith('---\ntitle: "T"\ntags: ["a"]\n---\n\n')

    def test_tags_disabled(self):
        """Test the tag line can be switched off."""
        note = render_note("T", "a, b", "Q", "A", "C", NEW_YEAR, NoteOptions(include_tags=False))
        assert "tags:" not in note

    def test_no_tags(self):
        """Test an empty tag string omits the tag line."""
        note = render_note("T", " , ", "Q", "A", "C", NEW_YEAR)
        assert "tags:" not in note

    def test_quotes_escaped(self):
        """Test embedded quotes and backslashes keep the header well formed."""
        note = render_note('Say "hi"', 'my "tag"', None, "A", 'C:\\dir "x"', NEW_YEAR)
        assert 'title: "Say \\"hi\\""' in note
        assert 'tags: ["my \\"tag\\""]' in note
        assert 'conversation: "C:\\\\dir \\"x\\""' in note

    def test_created_date_utc(self):
        """Test the date is the UTC calendar date of the timestamp."""
        note = render_note("T", "", None, "A", "C", NEW_YEAR + 86399)
        assert "created: 2022-01-01" in note

    def test_zero_timestamp(self):
        """Test a missing timestamp renders the epoch date."""
        assert "created: 1970-01-01" in render_note("T", "", None, "A", "C", 0)
