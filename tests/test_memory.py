"""Tests for memory backends."""

import pytest

from synapse_agent.memory import CollectionMemory, FileMemory, format_transcript
from synapse_agent.prompt import decode_payload
from synapse_agent.types import ImageSegment, Message, Role, TextSegment


def tool_message(call_id: str = "t1") -> Message:
    return Message(
        role=Role.TOOL,
        tool_call_id=call_id,
        tool_name="search",
        tool_arguments='{"q": "x"}',
        tool_content="found it",
    )


class TestCollectionMemory:
    """Tests for CollectionMemory."""

    @pytest.mark.asyncio
    async def test_create_and_get(self):
        """Messages are kept in insertion order."""
        memory = CollectionMemory()
        await memory.load()
        await memory.create(Message(role=Role.USER, content="a"))
        await memory.create(Message(role=Role.ASSISTANT, content="b"))
        assert [m.content for m in memory.get()] == ["a", "b"]
        assert len(memory) == 2

    @pytest.mark.asyncio
    async def test_get_returns_copy(self):
        """Mutating the returned list does not change memory."""
        memory = CollectionMemory([Message(role=Role.USER, content="a")])
        memory.get().clear()
        assert len(memory) == 1

    @pytest.mark.asyncio
    async def test_clear(self):
        """clear() removes everything."""
        memory = CollectionMemory([Message(role=Role.USER, content="a")])
        await memory.clear()
        assert memory.get() == []


class TestAsInputs:
    """Tests for Memory.as_inputs()."""

    def test_transcript(self):
        """The memory key holds a plain-text transcript."""
        memory = CollectionMemory([Message(role=Role.USER, content="hi"), tool_message()])
        assert memory.as_inputs()["memory"] == "user: hi\ntool(search): found it"

    def test_block_inputs_encode_tool(self):
        """Tool turns carry a base64(JSON) tool attribute."""
        memory = CollectionMemory([tool_message()])
        entry = memory.as_inputs()["memory_with_messages"][0]
        assert entry["role"] == "tool"
        assert entry["image"] is None
        assert decode_payload(entry["tool"]) == {
            "id": "t1",
            "name": "search",
            "arguments": '{"q": "x"}',
            "content": "found it",
        }

    def test_block_inputs_encode_image(self):
        """User turns with an image carry a base64(JSON) image attribute."""
        msg = Message(
            role=Role.USER,
            content=[TextSegment(text="look"), ImageSegment(image_url={"url": "http://x/y.png"})],
        )
        entry = CollectionMemory([msg]).as_inputs()["memory_with_messages"][0]
        assert entry["content"] == "look"
        assert entry["tool"] is None
        assert decode_payload(entry["image"]) == {"url": "http://x/y.png"}

    def test_empty(self):
        """Empty memory yields empty inputs."""
        assert CollectionMemory().as_inputs() == {"memory": "", "memory_with_messages": []}

    def test_format_transcript_without_tool_content(self):
        """Tool turns without content fall back to message text."""
        msg = Message(role=Role.TOOL, tool_call_id="t1", tool_name="x", content="text")
        assert format_transcript([msg]) == "tool(x): text"


class TestFileMemory:
    """Tests for FileMemory."""

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path):
        """A second instance sees what the first wrote after load()."""
        first = FileMemory(tmp_path, "conv:1")
        await first.create(Message(role=Role.USER, content="hello"))
        await first.create(tool_message())

        second = FileMemory(tmp_path, "conv:1")
        assert second.get() == []
        await second.load()
        assert second.get() == first.get()
        assert second.get()[1].tool_content == "found it"

    @pytest.mark.asyncio
    async def test_key_is_sanitised(self, tmp_path):
        """Path separators in the key do not escape base_dir."""
        memory = FileMemory(tmp_path, "a/b:c")
        await memory.create(Message(role=Role.USER, content="x"))
        assert memory.path == tmp_path / "a_b_c.jsonl"
        assert memory.path.exists()

    @pytest.mark.asyncio
    async def test_load_missing_file(self, tmp_path):
        """Loading a conversation with no file yields no messages."""
        memory = FileMemory(tmp_path, "new")
        await memory.load()
        assert memory.get() == []

    @pytest.mark.asyncio
    async def test_clear(self, tmp_path):
        """clear() empties the file and leaves no temp files."""
        memory = FileMemory(tmp_path, "conv")
        await memory.create(Message(role=Role.USER, content="x"))
        await memory.clear()
        await memory.load()
        assert memory.get() == []
        assert [p.name for p in tmp_path.iterdir()] == ["conv.jsonl"]

    @pytest.mark.asyncio
    async def test_corrupt_line_raises(self, tmp_path):
        """A corrupt line is reported rather than skipped."""
        (tmp_path / "bad.jsonl").write_text('{"role": "user", "content": "ok"}\n{"role": 7}\n')
        memory = FileMemory(tmp_path, "bad")
        with pytest.raises(ValueError):
            await memory.load()

    def test_empty_key_rejected(self, tmp_path):
        """An empty key is rejected."""
        with pytest.raises(ValueError):
            FileMemory(tmp_path, " ")
