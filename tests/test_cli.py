# Test suite for the promptx-context command line

import json

import pytest

from promptx.ui.cli import DEFAULT_SYSTEM_PROMPT, load_conversation, main
from promptx.exceptions import ConversationFileError


@pytest.fixture
def chat_file(tmp_path):
    path = tmp_path / "chat.json"
    path.write_text(
        json.dumps(
            [
                {"role": "system", "content": "You rewrite prompts."},
                {"role": "user", "content": "Make this prompt better: write a poem"},
                {"role": "assistant", "content": "Write a sonnet about autumn light."},
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def long_chat_file(tmp_path, conversation_factory):
    path = tmp_path / "long_chat.json"
    messages = [m.to_dict() for m in conversation_factory(15, filler_words=700)]
    path.write_text(
        json.dumps({"system": "You rewrite prompts.", "messages": messages}),
        encoding="utf-8",
    )
    return path


class TestLoadConversation:
    """Conversation file parsing"""

    def test_leading_system_message_becomes_prompt(self, chat_file):
        system_prompt, messages = load_conversation(chat_file)
        assert system_prompt.content == "You rewrite prompts."
        assert len(messages) == 2

    def test_system_override(self, chat_file):
        system_prompt, _ = load_conversation(chat_file, "Override")
        assert system_prompt.content == "Override"

    def test_default_system_prompt(self, tmp_path):
        path = tmp_path / "chat.json"
        path.write_text(json.dumps([{"role": "user", "content": "hi"}]), encoding="utf-8")
        system_prompt, messages = load_conversation(path)
        assert system_prompt.content == DEFAULT_SYSTEM_PROMPT
        assert len(messages) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConversationFileError) as exc_info:
            load_conversation(tmp_path / "missing.json")
        assert isinstance(exc_info.value.original_error, FileNotFoundError)

    def test_invalid_role(self, tmp_path):
        path = tmp_path / "chat.json"
        path.write_text(json.dumps([{"role": "robot", "content": "hi"}]), encoding="utf-8")
        with pytest.raises(ConversationFileError):
            load_conversation(path)

    def test_object_without_messages(self, tmp_path):
        path = tmp_path / "chat.json"
        path.write_text(json.dumps({"system": "x"}), encoding="utf-8")
        with pytest.raises(ConversationFileError):
            load_conversation(path)

    def test_non_string_system_field(self, tmp_path):
        path = tmp_path / "chat.json"
        path.write_text(
            json.dumps({"system": 5, "messages": [{"role": "user", "content": "hi"}]}),
            encoding="utf-8",
        )
        with pytest.raises(ConversationFileError) as exc_info:
            load_conversation(path)
        assert "'system' must be a string" in exc_info.value.message

        assert main(["prepare", str(path)]) == 1


class TestCommands:
    """End-to-end command runs"""

    def test_prepare_json(self, chat_file, capsys):
        assert main(["prepare", str(chat_file), "--json"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["wasTruncated"] is False
        assert output["keptCount"] == 2
        assert output["messages"][0] == {"role": "system", "content": "You rewrite prompts."}

    def test_prepare_json_truncated(self, long_chat_file, capsys):
        assert main(["prepare", str(long_chat_file), "--model", "gpt-3.5-turbo", "--json"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["wasTruncated"] is True
        assert output["summarizedCount"] == 5
        assert output["keptCount"] == 10
        assert output["summary"].endswith("Total messages summarized: 5")

    def test_prepare_table(self, long_chat_file, capsys):
        assert main(["prepare", str(long_chat_file), "--model", "gpt-3.5-turbo"]) == 0

        out = capsys.readouterr().out
        assert "Kept verbatim" in out
        assert "Conversation Summary" in out

    def test_stats(self, chat_file, capsys):
        assert main(["stats", str(chat_file), "--model", "claude-3-opus"]) == 0

        out = capsys.readouterr().out
        assert "Usage" in out
        assert "200.0K" in out

    def test_models(self, capsys):
        assert main(["models"]) == 0
        assert "gpt-3.5-turbo" in capsys.readouterr().out

    def test_models_with_extra_file(self, tmp_path, capsys):
        models_file = tmp_path / "models.json"
        models_file.write_text(json.dumps({"models": {"my-model": 4096}}), encoding="utf-8")

        assert main(["--models-file", str(models_file), "models"]) == 0
        assert "my-model" in capsys.readouterr().out

    def test_missing_file_reports_error(self, tmp_path, capsys):
        assert main(["prepare", str(tmp_path / "missing.json")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_json_error_payload(self, tmp_path, capsys):
        path = tmp_path / "chat.json"
        path.write_text(json.dumps([{"role": "robot", "content": "hi"}]), encoding="utf-8")

        assert main(["prepare", str(path), "--json"]) == 1

        payload = json.loads(capsys.readouterr().out)
        assert payload["error"] == "ConversationFileError"
        assert "robot" in payload["message"]
        assert "cause" in payload

    def test_bad_log_level_reports_error(self, chat_file, capsys):
        assert main(["--log-level", "LOUD", "stats", str(chat_file)]) == 1
        assert "Invalid log level" in capsys.readouterr().err

    def test_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2


if __name__ == "__main__":
    pytest.main([__file__])
