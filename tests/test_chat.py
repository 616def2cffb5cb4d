import json

import pytest

from ai.chat import GREETING, ChatTurn, render_history, step
from ai.prompts import SYSTEM_CHAT
from documents.errors import GenerationFailure


def reply(response, resume_data=None):
    return json.dumps({"response": response, "resumeData": resume_data})


class TestChatStep:

    def test_incomplete_turn_has_no_resume(self, make_provider):
        provider = make_provider(default=reply("Great! What is your name?"))
        result = step([], "Here is the job description...", provider)
        assert result.response == "Great! What is your name?"
        assert result.resume_data is None
        assert not result.complete
        assert result.history == (
            ChatTurn("user", "Here is the job description..."),
            ChatTurn("model", "Great! What is your name?"),
        )

    def test_complete_turn_surfaces_resume(self, make_provider, raw_resume):
        provider = make_provider(default=reply("Your resume is ready!", raw_resume))
        result = step([ChatTurn("model", GREETING)], "That's everything.", provider)
        assert result.complete
        assert result.resume_data.name == "Jane Doe"
        assert result.schema_error is None

    def test_invalid_resume_data_is_dropped(self, make_provider, raw_resume, caplog):
        del raw_resume["email"]
        provider = make_provider(default=reply("Done!", raw_resume))
        with caplog.at_level("WARNING", logger="ai.chat"):
            result = step([], "That's all", provider)
        assert result.response == "Done!"
        assert result.resume_data is None
        assert "email" in result.schema_error.fields
        assert "failed validation" in caplog.text

    def test_history_is_append_only(self, make_provider):
        provider = make_provider(default=reply("Noted."))
        original = [{"role": "model", "content": GREETING}, {"role": "user", "content": "hi"},
                    {"role": "model", "content": "Hello!"}]
        snapshot = [dict(t) for t in original]
        result = step(original, "I am a data engineer", provider)
        assert original == snapshot
        assert len(result.history) == len(original) + 2
        assert [t.content for t in result.history[:3]] == [GREETING, "hi", "Hello!"]
        assert result.history[-2] == ChatTurn("user", "I am a data engineer")

    def test_prompt_carries_rendered_history(self, make_provider):
        provider = make_provider(default=reply("ok"))
        step([ChatTurn("model", GREETING)], "Build me a resume", provider)
        call = provider.calls_for(SYSTEM_CHAT)[0]
        assert call["json_mode"] is True
        assert f"model: {GREETING}" in call["user"]
        assert call["user"].rstrip().endswith("user: Build me a resume\nmodel:")

    def test_plain_text_reply_is_the_response(self, make_provider):
        provider = make_provider(default="Sure, tell me about your last job.")
        result = step([], "hello", provider)
        assert result.response == "Sure, tell me about your last job."
        assert result.resume_data is None

    def test_json_without_response_fails(self, make_provider):
        provider = make_provider(default=json.dumps({"resumeData": None}))
        with pytest.raises(GenerationFailure):
            step([], "hello", provider)

    def test_provider_failure_propagates(self, make_provider):
        provider = make_provider(default=GenerationFailure("quota exceeded"))
        with pytest.raises(GenerationFailure):
            step([], "hello", provider)

    def test_empty_message_rejected(self, make_provider):
        with pytest.raises(ValueError):
            step([], "   ", make_provider(default=reply("x")))


class TestTurns:

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError):
            ChatTurn("assistant", "hi")

    def test_render_history(self):
        turns = [ChatTurn("model", "Hi"), ChatTurn("user", "Hello")]
        assert render_history(turns) == "model: Hi\nuser: Hello"
