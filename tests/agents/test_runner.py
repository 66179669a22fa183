"""Tests for the agent runner."""

import json

import pytest

from screenwright.agents import AgentRunner
from screenwright.agents.models import (
    AgentKind,
    DialogueForm,
    OutcomeStatus,
    SceneDirection,
)
from screenwright.agents.prompts import DIRECTOR_SYSTEM_PROMPT
from screenwright.agents.runner import (
    format_dialogue_result,
    format_screenwriter_result,
    rewrite_result,
)
from screenwright.config.settings import ScreenwrightSettings
from screenwright.exceptions import GenerationError, ScreenwrightError
from screenwright.validation import ContentValidation

DIALOGUE = json.dumps(
    {
        "dialogue": [
            {"character": "SARAH", "line": "You're late.", "subtext": "hurt"},
            {"character": "JOHN", "line": "Traffic."},
        ]
    }
)


def runner_for(client, notifier=None, **settings):
    return AgentRunner(ScreenwrightSettings(**settings), client, notifier)


class TestScreenwriter:
    """Test the screenwriter agent."""

    @pytest.mark.asyncio
    async def test_formats_and_prepares_insertion(self, make_client, notifier):
        """Test the continuation is spaced and separated from the cursor line."""
        response = json.dumps(
            {
                "content": ["The door creaks open.", "JOHN", "What was that?"],
                "lineCount": 3,
            }
        )
        client = make_client(chunks=[response])
        editor = "INT. HOUSE - DAY\n\nRain falls."

        outcome = await runner_for(client, notifier).screenwriter(
            "Someone arrives", editor, len(editor)
        )

        assert outcome.succeeded
        assert outcome.content == "\n\nThe door creaks open.\n\nJOHN\nWhat was that?"
        assert notifier.successes == ["Content generated and inserted"]

        request = client.requests[0]
        assert request.model_id == "claude-sonnet-4-5"
        assert request.response_schema["json_schema"]["name"] == "screenwriter_response"
        assert request.scene_context["heading"] == "INT. HOUSE - DAY"
        assert request.user_prompt.startswith("Someone arrives")
        assert "Rain falls." in request.user_prompt

    @pytest.mark.asyncio
    async def test_without_editor(self, make_client):
        """Test content is returned as is without an editor buffer."""
        response = json.dumps({"content": ["JOHN", "Hi."]})
        outcome = await runner_for(make_client(chunks=[response])).screenwriter("Go")
        assert outcome.content == "JOHN\nHi."

    @pytest.mark.asyncio
    async def test_duplicate_of_context_rejected(self, make_client, notifier):
        """Test repeating the text before the cursor fails validation."""
        editor = "INT. HOUSE - DAY\n\nRain hammers the tin roof all night."
        response = json.dumps({"content": ["Rain hammers the tin roof all night."]})

        outcome = await runner_for(
            make_client(chunks=[response]), notifier
        ).screenwriter("More", editor, len(editor))

        assert outcome.status is OutcomeStatus.VALIDATION_ERROR
        assert "duplicate" in outcome.message
        assert outcome.content == ""

    @pytest.mark.asyncio
    async def test_prompt_required(self, make_client):
        """Test an empty prompt is rejected before any request."""
        client = make_client()
        with pytest.raises(ScreenwrightError, match="Please enter a prompt"):
            await runner_for(client).screenwriter("   ")
        assert client.requests == []


class TestModelSelection:
    """Test models and schemas come from settings."""

    @pytest.mark.asyncio
    async def test_agent_override_without_schema(self, make_client):
        """Test a haiku override is used and gets no JSON schema."""
        client = make_client(chunks=[DIALOGUE])
        runner = runner_for(client, agent_models={"dialogue": "claude-3-5-haiku"})

        await runner.dialogue(DialogueForm(characters=["SARAH"], conflict="Late"))

        request = client.requests[0]
        assert request.model_id == "claude-3-5-haiku"
        assert request.response_schema is None

    def test_default_model(self, make_client):
        """Test agents without an override use the default model."""
        runner = runner_for(make_client(), default_model="gpt-4o")
        request = runner.build_request(
            AgentKind.DIRECTOR, "prompt", DIRECTOR_SYSTEM_PROMPT, {}, None
        )
        assert request.model_id == "gpt-4o"
        assert request.response_schema["json_schema"]["name"] == "director_response"
        assert request.scene_context is None


class TestDialogue:
    """Test the dialogue agent."""

    @pytest.mark.asyncio
    async def test_lays_out_exchanges(self, make_client, notifier):
        """Test exchanges are rendered as cue, parenthetical and line."""
        client = make_client(chunks=[DIALOGUE])
        form = DialogueForm(
            characters=["SARAH", "JOHN"], conflict="He is late", tone="Tense"
        )

        outcome = await runner_for(client, notifier).dialogue(form)

        assert outcome.content == "SARAH\n(hurt)\nYou're late.\n\nJOHN\nTraffic."
        assert notifier.successes == ["Dialogue generated and inserted"]
        assert "Conflict/Tension: He is late" in client.requests[0].user_prompt
        assert "Tone: Tense" in client.requests[0].user_prompt

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("form", "message"),
        [
            (DialogueForm(characters=["SARAH"]), "Conflict/Tension is required"),
            (DialogueForm(conflict="Late"), "Please select at least one character"),
        ],
    )
    async def test_form_validation(self, make_client, form, message):
        """Test required form fields."""
        with pytest.raises(ScreenwrightError, match=message):
            await runner_for(make_client()).dialogue(form)

    @pytest.mark.asyncio
    async def test_transport_failure_message(self, make_client, notifier):
        """Test backend errors are reported through the notifier."""
        client = make_client(error=GenerationError(message=""))
        outcome = await runner_for(client, notifier).dialogue(
            DialogueForm(characters=["SARAH"], conflict="Late")
        )
        assert outcome.status is OutcomeStatus.TRANSPORT_ERROR
        assert notifier.errors == ["Failed to generate dialogue"]


class TestDirector:
    """Test the director agent."""

    @pytest.mark.asyncio
    async def test_renders_scenes(self, make_client, notifier):
        """Test scenes are rendered heading first with spaced content."""
        response = json.dumps(
            {
                "scenes": [
                    {
                        "heading": "EXT. PARK - DAY",
                        "content": ["Birds sing.", "SARAH", "Hi.", "JOHN", "Hello."],
                    }
                ]
            }
        )
        client = make_client(chunks=[response])

        outcome = await runner_for(client, notifier).director(
            [SceneDirection(location="PARK", scenario="They meet")]
        )

        assert outcome.content == (
            "EXT. PARK - DAY\n\nBirds sing.\n\nSARAH\nHi.\n\nJOHN\nHello."
        )
        assert notifier.successes == ["Generated 1 scene"]
        assert "Location: PARK" in client.requests[0].user_prompt

    @pytest.mark.asyncio
    async def test_scene_count_mismatch(self, make_client, notifier):
        """Test fewer scenes than requested fails."""
        scene = {"heading": "EXT. PARK - DAY", "content": ["x"] * 5}
        client = make_client(chunks=[json.dumps({"scenes": [scene]})])
        directions = [
            SceneDirection(location="PARK", scenario="They meet"),
            SceneDirection(location="CAR", scenario="They leave"),
        ]

        outcome = await runner_for(client, notifier).director(directions)

        assert outcome.status is OutcomeStatus.VALIDATION_ERROR
        assert outcome.message == "Invalid response: Expected 2 scene(s), got 1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("directions", "message"),
        [
            ([], "At least one scene is required"),
            ([SceneDirection(location="A", scenario="B")] * 4, "At most 3 scenes"),
            (
                [SceneDirection(location="A", scenario="B"),
                 SceneDirection(location=" ", scenario="B")],
                "Scene 2: Location is required",
            ),
            ([SceneDirection(location="A", scenario="")], "Scene 1: Scenario is required"),
        ],
    )
    async def test_direction_validation(self, make_client, directions, message):
        """Test the scene directions are checked before generating."""
        with pytest.raises(ScreenwrightError, match=message):
            await runner_for(make_client()).director(directions)


class TestRewrite:
    """Test the rewrite agent."""

    @pytest.mark.asyncio
    async def test_json_rewrite(self, make_client, notifier):
        """Test the rewritten text replaces the selection."""
        editor = "JOHN\nHi.\n"
        client = make_client(chunks=[json.dumps({"rewrittenText": "Hello there."})])

        outcome = await runner_for(client, notifier).rewrite("Warmer", editor, 5, 8)

        assert outcome.content == "Hello there."
        assert notifier.successes == ["Text rewritten successfully"]
        assert "Hi." in client.requests[0].user_prompt

    @pytest.mark.asyncio
    async def test_selection_context_window(self, make_client):
        """Test the prompt carries at most 100 characters before the selection."""
        editor = "~" * 50 + "x" * 100 + "\nJOHN\nHi.\n"
        start = editor.index("Hi.")
        client = make_client(chunks=[json.dumps({"rewrittenText": "Hello."})])

        await runner_for(client).rewrite("Warmer", editor, start, start + 3)

        prompt = client.requests[0].user_prompt
        assert "x" * 94 + "\nJOHN" in prompt
        assert "~" not in prompt

    @pytest.mark.asyncio
    async def test_free_text_fallback(self, make_client):
        """Test non-JSON replies are cleaned instead of rejected."""
        reply = "Here's the rewrite:\nHello there.\n\nWould you like more options?"
        outcome = await runner_for(make_client(chunks=[reply])).rewrite(
            "Warmer", "JOHN\nHi.\n", 5, 8
        )
        assert outcome.succeeded
        assert outcome.content == "Hello there."

    @pytest.mark.asyncio
    async def test_empty_reply(self, make_client, notifier):
        """Test a reply that cleans down to nothing fails."""
        outcome = await runner_for(make_client(chunks=["   "]), notifier).rewrite(
            "Warmer", "JOHN\nHi.\n", 5, 8
        )
        assert outcome.status is OutcomeStatus.EMPTY_CONTENT

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("instruction", "start", "end", "message"),
        [
            ("Warmer", 3, 3, "Please select text to rewrite"),
            ("Warmer", 4, 5, "Please select text to rewrite"),
            ("  ", 5, 8, "Please enter a rewrite instruction"),
        ],
    )
    async def test_input_validation(self, make_client, instruction, start, end, message):
        """Test a selection and an instruction are required."""
        with pytest.raises(ScreenwrightError, match=message):
            await runner_for(make_client()).rewrite(instruction, "JOHN\nHi.\n", start, end)


class TestRunnerSessions:
    """Test per-agent sessions."""

    def test_cancel_idle_agent(self, make_client):
        """Test cancelling an agent with nothing running."""
        assert not runner_for(make_client()).cancel(AgentKind.REWRITE)

    @pytest.mark.asyncio
    async def test_credits_listener_on_every_agent(self, make_client):
        """Test credits listeners fire for any agent."""
        client = make_client(chunks=[DIALOGUE])
        runner = runner_for(client)
        credits = []
        runner.add_credits_listener(lambda: credits.append(1))

        await runner.dialogue(DialogueForm(characters=["SARAH"], conflict="Late"))

        assert credits == [1]
        assert runner.session(AgentKind.SCREENWRITER)._credits_listeners


class TestFormatting:
    """Test result formatting helpers."""

    def test_invalid_results_untouched(self):
        """Test failed validations pass through unchanged."""
        failed = ContentValidation(valid=False, errors=["bad"])
        assert format_screenwriter_result(failed) is failed
        assert format_dialogue_result(failed) is failed

    def test_rewrite_result_prefers_json(self):
        """Test JSON replies keep their text."""
        assert rewrite_result('{"rewrittenText": "A."}').content == "A."
