"""Agent runner: prompts, schemas, validators and formatting per agent."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from screenwright.agents.client import GenerationClient
from screenwright.agents.models import (
    AgentKind,
    DialogueForm,
    GenerationOutcome,
    GenerationRequest,
    SceneDirection,
)
from screenwright.agents.prompts import (
    DIALOGUE_SYSTEM_PROMPT,
    DIRECTOR_SYSTEM_PROMPT,
    REWRITE_SYSTEM_PROMPT,
    SCREENWRITER_SYSTEM_PROMPT,
    build_dialogue_prompt,
    build_director_prompt,
    build_rewrite_prompt,
    build_screenwriter_prompt,
)
from screenwright.agents.session import AgentSession, CreditsListener, Notifier
from screenwright.config import get_logger
from screenwright.config.settings import ScreenwrightSettings
from screenwright.exceptions import ScreenwrightError
from screenwright.fountain.cleaner import clean_fountain_output
from screenwright.fountain.insertion import prepare_insertion
from screenwright.fountain.scene_context import (
    SceneContext,
    detect_current_scene,
    extract_selection_context,
)
from screenwright.fountain.spacing import format_fountain_spacing
from screenwright.validation.models import ContentValidation
from screenwright.validation.schemas import (
    DIALOGUE_SCHEMA,
    DIRECTOR_SCENES_SCHEMA,
    REWRITE_SCHEMA,
    SCREENPLAY_CONTENT_SCHEMA,
    response_format_for,
    supports_structured_outputs,
)
from screenwright.validation.validators import (
    validate_dialogue_content,
    validate_director_modal_content,
    validate_rewrite_content,
    validate_screenwriter_content,
)

logger = get_logger(__name__)

MAX_DIRECTOR_SCENES = 3

_FAILURE_MESSAGES = {
    AgentKind.SCREENWRITER: "Failed to generate content",
    AgentKind.DIALOGUE: "Failed to generate dialogue",
    AgentKind.DIRECTOR: "Failed to generate content",
    AgentKind.REWRITE: "Failed to rewrite text",
}


def _formatted(validation: ContentValidation, content: str) -> ContentValidation:
    return ContentValidation(valid=True, content=content, raw_json=validation.raw_json)


def _with_insertion(
    validation: ContentValidation, editor_text: str | None, cursor: int
) -> ContentValidation:
    if editor_text is None or not validation.valid or not validation.content.strip():
        return validation
    return _formatted(
        validation, prepare_insertion(validation.content, editor_text, cursor)
    )


def format_screenwriter_result(validation: ContentValidation) -> ContentValidation:
    """Apply Fountain spacing to a validated screenwriter response."""
    if not validation.valid:
        return validation
    lines = validation.content_lines or validation.content.split("\n")
    return _formatted(validation, format_fountain_spacing(lines))


def format_director_result(validation: ContentValidation) -> ContentValidation:
    """Render validated director scenes with Fountain spacing per scene."""
    if not validation.valid or not isinstance(validation.raw_json, dict):
        return validation
    rendered = []
    for scene in validation.raw_json.get("scenes") or []:
        body = format_fountain_spacing(scene.get("content") or [])
        rendered.append(f"{scene['heading'].strip()}\n\n{body}")
    return _formatted(validation, "\n\n".join(rendered))


def format_dialogue_result(validation: ContentValidation) -> ContentValidation:
    """Lay out validated dialogue exchanges as spaced Fountain."""
    if not validation.valid or not isinstance(validation.raw_json, dict):
        return validation
    lines: list[str] = []
    for exchange in validation.raw_json.get("dialogue") or []:
        lines.append(exchange["character"].upper())
        subtext = (exchange.get("subtext") or "").strip()
        if subtext:
            lines.append(f"({subtext})")
        lines.append(exchange["line"])
    return _formatted(validation, format_fountain_spacing(lines).strip())


def rewrite_result(raw: str) -> ContentValidation:
    """Take the rewritten text from a JSON reply, else clean the free text."""
    validation = validate_rewrite_content(raw)
    if validation.valid:
        return validation
    logger.warning(
        "Rewrite response was not valid JSON, cleaning free text",
        errors=validation.errors,
    )
    return ContentValidation(valid=True, content=clean_fountain_output(raw))


class AgentRunner:
    """Entry point for the four writing agents.

    Each agent has its own ``AgentSession``, so starting a dialogue
    generation cancels a running dialogue generation but leaves the other
    agents alone.
    """

    def __init__(
        self,
        settings: ScreenwrightSettings,
        client: GenerationClient,
        notifier: Notifier | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            settings: Model selection and director defaults
            client: Streaming generation client shared by all agents
            notifier: Where success and error messages are shown
        """
        self.settings = settings
        self.client = client
        self.sessions = {
            agent: AgentSession(
                agent, client, notifier, failure_message=_FAILURE_MESSAGES[agent]
            )
            for agent in AgentKind
        }

    def session(self, agent: AgentKind) -> AgentSession:
        """Return the session of one agent."""
        return self.sessions[agent]

    def cancel(self, agent: AgentKind) -> bool:
        """Cancel the in-flight generation of one agent."""
        return self.sessions[agent].cancel()

    def add_credits_listener(self, listener: CreditsListener) -> None:
        """Register a callback fired after any successful generation."""
        for session in self.sessions.values():
            session.add_credits_listener(listener)

    def build_request(
        self,
        agent: AgentKind,
        user_prompt: str,
        system_prompt: str,
        schema: dict[str, Any],
        scene: SceneContext | None,
    ) -> GenerationRequest:
        """Build a request for ``agent`` with its configured model.

        The JSON schema is only attached for models that accept one.
        """
        model_id = self.settings.model_for(agent.value)
        response_schema = None
        if supports_structured_outputs(model_id):
            response_schema = response_format_for(schema, f"{agent.value}_response")
        return GenerationRequest(
            user_prompt=user_prompt,
            system_prompt=system_prompt,
            model_id=model_id,
            response_schema=response_schema,
            scene_context=scene.to_request_metadata() if scene else None,
        )

    @staticmethod
    def _context(
        editor_text: str | None,
        cursor: int,
        selection: tuple[int, int] | None = None,
    ) -> tuple[SceneContext | None, str]:
        """Scene and preceding text for a cursor or a selection."""
        if not editor_text:
            return None, ""
        if selection and selection[0] != selection[1]:
            start, end = selection
            selected = extract_selection_context(editor_text, start, end)
            before = selected.before_context.strip() if selected else ""
            return detect_current_scene(editor_text, start), before
        scene = detect_current_scene(editor_text, cursor)
        return scene, scene.context_before_cursor if scene else ""

    async def screenwriter(
        self,
        prompt: str,
        editor_text: str | None = None,
        cursor: int = 0,
        selection: tuple[int, int] | None = None,
    ) -> GenerationOutcome:
        """Continue the scene at the cursor with one to three lines."""
        if not prompt.strip():
            raise ScreenwrightError("Please enter a prompt describing what to generate")

        scene, context_before = self._context(editor_text, cursor, selection)
        request = self.build_request(
            AgentKind.SCREENWRITER,
            build_screenwriter_prompt(prompt, scene, context_before),
            SCREENWRITER_SYSTEM_PROMPT,
            SCREENPLAY_CONTENT_SCHEMA,
            scene,
        )

        def postprocess(raw: str) -> ContentValidation:
            validation = format_screenwriter_result(
                validate_screenwriter_content(raw, context_before)
            )
            return _with_insertion(validation, editor_text, cursor)

        return await self.sessions[AgentKind.SCREENWRITER].run(
            request, postprocess, success_message="Content generated and inserted"
        )

    async def dialogue(
        self,
        form: DialogueForm,
        editor_text: str | None = None,
        cursor: int = 0,
    ) -> GenerationOutcome:
        """Write a dialogue exchange from the dialogue form."""
        if not form.conflict.strip():
            raise ScreenwrightError("Conflict/Tension is required")
        if not form.characters:
            raise ScreenwrightError("Please select at least one character")

        scene, _ = self._context(editor_text, cursor)
        request = self.build_request(
            AgentKind.DIALOGUE,
            build_dialogue_prompt(form, scene),
            DIALOGUE_SYSTEM_PROMPT,
            DIALOGUE_SCHEMA,
            scene,
        )

        def postprocess(raw: str) -> ContentValidation:
            validation = format_dialogue_result(validate_dialogue_content(raw))
            return _with_insertion(validation, editor_text, cursor)

        return await self.sessions[AgentKind.DIALOGUE].run(
            request, postprocess, success_message="Dialogue generated and inserted"
        )

    async def director(
        self,
        directions: Sequence[SceneDirection],
        editor_text: str | None = None,
        cursor: int = 0,
        selection: tuple[int, int] | None = None,
    ) -> GenerationOutcome:
        """Write one to three new scenes after the current one."""
        if not directions:
            raise ScreenwrightError("At least one scene is required")
        if len(directions) > MAX_DIRECTOR_SCENES:
            raise ScreenwrightError(
                f"At most {MAX_DIRECTOR_SCENES} scenes can be generated at once"
            )
        for number, direction in enumerate(directions, start=1):
            if not direction.location.strip():
                raise ScreenwrightError(f"Scene {number}: Location is required")
            if not direction.scenario.strip():
                raise ScreenwrightError(f"Scene {number}: Scenario is required")

        scene_count = len(directions)
        scene, context_before = self._context(editor_text, cursor, selection)
        request = self.build_request(
            AgentKind.DIRECTOR,
            build_director_prompt(directions, scene, context_before),
            DIRECTOR_SYSTEM_PROMPT,
            DIRECTOR_SCENES_SCHEMA,
            scene,
        )

        def postprocess(raw: str) -> ContentValidation:
            validation = format_director_result(
                validate_director_modal_content(raw, context_before, scene_count)
            )
            return _with_insertion(validation, editor_text, cursor)

        plural = "s" if scene_count > 1 else ""
        return await self.sessions[AgentKind.DIRECTOR].run(
            request,
            postprocess,
            success_message=f"Generated {scene_count} scene{plural}",
        )

    async def rewrite(
        self,
        instruction: str,
        editor_text: str,
        start: int,
        end: int,
    ) -> GenerationOutcome:
        """Rewrite the selected span; the outcome content replaces it."""
        selection = extract_selection_context(editor_text, start, end)
        if selection is None or start >= end or not selection.selected_text.strip():
            raise ScreenwrightError("Please select text to rewrite")
        if not instruction.strip():
            raise ScreenwrightError("Please enter a rewrite instruction")

        scene = detect_current_scene(editor_text, start)

        request = self.build_request(
            AgentKind.REWRITE,
            build_rewrite_prompt(
                instruction,
                selection.selected_text,
                scene,
                selection.before_context.strip(),
                selection.after_context.strip(),
            ),
            REWRITE_SYSTEM_PROMPT,
            REWRITE_SCHEMA,
            scene,
        )
        return await self.sessions[AgentKind.REWRITE].run(
            request, rewrite_result, success_message="Text rewritten successfully"
        )
