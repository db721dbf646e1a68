"""UI-event handlers that run orchestration calls and update session state."""

from typing import List, Optional

from studio.handlers.error_handler import ValidationError
from studio.models.image import DataUrl, ImagePayload
from studio.models.refine import RefinementResult
from studio.services.refinement_service.orchestrator import PromptRefinementOrchestrator
from studio.services.session_service.session import StudioSession
from studio.utility.data_url import decode
from studio.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)


class StudioWorkflow:
    """Coordinates one user action at a time per session and action type.

    History controllers are only touched after the remote call succeeds,
    so a failed action leaves every earlier result in place.
    """

    def __init__(self, orchestrator: PromptRefinementOrchestrator):
        self.orchestrator = orchestrator

    async def edit(self, session: StudioSession, prompt: str) -> Optional[DataUrl]:
        """
        Edit the displayed image (or the source) and commit the result.
        Returns None when a new source image arrived while the edit was running;
        that result belongs to the old product and is dropped.
        """
        if not session.source_image:
            raise ValidationError("Please upload a product image.")
        if not (prompt or "").strip():
            raise ValidationError("Please enter a prompt.")

        async with session.in_flight("edit"):
            version = session.source_version
            images: List[ImagePayload] = [decode(session.edit_base_image())]
            if session.reference_image:
                images.append(decode(session.reference_image))

            result = await self.orchestrator.apply_edit(prompt, images)
            if session.source_version != version:
                logger.warning(
                    f"Session {session.session_id}: source image changed during edit, result dropped"
                )
                return None

            session.edit_history.commit(result)
            logger.info(
                f"Session {session.session_id}: committed edit {session.edit_history.cursor}"
            )
            return result

    async def generate(
        self, session: StudioSession, prompt: str, aspect_ratio: str, style: str
    ) -> DataUrl:
        """Generate from text; the prompt joins the history only on success."""
        async with session.in_flight("generate"):
            result = await self.orchestrator.generate(prompt, aspect_ratio, style)
            session.generated_image = result
            session.prompt_history.submit(prompt)
            return result

    async def suggest(self, session: StudioSession) -> List[str]:
        async with session.in_flight("suggestions"):
            version = session.source_version
            session.suggestions = []
            ideas = await self.orchestrator.fetch_suggestions(session.source_payload())
            if session.source_version != version:
                logger.warning(
                    f"Session {session.session_id}: source image changed, suggestions dropped"
                )
                return []
            session.suggestions = ideas
            return ideas

    async def translate(self, session: StudioSession, text: str) -> RefinementResult:
        async with session.in_flight("translate"):
            session.translation = None
            refined = await self.orchestrator.translate_and_refine(text)
            session.translation = RefinementResult(source_text=text, refined_text=refined)
            return session.translation

    async def refine_style(self, session: StudioSession, suggestion: str) -> RefinementResult:
        async with session.in_flight("refine-style"):
            session.style_refinement = None
            reference = session.reference_payload()
            refined = await self.orchestrator.refine_with_style_reference(suggestion, reference)
            session.style_refinement = RefinementResult(
                source_text=suggestion,
                refined_text=refined,
                style_image=reference,
            )
            return session.style_refinement
