"""API routes for studio sessions: uploads, edits, history, prompts and generation."""

import io
from typing import Any, Literal

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import StreamingResponse

from studio.config.options import Options
from studio.handlers.error_handler import StudioError, ValidationError
from studio.models.edit_image import EditHistoryView, EditRequest, JumpRequest
from studio.models.generate import (
    GenerateRequest,
    GenerateResponse,
    LiveEditRequest,
    PromptHistoryView,
    PromptNavigationResponse,
)
from studio.models.refine import (
    RefinementResult,
    RefineStyleRequest,
    SuggestionsResponse,
    TranslateRequest,
)
from studio.models.session import SessionView
from studio.services.session_service.main import StudioServices as ss
from studio.services.session_service.session import SessionStore
from studio.services.session_service.workflow import StudioWorkflow
from studio.utility.data_url import decode_bytes, read_local_file
from studio.utility.logger import AppLogger

router = APIRouter(prefix="/api/studio", tags=["Studio"])
logger = AppLogger.get_logger(__name__)

DOWNLOAD_FILENAME = "gemini-image.png"


@router.get("/options")
async def get_options(service: Options = Depends(ss.get_options)) -> dict[str, Any]:
    """Return aspect ratios, style presets and style-refinement quick prompts."""
    return service.get_options()


@router.post("/sessions", response_model=SessionView, status_code=status.HTTP_201_CREATED)
async def create_session(store: SessionStore = Depends(ss.get_store)) -> SessionView:
    """Start a new studio workflow with empty histories."""
    return store.create().snapshot()


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(session_id: str, store: SessionStore = Depends(ss.get_store)) -> SessionView:
    return store.get(session_id).snapshot()


@router.delete("/sessions/{session_id}")
async def delete_session(
    session_id: str, store: SessionStore = Depends(ss.get_store)
) -> dict[str, bool]:
    """Discard a session; its in-flight results are dropped."""
    return {"success": store.discard(session_id)}


@router.post("/sessions/{session_id}/source", response_model=SessionView)
async def upload_source(
    session_id: str,
    file: UploadFile = File(...),
    store: SessionStore = Depends(ss.get_store),
) -> SessionView:
    """Upload the product image. Resets the edit history and suggestions."""
    session = store.get(session_id)
    data_url = await read_local_file(file)
    session.set_source_image(data_url)
    return session.snapshot()


@router.post("/sessions/{session_id}/reference", response_model=SessionView)
async def upload_reference(
    session_id: str,
    file: UploadFile = File(...),
    store: SessionStore = Depends(ss.get_store),
) -> SessionView:
    """Upload the optional style reference image."""
    session = store.get(session_id)
    session.set_reference_image(await read_local_file(file))
    return session.snapshot()


@router.delete("/sessions/{session_id}/reference", response_model=SessionView)
async def clear_reference(
    session_id: str, store: SessionStore = Depends(ss.get_store)
) -> SessionView:
    session = store.get(session_id)
    session.clear_reference_image()
    return session.snapshot()


@router.post("/sessions/{session_id}/edit", response_model=SessionView)
async def edit_image(
    session_id: str,
    payload: EditRequest,
    store: SessionStore = Depends(ss.get_store),
    workflow: StudioWorkflow = Depends(ss.get_workflow),
) -> SessionView:
    """Edit the displayed image with Gemini and push the result onto the history."""
    session = store.get(session_id)
    try:
        await workflow.edit(session, payload.prompt)
        return session.snapshot()
    except StudioError:
        raise
    except Exception as e:
        logger.exception(f"Edit endpoint error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unexpected error while editing image.",
        )


@router.post("/sessions/{session_id}/history/undo", response_model=EditHistoryView)
async def undo(session_id: str, store: SessionStore = Depends(ss.get_store)) -> EditHistoryView:
    history = store.get(session_id).edit_history
    history.undo()
    return history.snapshot()


@router.post("/sessions/{session_id}/history/redo", response_model=EditHistoryView)
async def redo(session_id: str, store: SessionStore = Depends(ss.get_store)) -> EditHistoryView:
    history = store.get(session_id).edit_history
    history.redo()
    return history.snapshot()


@router.post("/sessions/{session_id}/history/jump", response_model=EditHistoryView)
async def jump(
    session_id: str, payload: JumpRequest, store: SessionStore = Depends(ss.get_store)
) -> EditHistoryView:
    """Select a history thumbnail; index -1 shows the original image."""
    history = store.get(session_id).edit_history
    history.jump_to(payload.index)
    return history.snapshot()


@router.post("/sessions/{session_id}/suggestions", response_model=SuggestionsResponse)
async def suggestions(
    session_id: str,
    store: SessionStore = Depends(ss.get_store),
    workflow: StudioWorkflow = Depends(ss.get_workflow),
) -> SuggestionsResponse:
    """Ask the model for photoshoot prompt ideas for the product image."""
    session = store.get(session_id)
    try:
        return SuggestionsResponse(suggestions=await workflow.suggest(session))
    except StudioError:
        raise
    except Exception as e:
        logger.exception(f"Suggestions endpoint error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get suggestions.",
        )


@router.post("/sessions/{session_id}/translate", response_model=RefinementResult)
async def translate(
    session_id: str,
    payload: TranslateRequest,
    store: SessionStore = Depends(ss.get_store),
    workflow: StudioWorkflow = Depends(ss.get_workflow),
) -> RefinementResult:
    """Translate Bangla/Banglish/English text into a refined English prompt."""
    session = store.get(session_id)
    return await workflow.translate(session, payload.text)


@router.post("/sessions/{session_id}/refine-style", response_model=RefinementResult)
async def refine_style(
    session_id: str,
    payload: RefineStyleRequest,
    store: SessionStore = Depends(ss.get_store),
    workflow: StudioWorkflow = Depends(ss.get_workflow),
) -> RefinementResult:
    """Rewrite a suggestion so the scene follows the reference image's style."""
    session = store.get(session_id)
    return await workflow.refine_style(session, payload.suggestion)


@router.post("/sessions/{session_id}/generate", response_model=GenerateResponse)
async def generate(
    session_id: str,
    payload: GenerateRequest,
    store: SessionStore = Depends(ss.get_store),
    workflow: StudioWorkflow = Depends(ss.get_workflow),
) -> GenerateResponse:
    """Generate a new image from text in the chosen style and aspect ratio."""
    session = store.get(session_id)
    try:
        image = await workflow.generate(
            session, payload.prompt, payload.aspect_ratio, payload.style
        )
        return GenerateResponse(image=image, prompt_history=session.prompt_history.snapshot())
    except StudioError:
        raise
    except Exception as e:
        logger.exception(f"Generate endpoint error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unexpected error while generating image.",
        )


@router.post("/sessions/{session_id}/prompts/live", response_model=PromptHistoryView)
async def live_edit(
    session_id: str, payload: LiveEditRequest, store: SessionStore = Depends(ss.get_store)
) -> PromptHistoryView:
    """Record what is typed in the prompt box."""
    history = store.get(session_id).prompt_history
    history.on_live_edit(payload.text)
    return history.snapshot()


@router.post("/sessions/{session_id}/prompts/older", response_model=PromptNavigationResponse)
async def prompt_older(
    session_id: str, store: SessionStore = Depends(ss.get_store)
) -> PromptNavigationResponse:
    history = store.get(session_id).prompt_history
    display = history.navigate_older()
    return PromptNavigationResponse(display=display, history=history.snapshot())


@router.post("/sessions/{session_id}/prompts/newer", response_model=PromptNavigationResponse)
async def prompt_newer(
    session_id: str, store: SessionStore = Depends(ss.get_store)
) -> PromptNavigationResponse:
    history = store.get(session_id).prompt_history
    display = history.navigate_newer()
    return PromptNavigationResponse(display=display, history=history.snapshot())


@router.get("/sessions/{session_id}/download")
async def download_image(
    session_id: str,
    target: Literal["edit", "generated"] = "edit",
    store: SessionStore = Depends(ss.get_store),
):
    """
    Download the displayed edit result or the last generated image.
    target ∈ [edit, generated]
    """
    session = store.get(session_id)
    data_url = session.display_image() if target == "edit" else session.generated_image
    if not data_url:
        logger.error(f"Nothing to download for session {session_id} ({target})")
        raise ValidationError(
            "No image available to download.",
            status_code=404,
            error_type="image_not_found",
        )

    raw_bytes, mime_type = decode_bytes(data_url)
    return StreamingResponse(
        io.BytesIO(raw_bytes),
        media_type=mime_type,
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_FILENAME}"'},
    )
