"""Tests for session state and the workflow that updates it."""

import asyncio

import pytest

from studio.handlers.error_handler import (
    NO_EDITED_IMAGE,
    EmptyResultError,
    FormatError,
    RemoteError,
    ValidationError,
)
from studio.models.image import ContentPart
from studio.services.capability.mock import MockCapability
from studio.services.refinement_service.orchestrator import PromptRefinementOrchestrator
from studio.services.session_service.session import SessionStore, StudioSession
from studio.services.session_service.workflow import StudioWorkflow
from studio.utility.data_url import decode_bytes, encode, encode_bytes

SOURCE = encode_bytes(b"source", "image/png")
NEW_SOURCE = encode_bytes(b"new source", "image/png")
REFERENCE = encode_bytes(b"reference", "image/jpeg")


class NumberedEdits(MockCapability):
    """Returns a distinct image per edit so history entries can be told apart."""

    def __init__(self):
        super().__init__()
        self.edit_calls = []

    async def edit_images(self, prompt, images):
        self.edit_calls.append(list(images))
        return [ContentPart(data=f"edit-{len(self.edit_calls)}".encode(), mime_type="image/png")]


class FailingEdits(MockCapability):
    async def edit_images(self, prompt, images):
        raise RuntimeError("500 upstream server error")


class TextOnlyEdits(MockCapability):
    async def edit_images(self, prompt, images):
        return [ContentPart(text="I can only describe it.")]


class BlockingSuggestions(MockCapability):
    def __init__(self, release: asyncio.Event):
        super().__init__()
        self.release = release

    async def analyze_image_for_suggestions(self, image):
        await self.release.wait()
        return await super().analyze_image_for_suggestions(image)


class EmptyGenerator(MockCapability):
    async def generate_image(self, prompt, aspect_ratio, count=1, output_format="image/png"):
        return []


class BlockingEdits(MockCapability):
    def __init__(self, release: asyncio.Event):
        super().__init__()
        self.release = release

    async def edit_images(self, prompt, images):
        await self.release.wait()
        return await super().edit_images(prompt, images)


def make_workflow(capability) -> StudioWorkflow:
    return StudioWorkflow(PromptRefinementOrchestrator(capability))


# --- StudioSession / SessionStore --------------------------------------------------


class TestSession:
    def test_new_source_resets_edit_history(self):
        session = StudioSession()
        session.set_source_image(SOURCE)
        session.edit_history.commit("data:image/png;base64,QQ==")
        session.suggestions = ["a"]

        session.set_source_image(SOURCE)

        assert session.edit_history.entries == []
        assert session.suggestions == []

    def test_invalid_source_is_rejected(self):
        session = StudioSession()
        with pytest.raises(FormatError):
            session.set_source_image("not a data url")
        assert session.source_image is None

    def test_edit_base_falls_back_to_source(self):
        session = StudioSession()
        session.set_source_image(SOURCE)
        assert session.display_image() is None
        assert session.edit_base_image() == SOURCE

    def test_clear_reference_drops_style_refinement(self):
        session = StudioSession()
        session.set_reference_image(REFERENCE)
        session.style_refinement = object()
        session.clear_reference_image()
        assert session.reference_image is None
        assert session.style_refinement is None

    def test_store_lifecycle(self):
        store = SessionStore()
        session = store.create()
        assert store.get(session.session_id) is session
        assert len(store) == 1
        assert store.discard(session.session_id) is True
        assert store.discard(session.session_id) is False

    def test_unknown_session(self):
        with pytest.raises(ValidationError) as exc_info:
            SessionStore().get("missing")
        assert exc_info.value.status_code == 404


# --- StudioWorkflow -------------------------------------------------------------------


class TestWorkflowEdit:
    def test_edits_chain_from_displayed_image(self):
        capability = NumberedEdits()
        workflow = make_workflow(capability)
        session = StudioSession()
        session.set_source_image(SOURCE)

        first = asyncio.run(workflow.edit(session, "make it blue"))
        asyncio.run(workflow.edit(session, "add shadow"))

        assert session.edit_history.entries[0] == first
        assert session.edit_history.cursor == 1
        assert decode_bytes(session.display_image())[0] == b"edit-2"
        assert decode_bytes(first)[0] == b"edit-1"
        # second edit started from the first result
        assert encode(capability.edit_calls[1][0]) == first

    def test_reference_image_is_sent_second(self):
        capability = NumberedEdits()
        session = StudioSession()
        session.set_source_image(SOURCE)
        session.set_reference_image(REFERENCE)

        asyncio.run(make_workflow(capability).edit(session, "match style"))

        sent = capability.edit_calls[0]
        assert [p.mime_type for p in sent] == ["image/png", "image/jpeg"]

    def test_requires_source(self):
        with pytest.raises(ValidationError):
            asyncio.run(make_workflow(MockCapability()).edit(StudioSession(), "blue"))

    def test_duplicate_edit_is_rejected_while_in_flight(self):
        async def scenario():
            release = asyncio.Event()
            workflow = make_workflow(BlockingEdits(release))
            session = StudioSession()
            session.set_source_image(SOURCE)

            first = asyncio.create_task(workflow.edit(session, "blue"))
            await asyncio.sleep(0)
            assert session.is_busy("edit")

            with pytest.raises(ValidationError) as exc_info:
                await workflow.edit(session, "red")
            assert exc_info.value.status_code == 409

            release.set()
            await first
            return session

        session = asyncio.run(scenario())
        assert not session.is_busy("edit")
        assert len(session.edit_history.entries) == 1


class TestWorkflowGenerate:
    def test_success_records_prompt(self):
        session = StudioSession()
        image = asyncio.run(
            make_workflow(MockCapability()).generate(session, " red shoe ", "1:1", "minimalist")
        )
        assert session.generated_image == image
        assert session.prompt_history.entries == ["red shoe"]

    def test_failure_keeps_prompt_history(self):
        session = StudioSession()
        with pytest.raises(EmptyResultError):
            asyncio.run(
                make_workflow(EmptyGenerator()).generate(session, "shoe", "1:1", "minimalist")
            )
        assert session.prompt_history.entries == []
        assert session.generated_image is None
        assert not session.is_busy("generate")


class TestWorkflowText:
    def test_suggest_stores_ideas(self):
        session = StudioSession()
        session.set_source_image(SOURCE)
        ideas = asyncio.run(make_workflow(MockCapability()).suggest(session))
        assert len(ideas) == 3
        assert session.suggestions == ideas

    def test_suggest_requires_source(self):
        with pytest.raises(ValidationError):
            asyncio.run(make_workflow(MockCapability()).suggest(StudioSession()))

    def test_translate_records_result(self):
        session = StudioSession()
        result = asyncio.run(make_workflow(MockCapability()).translate(session, "lal juta"))
        assert result.source_text == "lal juta"
        assert session.translation == result

    def test_refine_style_uses_reference(self):
        session = StudioSession()
        session.set_reference_image(REFERENCE)
        result = asyncio.run(make_workflow(MockCapability()).refine_style(session, "beach"))
        assert result.style_image.mime_type == "image/jpeg"
        assert session.style_refinement == result

    def test_refine_style_without_reference(self):
        with pytest.raises(ValidationError):
            asyncio.run(make_workflow(MockCapability()).refine_style(StudioSession(), "beach"))


class TestWorkflowEditFailures:
    def setup_method(self):
        self.session = StudioSession()
        self.session.set_source_image(SOURCE)
        self.entries = [encode_bytes(name, "image/png") for name in (b"a", b"b", b"c")]
        for entry in self.entries:
            self.session.edit_history.commit(entry)
        self.session.edit_history.undo()

    def _assert_history_untouched(self):
        assert self.session.edit_history.entries == self.entries
        assert self.session.edit_history.cursor == 1
        assert not self.session.is_busy("edit")

    def test_remote_failure_keeps_history(self):
        with pytest.raises(RemoteError) as exc_info:
            asyncio.run(make_workflow(FailingEdits()).edit(self.session, "blue"))
        assert exc_info.value.error_type == "server_error"
        self._assert_history_untouched()

    def test_text_only_reply_keeps_history(self):
        with pytest.raises(EmptyResultError) as exc_info:
            asyncio.run(make_workflow(TextOnlyEdits()).edit(self.session, "blue"))
        assert exc_info.value.message == NO_EDITED_IMAGE
        self._assert_history_untouched()

    def test_blank_prompt_keeps_history(self):
        with pytest.raises(ValidationError):
            asyncio.run(make_workflow(MockCapability()).edit(self.session, "   "))
        self._assert_history_untouched()


class TestWorkflowSourceSwap:
    def test_new_source_during_edit_drops_result(self):
        async def scenario():
            release = asyncio.Event()
            workflow = make_workflow(BlockingEdits(release))
            session = StudioSession()
            session.set_source_image(SOURCE)

            task = asyncio.create_task(workflow.edit(session, "blue"))
            await asyncio.sleep(0)
            session.set_source_image(NEW_SOURCE)
            release.set()
            return session, await task

        session, result = asyncio.run(scenario())

        assert result is None
        assert session.source_image == NEW_SOURCE
        assert session.edit_history.entries == []
        assert session.display_image() is None
        assert not session.is_busy("edit")

    def test_new_source_during_suggestions_drops_ideas(self):
        async def scenario():
            release = asyncio.Event()
            workflow = make_workflow(BlockingSuggestions(release))
            session = StudioSession()
            session.set_source_image(SOURCE)

            task = asyncio.create_task(workflow.suggest(session))
            await asyncio.sleep(0)
            session.set_source_image(NEW_SOURCE)
            release.set()
            return session, await task

        session, ideas = asyncio.run(scenario())

        assert ideas == []
        assert session.suggestions == []


class TestSessionStoreLimit:
    def test_least_recently_used_is_evicted(self):
        store = SessionStore(max_sessions=2)
        first = store.create()
        second = store.create()
        store.get(first.session_id)

        third = store.create()

        assert len(store) == 2
        assert store.get(first.session_id) is first
        assert store.get(third.session_id) is third
        with pytest.raises(ValidationError):
            store.get(second.session_id)

    def test_busy_session_is_kept(self):
        async def scenario():
            store = SessionStore(max_sessions=2)
            busy = store.create()
            idle = store.create()
            async with busy.in_flight("edit"):
                store.create()
            return store, busy, idle

        store, busy, idle = asyncio.run(scenario())

        assert store.get(busy.session_id) is busy
        with pytest.raises(ValidationError):
            store.get(idle.session_id)
