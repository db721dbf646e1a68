"""End-to-end API tests against the mock capability."""

import io

from fastapi.testclient import TestClient
from PIL import Image

from studio.config.settings import Settings
from studio.controller.main_controller import create_app
from studio.services.capability.mock import MockCapability


def _png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), (0, 128, 0)).save(buf, format="PNG")
    return buf.getvalue()


def create_test_app():
    return create_app(settings=Settings(run_mode="mock"), capability=MockCapability())


class TestHealth:
    def test_health_endpoints(self):
        client = TestClient(create_test_app())
        assert client.get("/").json()["mode"] == "mock"
        assert client.get("/health").json()["status"] == "ok"


class TestStudioApi:
    def setup_method(self):
        self.client = TestClient(create_test_app())
        resp = self.client.post("/api/studio/sessions")
        assert resp.status_code == 201
        self.session_id = resp.json()["session_id"]
        self.base = f"/api/studio/sessions/{self.session_id}"

    def _upload_source(self):
        files = {"file": ("product.png", _png_bytes(), "image/png")}
        resp = self.client.post(f"{self.base}/source", files=files)
        assert resp.status_code == 200
        return resp.json()

    def test_options(self):
        body = self.client.get("/api/studio/options").json()
        assert [o["value"] for o in body["aspect_ratios"]] == ["1:1", "16:9", "9:16", "4:3", "3:4"]
        assert len(body["style_presets"]) == 5
        assert body["style_refinements"]

    def test_unknown_session_is_404(self):
        resp = self.client.get("/api/studio/sessions/nope")
        assert resp.status_code == 404
        assert resp.json()["error_type"] == "session_not_found"

    def test_upload_source(self):
        body = self._upload_source()
        assert body["source_image"].startswith("data:image/png;base64,")
        assert body["edit_history"]["viewing_original"] is True

    def test_upload_rejects_non_image(self):
        files = {"file": ("notes.txt", b"hello", "text/plain")}
        resp = self.client.post(f"{self.base}/source", files=files)
        assert resp.status_code == 415

    def test_edit_without_source(self):
        resp = self.client.post(f"{self.base}/edit", json={"prompt": "make it blue"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Please upload a product image."

    def test_blank_edit_prompt_is_studio_validation_error(self):
        self._upload_source()
        resp = self.client.post(f"{self.base}/edit", json={"prompt": "   "})

        assert resp.status_code == 400
        body = resp.json()
        assert body["status"] == "error"
        assert body["error_type"] == "validation_error"
        assert body["message"] == "Please enter a prompt."
        assert self.client.get(self.base).json()["edit_history"]["entries"] == []

    def test_blank_generate_prompt_is_studio_validation_error(self):
        resp = self.client.post(f"{self.base}/generate", json={"prompt": "  "})

        assert resp.status_code == 400
        assert resp.json()["error_type"] == "validation_error"
        assert resp.json()["message"] == "Please enter a prompt."
        assert self.client.get(self.base).json()["prompt_history"]["entries"] == []

    def test_edit_undo_redo_jump(self):
        self._upload_source()
        for prompt in ("blue", "shadow"):
            resp = self.client.post(f"{self.base}/edit", json={"prompt": prompt})
            assert resp.status_code == 200

        body = resp.json()
        assert body["edit_history"]["cursor"] == 1
        assert body["display_image"] == body["edit_history"]["entries"][1]

        undo = self.client.post(f"{self.base}/history/undo").json()
        assert undo["cursor"] == 0 and undo["can_redo"] is True

        redo = self.client.post(f"{self.base}/history/redo").json()
        assert redo["cursor"] == 1

        jump = self.client.post(f"{self.base}/history/jump", json={"index": -1}).json()
        assert jump["viewing_original"] is True

        bad = self.client.post(f"{self.base}/history/jump", json={"index": 5})
        assert bad.status_code == 400

    def test_suggestions_translate_and_refine_style(self):
        self._upload_source()
        ideas = self.client.post(f"{self.base}/suggestions").json()["suggestions"]
        assert len(ideas) == 3

        translated = self.client.post(f"{self.base}/translate", json={"text": "lal juta"}).json()
        assert translated["source_text"] == "lal juta"
        assert translated["refined_text"]

        missing = self.client.post(f"{self.base}/refine-style", json={"suggestion": ideas[0]})
        assert missing.status_code == 400

        files = {"file": ("ref.png", _png_bytes(), "image/png")}
        self.client.post(f"{self.base}/reference", files=files)
        styled = self.client.post(f"{self.base}/refine-style", json={"suggestion": ideas[0]})
        assert styled.status_code == 200
        assert styled.json()["style_image"]["mime_type"] == "image/png"

        cleared = self.client.delete(f"{self.base}/reference").json()
        assert cleared["reference_image"] is None
        assert cleared["style_refinement"] is None

    def test_translate_blank_text(self):
        resp = self.client.post(f"{self.base}/translate", json={"text": "  "})
        assert resp.status_code == 400

    def test_generate_and_prompt_navigation(self):
        resp = self.client.post(
            f"{self.base}/generate",
            json={"prompt": "red shoe", "aspectRatio": "16:9", "style": "cinematic"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["image"].startswith("data:image/png;base64,")
        assert body["prompt_history"]["entries"] == ["red shoe"]

        self.client.post(f"{self.base}/prompts/live", json={"text": "draft"})
        older = self.client.post(f"{self.base}/prompts/older").json()
        assert older["display"] == "red shoe"
        newer = self.client.post(f"{self.base}/prompts/newer").json()
        assert newer["display"] == "draft"

    def test_generate_rejects_unknown_aspect_ratio(self):
        resp = self.client.post(
            f"{self.base}/generate", json={"prompt": "shoe", "aspectRatio": "2:1"}
        )
        assert resp.status_code == 422

    def test_download(self):
        missing = self.client.get(f"{self.base}/download")
        assert missing.status_code == 404

        self._upload_source()
        self.client.post(f"{self.base}/edit", json={"prompt": "blue"})
        resp = self.client.get(f"{self.base}/download", params={"target": "edit"})

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert 'filename="gemini-image.png"' in resp.headers["content-disposition"]
        assert resp.content == _png_bytes()

    def test_delete_session(self):
        assert self.client.delete(self.base).json() == {"success": True}
        assert self.client.get(self.base).status_code == 404
