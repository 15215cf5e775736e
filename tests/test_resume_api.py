import unittest
from io import BytesIO

import support

from docx import Document
from fastapi.testclient import TestClient

from skillgap.ai.factory import get_llm_client_factory
from skillgap.ai.types import LLMError
from skillgap.core.security import decrypt_credential
from skillgap.main import app
from skillgap.parsing.parse import DOCX_MIME
from skillgap.storage import store


def _docx_bytes(*lines: str) -> bytes:
    document = Document()
    for line in lines:
        document.add_paragraph(line)
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class ApiTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        store.clear_store()
        self.user = support.create_user()
        self.headers = support.auth_headers(self.user.id)

    def tearDown(self):
        app.dependency_overrides.clear()

    def _use(self, responses):
        stub = support.StubLLMClient(responses)
        factory = support.StubFactory(stub)
        app.dependency_overrides[get_llm_client_factory] = lambda: factory
        return stub


class ResumeUploadTests(ApiTestCase):
    def _upload(self, name, content, mime=DOCX_MIME):
        return self.client.post(
            "/v1/resume/upload",
            files={"resume": (name, content, mime)},
            headers=self.headers,
        )

    def test_docx_upload_stores_text_without_skills(self):
        response = self._upload("resume.docx", _docx_bytes("Jane Doe", "Python and Django developer"))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["resume"]["originalName"], "resume.docx")
        self.assertFalse(body["resume"]["hasSkills"])
        self.assertEqual(body["resume"]["skillCount"], 0)
        self.assertEqual(body["parsingWarnings"], [])

        stored = store.get_resume(self.user.id)
        self.assertIn("Python and Django developer", stored.extracted_text)
        self.assertEqual(stored.mime_type, DOCX_MIME)
        self.assertEqual(stored.extracted_skills, [])

    def test_second_upload_replaces_the_first(self):
        self._upload("first.txt", b"First resume text", "text/plain")
        self._upload("second.txt", b"Second resume text", "text/plain")
        self.assertEqual(store.get_resume(self.user.id).extracted_text, "Second resume text")

    def test_rejects_bad_signature_and_unsupported_types(self):
        bad_docx = self._upload("resume.docx", b"definitely not a zip archive")
        self.assertEqual(bad_docx.status_code, 400)
        legacy_doc = self._upload("resume.doc", b"\xd0\xcf\x11\xe0", "application/msword")
        self.assertEqual(legacy_doc.status_code, 400)
        self.assertIsNone(store.get_resume(self.user.id))

    def test_empty_file_is_rejected(self):
        self.assertEqual(self._upload("resume.docx", b"").status_code, 400)

    def test_get_and_delete(self):
        self.assertEqual(self.client.get("/v1/resume", headers=self.headers).status_code, 404)
        support.create_resume(self.user.id, skills=["Python"])
        summary = self.client.get("/v1/resume", headers=self.headers).json()
        self.assertTrue(summary["hasSkills"])
        self.assertEqual(summary["skillCount"], 1)

        deleted = self.client.delete("/v1/resume", headers=self.headers)
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(self.client.get("/v1/resume", headers=self.headers).status_code, 404)


class ResumeAnalyzeTests(ApiTestCase):
    def _analyze(self):
        return self.client.post("/v1/resume/analyze", headers=self.headers)

    def test_profile_path_saves_skills_and_profile(self):
        support.create_resume(self.user.id)
        stub = self._use({"resume_profile": support.profile_payload(programming=["Python"], frameworks=["Django"])})

        response = self._analyze()
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["skills"], ["Python", "Django"])
        self.assertEqual(body["skillCount"], 2)
        self.assertTrue(body["hasComprehensiveProfile"])
        summary = body["comprehensiveData"]
        self.assertEqual(summary["careerLevel"]["level"], "mid-level")
        self.assertEqual(summary["primaryDomain"], "Backend")
        self.assertEqual(summary["experienceYears"], 5)
        self.assertEqual(len(summary["suitableRoles"]), 3)
        self.assertEqual(stub.calls, ["resume_profile"])

        profile = self.client.get("/v1/resume/profile", headers=self.headers).json()
        self.assertTrue(profile["hasProfile"])
        self.assertEqual(profile["skillsAnalysis"]["programming"], ["Python"])
        self.assertEqual(profile["basicInfo"]["skillCount"], 2)

    def test_falls_back_to_flat_extraction(self):
        support.create_resume(self.user.id)
        stub = self._use({"resume_profile": "garbage", "skill_extraction": '["Python", "SQL"]'})

        body = self._analyze().json()
        self.assertEqual(body["skills"], ["Python", "SQL"])
        self.assertFalse(body["hasComprehensiveProfile"])
        self.assertIsNone(body["comprehensiveData"])
        self.assertEqual(stub.calls, ["resume_profile", "skill_extraction"])

        stored = store.get_resume(self.user.id)
        self.assertEqual(stored.extracted_skills, ["Python", "SQL"])
        self.assertFalse(stored.has_profile)
        self.assertFalse(self.client.get("/v1/resume/profile", headers=self.headers).json()["hasProfile"])

    def test_both_tiers_failing_is_an_error(self):
        support.create_resume(self.user.id)
        self._use(
            {
                "resume_profile": LLMError("quota", code="llm_exception"),
                "skill_extraction": LLMError("quota", code="llm_exception"),
            }
        )
        response = self._analyze()
        self.assertEqual(response.status_code, 500)
        body = response.json()
        self.assertEqual(body["code"], "analysis_failed")
        self.assertIn("Gemini API key", body["message"])
        self.assertEqual(store.get_resume(self.user.id).extracted_skills, [])

    def test_requires_a_resume(self):
        self._use({})
        response = self._analyze()
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "no_resume")


class AccountTests(ApiTestCase):
    def test_me(self):
        body = self.client.get("/v1/auth/me", headers=self.headers).json()
        self.assertEqual(body["email"], "jane@example.com")
        self.assertTrue(body["hasGeminiKey"])

    def test_save_gemini_key(self):
        blank = self.client.post("/v1/api-key/gemini", json={"apiKey": "   "}, headers=self.headers)
        self.assertEqual(blank.status_code, 400)
        self.assertEqual(blank.json()["code"], "invalid_request")

        saved = self.client.post("/v1/api-key/gemini", json={"apiKey": "AIza-new"}, headers=self.headers)
        self.assertEqual(saved.status_code, 200)
        stored = store.get_user(self.user.id).credential
        self.assertNotIn("AIza-new", stored)
        self.assertEqual(decrypt_credential(stored), "AIza-new")

    def test_extension_token_flow(self):
        issued = self.client.post("/v1/auth/extension-token", headers=self.headers).json()
        self.assertEqual(issued["expiresIn"], "30 days")

        status = self.client.post("/v1/extension/auth", json={"token": issued["token"]}).json()
        self.assertEqual(status["user"]["email"], "jane@example.com")
        self.assertFalse(status["hasResume"])
        self.assertTrue(status["hasGeminiKey"])
        self.assertEqual(status["skillCount"], 0)

        support.create_resume(self.user.id, skills=["Python", "AWS"])
        status = self.client.post("/v1/extension/auth", json={"token": issued["token"]}).json()
        self.assertTrue(status["hasSkills"])
        self.assertEqual(status["skillCount"], 2)

    def test_extension_auth_rejects_missing_and_bad_tokens(self):
        self.assertEqual(self.client.post("/v1/extension/auth", json={}).status_code, 401)
        self.assertEqual(self.client.post("/v1/extension/auth", json={"token": "nope"}).status_code, 401)


if __name__ == "__main__":
    unittest.main()
