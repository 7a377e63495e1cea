import json
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from ats_fakes import JOB_DESCRIPTION, FakeTextClient, make_context, sample_portfolio

from resume_ats.api.v1.deps import get_analysis_store, get_ats_context
from resume_ats.core.config import settings
from resume_ats.main import app
from resume_ats.schemas.optimized import OptimizationResult
from resume_ats.storage.analysis_store import AnalysisStore


def _sse_events(body):
    events = []
    for block in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in block.splitlines() if ": " in line)
        events.append((lines["event"], json.loads(lines["data"])))
    return events


class AtsApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)
        cls.headers = {"X-API-Key": settings.api_key or ""}

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store = AnalysisStore(Path(self._tmp.name) / "ats.db")
        self.store.init()
        self.text_client = FakeTextClient()
        app.dependency_overrides[get_analysis_store] = lambda: self.store
        app.dependency_overrides[get_ats_context] = lambda: make_context(text_client=self.text_client)
        self.portfolio_json = sample_portfolio().model_dump(mode="json")

    def tearDown(self):
        app.dependency_overrides.clear()
        self._tmp.cleanup()

    def _put_portfolio(self, user_id="user-1"):
        response = self.client.put(f"/v1/portfolios/{user_id}", json=self.portfolio_json, headers=self.headers)
        self.assertEqual(response.status_code, 200)
        return response

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_portfolio_put_and_get(self):
        saved = self._put_portfolio().json()
        self.assertEqual(saved["user_id"], "user-1")
        self.assertIn("updated_at", saved)

        response = self.client.get("/v1/portfolios/user-1", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["work_experiences"][0]["company"], "Northwind")

        missing = self.client.get("/v1/portfolios/nobody", headers=self.headers)
        self.assertEqual(missing.status_code, 404)

    def test_analyze_contract(self):
        self._put_portfolio()
        response = self.client.post(
            "/v1/ats/analyze",
            json={"user_id": "user-1", "resume_id": "resume-1", "job_description": JOB_DESCRIPTION},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertAlmostEqual(body["scores"]["overall_score"], 70.0)
        self.assertEqual(body["priority_keywords"], ["aws", "docker"])
        self.assertEqual(body["job"]["jobTitle"], "Backend Engineer")
        self.assertEqual(len(body["recommendations"]), 4)

        fetched = self.client.get(
            f"/v1/ats/analyses/{body['analysis_id']}", params={"user_id": "user-1"}, headers=self.headers
        )
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.json()["analysis_id"], body["analysis_id"])

        foreign = self.client.get(
            f"/v1/ats/analyses/{body['analysis_id']}", params={"user_id": "user-2"}, headers=self.headers
        )
        self.assertEqual(foreign.status_code, 404)

    def test_analyze_without_portfolio_is_404(self):
        response = self.client.post(
            "/v1/ats/analyze",
            json={"user_id": "nobody", "job_description": JOB_DESCRIPTION},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 404)

    def test_analyze_extraction_failure_is_502(self):
        self._put_portfolio()
        self.text_client = FakeTextClient(job="not json")
        response = self.client.post(
            "/v1/ats/analyze",
            json={"user_id": "user-1", "resume_id": "resume-1", "job_description": JOB_DESCRIPTION},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 502)
        self.assertIsNone(self.store.latest_analysis("user-1", "resume-1"))

    def test_analyze_rejects_short_job_description(self):
        response = self.client.post(
            "/v1/ats/analyze",
            json={"user_id": "user-1", "job_description": "too short"},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 422)

    def test_unknown_analysis_is_404(self):
        response = self.client.get("/v1/ats/analyses/missing", params={"user_id": "user-1"}, headers=self.headers)
        self.assertEqual(response.status_code, 404)

    def test_analysis_lookup_requires_user_id(self):
        response = self.client.get("/v1/ats/analyses/missing", headers=self.headers)
        self.assertEqual(response.status_code, 422)

    def test_analyze_stream_events(self):
        self._put_portfolio()
        response = self.client.post(
            "/v1/ats/analyze/stream",
            json={"user_id": "user-1", "job_description": JOB_DESCRIPTION},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/event-stream"))
        events = _sse_events(response.text)
        self.assertEqual([name for name, _ in events], ["progress", "progress", "progress", "complete"])
        self.assertAlmostEqual(events[-1][1]["analysis"]["scores"]["overall_score"], 70.0)

    def test_analyze_stream_reports_errors_as_events(self):
        self._put_portfolio()
        self.text_client = FakeTextClient(fail_on={"resume"})
        response = self.client.post(
            "/v1/ats/analyze/stream",
            json={"user_id": "user-1", "job_description": JOB_DESCRIPTION},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        name, payload = _sse_events(response.text)[-1]
        self.assertEqual(name, "error")
        self.assertEqual(payload["status"], 502)

    def test_optimize_contract(self):
        self._put_portfolio()
        analysis = self.client.post(
            "/v1/ats/analyze",
            json={"user_id": "user-1", "job_description": JOB_DESCRIPTION},
            headers=self.headers,
        ).json()

        response = self.client.post(
            "/v1/ats/optimize",
            json={"user_id": "user-1", "analysis_id": analysis["analysis_id"]},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["analysis_id"], analysis["analysis_id"])
        self.assertEqual(body["output_format"], "structured")
        self.assertEqual(body["structured"]["workExperiences"][0]["company"], "Northwind")
        self.assertTrue(body["optimized_resume_id"])
        self.assertLessEqual(len(body["modifications"]), 5)

    def test_optimize_requires_an_analysis_source(self):
        response = self.client.post("/v1/ats/optimize", json={"user_id": "user-1"}, headers=self.headers)
        self.assertEqual(response.status_code, 422)

    def test_optimize_unknown_analysis_is_404(self):
        self._put_portfolio()
        response = self.client.post(
            "/v1/ats/optimize",
            json={"user_id": "user-1", "analysis_id": "missing"},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 404)

    def test_optimize_failure_is_502(self):
        self._put_portfolio()
        self.text_client = FakeTextClient(optimized="{broken")
        response = self.client.post(
            "/v1/ats/optimize",
            json={"user_id": "user-1", "job_description": JOB_DESCRIPTION},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 502)

    def test_optimized_resumes_list_and_compare(self):
        self._put_portfolio()
        analysis = self.client.post(
            "/v1/ats/analyze",
            json={"user_id": "user-1", "resume_id": "resume-1", "job_description": JOB_DESCRIPTION},
            headers=self.headers,
        ).json()
        optimized = self.client.post(
            "/v1/ats/optimize",
            json={"user_id": "user-1", "analysis_id": analysis["analysis_id"]},
            headers=self.headers,
        ).json()
        optimized_id = optimized["optimized_resume_id"]

        listed = self.client.get(
            "/v1/ats/optimized-resumes", params={"user_id": "user-1", "resume_id": "resume-1"}, headers=self.headers
        )
        self.assertEqual(listed.status_code, 200)
        self.assertEqual([item["optimized_resume_id"] for item in listed.json()], [optimized_id])
        self.assertIn("### Software Engineer at Northwind", listed.json()[0]["markdown"])

        other_resume = self.client.get(
            "/v1/ats/optimized-resumes", params={"user_id": "user-1", "resume_id": "resume-2"}, headers=self.headers
        )
        self.assertEqual(other_resume.json(), [])

        compared = self.client.get(
            f"/v1/ats/optimized-resumes/{optimized_id}/compare", params={"user_id": "user-1"}, headers=self.headers
        )
        self.assertEqual(compared.status_code, 200)
        body = compared.json()
        self.assertEqual(body["original"]["resume_id"], "resume-1")
        self.assertEqual(body["original"]["analysis"]["analysis_id"], analysis["analysis_id"])
        self.assertEqual(body["modified"]["resume"]["optimized_resume_id"], optimized_id)
        self.assertAlmostEqual(body["modified"]["ats_score"], 70.0)

    def test_compare_of_another_users_resume_is_404(self):
        optimized_id = self.store.save_optimized_resume(
            "user-1",
            OptimizationResult(output_format="markdown", markdown="# Sam Rivera", ats_score=40.0),
        )

        foreign = self.client.get(
            f"/v1/ats/optimized-resumes/{optimized_id}/compare", params={"user_id": "user-2"}, headers=self.headers
        )
        self.assertEqual(foreign.status_code, 404)

        owned = self.client.get(
            f"/v1/ats/optimized-resumes/{optimized_id}/compare", params={"user_id": "user-1"}, headers=self.headers
        )
        self.assertEqual(owned.status_code, 200)
        self.assertIsNone(owned.json()["original"]["analysis"])
        self.assertEqual(owned.json()["modified"]["ats_score"], 40.0)

        listed = self.client.get("/v1/ats/optimized-resumes", params={"user_id": "user-2"}, headers=self.headers)
        self.assertEqual(listed.json(), [])

    def test_match_job_contract(self):
        self._put_portfolio()
        response = self.client.post(
            "/v1/match-job",
            json={"user_id": "user-1", "job_description": JOB_DESCRIPTION},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["workExperienceIds"], ["we-1"])
        self.assertEqual(body["resumeTitle"], "Backend Engineer - Python Services")


if __name__ == "__main__":
    unittest.main()
