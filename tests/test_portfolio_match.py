import unittest

from ats_fakes import JOB_DESCRIPTION, FakeTextClient, sample_portfolio

from resume_ats.ats.errors import StructuredExtractionFailure
from resume_ats.ats.formatting import portfolio_for_matching
from resume_ats.ats.portfolio_match import match_job_to_portfolio


class PortfolioMatchTests(unittest.IsolatedAsyncioTestCase):
    async def test_unknown_and_duplicate_ids_are_dropped(self):
        client = FakeTextClient()

        result = await match_job_to_portfolio(client, JOB_DESCRIPTION, sample_portfolio(), model="extract-model")

        self.assertEqual(result.work_experience_ids, ["we-1"])
        self.assertEqual(result.education_ids, ["ed-1"])
        self.assertEqual(result.skill_ids, ["sk-1"])
        self.assertEqual(result.resume_title, "Backend Engineer - Python Services")
        self.assertTrue(client.calls[0]["json_mode"])
        self.assertIn("[ID: we-1]", client.calls[0]["prompt"])

    async def test_malformed_answer_fails(self):
        with self.assertRaises(StructuredExtractionFailure):
            await match_job_to_portfolio(FakeTextClient(match="no json here"), JOB_DESCRIPTION, sample_portfolio())

    async def test_provider_error_fails(self):
        with self.assertRaises(StructuredExtractionFailure):
            await match_job_to_portfolio(FakeTextClient(fail_on={"match"}), JOB_DESCRIPTION, sample_portfolio())


class PortfolioForMatchingTests(unittest.TestCase):
    def test_every_item_is_tagged(self):
        text = portfolio_for_matching(sample_portfolio())
        for item_id in ("we-1", "ed-1", "pr-1", "ac-1", "sk-1"):
            self.assertIn(f"[ID: {item_id}]", text)
        self.assertIn("Duration: Mar 2021 - Present", text)


if __name__ == "__main__":
    unittest.main()
