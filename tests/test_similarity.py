import unittest

from ats_fakes import FakeEmbeddingClient

from resume_ats.ats.embeddings import EMPTY_TEXT_PLACEHOLDER, EmbeddingService, cosine_similarity
from resume_ats.ats.fusion import FusionWeights, fuse
from resume_ats.ats.similarity import (
    SimilarityEngine,
    contains_match,
    experience_relevance,
    job_keyword_pool,
    keyword_match_percent,
    match_percent,
    resume_keyword_pool,
    skill_overlap_percent,
)
from resume_ats.schemas.job import JobRecord
from resume_ats.schemas.resume import ResumeRecord


def _job(**overrides):
    payload = {
        "jobTitle": "Backend Engineer",
        "qualifications": {"required": ["python"], "preferred": []},
        "extractedKeywords": ["python", "aws", "docker"],
    }
    payload.update(overrides)
    return JobRecord.model_validate(payload)


def _resume(**overrides):
    payload = {
        "Skills": [{"category": "Languages", "skillName": "Python"}],
        "Extracted Keywords": ["python"],
    }
    payload.update(overrides)
    return ResumeRecord.model_validate(payload)


class MatchingTests(unittest.TestCase):
    def test_containment_matches_in_both_directions(self):
        self.assertTrue(contains_match("java", "javascript"))
        self.assertTrue(contains_match("javascript", "java"))
        self.assertFalse(contains_match("go", "rust"))

    def test_empty_needles_score_zero(self):
        self.assertEqual(match_percent([], ["python"]), 0.0)
        self.assertEqual(match_percent(["python"], []), 0.0)

    def test_pools_are_lowercased_and_deduplicated(self):
        job = _job(
            extractedKeywords=["Python", "python", " "],
            qualifications={"required": ["PYTHON"], "preferred": ["Docker"]},
        )
        self.assertEqual(job_keyword_pool(job), ["python", "docker"])

    def test_resume_pool_draws_on_experience_and_projects(self):
        resume = _resume(
            Experiences=[
                {
                    "jobTitle": "Engineer",
                    "company": "Northwind",
                    "description": ["Deployed services to Kubernetes"],
                    "technologiesUsed": ["Terraform"],
                }
            ],
            Projects=[{"projectName": "Ledger", "description": "Budget tracker", "technologiesUsed": ["SQLite"]}],
        )
        pool = resume_keyword_pool(resume)
        for term in ("python", "terraform", "kubernetes", "deployed", "sqlite", "budget", "tracker"):
            self.assertIn(term, pool)

    def test_keyword_and_skill_percentages(self):
        job = _job()
        resume = _resume()
        self.assertAlmostEqual(keyword_match_percent(job, resume), 100 / 3)
        self.assertEqual(skill_overlap_percent(job, resume), 100.0)

    def test_skill_overlap_uses_containment(self):
        job = _job(qualifications={"required": ["Python", "AWS"], "preferred": ["docker"]})
        resume = _resume(Skills=[{"skillName": "python3"}])
        self.assertAlmostEqual(skill_overlap_percent(job, resume), 100 / 3)

    def test_experience_relevance_averages_title_overlap(self):
        job = _job(jobTitle="Senior Backend Engineer")
        resume = _resume(
            Experiences=[
                {"jobTitle": "Backend Engineer", "company": "A"},
                {"jobTitle": "Designer", "company": "B"},
            ]
        )
        self.assertAlmostEqual(experience_relevance(job, resume), 100 / 3)

    def test_experience_relevance_edge_cases(self):
        self.assertEqual(experience_relevance(_job(), _resume()), 0.0)
        resume = _resume(Experiences=[{"jobTitle": "Backend Engineer", "company": "A"}])
        self.assertEqual(experience_relevance(_job(jobTitle=""), resume), 0.0)

    def test_experience_without_a_title_counts_as_no_overlap(self):
        resume = _resume(
            Experiences=[
                {"jobTitle": "", "company": "A"},
                {"company": "B"},
                {"jobTitle": "Backend Engineer", "company": "C"},
            ]
        )
        self.assertAlmostEqual(experience_relevance(_job(), resume), 100 / 3)
        self.assertEqual(experience_relevance(_job(), _resume(Experiences=[{"jobTitle": "   "}])), 0.0)


class FusionTests(unittest.TestCase):
    def test_saturated_inputs_score_exactly_100(self):
        self.assertEqual(fuse(1.0, 100.0, 100.0, 100.0), 100.0)

    def test_zero_inputs_score_zero(self):
        self.assertEqual(fuse(0.0, 0.0, 0.0, 0.0), 0.0)

    def test_weighted_sum(self):
        self.assertAlmostEqual(fuse(0.5, 50.0, 50.0, 50.0), 50.0)

    def test_clamps_out_of_range_weights(self):
        heavy = FusionWeights(cosine=400.0)
        self.assertEqual(fuse(1.0, 0.0, 0.0, 0.0, heavy), 100.0)
        negative = FusionWeights(cosine=-40.0)
        self.assertEqual(fuse(1.0, 0.0, 0.0, 0.0, negative), 0.0)


class CosineTests(unittest.TestCase):
    def test_cosine_similarity(self):
        self.assertAlmostEqual(cosine_similarity([1.0, 0.0], [1.0, 0.0]), 1.0)
        self.assertAlmostEqual(cosine_similarity([1.0, 0.0], [0.0, 1.0]), 0.0)
        self.assertEqual(cosine_similarity([0.0, 0.0], [1.0, 0.0]), 0.0)

    def test_length_mismatch_raises(self):
        with self.assertRaises(ValueError):
            cosine_similarity([1.0], [1.0, 0.0])


class SimilarityEngineTests(unittest.IsolatedAsyncioTestCase):
    async def test_score_with_embeddings(self):
        client = FakeEmbeddingClient(vectors=[[1.0, 0.0], [1.0, 0.0]])
        engine = SimilarityEngine(EmbeddingService(client))

        scores = await engine.score(_job(), _resume())

        self.assertAlmostEqual(scores.cosine_similarity, 1.0)
        self.assertAlmostEqual(scores.keyword_match_percent, 100 / 3)
        self.assertEqual(scores.skill_overlap_percent, 100.0)
        self.assertEqual(scores.experience_relevance, 0.0)
        self.assertAlmostEqual(scores.overall_score, 70.0)
        self.assertEqual(sorted(client.texts), ["python", "python aws docker"])

    async def test_embedding_failure_falls_back_to_keyword_match(self):
        engine = SimilarityEngine(EmbeddingService(FakeEmbeddingClient(fail=True)))

        scores = await engine.score(_job(), _resume())

        self.assertAlmostEqual(scores.cosine_similarity, 1 / 3)
        self.assertAlmostEqual(scores.overall_score, 40 / 3 + 10 + 20)

    async def test_dimension_mismatch_falls_back(self):
        client = FakeEmbeddingClient(vectors=[[1.0, 0.0], [1.0, 0.0, 0.0]])
        engine = SimilarityEngine(EmbeddingService(client))

        scores = await engine.score(_job(), _resume())

        self.assertAlmostEqual(scores.cosine_similarity, 1 / 3)

    async def test_negative_cosine_is_clamped(self):
        client = FakeEmbeddingClient(vectors=[[1.0, 0.0], [-1.0, 0.0]])
        engine = SimilarityEngine(EmbeddingService(client))

        value = await engine.embedding_similarity(["python"], ["cobol"])

        self.assertEqual(value, 0.0)

    async def test_empty_pools_embed_placeholder(self):
        client = FakeEmbeddingClient()
        engine = SimilarityEngine(EmbeddingService(client))
        job = JobRecord.model_validate({})
        resume = ResumeRecord.model_validate({})

        scores = await engine.score(job, resume)

        self.assertEqual(client.texts, [EMPTY_TEXT_PLACEHOLDER, EMPTY_TEXT_PLACEHOLDER])
        self.assertEqual(scores.keyword_match_percent, 0.0)
        self.assertEqual(scores.skill_overlap_percent, 0.0)
        self.assertGreaterEqual(scores.overall_score, 0.0)
        self.assertLessEqual(scores.overall_score, 100.0)


if __name__ == "__main__":
    unittest.main()
