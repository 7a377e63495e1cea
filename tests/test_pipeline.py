import asyncio
import tempfile
import unittest
from pathlib import Path

from ats_fakes import JOB_DESCRIPTION, FakeEmbeddingClient, FakeTextClient, make_context, sample_portfolio

from resume_ats.ats.errors import MissingPrerequisiteData, StructuredExtractionFailure
from resume_ats.ats.pipeline import iter_analysis, run_analysis, run_optimization
from resume_ats.storage.analysis_store import AnalysisStore


class SlowResumeTextClient(FakeTextClient):
    """Fails the job prompt at once and answers the resume prompt only after a delay."""

    def __init__(self, delay=0.2):
        super().__init__(fail_on=["job"])
        self.delay = delay
        self.resume_finished = False
        self.resume_cancelled = False

    async def complete(self, messages, *, model=None, temperature=None, json_mode=False):
        if self._kind(messages[-1].content) == "resume":
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.resume_cancelled = True
                raise
            self.resume_finished = True
        return await super().complete(messages, model=model, temperature=temperature, json_mode=json_mode)


class PipelineTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store = AnalysisStore(Path(self._tmp.name) / "ats.db")
        self.store.init()
        self.portfolio = sample_portfolio()
        self.store.save_portfolio("user-1", self.portfolio)

    def tearDown(self):
        self._tmp.cleanup()

    async def test_analysis_end_to_end(self):
        text_client = FakeTextClient()
        ctx = make_context(text_client=text_client)

        record = await run_analysis(
            ctx,
            user_id="user-1",
            job_description=JOB_DESCRIPTION,
            portfolio=self.portfolio,
            resume_id="resume-1",
            store=self.store,
        )

        self.assertEqual(sorted(text_client.kinds()), ["job", "resume"])
        self.assertAlmostEqual(record.scores.keyword_match_percent, 100 / 3)
        self.assertEqual(record.scores.skill_overlap_percent, 100.0)
        self.assertEqual(record.scores.experience_relevance, 0.0)
        self.assertAlmostEqual(record.scores.cosine_similarity, 1.0)
        self.assertAlmostEqual(record.scores.overall_score, 70.0)
        self.assertEqual(record.missing_skills, [])
        self.assertEqual(record.priority_keywords, ["aws", "docker"])
        self.assertEqual(len(record.recommendations), 4)

        stored = self.store.get_analysis(record.analysis_id)
        self.assertEqual(stored.model_dump(), record.model_dump())
        self.assertEqual(self.store.latest_analysis("user-1", "resume-1").analysis_id, record.analysis_id)

    async def test_progress_events_precede_completion(self):
        ctx = make_context()
        events = [
            event
            async for event in iter_analysis(
                ctx,
                user_id="user-1",
                job_description=JOB_DESCRIPTION,
                portfolio=self.portfolio,
            )
        ]
        self.assertEqual([event.type for event in events], ["progress", "progress", "progress", "complete"])
        self.assertIsNotNone(events[-1].analysis)

    async def test_embedding_failure_degrades_instead_of_failing(self):
        ctx = make_context(embedding_client=FakeEmbeddingClient(fail=True))

        record = await run_analysis(
            ctx,
            user_id="user-1",
            job_description=JOB_DESCRIPTION,
            portfolio=self.portfolio,
        )

        self.assertAlmostEqual(record.scores.cosine_similarity, 1 / 3)

    async def test_extraction_failure_persists_nothing(self):
        ctx = make_context(text_client=FakeTextClient(resume="I could not parse that resume."))

        with self.assertRaises(StructuredExtractionFailure):
            await run_analysis(
                ctx,
                user_id="user-1",
                job_description=JOB_DESCRIPTION,
                portfolio=self.portfolio,
                resume_id="resume-1",
                store=self.store,
            )

        self.assertIsNone(self.store.latest_analysis("user-1", "resume-1"))

    async def test_failed_extraction_cancels_the_sibling_call(self):
        text_client = SlowResumeTextClient(delay=0.2)
        ctx = make_context(text_client=text_client)

        with self.assertRaises(StructuredExtractionFailure):
            await run_analysis(
                ctx,
                user_id="user-1",
                job_description=JOB_DESCRIPTION,
                portfolio=self.portfolio,
                store=self.store,
            )

        self.assertTrue(text_client.resume_cancelled)
        await asyncio.sleep(0.3)
        self.assertFalse(text_client.resume_finished)
        self.assertIsNone(self.store.latest_analysis("user-1"))

    async def test_optimization_reuses_prior_analysis(self):
        text_client = FakeTextClient()
        ctx = make_context(text_client=text_client)
        record = await run_analysis(
            ctx,
            user_id="user-1",
            job_description=JOB_DESCRIPTION,
            portfolio=self.portfolio,
            store=self.store,
        )

        result = await run_optimization(ctx, self.store, user_id="user-1", analysis_id=record.analysis_id)

        self.assertEqual(text_client.kinds().count("optimize"), 1)
        self.assertEqual(text_client.calls[-1]["model"], "optimize-model")
        self.assertEqual(result.analysis_id, record.analysis_id)
        self.assertEqual(result.ats_score, record.scores.overall_score)
        self.assertIsNotNone(result.optimized_resume_id)
        saved = self.store.get_optimized_resume(result.optimized_resume_id)
        self.assertEqual(saved.model_dump(), result.model_dump())

    async def test_optimization_computes_a_fresh_analysis(self):
        text_client = FakeTextClient(optimized="# Sam Rivera\n\n- Built Python APIs for billing.")
        ctx = make_context(text_client=text_client)

        result = await run_optimization(
            ctx,
            self.store,
            user_id="user-1",
            resume_id="resume-9",
            job_description=JOB_DESCRIPTION,
            output_format="markdown",
        )

        self.assertEqual(text_client.kinds()[-1], "optimize")
        self.assertEqual(result.output_format, "markdown")
        self.assertEqual(self.store.latest_analysis("user-1", "resume-9").analysis_id, result.analysis_id)

    async def test_optimization_falls_back_to_latest_analysis(self):
        ctx = make_context()
        record = await run_analysis(
            ctx,
            user_id="user-1",
            job_description=JOB_DESCRIPTION,
            portfolio=self.portfolio,
            resume_id="resume-1",
            store=self.store,
        )

        result = await run_optimization(ctx, self.store, user_id="user-1", resume_id="resume-1")

        self.assertEqual(result.analysis_id, record.analysis_id)

    async def test_missing_prerequisites(self):
        ctx = make_context()
        with self.assertRaises(MissingPrerequisiteData):
            await run_optimization(ctx, self.store, user_id="nobody", job_description=JOB_DESCRIPTION)
        with self.assertRaises(MissingPrerequisiteData):
            await run_optimization(ctx, self.store, user_id="user-1", analysis_id="does-not-exist")
        with self.assertRaises(MissingPrerequisiteData):
            await run_optimization(ctx, self.store, user_id="user-1", resume_id="never-analyzed")

    async def test_analysis_of_another_user_is_not_found(self):
        ctx = make_context()
        self.store.save_portfolio("user-2", self.portfolio)
        record = await run_analysis(
            ctx,
            user_id="user-1",
            job_description=JOB_DESCRIPTION,
            portfolio=self.portfolio,
            store=self.store,
        )
        with self.assertRaises(MissingPrerequisiteData):
            await run_optimization(ctx, self.store, user_id="user-2", analysis_id=record.analysis_id)


if __name__ == "__main__":
    unittest.main()
