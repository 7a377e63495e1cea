import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_ats.ats.fusion import FusionWeights  # noqa: E402
from resume_ats.ats.recommendations import RecommendationPolicy  # noqa: E402
from resume_ats.core.config.scoring import get_scoring_config, get_scoring_value  # noqa: E402


class ScoringConfigTests(unittest.TestCase):
    def test_loader_and_value_lookup(self):
        config = get_scoring_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_scoring_value("fusion.weights.cosine"), 40)
        self.assertEqual(get_scoring_value("recommendations.thresholds.skill_overlap"), 60)

    def test_missing_path_returns_default(self):
        self.assertEqual(get_scoring_value("fusion.weights.unknown", 7), 7)
        self.assertEqual(get_scoring_value("fusion.weights.cosine.deeper", "x"), "x")
        self.assertIsNone(get_scoring_value(""))

    def test_packaged_values_match_builtin_defaults(self):
        self.assertEqual(FusionWeights.from_config(), FusionWeights())
        self.assertEqual(RecommendationPolicy.from_config(), RecommendationPolicy())


if __name__ == "__main__":
    unittest.main()
