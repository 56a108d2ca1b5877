"""
Unit tests for the metrics engine.

Includes property-based testing with hypothesis for the aggregate counts.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from campaign_insights.batch.readers import CSVRecordParser
from campaign_insights.core.config import EngineConfigBuilder
from campaign_insights.core.metrics import MetricsEngine
from campaign_insights.core.models import TOTAL_AUDIENCE
from campaign_insights.core.schema import SchemaResolver

pytestmark = pytest.mark.unit


class TestMinimalExport:
    """Tests against the three-row export with one test user"""

    @pytest.fixture(autouse=True)
    def _compute(self, minimal_export_text, testuser_config, parse_and_resolve):
        table, schema = parse_and_resolve(minimal_export_text, testuser_config)
        self.record, self.exclusions = MetricsEngine(testuser_config).compute_detailed(table, schema)

    def test_unique_visitors(self):
        """Test one real identity remains after excluding the test user"""
        assert self.record.metrics["unique_visitors"] == 1
        assert self.record.metrics["total_rows"] == 2

    def test_unique_completions(self):
        """Test a user completing in at least one row counts once"""
        assert self.record.metrics["unique_completions"] == 1
        assert self.record.metrics["total_completions"] == 1

    def test_unique_completion_rate(self):
        """Test the completion rate is a percentage of unique visitors"""
        assert self.record.metrics["unique_completion_rate"] == 100.0

    def test_interaction_unique_users(self):
        """Test a value present in two rows of one user counts once"""
        assert self.record.interaction_unique_users == {"event_count_click": 1}
        assert self.record.interaction_totals == {"event_count_click": 1}
        assert self.record.interaction_labels == {"event_count_click": "Click"}

    def test_test_user_is_reported(self):
        """Test excluded test identities are listed"""
        assert self.record.excluded_test_users == ["TESTUSER"]
        assert self.exclusions.test_user_rows == 1
        assert self.exclusions.blank_identity_rows == 0

    def test_total_audience_is_never_computed(self):
        """Test total audience stays absent until supplied manually"""
        assert self.record.total_audience is None
        assert TOTAL_AUDIENCE not in self.record.metrics
        assert TOTAL_AUDIENCE not in self.record.available_metrics()

    def test_absent_columns_produce_no_metrics(self):
        """Test metrics of columns missing from the file are omitted, not zero"""
        for name in ("total_impressions", "unique_plays", "total_visits", "unique_thumbnail_clicks"):
            assert name not in self.record.metrics


class TestSampleExport:
    """Tests against the realistic fixture export"""

    @pytest.fixture(autouse=True)
    def _compute(self, sample_export_path, parse_and_resolve):
        text = sample_export_path.read_text(encoding="utf-8")
        table, schema = parse_and_resolve(text)
        self.record, self.exclusions = MetricsEngine().compute_detailed(table, schema)

    def test_row_exclusions(self):
        """Test default test users and blank identities are left out"""
        assert self.record.metrics["total_rows"] == 7
        assert self.exclusions.test_user_rows == 2
        assert self.exclusions.blank_identity_rows == 1
        assert self.record.excluded_test_users == ["PH123", "X001"]

    def test_count_metrics(self):
        """Test totals sum columns and uniques count users with a positive value"""
        metrics = self.record.metrics

        assert metrics["unique_visitors"] == 5
        assert (metrics["total_impressions"], metrics["unique_impressions"]) == (12, 4)
        assert (metrics["total_visits"], metrics["unique_visits"]) == (5, 3)
        assert (metrics["total_plays"], metrics["unique_plays"]) == (4, 3)
        assert (metrics["total_thumbnail_clicks"], metrics["unique_thumbnail_clicks"]) == (1, 1)
        assert (metrics["total_completions"], metrics["unique_completions"]) == (2, 2)
        assert metrics["unique_completion_rate"] == 40.0

    def test_interaction_columns(self):
        """Test per-interaction unique users count present values, zero included"""
        assert self.record.interaction_unique_users == {
            "event_count_back_to_home": 2,
            "event_count_scene2_earning_details": 1,
        }
        assert self.record.interaction_totals == {
            "event_count_back_to_home": 1,
            "event_count_scene2_earning_details": 2,
        }

    def test_unique_interactions(self):
        """Test users whose interaction events sum above zero"""
        assert self.record.metrics["unique_interactions"] == 1
        assert self.record.metrics["unique_interaction_rate"] == 20.0

    def test_missing_ids(self):
        """Test tracker placeholders are reported once each"""
        assert self.record.missing_ids == ["abc123"]


class TestCountParsing:
    """Tests for lenient count cell parsing"""

    def compute(self, text, config=None):
        table = CSVRecordParser().parse(text)
        schema = SchemaResolver(config).resolve(table.header)
        return MetricsEngine(config).compute(table, schema)

    def test_non_numeric_and_negative_cells_count_as_zero(self):
        """Test junk cells never raise and never add to totals"""
        record = self.compute("user_id,plays\nU1,abc\nU2,-3\nU3,\nU4,2.7\n")

        assert record.metrics["total_plays"] == 2
        assert record.metrics["unique_plays"] == 1
        assert record.metrics["unique_visitors"] == 4

    def test_identities_are_trimmed_and_case_sensitive(self):
        """Test identities compare exactly after trimming"""
        record = self.compute('user_id,plays\n"U1 ",1\nU1,1\nu1,1\n')

        assert record.metrics["unique_visitors"] == 2

    def test_zero_is_present_for_interactions(self):
        """Test an explicit zero still marks a user as having the column"""
        record = self.compute("user_id,event_count_share\nU1,0\nU2,\n")

        assert record.interaction_unique_users == {"event_count_share": 1}
        assert record.metrics["unique_interactions"] == 0
        assert record.metrics["unique_interaction_rate"] == 0.0

    def test_completion_rate_uses_distinct_identities(self):
        """Test one user completing across three rows is 100%, not a third"""
        record = self.compute("user_id,completions\nU1,1\nU1,1\nU1,1\n")

        assert record.metrics["total_rows"] == 3
        assert record.metrics["unique_visitors"] == 1
        assert record.metrics["unique_completion_rate"] == 100.0

    def test_oversized_count_is_capped_not_wrapped(self):
        """Test a count beyond the int64 range stays positive"""
        record = self.compute("user_id,plays\nU1,12345678901234567890\n")

        assert record.metrics["total_plays"] > 0
        assert record.metrics["unique_plays"] == 1

    def test_totals_of_large_counts_do_not_overflow(self):
        """Test summing near-maximum counts keeps an exact positive total"""
        big = 2 ** 62
        record = self.compute(
            f"user_id,plays,event_count_share\nU1,{big},{big}\nU2,{big},{big}\nU3,{big},{big}\n"
        )

        assert record.metrics["total_plays"] == 3 * big
        assert record.interaction_totals == {"event_count_share": 3 * big}
        assert record.metrics["unique_interactions"] == 3

    def test_no_interaction_columns_means_no_interaction_metrics(self):
        """Test unique_interactions is only reported when columns exist"""
        record = self.compute("user_id,plays\nU1,1\n")

        assert "unique_interactions" not in record.metrics
        assert record.interaction_unique_users == {}


class TestEdgeCases:
    """Tests for empty and degenerate inputs"""

    def compute(self, text, config=None):
        table = CSVRecordParser().parse(text)
        schema = SchemaResolver(config).resolve(table.header)
        return MetricsEngine(config).compute(table, schema)

    def test_header_only_export(self):
        """Test an export without data rows yields zero metrics"""
        record = self.compute("user_id,completions,event_count_click\n")

        assert record.metrics["total_rows"] == 0
        assert record.metrics["unique_visitors"] == 0
        assert record.metrics["unique_completions"] == 0
        assert record.metrics["unique_completion_rate"] == 0.0
        assert record.interaction_unique_users == {"event_count_click": 0}

    def test_only_test_users(self):
        """Test a zero visitor count never divides by zero"""
        record = self.compute("user_id,completions\nX001,1\nOMMATEST,1\n")

        assert record.metrics["unique_visitors"] == 0
        assert record.metrics["unique_completion_rate"] == 0.0
        assert record.excluded_test_users == ["OMMATEST", "X001"]

    def test_configured_test_users_replace_defaults(self):
        """Test the exclusion list comes from configuration"""
        config = EngineConfigBuilder().with_test_user_ids("QA1").build()
        record = self.compute("user_id,plays\nQA1,1\nX001,1\n", config)

        assert record.metrics["unique_visitors"] == 1
        assert record.excluded_test_users == ["QA1"]

    def test_configured_missing_id_prefix(self):
        """Test the missing-identity convention comes from configuration"""
        config = EngineConfigBuilder().with_missing_id_prefix("anon:").build()
        record = self.compute("user_id,plays\nanon:42,1\nMissingID-7,1\n", config)

        assert record.missing_ids == ["42"]

    def test_compute_is_repeatable(self):
        """Test the engine keeps no state between invocations"""
        table = CSVRecordParser().parse("user_id,plays\nU1,1\nX001,3\n")
        schema = SchemaResolver().resolve(table.header)
        engine = MetricsEngine()

        assert engine.compute(table, schema) == engine.compute(table, schema)

    @settings(max_examples=50, deadline=None)
    @given(st.lists(
        st.tuples(
            st.sampled_from(["U1", "U2", "U3", "U4", "X001"]),
            st.integers(min_value=0, max_value=50),
            st.integers(min_value=0, max_value=5),
        ),
        max_size=40,
    ))
    def test_property_aggregate_bounds(self, rows):
        """Property test: uniques never exceed visitors and totals match the sum"""
        lines = ["user_id,plays,completions"] + [f"{uid},{p},{c}" for uid, p, c in rows]
        record = self.compute("\n".join(lines) + "\n")
        kept = [r for r in rows if r[0] != "X001"]

        metrics = record.metrics
        assert metrics["total_rows"] == len(kept)
        assert metrics["unique_visitors"] <= metrics["total_rows"]
        assert metrics["total_plays"] == sum(p for _, p, _ in kept)
        assert metrics["unique_plays"] <= metrics["unique_visitors"]
        assert metrics["unique_completions"] <= metrics["unique_visitors"]
        assert 0.0 <= metrics["unique_completion_rate"] <= 100.0
