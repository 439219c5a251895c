import copy
import unittest

from src.transform.fields import (
    CARBON_INTENSITY_HISTORY,
    CARBON_INTENSITY_LATEST,
    POWER_BREAKDOWN_HISTORY,
    POWER_BREAKDOWN_LATEST,
    USGS_INSTANTANEOUS,
    WASTE_CATEGORY_FIELDS,
    WORLDBANK_OBSERVATIONS,
    WORLDBANK_SERIES,
    field,
    path,
    probe,
)
from src.transform.normalize import natural_key, normalize
from src.transform.records import CategoryTally, Observation, TimePoint


def usgs_payload(*readings):
    return {
        "value": {
            "timeSeries": [
                {"values": [{"value": [{"value": value, "dateTime": ts} for ts, value in readings]}]}
            ]
        }
    }


class FieldProbeTests(unittest.TestCase):
    def test_first_present_candidate_wins(self) -> None:
        record = {"Group": "Landfill", "type": "Ignored"}
        self.assertEqual(probe(record, WASTE_CATEGORY_FIELDS), "Landfill")

    def test_null_candidates_are_skipped(self) -> None:
        record = {"category": None, "Category": "Recycling"}
        self.assertEqual(probe(record, WASTE_CATEGORY_FIELDS), "Recycling")

    def test_missing_everywhere_returns_none(self) -> None:
        self.assertIsNone(probe({}, WASTE_CATEGORY_FIELDS))
        self.assertIsNone(probe("not a record", WASTE_CATEGORY_FIELDS))

    def test_path_walks_lists_and_mappings(self) -> None:
        raw = {"history": [{"a": 1}, {"a": 2}]}
        self.assertEqual(path("history", -1, "a")(raw), 2)
        self.assertIsNone(path("history", 5, "a")(raw))
        self.assertIsNone(field("history")(["not", "a", "mapping"]))


class NormalizeTimeSeriesTests(unittest.TestCase):
    def test_worldbank_history_drops_null_values(self) -> None:
        raw = [{"page": 1}, [{"date": "2020", "value": "12.5"}, {"date": "2019", "value": None}]]

        self.assertEqual(normalize(raw, WORLDBANK_SERIES), [TimePoint(key="2020", value=12.5)])

    def test_worldbank_history_sorted_by_year(self) -> None:
        raw = [
            {"page": 1},
            [
                {"date": "2021", "value": 3},
                {"date": "2009", "value": 1},
                {"date": "2015", "value": 2},
            ],
        ]

        series = normalize(raw, WORLDBANK_SERIES)

        self.assertEqual([p.key for p in series], ["2009", "2015", "2021"])

    def test_unusable_values_never_survive(self) -> None:
        raw = [
            {},
            [
                {"date": "2018", "value": float("nan")},
                {"date": "2019", "value": "abc"},
                {"date": "2020", "value": -4},
                {"date": "2021", "value": True},
                {"value": 7},
                {"date": "2022", "value": 8},
            ],
        ]

        self.assertEqual(normalize(raw, WORLDBANK_SERIES), [TimePoint(key="2022", value=8.0)])

    def test_duplicate_keys_keep_last_reading(self) -> None:
        raw = [{}, [{"date": "2020", "value": 1}, {"date": "2020", "value": 2}]]

        self.assertEqual(normalize(raw, WORLDBANK_SERIES), [TimePoint(key="2020", value=2.0)])

    def test_values_too_large_for_a_float_are_dropped(self) -> None:
        raw = [{}, [{"date": "2019", "value": 10**400}, {"date": "2020", "value": 5}]]

        self.assertEqual(normalize(raw, WORLDBANK_SERIES), [TimePoint(key="2020", value=5.0)])

    def test_usgs_series_drops_no_data_sentinel(self) -> None:
        raw = usgs_payload(
            ("2024-01-01T00:30:00.000-05:00", "130"),
            ("2024-01-01T00:15:00.000-05:00", "120"),
            ("2024-01-01T00:45:00.000-05:00", "-999999"),
        )

        series = normalize(raw, USGS_INSTANTANEOUS)

        self.assertEqual(
            series,
            [
                TimePoint(key="2024-01-01T00:15:00.000-05:00", value=120.0),
                TimePoint(key="2024-01-01T00:30:00.000-05:00", value=130.0),
            ],
        )

    def test_carbon_history_probes_value_and_time_names(self) -> None:
        raw = {
            "zone": "US",
            "history": [
                {"datetime": "2024-01-01T01:00:00Z", "carbonIntensity": 300, "value": 5},
                {"time": "2024-01-01T00:00:00Z", "intensity": "250"},
                {"datetime": "2024-01-01T02:00:00Z", "carbonIntensity": None},
            ],
        }

        series = normalize(raw, CARBON_INTENSITY_HISTORY)

        self.assertEqual(
            series,
            [
                TimePoint(key="2024-01-01T00:00:00Z", value=250.0),
                TimePoint(key="2024-01-01T01:00:00Z", value=300.0),
            ],
        )

    def test_carbon_history_falls_back_to_ordinal_keys(self) -> None:
        raw = {"data": [{"carbonIntensity": 120}, {"carbonIntensity": 130}]}

        self.assertEqual(
            normalize(raw, CARBON_INTENSITY_HISTORY),
            [TimePoint(key="0", value=120.0), TimePoint(key="1", value=130.0)],
        )

    def test_carbon_history_mapping_without_list_yields_nothing(self) -> None:
        raw = {"zone": "US", "2024-05-01T09:00:00Z": {"carbonIntensity": 190}}

        self.assertEqual(normalize(raw, CARBON_INTENSITY_HISTORY), [])

    def test_carbon_latest_needs_positive_reading(self) -> None:
        self.assertEqual(normalize({"carbonIntensity": 0}, CARBON_INTENSITY_LATEST), [])
        self.assertEqual(
            normalize({"intensity": 210}, CARBON_INTENSITY_LATEST),
            [TimePoint(key="now", value=210.0)],
        )


class NormalizeCategoryTests(unittest.TestCase):
    def test_power_breakdown_mapping_becomes_tallies(self) -> None:
        raw = {
            "zone": "US",
            "powerConsumptionBreakdown": {"wind": 28, "solar": 0, "coal": "10", "nuclear": None},
        }

        self.assertEqual(
            normalize(raw, POWER_BREAKDOWN_LATEST),
            [CategoryTally(name="Wind", value=28.0), CategoryTally(name="Coal", value=10.0)],
        )

    def test_power_breakdown_accepts_bare_mapping(self) -> None:
        raw = {"wind": 5, "zone": "US"}

        self.assertEqual(normalize(raw, POWER_BREAKDOWN_LATEST), [CategoryTally(name="Wind", value=5.0)])

    def test_power_breakdown_history_uses_last_entry(self) -> None:
        raw = {
            "history": [
                {"powerConsumptionBreakdown": {"gas": 1}},
                {"powerProductionBreakdown": {"hydro": 4}},
            ]
        }

        self.assertEqual(normalize(raw, POWER_BREAKDOWN_HISTORY), [CategoryTally(name="Hydro", value=4.0)])


class NormalizeObservationTests(unittest.TestCase):
    def test_rows_without_entity_are_dropped(self) -> None:
        raw = [
            {"page": 1},
            [
                {"country": {"value": "United States"}, "date": "2018", "value": 500},
                {"country": {}, "date": "2018", "value": 10},
                {"country": {"value": "Chile"}, "date": "2018", "value": None},
            ],
        ]

        self.assertEqual(
            normalize(raw, WORLDBANK_OBSERVATIONS),
            [Observation(entity="United States", period="2018", value=500.0)],
        )


class NormalizeRobustnessTests(unittest.TestCase):
    def test_garbage_input_yields_empty_list(self) -> None:
        for raw in (None, "not json", 42, [1, 2], {"history": "nope"}, [{"message": "Invalid value"}]):
            with self.subTest(raw=raw):
                self.assertEqual(normalize(raw, WORLDBANK_SERIES), [])
                self.assertEqual(normalize(raw, CARBON_INTENSITY_HISTORY), [])

    def test_normalize_is_idempotent_and_leaves_input_untouched(self) -> None:
        raw = [{}, [{"date": "2020", "value": "1.5"}, {"date": "2019", "value": 2}]]
        pristine = copy.deepcopy(raw)

        first = normalize(raw, WORLDBANK_SERIES)
        second = normalize(raw, WORLDBANK_SERIES)

        self.assertEqual(first, second)
        self.assertEqual(raw, pristine)

    def test_natural_key_orders_numbers_before_timestamps(self) -> None:
        keys = ["2024-01-02T00:00:00Z", "10", "2", "2024-01-01T00:00:00+00:00"]

        self.assertEqual(
            sorted(keys, key=natural_key),
            ["2", "10", "2024-01-01T00:00:00+00:00", "2024-01-02T00:00:00Z"],
        )


if __name__ == "__main__":
    unittest.main()
