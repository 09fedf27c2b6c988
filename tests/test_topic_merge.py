"""Topic list and legacy tree merges."""

from app.services.topic_merge import merge_topic_list, merge_topic_tree


class TestTopicList:
    def test_union_keeps_order_and_takes_incoming_summary(self):
        merged = merge_topic_list(
            [{"name": "A"}, {"name": "B"}],
            [{"name": "B", "summary": "new"}, {"name": "C"}],
        )
        assert merged == [{"name": "A"}, {"name": "B", "summary": "new"}, {"name": "C"}]

    def test_every_name_exactly_once(self):
        merged = merge_topic_list(
            [{"name": "A"}, {"name": "B"}, {"name": "C"}],
            [{"name": "C"}, {"name": "A"}, {"name": "D"}],
        )
        names = [t["name"] for t in merged]
        assert sorted(names) == ["A", "B", "C", "D"]
        assert len(names) == len(set(names))

    def test_coverage_survives_summary_only_update(self):
        merged = merge_topic_list(
            [{"name": "A", "summary": "old", "coverage": 40}],
            [{"name": "A", "summary": "new"}],
        )
        assert merged == [{"name": "A", "summary": "new", "coverage": 40}]

    def test_empty_incoming_keeps_existing(self):
        assert merge_topic_list([{"name": "A"}], []) == [{"name": "A"}]

    def test_both_empty_falls_back_to_incoming(self):
        assert merge_topic_list([], []) == []
        assert merge_topic_list(None, []) == []
        assert merge_topic_list([], None) == []


class TestTopicTree:
    def test_subtopics_survive_overview_edit(self):
        existing = {
            "subject": "Calc",
            "topics": [{"name": "Limits", "subtopics": [{"name": "One-sided"}]}],
        }
        incoming = {"subject": "Calc", "topics": [{"name": "Limits", "overview": "new"}]}
        merged = merge_topic_tree(existing, incoming)
        assert merged["topics"] == [
            {"name": "Limits", "subtopics": [{"name": "One-sided"}], "overview": "new"}
        ]

    def test_recursive_merge_at_depth(self):
        existing = {
            "topics": [
                {
                    "name": "Limits",
                    "subtopics": [
                        {"name": "One-sided", "subtopics": [{"name": "Left"}]},
                    ],
                }
            ]
        }
        incoming = {
            "topics": [
                {
                    "name": "Limits",
                    "subtopics": [
                        {"name": "One-sided", "subtopics": [{"name": "Right"}]},
                        {"name": "Infinite"},
                    ],
                }
            ]
        }
        merged = merge_topic_tree(existing, incoming)
        one_sided = merged["topics"][0]["subtopics"][0]
        assert [n["name"] for n in one_sided["subtopics"]] == ["Left", "Right"]
        assert [n["name"] for n in merged["topics"][0]["subtopics"]] == [
            "One-sided",
            "Infinite",
        ]

    def test_null_tree_keeps_existing(self):
        existing = {"topics": [{"name": "A"}]}
        assert merge_topic_tree(existing, None) == existing

    def test_first_tree_is_taken(self):
        incoming = {"subject": "Calc", "topics": [{"name": "A"}]}
        assert merge_topic_tree(None, incoming) == incoming
