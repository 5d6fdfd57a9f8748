"""Tests for parley.schemas.fragment: fragment validation and state models."""

from __future__ import annotations

from parley.schemas.fragment import Fragment, Link, LinksObj, ResponseState, SideObjects


class TestFragmentFromPartial:
    def test_empty_object(self):
        fragment = Fragment.from_partial({})
        assert fragment.content is None
        assert fragment.links_obj is None
        assert fragment.needs_help_obj is None
        assert fragment.is_prospect_obj is None
        assert fragment.follow_up_questions is None

    def test_non_object_payload_is_empty(self):
        assert Fragment.from_partial(None) == Fragment()
        assert Fragment.from_partial("hello") == Fragment()
        assert Fragment.from_partial([1, 2]) == Fragment()

    def test_wire_names(self):
        fragment = Fragment.from_partial({
            "content": "Hi there",
            "linksObj": {"links": [{"label": "Docs", "url": "https://x"}]},
            "needsHelpObj": {"reason": "stuck"},
            "isProspectObj": {"plan": "enterprise"},
            "followUpQuestions": ["How do I start?"],
        })
        assert fragment.content == "Hi there"
        assert fragment.links_obj == LinksObj(links=[Link(label="Docs", url="https://x")])
        assert fragment.needs_help_obj == {"reason": "stuck"}
        assert fragment.is_prospect_obj == {"plan": "enterprise"}
        assert fragment.follow_up_questions == ["How do I start?"]

    def test_malformed_field_is_dropped_alone(self):
        """A bad side-object never discards the text next to it."""
        fragment = Fragment.from_partial({
            "content": "Still here",
            "needsHelpObj": "not an object",
            "followUpQuestions": "not a list",
        })
        assert fragment.content == "Still here"
        assert fragment.needs_help_obj is None
        assert fragment.follow_up_questions is None

    def test_non_string_content_dropped(self):
        fragment = Fragment.from_partial({"content": 42})
        assert fragment.content is None

    def test_null_entries_in_follow_ups_survive_validation(self):
        fragment = Fragment.from_partial({"followUpQuestions": ["a", None, "b"]})
        assert fragment.follow_up_questions == ["a", None, "b"]

    def test_half_streamed_link_is_dropped(self):
        fragment = Fragment.from_partial({
            "linksObj": {"links": [
                {"label": "Docs", "url": "https://x"},
                {"label": "Pric"},
            ]},
        })
        assert fragment.links_obj is not None
        assert fragment.links_obj.links == [Link(label="Docs", url="https://x")]

    def test_snake_case_names_accepted_on_construction(self):
        fragment = Fragment(content="x", follow_up_questions=["q"])
        assert fragment.follow_up_questions == ["q"]


class TestLinksObj:
    def test_link_instances_are_kept(self):
        links = LinksObj(links=[Link(label="Docs", url="https://x")])
        assert links.links == [Link(label="Docs", url="https://x")]

    def test_mixed_instances_and_dicts(self):
        links = LinksObj(links=[
            Link(label="Docs", url="https://x"),
            {"label": "API", "url": "https://y"},
            {"url": "https://z"},
        ])
        assert [link.label for link in links.links] == ["Docs", "API"]


class TestOutputSchema:
    def test_schema_uses_wire_names(self):
        schema = Fragment.output_schema()
        properties = schema["properties"]
        assert set(properties) == {
            "content",
            "linksObj",
            "needsHelpObj",
            "isProspectObj",
            "followUpQuestions",
        }


class TestResponseState:
    def test_defaults(self):
        state = ResponseState()
        assert state.content == ""
        assert state.side_objects == SideObjects()
        assert state.follow_up_questions == []
