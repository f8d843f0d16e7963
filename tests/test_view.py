from __future__ import annotations

from vocab_cards.session import transitions, view
from vocab_cards.session.models import DisplayFilter, LoadedScope, PrimaryLanguage, SessionState


def _state(scope, lessons):
    state, request_id = transitions.begin_load(SessionState())
    return transitions.complete_load(state, request_id, scope, lessons).state


LESSON1 = [
    {"eng": "dog", "rus": "sobaka", "display": 1},
    {"eng": "fox", "rus": "lisa", "display": 0},
]


def test_card_faces_follow_primary_language():
    state = _state(LoadedScope.single("lesson1"), [("lesson1", LESSON1)])

    assert (view.primary_text(state), view.secondary_text(state)) == ("dog", "sobaka")
    assert view.primary_hint(state) == "Click to reveal Russian translation"

    state = transitions.set_primary_language(state, PrimaryLanguage.TARGET)
    assert (view.primary_text(state), view.secondary_text(state)) == ("sobaka", "dog")
    assert view.secondary_hint(state) == "English translation"


def test_empty_state_has_blank_card():
    state = SessionState()
    assert view.current_record(state) is None
    assert view.primary_text(state) == ""


def test_display_titles():
    single = _state(LoadedScope.single("lesson1"), [("lesson1", LESSON1)])
    assert view.display_title(single) == "Lesson1 (Active Words)"

    multi = _state(LoadedScope.multi(["lesson1", "lesson2"]), [("lesson1", LESSON1)])
    multi = transitions.set_display_filter(multi, DisplayFilter.ALL)
    assert view.display_title(multi) == "Selected Files (lesson1, lesson2) (All Words)"

    everything = _state(LoadedScope.all_files(["lesson1"]), [("lesson1", LESSON1)])
    assert view.display_title(everything) == "All Vocabulary Files (Active Words)"


def test_search_matches_any_column_case_insensitively():
    state = _state(LoadedScope.single("lesson1"), [("lesson1", LESSON1)])
    state = transitions.set_display_filter(state, DisplayFilter.ALL)

    assert [r.eng for r in view.search_records(state.all_records, "LIS")] == ["fox"]
    assert len(view.search_records(state.all_records, "lesson1")) == 2
    assert len(view.search_records(state.all_records, "  ")) == 2


def test_table_rows_apply_search_to_visible_records():
    state = _state(LoadedScope.single("lesson1"), [("lesson1", LESSON1)])
    state = transitions.set_display_filter(state, DisplayFilter.ALL)
    state = transitions.set_search_query(state, "fox")

    rows = view.table_rows(state)

    assert [(row["eng"], row["status"]) for row in rows] == [("fox", "Inactive")]
    assert len(view.table_rows(transitions.clear_search(state))) == 2
