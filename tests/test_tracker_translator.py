from __future__ import annotations

from dataclasses import replace

import pytest

from core.action import ActionKind, Service
from core.errors import ValidationError
from core.models import TrackerActionType, TrackerEvent
from core.tracker_translator import translate_tracker_event


def _event(raw_key: str, **overrides) -> TrackerEvent:
    event = TrackerEvent(
        action_type=TrackerActionType.parse(raw_key),
        raw_action_type=raw_key,
        card_id="abc64ds5ad45s6161d",
        short_link="Xy12AbCd",
        card_name="Ship v2",
        member_name="Alice",
    )
    return replace(event, **overrides)


def test_renamed_card_without_link_starts_thread() -> None:
    action = translate_tracker_event(_event("action_renamed_card"), None)

    assert action.kind is ActionKind.NEW_THREAD
    assert action.update.text == "This card has been renamed to Ship v2 by Alice"
    assert action.target.id is None
    assert action.target.service is Service.SLACK
    assert action.source.id == "abc64ds5ad45s6161d"
    assert action.source.url == "https://trello.com/c/Xy12AbCd"


def test_linked_card_updates_existing_thread() -> None:
    action = translate_tracker_event(_event("action_archived_card"), "1715287188.123456")

    assert action.kind is ActionKind.UPDATE_THREAD
    assert action.target.id == "1715287188.123456"
    assert action.update.text == "This card has been archived by Alice"


@pytest.mark.parametrize(
    ("raw_key", "overrides", "expected"),
    [
        ("action_create_card", {}, "This card Ship v2 has been created by Alice"),
        (
            "action_changed_description_of_card",
            {"card_desc": "Ready for QA"},
            "This card description has been updated to Ready for QA by Alice",
        ),
        (
            "action_move_card_from_list_to_list",
            {"list_before": "Doing", "list_after": "Done"},
            "This card has been moved from list Doing to list Done by Alice",
        ),
        ("action_comment_on_card", {"comment_text": "looks good"}, "Comment added by Alice\nlooks good"),
    ],
)
def test_rendered_text_per_action_type(raw_key: str, overrides: dict, expected: str) -> None:
    action = translate_tracker_event(_event(raw_key, **overrides), None)

    assert action.kind is ActionKind.NEW_THREAD
    assert action.update.text == expected


def test_unknown_action_type_is_an_auditable_noop() -> None:
    action = translate_tracker_event(_event("action_copy_card"), None)

    assert action.kind is ActionKind.NONE
    assert "Unknown key" in action.update.text
    assert "action_copy_card" in action.update.text


def test_known_but_unrendered_key_is_unrecognized() -> None:
    event = _event("action_moved_card_lower")

    assert event.action_type is TrackerActionType.UNRECOGNIZED
    assert translate_tracker_event(event, "1715287188.123456").kind is ActionKind.NONE


def test_app_created_actions_are_ignored_but_rendered() -> None:
    event = _event("action_comment_on_card", comment_text="synced", app_creator_id="app-1")

    linked = translate_tracker_event(event, "1715287188.123456")
    unlinked = translate_tracker_event(event, None)

    assert linked.kind is ActionKind.NONE
    assert unlinked.kind is ActionKind.NONE
    assert linked.update.text == "Comment added by Alice\nsynced"


@pytest.mark.parametrize(
    ("raw_key", "overrides"),
    [
        ("action_move_card_from_list_to_list", {"list_before": "Doing"}),
        ("action_move_card_from_list_to_list", {"list_after": "Done"}),
        ("action_comment_on_card", {}),
        ("action_changed_description_of_card", {}),
    ],
)
def test_missing_required_field_is_a_validation_error(raw_key: str, overrides: dict) -> None:
    with pytest.raises(ValidationError):
        translate_tracker_event(_event(raw_key, **overrides), None)
