import json

from jsonsmith.core import constants as app_constants
from jsonsmith.core.domain_impl.infra import settings_service
from jsonsmith.core.editor_state import DocumentTab, EditorSession, UserSettings


def test_missing_settings_file_gives_defaults(tmp_path):
    settings = settings_service.load_user_settings(str(tmp_path / "none.json"))
    assert settings == UserSettings()


def test_settings_round_trip(tmp_path):
    path = str(tmp_path / app_constants.SETTINGS_FILENAME)
    saved = UserSettings(indent_width=4, theme="light", font_size=14, live_feedback_delay_ms=0)
    assert settings_service.save_user_settings(path, saved) is True
    assert settings_service.load_user_settings(path) == saved


def test_corrupt_settings_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert settings_service.load_user_settings(str(path)) == UserSettings()


def test_out_of_range_fields_keep_defaults():
    settings = settings_service.settings_from_dict(
        {
            "indent_width": 99,
            "font_size": True,
            "live_feedback_delay_ms": -1,
            "theme": "  LIGHT ",
        }
    )
    assert settings.indent_width == app_constants.DEFAULT_INDENT_WIDTH
    assert settings.font_size == app_constants.FONT_SIZE_DEFAULT
    assert settings.live_feedback_delay_ms == app_constants.LIVE_FEEDBACK_DELAY_MS_DEFAULT
    assert settings.theme == "light"
    assert settings_service.settings_from_dict(["x"]) == UserSettings()


def test_save_settings_reports_failure(tmp_path):
    path = str(tmp_path / "missing-dir" / "settings.json")
    assert settings_service.save_user_settings(path, UserSettings()) is False


def test_session_round_trip(tmp_path):
    path = str(tmp_path / app_constants.SESSION_FILENAME)
    session = EditorSession(tabs=[DocumentTab(id="a", name="One", content="[1]"), DocumentTab(id="b", name="Two")])
    session.activate("b")
    assert settings_service.save_session(path, session) is True
    restored = settings_service.load_session(path)
    assert restored.to_dict() == session.to_dict()
    assert restored.active_tab.name == "Two"


def test_missing_or_corrupt_session_gives_one_empty_tab(tmp_path):
    path = tmp_path / "session.json"
    for restored in (
        settings_service.load_session(str(path)),
        settings_service.session_from_dict({"tabs": "nope"}),
    ):
        assert len(restored.tabs) == 1
        assert restored.active_tab.content == ""
    path.write_text(json.dumps({"tabs": []}), encoding="utf-8")
    assert len(settings_service.load_session(str(path)).tabs) == 1


def test_session_duplicate_ids_are_replaced():
    session = settings_service.session_from_dict(
        {"tabs": [{"id": "x", "name": "A"}, {"id": "x", "name": "B"}, "junk"], "active_id": "gone"}
    )
    assert [tab.name for tab in session.tabs] == ["A", "B"]
    assert session.tabs[0].id == "x"
    assert session.tabs[1].id != "x"
    assert session.active_id == "x"


def test_add_tab_numbers_untitled_names():
    session = EditorSession()
    second = session.add_tab()
    third = session.add_tab()
    named = session.add_tab("data.json", "{}")
    assert [tab.name for tab in session.tabs] == ["Untitled", "Untitled 2", "Untitled 3", "data.json"]
    assert session.active_id == named.id
    assert second.id != third.id


def test_close_tab_activates_neighbour():
    session = EditorSession(tabs=[DocumentTab(id="a"), DocumentTab(id="b"), DocumentTab(id="c")])
    session.activate("b")
    assert session.close_tab("b").id == "c"
    assert session.close_tab("c").id == "a"
    assert session.close_tab("missing").id == "a"


def test_closing_inactive_tab_keeps_active():
    session = EditorSession(tabs=[DocumentTab(id="a"), DocumentTab(id="b")])
    session.activate("b")
    assert session.close_tab("a").id == "b"


def test_closing_last_tab_clears_it():
    session = EditorSession(tabs=[DocumentTab(id="a", name="Doc", content="[1]")])
    remaining = session.close_tab("a")
    assert remaining.id == "a"
    assert remaining.name == app_constants.UNTITLED_TAB_NAME
    assert remaining.content == ""


def test_rename_and_update_content():
    session = EditorSession(tabs=[DocumentTab(id="a")])
    assert session.rename_tab("a", "  New  ") is True
    assert session.rename_tab("a", "   ") is False
    assert session.rename_tab("zzz", "X") is False
    session.update_content("a", '{"k": 1}')
    assert session.active_tab.name == "New"
    assert session.active_tab.content == '{"k": 1}'


def test_session_with_lone_surrogate_saves_without_leftovers(tmp_path):
    path = str(tmp_path / app_constants.SESSION_FILENAME)
    session = EditorSession(tabs=[DocumentTab(id="a", content='["\ud800"]')])
    assert settings_service.save_session(path, session) is True
    assert [p.name for p in tmp_path.iterdir()] == [app_constants.SESSION_FILENAME]
    assert settings_service.load_session(path).tabs[0].content == '["\ud800"]'
