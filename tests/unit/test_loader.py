"""Hook declaration documents: parsing and file formats."""

from __future__ import annotations

import pytest

from hookline.hooks.loader import (
    HookConfigError,
    load_hooks_file,
    parse_hooks_config,
    read_hooks_file,
)
from hookline.types.hooks import HookEvent


class TestParseHooksConfig:
    def test_wrapped_form(self):
        pairs = parse_hooks_config({
            "description": "lint plugin",
            "hooks": {
                "PreToolUse": [
                    {
                        "matcher": "Write|Edit",
                        "hooks": [{"type": "command", "command": "lint.sh", "timeout": 10}],
                    }
                ],
            },
        })
        assert len(pairs) == 1
        event, group = pairs[0]
        assert event is HookEvent.PRE_TOOL_USE
        assert group.matcher == "Write|Edit"
        hook = group.hooks[0]
        assert hook.type_name == "command"
        assert hook.command == "lint.sh"
        assert hook.timeout == 10.0

    def test_bare_form_skips_description(self):
        pairs = parse_hooks_config({
            "description": "bare",
            "Stop": [{"hooks": [{"type": "prompt", "prompt": "Finished?"}]}],
        })
        assert [event for event, _ in pairs] == [HookEvent.STOP]
        assert pairs[0][1].hooks[0].prompt == "Finished?"

    def test_encounter_order(self):
        pairs = parse_hooks_config({
            "SessionStart": [{"hooks": []}, {"matcher": "x", "hooks": []}],
            "Stop": [{"hooks": []}],
        })
        assert [(e, g.matcher) for e, g in pairs] == [
            (HookEvent.SESSION_START, None),
            (HookEvent.SESSION_START, "x"),
            (HookEvent.STOP, None),
        ]

    def test_defaults(self):
        ((_, group),) = parse_hooks_config({"Stop": [{"hooks": [{"command": "true"}]}]})
        hook = group.hooks[0]
        assert hook.type_name == "command"
        assert hook.timeout is None
        assert hook.once is False
        assert hook.enabled is True
        assert hook.id

    def test_explicit_fields(self):
        ((_, group),) = parse_hooks_config({
            "Stop": [{
                "description": "group",
                "hooks": [{"id": "h1", "command": "true", "once": True, "enabled": False}],
            }],
        })
        hook = group.hooks[0]
        assert group.description == "group"
        assert hook.id == "h1"
        assert hook.once is True
        assert hook.enabled is False

    def test_empty_matcher_normalised(self):
        ((_, group),) = parse_hooks_config({"PreToolUse": [{"matcher": "", "hooks": []}]})
        assert group.matcher is None

    def test_non_positive_timeout_ignored(self):
        ((_, group),) = parse_hooks_config({"Stop": [{"hooks": [{"command": "x", "timeout": 0}]}]})
        assert group.hooks[0].timeout is None

    def test_plugin_root_attached(self):
        ((_, group),) = parse_hooks_config({"Stop": [{"hooks": []}]}, plugin_root="/plug")
        assert group.plugin_root == "/plug"

    def test_unknown_type_kept(self):
        ((_, group),) = parse_hooks_config({"Stop": [{"hooks": [{"type": "webhook"}]}]})
        assert group.hooks[0].type_name == "webhook"

    def test_null_groups_skipped(self):
        assert parse_hooks_config({"Stop": None}) == []

    @pytest.mark.parametrize(
        "config",
        [
            {"BeforeEverything": []},
            {"Stop": "not a list"},
            {"Stop": ["not a mapping"]},
            {"Stop": [{"hooks": "nope"}]},
            {"Stop": [{"matcher": 5, "hooks": []}]},
            {"Stop": [{"hooks": ["nope"]}]},
            {"Stop": [{"hooks": [{"command": "x", "timeout": "soon"}]}]},
            {"hooks": ["not a mapping"]},
        ],
    )
    def test_invalid_documents(self, config):
        with pytest.raises(HookConfigError):
            parse_hooks_config(config)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_hooks_config([])  # type: ignore[arg-type]


class TestReadHooksFile:
    def test_json(self, hooks_json):
        path = hooks_json({"hooks": {"Stop": []}})
        assert read_hooks_file(path) == {"hooks": {"Stop": []}}

    def test_toml(self, tmp_path):
        path = tmp_path / "hooks.toml"
        path.write_text(
            '[[hooks.PreToolUse]]\n'
            'matcher = "Bash"\n'
            '[[hooks.PreToolUse.hooks]]\n'
            'type = "command"\n'
            'command = "guard.sh"\n'
        )
        pairs = load_hooks_file(path)
        assert pairs[0][0] is HookEvent.PRE_TOOL_USE
        assert pairs[0][1].hooks[0].command == "guard.sh"

    def test_yaml(self, tmp_path):
        pytest.importorskip("yaml")
        path = tmp_path / "hooks.yaml"
        path.write_text(
            "hooks:\n"
            "  SessionStart:\n"
            "    - hooks:\n"
            "        - type: command\n"
            "          command: echo started\n"
            "          once: true\n"
        )
        ((event, group),) = load_hooks_file(path)
        assert event is HookEvent.SESSION_START
        assert group.hooks[0].once is True

    def test_empty_yaml_is_empty(self, tmp_path):
        pytest.importorskip("yaml")
        path = tmp_path / "hooks.yml"
        path.write_text("")
        assert read_hooks_file(path) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(HookConfigError, match="Cannot read"):
            read_hooks_file(tmp_path / "absent.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "hooks.json"
        path.write_text("{not json")
        with pytest.raises(HookConfigError, match="JSON"):
            read_hooks_file(path)

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "hooks.json"
        path.write_text("[1, 2]")
        with pytest.raises(HookConfigError, match="mapping"):
            read_hooks_file(path)

    def test_load_with_plugin_root(self, hooks_json, tmp_path):
        path = hooks_json({"Stop": [{"hooks": [{"command": "x"}]}]})
        ((_, group),) = load_hooks_file(path, plugin_root=str(tmp_path))
        assert group.plugin_root == str(tmp_path)
