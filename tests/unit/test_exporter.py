"""Tests for the variable exporter."""

from __future__ import annotations

import pytest

from tokenvars.core.diagnostics import DiagnosticKind
from tokenvars.core.errors import StoreUnavailable
from tokenvars.core.ir.config import ExportConfig, ExportFormat, ExportStrategy
from tokenvars.export.exporter import Exporter, export_css, export_json, export_variables
from tokenvars.store.memory import InMemoryVariableStore

from tests.conftest import DARK, LIGHT, alias, make_store, make_variable, rgba

EXPECTED_LIGHT = """\
:root {
    --color-primary: #ff0000;
    --spacing-small: 8px;
    --font-weight-bold: 700;
    --button-bg: var(--color-primary);
    --overlay-clear: rgba(0, 0, 0, 0.0000);
    --font-family-body: Inter;
    --layout-visible: true;
}
"""

EXPECTED_DARK = """\
:root {
    --color-primary: #0000ff;
    --spacing-small: 8px;
    --font-weight-bold: 700;
    --button-bg: var(--color-primary);
    --overlay-clear: rgba(0, 0, 0, 0.5000);
    --font-family-body: Inter;
    --layout-visible: false;
}
"""

PREFETCH = ExportConfig(strategy=ExportStrategy.PREFETCH)


class FlakyStore(InMemoryVariableStore):
    """Store whose reads fail for selected variable ids."""

    def __init__(self, latency: float = 0.0):
        super().__init__(latency)
        self.failing: set[str] = set()

    async def get_variable_by_id(self, variable_id):
        if variable_id in self.failing:
            raise RuntimeError(f"timeout reading {variable_id}")
        return await super().get_variable_by_id(variable_id)


class DownStore(InMemoryVariableStore):
    async def list_collections(self):
        raise ConnectionError("store offline")


def flaky_store(variables, failing: set[str]) -> FlakyStore:
    store = FlakyStore.from_snapshot(make_store(variables).to_snapshot())
    store.failing = failing
    return store


class TestCssExport:
    @pytest.mark.asyncio
    async def test_theme_export(self, theme_store) -> None:
        result = await export_css(theme_store)

        assert list(result.files) == ["variables-light.css", "variables-dark-mode.css"]
        assert result.files["variables-light.css"] == EXPECTED_LIGHT
        assert result.files["variables-dark-mode.css"] == EXPECTED_DARK
        assert result.processed == 14
        assert result.skipped == 4
        assert result.data == {}

    @pytest.mark.asyncio
    async def test_exclusions_are_reported(self, theme_store) -> None:
        result = await export_css(theme_store)

        excluded = [d for d in result.diagnostics if d.kind == DiagnosticKind.EXCLUDED]
        assert len(excluded) == 4
        assert {d.name for d in excluded} == {"internal/ux-token", "button/ghost"}
        assert {d.mode for d in excluded} == {"Light", "Dark Mode"}
        assert len(result.diagnostics) == 4

    @pytest.mark.asyncio
    async def test_prefetch_matches_sequential(self, theme_variables) -> None:
        sequential = await export_css(make_store(theme_variables))
        prefetch = await export_css(make_store(theme_variables), PREFETCH)

        assert prefetch.files == sequential.files
        assert prefetch.processed == sequential.processed
        assert prefetch.skipped == sequential.skipped
        assert [d.kind for d in prefetch.diagnostics] == [d.kind for d in sequential.diagnostics]

    @pytest.mark.asyncio
    async def test_prefetch_reads_each_variable_once(self, theme_store) -> None:
        await export_css(theme_store, PREFETCH)
        # one listing plus one read per variable, however many modes
        assert theme_store.read_count == 10

    @pytest.mark.asyncio
    async def test_sequential_reads_alias_targets(self, theme_store) -> None:
        await export_css(theme_store)
        # per mode: nine variables plus two alias targets
        assert theme_store.read_count == 1 + 2 * (9 + 2)

    @pytest.mark.asyncio
    async def test_export_is_repeatable(self, theme_store) -> None:
        first = await export_css(theme_store)
        second = await export_css(theme_store)
        assert first.files == second.files
        assert first.diagnostics == second.diagnostics

    @pytest.mark.asyncio
    async def test_selected_modes(self, theme_store) -> None:
        result = await export_css(theme_store, ExportConfig(selected_modes=["Dark Mode"]))
        assert list(result.files) == ["variables-dark-mode.css"]
        assert result.processed == 7

    @pytest.mark.asyncio
    async def test_unknown_collection_is_reported(self, theme_store) -> None:
        result = await export_css(theme_store, ExportConfig(selected_collections=["Brand"]))
        assert result.files == {}
        assert [d.kind for d in result.diagnostics] == [DiagnosticKind.COLLECTION_NOT_FOUND]

    @pytest.mark.asyncio
    async def test_alpha_zero_keyword(self, theme_store) -> None:
        result = await export_css(theme_store, ExportConfig(alpha_zero_keyword="transparent"))
        assert "--overlay-clear: transparent;" in result.files["variables-light.css"]
        assert "--overlay-clear: rgba(0, 0, 0, 0.5000);" in result.files["variables-dark-mode.css"]

    @pytest.mark.asyncio
    async def test_no_exclusions(self, theme_store) -> None:
        result = await export_css(theme_store, ExportConfig(exclusion_patterns=[]))
        light = result.files["variables-light.css"]
        assert "--internal-ux-token: #00ff00;" in light
        assert "--button-ghost: var(--internal-ux-token);" in light
        assert result.skipped == 0


class TestExportDiagnostics:
    @pytest.mark.asyncio
    async def test_invalid_values_are_skipped(self) -> None:
        store = make_store(
            [
                make_variable("V:1", "radius", "FLOAT", {LIGHT: "wide", DARK: 4}),
                make_variable("V:2", "accent", "COLOR", {LIGHT: "blurple", DARK: rgba(0, 0, 0)}),
            ]
        )
        result = await export_css(store)

        kinds = {(d.name, d.mode): d.kind for d in result.diagnostics}
        assert kinds == {
            ("radius", "Light"): DiagnosticKind.INVALID_NUMBER,
            ("accent", "Light"): DiagnosticKind.INVALID_COLOR,
        }
        assert "variables-light.css" not in result.files
        assert result.files["variables-dark-mode.css"] == (
            ":root {\n    --radius: 4px;\n    --accent: #000000;\n}\n"
        )

    @pytest.mark.asyncio
    async def test_duplicate_output_names(self) -> None:
        store = make_store(
            [
                make_variable("V:1", "space/one", "FLOAT", {LIGHT: 1, DARK: 1}),
                make_variable("V:2", "space one", "FLOAT", {LIGHT: 2, DARK: 2}),
            ]
        )
        result = await export_css(store, ExportConfig(selected_modes=["Light"]))

        assert result.files["variables-light.css"] == ":root {\n    --space-one: 1px;\n}\n"
        assert [d.kind for d in result.diagnostics] == [DiagnosticKind.DUPLICATE]
        assert result.diagnostics[0].id == "V:2"

    @pytest.mark.asyncio
    async def test_failed_render_does_not_claim_name(self) -> None:
        store = make_store(
            [
                make_variable("V:1", "space/one", "FLOAT", {LIGHT: "n/a", DARK: 1}),
                make_variable("V:2", "space one", "FLOAT", {LIGHT: 2, DARK: 2}),
            ]
        )
        result = await export_css(store, ExportConfig(selected_modes=["Light"]))
        assert result.files["variables-light.css"] == ":root {\n    --space-one: 2px;\n}\n"

    @pytest.mark.asyncio
    async def test_missing_mode_value_and_alias_target(self) -> None:
        store = make_store(
            [
                make_variable("V:1", "only/light", "FLOAT", {LIGHT: 1}),
                make_variable("V:2", "dangling", "COLOR", {LIGHT: alias("V:404"), DARK: alias("V:404")}),
            ]
        )
        result = await export_css(store)

        kinds = [(d.kind, d.name, d.mode) for d in result.diagnostics]
        assert kinds == [
            (DiagnosticKind.VARIABLE_NOT_FOUND, "dangling", "Light"),
            (DiagnosticKind.MISSING_MODE_VALUE, "only/light", "Dark Mode"),
            (DiagnosticKind.VARIABLE_NOT_FOUND, "dangling", "Dark Mode"),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("strategy", list(ExportStrategy))
    async def test_unknown_variable_id(self, strategy) -> None:
        snapshot = make_store([make_variable("V:1", "gap", "FLOAT", {LIGHT: 1, DARK: 1})]).to_snapshot()
        snapshot["collections"][0]["variable_ids"].append("V:ghost")
        store = InMemoryVariableStore.from_snapshot(snapshot)

        result = await export_css(store, ExportConfig(strategy=strategy))
        missing = [d for d in result.diagnostics if d.kind == DiagnosticKind.VARIABLE_NOT_FOUND]
        assert [d.id for d in missing] == ["V:ghost", "V:ghost"]
        assert result.processed == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("strategy", list(ExportStrategy))
    async def test_read_failure_is_isolated(self, theme_variables, strategy) -> None:
        store = flaky_store(theme_variables, {"V:2"})

        result = await export_css(store, ExportConfig(strategy=strategy))

        errors = [d for d in result.diagnostics if d.kind == DiagnosticKind.ERROR]
        assert [(d.id, d.mode) for d in errors] == [("V:2", "Light"), ("V:2", "Dark Mode")]
        assert "timeout reading V:2" in errors[0].reason
        assert "--spacing-small" not in result.files["variables-light.css"]
        assert "--color-primary: #ff0000;" in result.files["variables-light.css"]
        assert result.processed == 12

    @pytest.mark.asyncio
    async def test_unreachable_store_is_fatal(self) -> None:
        with pytest.raises(StoreUnavailable):
            await export_css(DownStore())


class TestAliasChains:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("strategy", list(ExportStrategy))
    @pytest.mark.parametrize("reverse", [False, True])
    async def test_exclusion_follows_alias_chain(self, strategy, reverse) -> None:
        variables = [
            make_variable("V:1", "internal/ux-token", "COLOR", {LIGHT: rgba(0, 1, 0), DARK: rgba(0, 1, 0)}),
            make_variable("V:2", "button/ghost", "COLOR", {LIGHT: alias("V:1"), DARK: alias("V:1")}),
            make_variable("V:3", "card/ghost", "COLOR", {LIGHT: alias("V:2"), DARK: alias("V:2")}),
        ]
        if reverse:
            variables.reverse()
        variables.append(make_variable("V:4", "color/base", "COLOR", {LIGHT: rgba(1, 0, 0), DARK: rgba(1, 0, 0)}))

        result = await export_css(make_store(variables), ExportConfig(strategy=strategy))

        assert result.files["variables-light.css"] == ":root {\n    --color-base: #ff0000;\n}\n"
        assert result.processed == 2
        excluded = [d for d in result.diagnostics if d.kind == DiagnosticKind.EXCLUDED]
        assert len(excluded) == 6
        assert {d.name for d in excluded} == {"internal/ux-token", "button/ghost", "card/ghost"}
        assert result.skipped == 6

    @pytest.mark.asyncio
    @pytest.mark.parametrize("strategy", list(ExportStrategy))
    async def test_alias_to_skipped_target_is_dropped(self, strategy) -> None:
        store = make_store(
            [
                make_variable("V:1", "card/radius", "FLOAT", {LIGHT: alias("V:2"), DARK: alias("V:2")}),
                make_variable("V:2", "radius", "FLOAT", {LIGHT: "wide", DARK: 4}),
                make_variable("V:3", "only/light", "FLOAT", {LIGHT: 1}),
                make_variable("V:4", "ref", "FLOAT", {LIGHT: alias("V:3"), DARK: alias("V:3")}),
                make_variable("V:5", "ref/ref", "FLOAT", {LIGHT: alias("V:4"), DARK: alias("V:4")}),
            ]
        )
        result = await export_css(store, ExportConfig(strategy=strategy))

        assert result.files["variables-light.css"] == (
            ":root {\n    --only-light: 1px;\n    --ref: var(--only-light);\n    --ref-ref: var(--ref);\n}\n"
        )
        assert result.files["variables-dark-mode.css"] == (
            ":root {\n    --card-radius: var(--radius);\n    --radius: 4px;\n}\n"
        )
        kinds = {(d.name, d.mode): d.kind for d in result.diagnostics}
        assert kinds == {
            ("radius", "Light"): DiagnosticKind.INVALID_NUMBER,
            ("card/radius", "Light"): DiagnosticKind.ALIAS_UNRESOLVED,
            ("only/light", "Dark Mode"): DiagnosticKind.MISSING_MODE_VALUE,
            ("ref", "Dark Mode"): DiagnosticKind.ALIAS_UNRESOLVED,
            ("ref/ref", "Dark Mode"): DiagnosticKind.ALIAS_UNRESOLVED,
        }

    @pytest.mark.asyncio
    async def test_alias_to_other_collection_is_kept(self) -> None:
        snapshot = make_store(
            [make_variable("V:1", "button/bg", "COLOR", {LIGHT: alias("V:10"), DARK: alias("V:10")})]
        ).to_snapshot()
        snapshot["collections"].append(
            {
                "id": "VariableCollectionId:2:0",
                "name": "Base",
                "modes": [{"mode_id": "2:0", "name": "Default"}],
                "variable_ids": ["V:10"],
            }
        )
        snapshot["variables"].append(
            {
                "id": "V:10",
                "name": "base/red",
                "collection_id": "VariableCollectionId:2:0",
                "resolved_type": "COLOR",
                "values_by_mode": {"2:0": rgba(1, 0, 0)},
            }
        )
        result = await export_css(InMemoryVariableStore.from_snapshot(snapshot))

        assert "--button-bg: var(--base-red);" in result.files["variables-light.css"]
        assert result.files["variables-default.css"] == ":root {\n    --base-red: #ff0000;\n}\n"
        assert result.diagnostics == []


class TestJsonExport:
    @pytest.mark.asyncio
    async def test_structure(self, theme_store) -> None:
        result = await export_json(theme_store)

        assert result.files == {}
        light = result.data["Theme"]["Light"]
        assert list(light) == [
            "color/primary",
            "spacing/small",
            "font/weight/bold",
            "button/bg",
            "overlay/clear",
            "font/family/body",
            "layout/visible",
        ]
        assert light["color/primary"] == {"type": "COLOR", "value": "#ff0000"}
        assert light["spacing/small"] == {"type": "FLOAT", "value": 8}
        assert light["button/bg"] == {"type": "COLOR", "value": "{color.primary}"}
        assert light["overlay/clear"] == {"type": "COLOR", "value": "rgba(0, 0, 0, 0.0000)"}
        assert light["layout/visible"] == {"type": "BOOLEAN", "value": True}
        assert result.data["Theme"]["Dark Mode"]["layout/visible"]["value"] is False

    @pytest.mark.asyncio
    async def test_format_switch(self, theme_store) -> None:
        result = await export_variables(theme_store, None, ExportFormat.JSON)
        assert "Theme" in result.data


class TestCollect:
    @pytest.mark.asyncio
    async def test_documents_follow_collection_order(self, theme_store) -> None:
        run = await Exporter(theme_store).collect()

        assert [d.mode.name for d in run.documents] == ["Light", "Dark Mode"]
        light = run.documents[0]
        assert [e.variable_id for e in light.entries] == ["V:1", "V:2", "V:3", "V:5", "V:7", "V:8", "V:9"]
        assert len(run.log) == 4
