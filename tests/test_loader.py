"""Tests for loading projects and resolving external levels."""

import logging
import warnings
from pathlib import Path

import pytest

import ldtk_samples as samples
from ldtk_loader import (
    DecodeError,
    LdtkError,
    LdtkJson,
    Level,
    LevelState,
    MissingExternalPathError,
    Project,
    ProjectLevelState,
    ResourceNotFoundError,
    clear_levels,
    find_level_by_uid,
    load_full_project,
    load_level,
    load_project,
    resolve_external_levels,
)


class TestInlineProjects:
    """Projects storing their levels in the project file."""

    def test_levels_match_embedded_array(self, inline_project_path: Path) -> None:
        data = samples.project([samples.level(0), samples.level(1)])
        expected = [Level.from_dict(level) for level in data["levels"]]

        project = load_full_project(inline_project_path)

        assert project.levels == expected
        assert project.level_state is ProjectLevelState.INLINE
        assert all(level.state is LevelState.FULL for level in project.levels)

    def test_resolve_is_noop(self, inline_project_path: Path) -> None:
        project = load_full_project(inline_project_path)
        before = list(project.levels)

        resolve_external_levels(project, inline_project_path)

        assert project.levels == before
        assert project.levels[0] is before[0]

    def test_load_project_equals_full_load(self, inline_project_path: Path) -> None:
        assert load_project(inline_project_path) == load_full_project(inline_project_path)


class TestExternalLevels:
    """Projects saved with one file per level."""

    def test_load_project_keeps_stubs(self, external_project_path: Path) -> None:
        project = load_project(external_project_path)

        assert project.external_levels is True
        assert project.level_state is ProjectLevelState.STUB_ONLY
        assert [level.uid for level in project.levels] == [0, 5, 2]
        assert all(level.is_stub for level in project.levels)
        assert project.levels[0].external_rel_path == "world/Level_0.ldtkl"

    def test_full_load_resolves_in_stub_order(self, external_project_path: Path) -> None:
        project = load_full_project(external_project_path)

        assert [level.uid for level in project.levels] == [0, 5, 2]
        assert project.level_state is ProjectLevelState.RESOLVED
        for level in project.levels:
            assert level.state is LevelState.FULL
            assert level.layer_instances is not None
            assert len(level.layer_instances) == 4

    def test_resolved_levels_match_level_files(self, external_project_path: Path) -> None:
        project = load_full_project(external_project_path)

        assert project.levels[1] == Level.from_dict(samples.level(5))

    def test_explicit_resolve_step(self, external_project_path: Path) -> None:
        project = load_project(external_project_path)
        resolve_external_levels(project, external_project_path)

        assert project.level_state is ProjectLevelState.RESOLVED
        assert len(project.levels) == 3

    def test_project_load_method(self, external_project_path: Path) -> None:
        project = Project.load(external_project_path)

        assert project.level_state is ProjectLevelState.RESOLVED

    def test_load_external_levels_method(self, external_project_path: Path) -> None:
        project = Project.load_project(external_project_path)
        project.load_external_levels(external_project_path)

        assert not any(level.is_stub for level in project.levels)

    def test_logs_each_opened_file(
        self, external_project_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="ldtk_loader"):
            load_full_project(external_project_path)

        opened = [r.getMessage() for r in caplog.records if "Opening level file" in r.getMessage()]
        assert len(opened) == 3
        expected = (external_project_path.parent / "world" / "Level_0.ldtkl").absolute()
        assert str(expected) in opened[0]

    def test_empty_external_project(self, tmp_path: Path) -> None:
        path = samples.write_json(tmp_path / "empty.ldtk", samples.project([], external_levels=True))

        project = load_full_project(path)

        assert project.levels == []
        assert project.level_state is ProjectLevelState.RESOLVED


class TestPathResolution:
    """External paths resolve against the project file's directory."""

    @pytest.fixture
    def nested_project(self, tmp_path: Path) -> Path:
        base = tmp_path / "a" / "b"
        samples.write_json(base / "levels" / "L1.json", samples.level(1, "Expected"))
        # Decoys for the wrong resolution strategies
        samples.write_json(tmp_path / "a" / "levels" / "L1.json", samples.level(1, "ParentDir"))
        samples.write_json(tmp_path / "levels" / "L1.json", samples.level(1, "WorkingDir"))
        stub = samples.level(1, "Stub", stub=True, rel_path="levels/L1.json")
        return samples.write_json(
            base / "project.json", samples.project([stub], external_levels=True)
        )

    def test_absolute_location(
        self, nested_project: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        project = load_full_project(nested_project)

        assert project.levels[0].identifier == "Expected"

    def test_relative_location(self, nested_project: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        project = load_full_project(Path("a") / "b" / "project.json")

        assert project.levels[0].identifier == "Expected"

    def test_string_location(self, nested_project: Path) -> None:
        project = load_full_project(str(nested_project))

        assert project.levels[0].identifier == "Expected"


class TestResolutionFailures:
    """Errors raised while resolving external levels."""

    def test_missing_external_path(self, tmp_path: Path) -> None:
        stubs = [
            samples.level(0, stub=True, rel_path="world/Level_0.ldtkl"),
            samples.level(1, stub=True, rel_path=None),
        ]
        samples.write_json(tmp_path / "world" / "Level_0.ldtkl", samples.level(0))
        path = samples.write_json(tmp_path / "world.ldtk", samples.project(stubs, external_levels=True))
        project = load_project(path)

        with pytest.raises(MissingExternalPathError) as exc_info:
            resolve_external_levels(project, path)

        assert exc_info.value.level_uid == 1
        assert exc_info.value.level_identifier == "Level_1"
        # Paths are captured before anything is loaded or replaced
        assert len(project.levels) == 2
        assert project.level_state is ProjectLevelState.STUB_ONLY

    def test_missing_external_path_from_full_load(self, tmp_path: Path) -> None:
        stubs = [samples.level(0, stub=True)]
        path = samples.write_json(tmp_path / "world.ldtk", samples.project(stubs, external_levels=True))

        with pytest.raises(MissingExternalPathError):
            load_full_project(path)

    def test_empty_external_path(self, tmp_path: Path) -> None:
        stubs = [samples.level(3, stub=True, rel_path="")]
        path = samples.write_json(tmp_path / "world.ldtk", samples.project(stubs, external_levels=True))
        project = load_project(path)

        with pytest.raises(MissingExternalPathError) as exc_info:
            resolve_external_levels(project, path)

        assert exc_info.value.level_uid == 3
        assert project.levels[0].is_stub

    def test_missing_level_file_keeps_stubs(self, external_project_path: Path) -> None:
        (external_project_path.parent / "world" / "Level_2.ldtkl").unlink()
        project = load_project(external_project_path)

        with pytest.raises(ResourceNotFoundError):
            resolve_external_levels(project, external_project_path)

        assert [level.uid for level in project.levels] == [0, 5, 2]
        assert all(level.is_stub for level in project.levels)

    def test_malformed_level_file(self, external_project_path: Path) -> None:
        samples.write_json(external_project_path.parent / "world" / "Level_5.ldtkl", {"not": "a level"})

        with pytest.raises(DecodeError) as exc_info:
            load_full_project(external_project_path)

        assert exc_info.value.source is not None
        assert exc_info.value.source.name == "Level_5.ldtkl"


class TestLoadLevel:
    """Loading single level files."""

    def test_loads_full_level(self, tmp_path: Path) -> None:
        path = samples.write_json(tmp_path / "Level_3.ldtkl", samples.level(3))

        level = load_level(path)

        assert level.uid == 3
        assert level.state is LevelState.FULL
        assert level == Level.load(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ResourceNotFoundError) as exc_info:
            load_level(tmp_path / "nope.ldtkl")

        assert isinstance(exc_info.value, FileNotFoundError)
        assert isinstance(exc_info.value, LdtkError)

    def test_directory_is_not_a_level(self, tmp_path: Path) -> None:
        with pytest.raises(ResourceNotFoundError):
            load_level(tmp_path)

    def test_not_a_level(self, tmp_path: Path) -> None:
        path = samples.write_json(tmp_path / "bad.ldtkl", {"not": "a level"})

        with pytest.raises(DecodeError) as exc_info:
            load_level(path)

        assert "missing required field" in str(exc_info.value)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.ldtkl"
        path.write_text('{"identifier": ', encoding="utf-8")

        with pytest.raises(DecodeError) as exc_info:
            load_level(path)

        assert isinstance(exc_info.value, ValueError)
        assert "invalid JSON" in str(exc_info.value)

    def test_top_level_array(self, tmp_path: Path) -> None:
        path = samples.write_json(tmp_path / "array.ldtkl", [samples.level(0)])

        with pytest.raises(DecodeError, match="expected object"):
            load_level(path)

    def test_stub_shaped_file_is_rejected(self, tmp_path: Path) -> None:
        path = samples.write_json(tmp_path / "stub.ldtkl", samples.level(0, stub=True))

        with pytest.raises(DecodeError, match="layerInstances"):
            load_level(path)

    def test_missing_project_file(self, tmp_path: Path) -> None:
        with pytest.raises(ResourceNotFoundError):
            load_full_project(tmp_path / "missing.ldtk")


class TestLevelLookup:
    """Lookup by uid and level list reset."""

    def test_find_by_uid(self, inline_project_path: Path) -> None:
        project = load_full_project(inline_project_path)

        found = find_level_by_uid(project, 1)

        assert found is project.levels[1]
        assert find_level_by_uid(project, 99) is None

    def test_find_in_empty_project(self, inline_project_path: Path) -> None:
        project = load_full_project(inline_project_path)
        project.clear_levels()

        assert find_level_by_uid(project, 0) is None

    def test_duplicate_uid_returns_first(self, tmp_path: Path) -> None:
        levels = [samples.level(7, "First"), samples.level(7, "Second")]
        path = samples.write_json(tmp_path / "dup.ldtk", samples.project(levels))

        project = load_full_project(path)

        found = project.get_level(7)
        assert found is not None
        assert found.identifier == "First"

    def test_find_by_identifier(self, inline_project_path: Path) -> None:
        project = load_full_project(inline_project_path)

        found = project.get_level_by_identifier("Level_1")

        assert found is not None
        assert found.uid == 1

    @pytest.mark.parametrize("fixture_name", ["inline_project_path", "external_project_path"])
    def test_clear_levels(self, fixture_name: str, request: pytest.FixtureRequest) -> None:
        path = request.getfixturevalue(fixture_name)
        for project in (load_project(path), load_full_project(path)):
            clear_levels(project)
            assert len(project.levels) == 0


class TestLegacyAlias:
    """LdtkJson forwards to the main entry point."""

    def test_new_warns_and_loads(self, external_project_path: Path) -> None:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            project = LdtkJson.new(external_project_path)

        assert any(issubclass(w.category, DeprecationWarning) for w in caught)
        assert project == load_full_project(external_project_path)
