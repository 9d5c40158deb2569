"""
Loading LDtk projects and levels from disk.

Reads project files, and for projects saved with external levels, replaces
the level stubs with the level files stored next to the project.
"""

import logging
import warnings
from pathlib import Path
from typing import Optional, Union

import orjson

from .errors import DecodeError, MissingExternalPathError, ResourceNotFoundError
from .schema.decoding import ROOT, JsonObject, key_path, type_name
from .schema.project import SCHEMA_VERSION, Level, Project

PathLike = Union[str, Path]


class LdtkLoader:
    """Loads LDtk project and level files.

    Holds no state besides its logger, so a single instance can be shared
    by any number of callers.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def read_document(self, location: PathLike) -> JsonObject:
        """Read a file and parse it as a JSON object.

        Raises:
            ResourceNotFoundError: If the file cannot be opened
            DecodeError: If the content is not a JSON object
        """
        path = Path(location)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise ResourceNotFoundError(path, e.strerror or str(e)) from e

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise DecodeError(f"invalid JSON: {e}", source=path) from e

        if not isinstance(data, dict):
            raise DecodeError(
                f"expected object at top level, got {type_name(data)}", ROOT, path
            )
        return data

    def load_project(self, location: PathLike) -> Project:
        """Load a project file without touching external level files.

        Raises:
            ResourceNotFoundError: If the file cannot be opened
            DecodeError: If the file is not a valid project document
        """
        path = Path(location)
        self.logger.info(f"Loading project from: {path}")

        data = self.read_document(path)
        try:
            project = Project.from_dict(data)
        except DecodeError as e:
            raise e.with_source(path) from e

        if project.json_version != SCHEMA_VERSION:
            self.logger.warning(
                f"Project {path.name} was saved by editor JSON version "
                f"{project.json_version}, model targets {SCHEMA_VERSION}"
            )

        self.logger.info(
            f"Loaded project '{path.name}' with {len(project.levels)} level(s) "
            f"(external levels: {project.external_levels})"
        )
        return project

    def load_full_project(self, location: PathLike) -> Project:
        """Load a project and, if it uses external levels, all its level files."""
        project = self.load_project(location)
        if project.external_levels:
            self.resolve_external_levels(project, location)
        return project

    def load_level(self, location: PathLike) -> Level:
        """Load a single external level file.

        Raises:
            ResourceNotFoundError: If the file cannot be opened
            DecodeError: If the file is not a complete level document
        """
        path = Path(location)
        data = self.read_document(path)
        try:
            level = Level.from_dict(data)
        except DecodeError as e:
            raise e.with_source(path) from e

        if level.is_stub:
            raise DecodeError(
                "level file has no layerInstances", key_path(ROOT, "layerInstances"), path
            )

        self.logger.debug(
            f"Loaded level '{level.identifier}' (uid {level.uid}) "
            f"with {len(level.layer_instances or [])} layer(s)"
        )
        return level

    def resolve_external_levels(self, project: Project, location: PathLike) -> None:
        """Replace the project's level stubs with their external level files.

        Paths are resolved against the directory holding the project file
        at ``location``. Does nothing if the project stores levels inline.
        The project's level list is only replaced once every file has
        loaded; on error it keeps its stubs.

        Raises:
            MissingExternalPathError: If a stub has no externalRelPath
            ResourceNotFoundError: If a level file cannot be opened
            DecodeError: If a level file is not a valid level document
        """
        if not project.external_levels:
            self.logger.debug("Project stores levels inline, nothing to resolve")
            return

        project_dir = Path(location).parent

        # Capture every path before opening anything
        level_files: list[Path] = []
        for level in project.levels:
            if not level.external_rel_path:
                raise MissingExternalPathError(level.identifier, level.uid)
            level_files.append(project_dir / level.external_rel_path)

        loaded: list[Level] = []
        for level_file in level_files:
            self.logger.info(f"Opening level file {level_file.absolute()}")
            loaded.append(self.load_level(level_file))

        project.clear_levels()
        project.levels.extend(loaded)
        self.logger.info(f"Resolved {len(loaded)} external level(s)")


default_loader = LdtkLoader()


def load_project(location: PathLike) -> Project:
    return default_loader.load_project(location)


def load_full_project(location: PathLike) -> Project:
    """Load a project with its external levels. Main entry point."""
    return default_loader.load_full_project(location)


def load_level(location: PathLike) -> Level:
    return default_loader.load_level(location)


def resolve_external_levels(project: Project, location: PathLike) -> None:
    default_loader.resolve_external_levels(project, location)


def find_level_by_uid(project: Project, uid: int) -> Optional[Level]:
    return project.get_level(uid)


def clear_levels(project: Project) -> None:
    project.clear_levels()


class LdtkJson:
    """Deprecated alias of Project from early releases.

    ``LdtkJson.new(path)`` forwards to ``load_full_project``; new code
    should call ``Project.load(path)``.
    """

    @staticmethod
    def new(location: PathLike) -> Project:
        warnings.warn(
            "LdtkJson is deprecated, use Project.load() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return load_full_project(location)
