"""Maven build tool gateway.

``BuildToolGateway`` is what the workflows need from the build tool: read
and change the project version, run goals, test and install. ``Maven``
implements it with the ``mvn`` command line and reads ``pom.xml`` directly
for the project version and its snapshot dependencies.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from gf.core.result import Err, Ok, Result
from gf.platform.process import run as run_process

if TYPE_CHECKING:
    from gf.output.console import ConsoleProtocol

__all__ = [
    "BuildError",
    "BuildToolGateway",
    "Maven",
    "POM_FILE_NAME",
]

POM_FILE_NAME = "pom.xml"

_VERSIONS_PLUGIN = "org.codehaus.mojo:versions-maven-plugin"


@dataclass(frozen=True, slots=True)
class BuildError:
    """Error from a build tool invocation or from reading the project model."""

    command: str
    message: str
    returncode: int = 1


class BuildToolGateway(Protocol):
    """Build tool operations used by the workflows."""

    def project_version(self) -> Result[str, BuildError]: ...

    def snapshot_dependencies(self) -> Result[list[str], BuildError]:
        """``groupId:artifactId:version`` of every snapshot the project uses."""
        ...

    def set_version(self, version: str, *, all_modules: bool = False) -> Result[None, BuildError]:
        """Set the project version.

        With ``all_modules`` every module carrying the current version is
        updated, not only the reactor.
        """
        ...

    def set_property(self, name: str, value: str) -> Result[None, BuildError]: ...

    def run_goals(self, goals: Sequence[str]) -> Result[None, BuildError]: ...

    def test(self) -> Result[None, BuildError]: ...

    def install(self) -> Result[None, BuildError]: ...


def _local(tag: str) -> str:
    """Element name without its XML namespace."""
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> ET.Element | None:
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _child_text(element: ET.Element, name: str) -> str | None:
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


class Maven:
    """``mvn`` command line implementation of ``BuildToolGateway``.

    Attributes:
        path: Project directory containing pom.xml
    """

    def __init__(
        self,
        path: Path,
        *,
        mvn: str = "mvn",
        args: Sequence[str] = (),
        batch_mode: bool = False,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self.path = path
        self._mvn = mvn
        self._args = list(args)
        self._batch_mode = batch_mode
        self._console = console

    @property
    def pom(self) -> Path:
        return self.path / POM_FILE_NAME

    # -------------------------------------------------------------------------
    # Project model
    # -------------------------------------------------------------------------

    def _read_pom(self) -> Result[ET.Element, BuildError]:
        try:
            return Ok(ET.parse(self.pom).getroot())
        except FileNotFoundError:
            return Err(BuildError(command="read pom", message=f"{self.pom} not found"))
        except ET.ParseError as e:
            return Err(BuildError(command="read pom", message=f"Invalid {self.pom}: {e}"))

    def project_version(self) -> Result[str, BuildError]:
        """Version of the root project, inherited from the parent if not set."""
        match self._read_pom():
            case Err(e):
                return Err(e)
            case Ok(root):
                version = _child_text(root, "version")
                if version is None:
                    parent = _child(root, "parent")
                    if parent is not None:
                        version = _child_text(parent, "version")
                if version is None:
                    return Err(
                        BuildError(
                            command="read pom",
                            message=f"No project version in {self.pom}",
                        )
                    )
                return Ok(version)

    def snapshot_dependencies(self) -> Result[list[str], BuildError]:
        match self._read_pom():
            case Err(e):
                return Err(e)
            case Ok(root):
                found: list[str] = []
                for element in root.iter():
                    if _local(element.tag) not in {"dependency", "plugin", "extension"}:
                        continue
                    version = _child_text(element, "version")
                    if version is None or not version.upper().endswith("SNAPSHOT"):
                        continue
                    group = _child_text(element, "groupId") or ""
                    artifact = _child_text(element, "artifactId") or ""
                    found.append(f"{group}:{artifact}:{version}")
                return Ok(found)

    # -------------------------------------------------------------------------
    # Goals
    # -------------------------------------------------------------------------

    def set_version(self, version: str, *, all_modules: bool = False) -> Result[None, BuildError]:
        goals = [
            f"{_VERSIONS_PLUGIN}:set",
            f"-DnewVersion={version}",
            "-DgenerateBackupPoms=false",
        ]
        if all_modules:
            goals += ["-DgroupId=*", "-DartifactId=*", "-DoldVersion=*"]
        return self._mvn_call(goals)

    def set_property(self, name: str, value: str) -> Result[None, BuildError]:
        return self._mvn_call(
            [
                f"{_VERSIONS_PLUGIN}:set-property",
                f"-Dproperty={name}",
                f"-DnewVersion={value}",
                "-DgenerateBackupPoms=false",
            ]
        )

    def run_goals(self, goals: Sequence[str]) -> Result[None, BuildError]:
        if not goals:
            return Ok(None)
        return self._mvn_call(list(goals))

    def test(self) -> Result[None, BuildError]:
        return self._mvn_call(["clean", "test"])

    def install(self) -> Result[None, BuildError]:
        return self._mvn_call(["clean", "install"])

    def _mvn_call(self, goals: list[str]) -> Result[None, BuildError]:
        cmd = [self._mvn, *goals, *self._args]
        if self._batch_mode:
            cmd.append("-B")
        if self._console is not None:
            self._console.command(cmd)
        match run_process(cmd, cwd=self.path):
            case Err(e):
                return Err(
                    BuildError(
                        command=" ".join(cmd[:2]),
                        message=e.details or f"mvn exited with {e.returncode}",
                        returncode=e.returncode,
                    )
                )
            case Ok(_):
                return Ok(None)
