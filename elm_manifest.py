import json
from dataclasses import dataclass
from enum import Enum


class UnknownManifestType(ValueError):
    pass


class InvalidDependency(ValueError):
    pass


class ManifestType(Enum):
    PACKAGE = "package"
    APPLICATION = "application"


@dataclass(frozen=True)
class Dependency:
    author: str
    name: str

    @classmethod
    def parse(cls, identifier):
        try:
            author, name = identifier.split("/")
        except ValueError:
            raise InvalidDependency(f"Malformed dependency: {identifier!r} (expected author/package)") from None
        return cls(author, name)

    def __str__(self):
        return f"{self.author}/{self.name}"


@dataclass(frozen=True)
class PackageManifest:
    constraints: dict

    type = ManifestType.PACKAGE

    def dependency_names(self):
        return list(self.constraints)

    def dependencies(self):
        return tuple(Dependency.parse(dep) for dep in self.dependency_names())


@dataclass(frozen=True)
class ApplicationManifest:
    direct: dict
    indirect: dict

    type = ManifestType.APPLICATION

    def dependency_names(self):
        # direct first, then indirect
        return list(self.direct) + list(self.indirect)

    def dependencies(self):
        return tuple(Dependency.parse(dep) for dep in self.dependency_names())


def parse_manifest(data):
    """Build a PackageManifest or ApplicationManifest from a decoded elm.json.

    The variant comes from the "type" field. Anything other than "package"
    or "application" (including a missing field) raises UnknownManifestType.
    A missing dependencies section raises KeyError.
    """
    raw_type = data.get("type")
    try:
        manifest_type = ManifestType(raw_type)
    except ValueError:
        raise UnknownManifestType(f"Unknown manifest type: {raw_type!r}") from None

    dependencies = data["dependencies"]
    if manifest_type is ManifestType.PACKAGE:
        return PackageManifest(dict(dependencies))
    return ApplicationManifest(dict(dependencies["direct"]), dict(dependencies["indirect"]))


def load_manifest(path):
    with open(path, 'r', encoding="utf-8") as f:
        return parse_manifest(json.load(f))
