"""Distribution metadata (META.yml) loading."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import yaml

from common.logging_utils import extra_context, is_debug_enabled
from .errors import MetadataParseError
from .prerequisites import Prerequisites

logger = logging.getLogger(__name__)


@dataclass
class Distmeta:
    """Decoded META.yml document.

    The three prerequisite lists are always present, empty when the document
    omits the section, so callers can iterate them unconditionally.
    """
    abstract: str = ""
    author: List[str] = field(default_factory=list)
    build_requires: Prerequisites = field(default_factory=Prerequisites)
    configure_requires: Prerequisites = field(default_factory=Prerequisites)
    requires: Prerequisites = field(default_factory=Prerequisites)
    distribution_type: str = ""
    dynamic_config: bool = False
    generated_by: str = ""
    license: str = ""
    meta_spec: Dict[str, str] = field(default_factory=dict)
    module_name: str = ""
    name: str = ""
    no_index: Dict[str, Any] = field(default_factory=dict)
    resources: Dict[str, Any] = field(default_factory=dict)
    version: str = ""

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Distmeta":
        """Build a Distmeta from a decoded YAML mapping.

        Raises:
            ValueError: If a field has a shape that cannot be decoded.
        """
        if not isinstance(doc, Mapping):
            raise ValueError(f"expected a mapping at document root, got {type(doc).__name__}")

        author = doc.get("author") or []
        if isinstance(author, str):
            author = [author]
        license_ = doc.get("license") or ""
        if isinstance(license_, list):
            license_ = ", ".join(str(x) for x in license_)
        version = doc.get("version")

        return cls(
            abstract=str(doc.get("abstract") or ""),
            author=[str(a) for a in author],
            build_requires=Prerequisites.from_mapping(doc.get("build_requires")),
            configure_requires=Prerequisites.from_mapping(doc.get("configure_requires")),
            requires=Prerequisites.from_mapping(doc.get("requires")),
            distribution_type=str(doc.get("distribution_type") or ""),
            dynamic_config=bool(doc.get("dynamic_config", False)),
            generated_by=str(doc.get("generated_by") or ""),
            license=str(license_),
            meta_spec=_string_map(doc.get("meta-spec")),
            module_name=str(doc.get("module_name") or ""),
            name=str(doc.get("name") or ""),
            no_index=dict(doc.get("no_index") or {}),
            resources=dict(doc.get("resources") or {}),
            version=str(version) if version is not None else "",
        )

    def all_prerequisites(self) -> List[Prerequisites]:
        return [self.build_requires, self.configure_requires, self.requires]


def _string_map(value: Optional[Mapping[Any, Any]]) -> Dict[str, str]:
    if not value:
        return {}
    return {str(k): str(v) for k, v in value.items()}


def _scalar_text(node: Optional[yaml.Node], key: str, default: Any) -> Any:
    """Source text of the scalar under ``key`` in a mapping node, else ``default``."""
    if default is None or not isinstance(node, yaml.MappingNode):
        return default
    for key_node, value_node in node.value:
        if isinstance(key_node, yaml.ScalarNode) and key_node.value == key:
            return value_node.value if isinstance(value_node, yaml.ScalarNode) else default
    return default


def _keep_source_text(doc: Any, node: Optional[yaml.Node]) -> Any:
    """Put the scalar text back for descriptive version fields.

    YAML resolves ``version: 1.10`` to a float, which would lose the
    trailing zero. Only prerequisite versions are canonicalized.
    """
    if not isinstance(doc, Mapping):
        return doc
    doc = dict(doc)
    doc["version"] = _scalar_text(node, "version", doc.get("version"))
    meta_spec = doc.get("meta-spec")
    if isinstance(meta_spec, Mapping):
        spec_node = next((v for k, v in node.value if k.value == "meta-spec"), None)
        doc["meta-spec"] = {k: _scalar_text(spec_node, k, v) for k, v in meta_spec.items()}
    return doc


def load_distmeta(filename: str, dist_path: str = "") -> Distmeta:
    """Read and decode a metadata file.

    Args:
        filename: Path to the META.yml file.
        dist_path: Distribution the file belongs to, for error messages.

    Raises:
        MetadataParseError: On any read or decode failure.
    """
    try:
        with open(filename, encoding="utf-8") as fh:
            loader = yaml.SafeLoader(fh)
            try:
                node = loader.get_single_node()
                doc = loader.construct_document(node) if node is not None else None
            finally:
                loader.dispose()
        doc = _keep_source_text(doc, node)
        meta = Distmeta.from_document(doc if doc is not None else {})
    except (OSError, UnicodeDecodeError, yaml.YAMLError, ValueError, TypeError, AttributeError) as exc:
        raise MetadataParseError(
            f"failed to load file {filename} for {dist_path}: {exc}"
        ) from exc

    if is_debug_enabled(logger):
        logger.debug(
            "Parsed distribution metadata",
            extra=extra_context(
                event="parse",
                component="distmeta",
                target=filename,
                distribution=dist_path,
                count=sum(len(p) for p in meta.all_prerequisites())
            )
        )
    return meta
