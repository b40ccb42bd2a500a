"""Generation of ``.nuspec`` manifests from mod metadata."""

import re
from collections.abc import Sequence
from string import Template

from ...core.types import CollectedFile, ModMetadata

NUSPEC_NAMESPACE = "http://schemas.microsoft.com/packaging/2013/05/nuspec.xsd"

DEFAULT_TAGS = ("duckymod", "game-mod")

TARGET_FRAMEWORK = "netstandard2.1"

README_TARGET = "README.md"

# Text longer than this is written as CDATA
CDATA_THRESHOLD = 400

NUSPEC_TEMPLATE = Template(
    """<?xml version="1.0" encoding="utf-8"?>
<package xmlns="$namespace">
  <metadata>
$metadata
  </metadata>
  <files>
$files
  </files>
</package>
"""
)

XML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}

XML_ESCAPE_PATTERN = re.compile("[&<>\"']")


def escape_xml(text: str) -> str:
    """Escape ``& < > " '`` for use in XML text and attributes."""
    return XML_ESCAPE_PATTERN.sub(lambda m: XML_ESCAPES[m.group(0)], text)


def format_text(text: str) -> str:
    """Format free text as CDATA or escaped text.

    CDATA is used when the text contains a newline or exceeds the
    threshold. A ``]]>`` inside the text is split across two CDATA
    sections.
    """
    if "\n" in text or len(text) > CDATA_THRESHOLD:
        return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"
    return escape_xml(text)


def format_tags(tags: Sequence[str] | None) -> str:
    """Join user tags and the default tags into a space-separated list.

    Whitespace inside a tag becomes a hyphen since NuGet splits tags on
    whitespace.

    Example:
        >>> format_tags(["Cities: Skylines", "Update"])
        'Cities:-Skylines Update duckymod game-mod'
    """
    user_tags = [re.sub(r"\s+", "-", tag.strip()) for tag in tags or [] if tag.strip()]
    return " ".join([*user_tags, *DEFAULT_TAGS])


def format_dependency(dependency: str) -> str:
    """Format an ``id`` or ``id:version`` string as a dependency element."""
    package_id, _, version = dependency.partition(":")
    package_id = package_id.strip()
    version = version.strip()

    if version:
        return f'<dependency id="{escape_xml(package_id)}" version="{escape_xml(version)}" />'
    return f'<dependency id="{escape_xml(package_id)}" />'


def format_dependencies(dependencies: Sequence[str] | None) -> list[str]:
    """Format dependencies as one framework group, empty when there are none."""
    items = [format_dependency(dep) for dep in dependencies or [] if dep.strip()]

    if not items:
        return [
            "<dependencies>",
            f'  <group targetFramework="{TARGET_FRAMEWORK}" />',
            "</dependencies>",
        ]

    return [
        "<dependencies>",
        f'  <group targetFramework="{TARGET_FRAMEWORK}">',
        *(f"    {item}" for item in items),
        "  </group>",
        "</dependencies>",
    ]


def format_file(source: str, target: str) -> str:
    return f'<file src="{escape_xml(source)}" target="{escape_xml(target)}" />'


def generate_nuspec(
    metadata: ModMetadata,
    description: str = "",
    release_notes: str = "",
    readme_path: str | None = None,
    files: Sequence[CollectedFile] | None = None,
) -> str:
    """Render a ``.nuspec`` document.

    Args:
        metadata: Validated mod metadata
        description: Resolved description; falls back to the metadata
            description, then to the title
        release_notes: Resolved release notes, omitted when empty
        readme_path: Source path of a readme to package as README.md
        files: Files to list in the ``<files>`` section

    Returns:
        The nuspec XML as a string

    Example:
        >>> xml = generate_nuspec(ModMetadata(name="MyMod", version="1.0.0"))
        >>> "<id>MyMod</id>" in xml
        True
    """
    title = metadata.title
    description_text = description or metadata.description or title

    lines = [
        f"<id>{escape_xml(metadata.name)}</id>",
        f"<version>{escape_xml(metadata.version)}</version>",
        f"<title>{escape_xml(title)}</title>",
        f"<authors>{escape_xml(metadata.author or metadata.name)}</authors>",
        f"<description>{format_text(description_text)}</description>",
    ]

    if release_notes:
        lines.append(f"<releaseNotes>{format_text(release_notes)}</releaseNotes>")

    if readme_path:
        lines.append(f"<readme>{README_TARGET}</readme>")

    if metadata.project_url:
        lines.append(f"<projectUrl>{escape_xml(metadata.project_url)}</projectUrl>")
    if metadata.license:
        lines.append(f'<license type="expression">{escape_xml(metadata.license)}</license>')
    if metadata.copyright:
        lines.append(f"<copyright>{escape_xml(metadata.copyright)}</copyright>")
    if metadata.icon:
        lines.append(f"<icon>{escape_xml(metadata.icon)}</icon>")

    lines.append(f"<tags>{escape_xml(format_tags(metadata.tags))}</tags>")
    lines.extend(format_dependencies(metadata.dependencies))

    file_lines = [format_file(f.source, f.target) for f in files or []]
    if readme_path:
        file_lines.append(format_file(readme_path, README_TARGET))

    return NUSPEC_TEMPLATE.substitute(
        namespace=NUSPEC_NAMESPACE,
        metadata="\n".join(f"    {line}" for line in lines),
        files="\n".join(f"    {line}" for line in file_lines),
    )
