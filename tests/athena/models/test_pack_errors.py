# tests/athena/models/test_pack_errors.py
import textwrap

import pytest

from athena.core.errors import (
    ConstraintSyntaxError,
    PackLoadError,
    StructuralError,
    UnknownVariantError,
)
from athena.models import parsePack


HEADER = """
[modpack]
name = "deadbeef"
version = "0.1.0"

[game]
minecraft = "1.17.1"
"""


def _doc(body: str) -> str:
    return textwrap.dedent(HEADER) + textwrap.dedent(body)


def _fileWithVersion(versionBody: str) -> str:
    return _doc("""
        [[files]]
        path = "mods/a.jar"
        [files.version]
    """) + textwrap.dedent(versionBody)


# ------------------------------------------------------------------ #
# Tagged unions
# ------------------------------------------------------------------ #

def test_unknown_source_type():
    text = _doc("""
        [sources.foo]
        type = "unknown.v1"
        url = "https://example.com"
    """)
    with pytest.raises(UnknownVariantError) as excinfo:
        parsePack(text)

    err = excinfo.value
    assert err.tag == "unknown.v1"
    assert "labrinth.v1" in err.expected
    assert err.location == ("sources", "foo", "type")
    assert "'unknown.v1'" in str(err)


def test_unknown_version_type():
    with pytest.raises(UnknownVariantError) as excinfo:
        parsePack(_fileWithVersion('type = "newest"\n'))

    err = excinfo.value
    assert err.tag == "newest"
    assert set(err.expected) == {"latest", "semver", "exact", "download"}
    assert err.location == ("files", 0, "version", "type")


def test_missing_version_type():
    with pytest.raises(StructuralError) as excinfo:
        parsePack(_fileWithVersion('channel = "beta"\n'))
    assert excinfo.value.location == ("files", 0, "version", "type")


@pytest.mark.parametrize("name", ["semver", "latest", "exact", "download", "labrinth.v1"])
def test_source_named_like_a_tag_keeps_its_location(name):
    text = _doc(f"""
        [sources."{name}"]
        type = "labrinth.v1"
    """)
    with pytest.raises(StructuralError) as excinfo:
        parsePack(text)
    assert excinfo.value.location == ("sources", name, "url")


@pytest.mark.parametrize("tag", ["1", "true", "[\"latest\"]", "{ name = \"latest\" }"])
def test_non_text_version_tag(tag):
    with pytest.raises(StructuralError) as excinfo:
        parsePack(_fileWithVersion(f"type = {tag}\n"))
    assert not isinstance(excinfo.value, UnknownVariantError)
    assert excinfo.value.location == ("files", 0, "version", "type")


def test_non_text_source_tag():
    with pytest.raises(StructuralError) as excinfo:
        parsePack(_doc("""
            [sources.modrinth]
            type = 1
            url = "https://api.modrinth.com"
        """))
    assert excinfo.value.location == ("sources", "modrinth", "type")
    assert "expected a string tag" in str(excinfo.value)


def test_missing_source_type():
    with pytest.raises(StructuralError) as excinfo:
        parsePack(_doc("""
            [sources.foo]
            url = "https://example.com"
        """))
    assert excinfo.value.location == ("sources", "foo", "type")


# ------------------------------------------------------------------ #
# Version requirement strings
# ------------------------------------------------------------------ #

def test_semver_requirement_syntax_error():
    text = _fileWithVersion('type = "semver"\nversion = "not a range"\n')
    with pytest.raises(ConstraintSyntaxError) as excinfo:
        parsePack(text)

    err = excinfo.value
    assert err.text == "not a range"
    assert err.location == ("files", 0, "version", "version")
    assert "not a range" in str(err)


def test_semver_requirement_must_be_text():
    with pytest.raises(StructuralError) as excinfo:
        parsePack(_fileWithVersion('type = "semver"\nversion = 5\n'))
    assert excinfo.value.location == ("files", 0, "version", "version")


# ------------------------------------------------------------------ #
# Shape errors
# ------------------------------------------------------------------ #

def test_missing_metadata_field():
    text = textwrap.dedent("""
        [modpack]
        name = "deadbeef"

        [game]
        minecraft = "1.17.1"
    """)
    with pytest.raises(StructuralError) as excinfo:
        parsePack(text)
    assert excinfo.value.location == ("modpack", "version")


def test_missing_modpack_table():
    with pytest.raises(StructuralError) as excinfo:
        parsePack('[game]\nminecraft = "1.17.1"\n')
    assert excinfo.value.location == ("modpack",)


def test_missing_file_path():
    with pytest.raises(StructuralError) as excinfo:
        parsePack(_doc("""
            [[files]]
            [files.version]
            type = "latest"
        """))
    assert excinfo.value.location == ("files", 0, "path")


def test_wrong_value_type():
    with pytest.raises(StructuralError) as excinfo:
        parsePack(_fileWithVersion('type = "exact"\nversion = 5\n'))
    assert excinfo.value.location == ("files", 0, "version", "version")


@pytest.mark.parametrize(
    "field, value",
    [
        ("environment", '"everywhere"'),
        ("path", '"/mods/a.jar"'),
        ("path", '"."'),
        ("sources", '"modrinth"'),
    ],
)
def test_invalid_file_fields(field, value):
    text = _doc(f"""
        [[files]]
        path = "mods/a.jar"
        {field} = {value}
        [files.version]
        type = "latest"
    """)
    # A duplicate `path` key is itself invalid TOML; build that case without the default path
    if field == "path":
        text = text.replace('path = "mods/a.jar"\n', "", 1)

    with pytest.raises(StructuralError) as excinfo:
        parsePack(text)
    assert excinfo.value.location[:3] == ("files", 0, field)


def test_invalid_channel():
    with pytest.raises(StructuralError) as excinfo:
        parsePack(_fileWithVersion('type = "latest"\nchannel = "nightly"\n'))
    assert excinfo.value.location == ("files", 0, "version", "channel")


def test_download_needs_sources():
    with pytest.raises(StructuralError) as excinfo:
        parsePack(_fileWithVersion('type = "download"\nsources = []\n'))
    assert excinfo.value.location == ("files", 0, "version", "sources")


def test_download_bad_hash():
    with pytest.raises(StructuralError):
        parsePack(_fileWithVersion('type = "download"\nsources = ["https://a"]\nsha1 = "abc"\n'))


# ------------------------------------------------------------------ #
# [game]
# ------------------------------------------------------------------ #

GAME_HEADER = """
[modpack]
name = "deadbeef"
version = "0.1.0"
"""


def _game(body: str) -> str:
    return textwrap.dedent(GAME_HEADER) + "[game]\n" + textwrap.dedent(body)


def test_game_forge_and_fabric_is_ambiguous():
    text = _game("""
        minecraft = "1.17.1"
        forge = "37.0.0"
        fabric-loader = "0.9.0"
    """)
    with pytest.raises(StructuralError) as excinfo:
        parsePack(text)
    assert excinfo.value.location[:1] == ("game",)


def test_game_without_minecraft():
    with pytest.raises(StructuralError) as excinfo:
        parsePack(_game('forge = "37.0.0"\n'))
    assert excinfo.value.location == ("game", "minecraft")


def test_game_unknown_key():
    with pytest.raises(StructuralError) as excinfo:
        parsePack(_game('minecraft = "1.17.1"\nquilt-loader = "0.1"\n'))
    assert excinfo.value.location == ("game", "quilt-loader")


def test_game_value_must_be_text():
    with pytest.raises(StructuralError) as excinfo:
        parsePack(_game("minecraft = 1.17\n"))
    assert excinfo.value.location == ("game", "minecraft")


def test_game_missing():
    with pytest.raises(StructuralError) as excinfo:
        parsePack(textwrap.dedent(GAME_HEADER))
    assert excinfo.value.location == ("game",)


# ------------------------------------------------------------------ #
# Document level
# ------------------------------------------------------------------ #

def test_invalid_toml():
    with pytest.raises(StructuralError) as excinfo:
        parsePack("[modpack\nname = ")
    assert "Invalid TOML" in str(excinfo.value)


def test_non_text_input():
    with pytest.raises(StructuralError):
        parsePack(b"[modpack]")  # type: ignore[arg-type]


def test_document_name_in_message():
    with pytest.raises(PackLoadError) as excinfo:
        parsePack('[game]\nminecraft = "1.17.1"\n', documentName="pack.toml")
    err = excinfo.value
    assert err.documentName == "pack.toml"
    assert str(err).startswith("pack.toml: ")
    assert "(at modpack)" in str(err)


def test_load_errors_are_value_errors():
    with pytest.raises(ValueError):
        parsePack("")
