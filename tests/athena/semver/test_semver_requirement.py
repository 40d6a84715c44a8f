# tests/athena/semver/test_semver_requirement.py
import pytest

from athena.core.errors import ConstraintSyntaxError
from athena.semver.semver import (
    MAX_COMPARATORS,
    Comparator,
    VersionReq,
    parseVersion,
    parseVersionReq,
)


def _matches(reqStr: str, candidates: list[str]) -> list[str]:
    req = parseVersionReq(reqStr)
    return [raw for raw in candidates if req.matches(parseVersion(raw))]


@pytest.mark.parametrize("raw", ["*", "x", "X", "  *  "])
def test_requirement_wildcard_any(raw):
    req = parseVersionReq(raw)
    assert req == VersionReq.STAR
    assert req.isAny
    assert str(req) == "*"
    assert req.matches(parseVersion("0.0.1"))
    assert req.matches(parseVersion("99.0.0"))


def test_requirement_bare_version_is_caret():
    req = parseVersionReq("1.2.3")
    assert req.comparators == (Comparator(op="^", major=1, minor=2, patch=3),)
    assert _matches("1.2.3", ["1.2.2", "1.2.3", "1.9.0", "2.0.0"]) == ["1.2.3", "1.9.0"]


def test_requirement_exact_version():
    assert _matches("=1.2.3", ["1.2.3", "1.2.4", "1.2.3-rc.1"]) == ["1.2.3"]
    assert _matches("=1.2.3-rc.1", ["1.2.3", "1.2.3-rc.1"]) == ["1.2.3-rc.1"]


def test_requirement_basic_inequalities():
    matched = _matches(">=1.2.0, <2.0.0", ["1.1.9", "1.2.0", "1.5.0", "2.0.0"])
    assert matched == ["1.2.0", "1.5.0"]


def test_requirement_partial_inequalities():
    # <1.2 means below 1.2.0, >1.2 means 1.3.0 or above
    assert _matches("<1.2", ["1.1.9", "1.2.0", "1.2.5"]) == ["1.1.9"]
    assert _matches(">1.2", ["1.2.0", "1.2.5", "1.3.0"]) == ["1.3.0"]
    assert _matches("<=1.2", ["1.2.9", "1.3.0"]) == ["1.2.9"]
    assert _matches(">=1", ["0.9.9", "1.0.0", "3.0.0"]) == ["1.0.0", "3.0.0"]


def test_requirement_caret_semantics():
    # ^1.2.3  => >=1.2.3 and <2.0.0
    assert _matches("^1.2.3", ["1.2.3", "1.4.0", "2.0.0", "0.9.0"]) == ["1.2.3", "1.4.0"]

    # ^0.2.3  => >=0.2.3 and <0.3.0
    assert _matches("^0.2.3", ["0.2.3", "0.2.9", "0.3.0", "1.0.0"]) == ["0.2.3", "0.2.9"]

    # ^0.0.3  => =0.0.3
    assert _matches("^0.0.3", ["0.0.2", "0.0.3", "0.0.4"]) == ["0.0.3"]

    # partial forms
    assert _matches("^1", ["1.0.0", "1.9.9", "2.0.0"]) == ["1.0.0", "1.9.9"]
    assert _matches("^1.2", ["1.1.0", "1.2.0", "1.7.0", "2.0.0"]) == ["1.2.0", "1.7.0"]
    assert _matches("^0.0", ["0.0.0", "0.0.5", "0.1.0"]) == ["0.0.0", "0.0.5"]


def test_requirement_tilde_semantics():
    # ~1.2.3 => >=1.2.3 and <1.3.0
    assert _matches("~1.2.3", ["1.2.2", "1.2.3", "1.2.9", "1.3.0", "2.0.0"]) == ["1.2.3", "1.2.9"]

    # ~1.2 => >=1.2.0 and <1.3.0
    assert _matches("~1.2", ["1.2.0", "1.2.7", "1.3.0"]) == ["1.2.0", "1.2.7"]

    # ~1 => >=1.0.0 and <2.0.0
    assert _matches("~1", ["0.9.9", "1.0.0", "1.5.0", "2.0.0"]) == ["1.0.0", "1.5.0"]


def test_requirement_wildcards():
    assert _matches("1.*", ["0.9.0", "1.0.0", "1.9.3", "2.0.0"]) == ["1.0.0", "1.9.3"]
    assert _matches("1.2.x", ["1.2.0", "1.2.9", "1.3.0"]) == ["1.2.0", "1.2.9"]
    assert _matches("=1.*", ["1.4.0", "2.0.0"]) == ["1.4.0"]
    assert str(parseVersionReq("1.2.X")) == "1.2.*"


def test_requirement_whitespace_after_operator():
    assert parseVersionReq(">= 1.2.3") == parseVersionReq(">=1.2.3")
    assert parseVersionReq(">=1.0 ,  <2") == parseVersionReq(">=1.0,<2")


def test_requirement_prerelease_rules():
    # A pre-release only matches when a comparator names the same core version with a pre-release
    assert _matches("^1.2.3", ["1.3.0-beta"]) == []
    assert _matches(">=1.3.0-alpha", ["1.3.0-beta", "1.3.0", "1.4.0-beta"]) == ["1.3.0-beta", "1.3.0"]
    assert _matches("~1.2.3-beta.2", ["1.2.3-beta.1", "1.2.3-beta.2", "1.2.3-rc.1", "1.2.4"]) == [
        "1.2.3-beta.2",
        "1.2.3-rc.1",
        "1.2.4",
    ]


def test_requirement_equality_and_str():
    left = parseVersionReq(">=1.0, <2")
    right = parseVersionReq(">=1.0,<2")
    assert left == right
    assert left != parseVersionReq(">=1.0, <3")
    assert str(left) == ">=1.0, <2"
    assert parseVersionReq(str(left)) == left


def test_requirement_max_comparators():
    ok = ", ".join([">=1.0.0"] * MAX_COMPARATORS)
    assert len(parseVersionReq(ok).comparators) == MAX_COMPARATORS

    with pytest.raises(ConstraintSyntaxError):
        parseVersionReq(", ".join([">=1.0.0"] * (MAX_COMPARATORS + 1)))


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "   ",
        "not a range",
        "^",
        "~",
        ">= ",
        "<=x.y.z",
        "1.2.3.4",
        "01.2.3",
        "1.02",
        "1.2.3+build",
        "1.2-beta",
        "1.2.3-",
        "1.2.3-beta..1",
        "1.2.3-01",
        "1.*.3",
        ">=1.0,",
        ",",
        "*, >=1.0",
        "1.2.3 - 2.0.0",
        ">=1.2.0 <2.0.0",
        "v1.2.3",
    ],
)
def test_requirement_invalid_inputs(raw):
    with pytest.raises(ConstraintSyntaxError) as excinfo:
        parseVersionReq(raw)
    assert excinfo.value.text == raw
    assert raw in str(excinfo.value) or not raw.strip()


def test_requirement_error_names_text_and_reason():
    with pytest.raises(ConstraintSyntaxError) as excinfo:
        parseVersionReq("not a range")
    err = excinfo.value
    assert err.text == "not a range"
    assert err.reason
    assert "'not a range'" in str(err)


def test_requirement_rejects_non_string():
    with pytest.raises(ConstraintSyntaxError):
        parseVersionReq(None)  # type: ignore[arg-type]
