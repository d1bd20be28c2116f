"""Hash composition tests."""

from __future__ import annotations

import hashlib

import pytest

from devcontainer_fingerprint.composer import (
    HashSegment,
    build_segments,
    compose_fingerprint,
    digest_segments,
    feature_segment,
)
from devcontainer_fingerprint.references import ReferencedFile
from devcontainer_fingerprint.settings import FingerprintSettings

_ROOT = '{"image":"ubuntu"}'
_DOCKERFILE = ReferencedFile(name="Dockerfile", path="/tmp/Dockerfile", content="FROM ubuntu\n")
_COMPOSE = ReferencedFile(
    name="docker-compose.yml",
    path="/tmp/docker-compose.yml",
    content="services: {}\n",
)


def test_root_only_digest_matches_tagged_text() -> None:
    """Ensure a lone root digest hashes the root segment rendering."""
    result = compose_fingerprint(_ROOT)

    expected = hashlib.sha256(f"root:{_ROOT}".encode()).hexdigest()
    assert result.digest == expected
    assert result.algorithm == "sha256"
    assert result.version == 1
    assert result.included_files == ("devcontainer.json",)
    assert result.file_digests == {
        "devcontainer.json": hashlib.sha256(_ROOT.encode()).hexdigest()
    }


def test_segments_joined_in_fixed_order() -> None:
    """Ensure segments are hashed root, build file, compose, then features."""
    result = compose_fingerprint(
        _ROOT,
        build_file=_DOCKERFILE,
        compose_file=_COMPOSE,
        features=(("a", {"version": "1"}),),
    )

    joined = "\n".join(
        [
            f"root:{_ROOT}",
            f"buildfile:{_DOCKERFILE.content}",
            f"compose:{_COMPOSE.content}",
            'feature:a:{"Key":"a","Value":{"version":"1"}}',
        ]
    )
    assert result.digest == hashlib.sha256(joined.encode()).hexdigest()
    assert result.included_files == ("devcontainer.json", "Dockerfile", "docker-compose.yml")


def test_features_excluded_from_file_digests() -> None:
    """Ensure features change the digest without appearing as files."""
    without = compose_fingerprint(_ROOT)
    with_feature = compose_fingerprint(_ROOT, features=(("node", {}),))

    assert without.digest != with_feature.digest
    assert with_feature.included_files == ("devcontainer.json",)
    assert set(with_feature.file_digests) == {"devcontainer.json"}


def test_feature_segment_content() -> None:
    """Ensure feature segments carry the canonical key/value pair."""
    segment = feature_segment("ghcr.io/x/y:1", {"b": 2.0, "a": True})

    assert segment.tag == "feature:ghcr.io/x/y:1"
    assert segment.content == '{"Key":"ghcr.io/x/y:1","Value":{"a":true,"b":2}}'
    assert segment.file_name is None


def test_feature_value_change_changes_digest() -> None:
    """Ensure feature option values contribute to the digest."""
    first = compose_fingerprint(_ROOT, features=(("node", {"version": "18"}),))
    second = compose_fingerprint(_ROOT, features=(("node", {"version": "20"}),))

    assert first.digest != second.digest


def test_build_file_removal_changes_digest() -> None:
    """Ensure dropping a referenced file changes the digest."""
    with_build = compose_fingerprint(_ROOT, build_file=_DOCKERFILE)
    without_build = compose_fingerprint(_ROOT)

    assert with_build.digest != without_build.digest


def test_build_and_compose_tags_are_distinct() -> None:
    """Ensure identical content under different tags hashes differently."""
    shared = ReferencedFile(name="shared", path="/tmp/shared", content="x")

    as_build = compose_fingerprint(_ROOT, build_file=shared)
    as_compose = compose_fingerprint(_ROOT, compose_file=shared)

    assert as_build.digest != as_compose.digest


def test_shared_reference_listed_once() -> None:
    """Ensure a file referenced twice is included once."""
    result = compose_fingerprint(_ROOT, build_file=_DOCKERFILE, compose_file=_DOCKERFILE)

    assert result.included_files == ("devcontainer.json", "Dockerfile")
    assert set(result.file_digests) == set(result.included_files)


def test_build_segments_order_and_names() -> None:
    """Ensure segment construction records file names for file segments."""
    segments = build_segments(
        _ROOT,
        root_name="devcontainer.json",
        compose_file=_COMPOSE,
        features=(("a", 1), ("b", 2)),
    )

    assert [segment.tag for segment in segments] == ["root", "compose", "feature:a", "feature:b"]
    assert [segment.file_name for segment in segments] == [
        "devcontainer.json",
        "docker-compose.yml",
        None,
        None,
    ]


def test_digest_segments_uses_requested_algorithm() -> None:
    """Ensure the configured algorithm produces the digest."""
    segments = [HashSegment(tag="root", content="{}"), HashSegment(tag="compose", content="x")]

    digest = digest_segments(segments, algorithm="sha512")

    assert digest == hashlib.sha512(b"root:{}\ncompose:x").hexdigest()


def test_settings_shape_result() -> None:
    """Ensure settings choose the algorithm and root identifier."""
    settings = FingerprintSettings(descriptor_name=".devcontainer.json", algorithm="blake2b")

    result = compose_fingerprint(_ROOT, settings=settings)

    assert result.algorithm == "blake2b"
    assert result.included_files == (".devcontainer.json",)
    assert result.digest == hashlib.blake2b(f"root:{_ROOT}".encode()).hexdigest()


def test_timestamp_does_not_affect_digest() -> None:
    """Ensure repeated composition differs only in capture time."""
    first = compose_fingerprint(_ROOT, build_file=_DOCKERFILE)
    second = compose_fingerprint(_ROOT, build_file=_DOCKERFILE)

    assert first.digest == second.digest
    assert first.file_digests == second.file_digests
    assert first.timestamp.tzinfo is not None


def test_unknown_algorithm_rejected() -> None:
    """Ensure digesting with an unsupported algorithm fails."""
    with pytest.raises(ValueError, match="Unsupported digest algorithm"):
        digest_segments([HashSegment(tag="root", content="{}")], algorithm="md5")
