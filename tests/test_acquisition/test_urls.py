"""Unit tests for archive URL resolution (robot_cli.acquisition.urls).

Tests cover:
- classify_host, repo_name, normalize_source
- build_archive_url per host convention
- build_candidates (mirrors only for GitHub, timeouts)
- cache_key_for (key, repository fallback, unsafe keys)
"""

from __future__ import annotations

import pytest

from robot_cli.acquisition import (
    HostKind,
    build_archive_url,
    build_candidates,
    cache_key_for,
    classify_host,
    repo_name,
)
from robot_cli.acquisition.urls import normalize_source
from robot_cli.catalog import TemplateDescriptor
from robot_cli.errors import InvalidDescriptor


class TestClassifyHost:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url, kind",
        [
            ("https://github.com/o/r", HostKind.GITHUB),
            ("https://www.github.com/o/r", HostKind.GITHUB),
            ("https://gitee.com/o/r", HostKind.GITEE),
            ("https://gitlab.com/o/r", HostKind.GITLAB),
            ("https://git.example.org/o/r", HostKind.UNKNOWN),
        ],
    )
    def test_hosts(self, url, kind):
        assert classify_host(url) is kind

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url",
        ["", "not a url", "ftp://github.com/o/r", "https://github.com/only-owner", "https://github.com/"],
    )
    def test_invalid_sources(self, url):
        with pytest.raises(InvalidDescriptor):
            classify_host(url)


class TestRepoName:
    @pytest.mark.unit
    def test_plain(self):
        assert repo_name("https://github.com/ChenyCHENYU/Robot_Admin") == "Robot_Admin"

    @pytest.mark.unit
    def test_git_suffix_and_trailing_slash(self):
        assert repo_name("https://github.com/o/repo.git") == "repo"
        assert repo_name("https://github.com/o/repo/") == "repo"

    @pytest.mark.unit
    def test_normalize(self):
        assert normalize_source(" https://github.com/o/repo.git/ ") == "https://github.com/o/repo"


class TestBuildArchiveUrl:
    @pytest.mark.unit
    def test_github(self):
        assert (
            build_archive_url("https://github.com/o/r")
            == "https://github.com/o/r/archive/refs/heads/main.zip"
        )

    @pytest.mark.unit
    def test_gitee(self):
        assert (
            build_archive_url("https://gitee.com/o/r")
            == "https://gitee.com/o/r/repository/archive/master.zip"
        )

    @pytest.mark.unit
    def test_gitlab(self):
        assert (
            build_archive_url("https://gitlab.com/o/r.git")
            == "https://gitlab.com/o/r/-/archive/main/r-main.zip"
        )

    @pytest.mark.unit
    def test_unknown_host_uses_github_layout(self):
        assert (
            build_archive_url("https://git.example.org/o/r")
            == "https://git.example.org/o/r/archive/refs/heads/main.zip"
        )


class TestBuildCandidates:
    @pytest.mark.unit
    def test_github_gets_mirrors(self):
        candidates = build_candidates(
            "https://github.com/o/r",
            ["https://ghproxy.net/", "https://mirror.example"],
            source_timeout=30,
            mirror_timeout=15,
        )
        archive = "https://github.com/o/r/archive/refs/heads/main.zip"
        assert [c.url for c in candidates] == [
            archive,
            f"https://ghproxy.net/{archive}",
            f"https://mirror.example/{archive}",
        ]
        assert [c.timeout for c in candidates] == [30, 15, 15]
        assert [c.is_mirror for c in candidates] == [False, True, True]

    @pytest.mark.unit
    def test_other_hosts_have_no_mirrors(self):
        candidates = build_candidates("https://gitee.com/o/r", ["https://ghproxy.net/"])
        assert len(candidates) == 1
        assert candidates[0].is_mirror is False

    @pytest.mark.unit
    def test_no_mirrors_configured(self):
        assert len(build_candidates("https://github.com/o/r", [])) == 1


class TestCacheKey:
    @pytest.mark.unit
    def test_uses_descriptor_key(self):
        t = TemplateDescriptor(key="robot-admin", display_name="A", source_location="https://github.com/o/Robot_Admin")
        assert cache_key_for(t) == "robot-admin"

    @pytest.mark.unit
    def test_falls_back_to_repository(self):
        t = TemplateDescriptor(display_name="A", source_location="https://github.com/o/Robot_Admin")
        assert cache_key_for(t) == "Robot_Admin"

    @pytest.mark.unit
    def test_neither_key_nor_source(self):
        t = TemplateDescriptor(display_name="A", source_location="")
        with pytest.raises(InvalidDescriptor):
            cache_key_for(t)

    @pytest.mark.unit
    @pytest.mark.parametrize("key", ["..", "a/b", "a\\b"])
    def test_unsafe_keys(self, key):
        t = TemplateDescriptor(key=key, display_name="A", source_location="https://github.com/o/r")
        with pytest.raises(InvalidDescriptor):
            cache_key_for(t)
