"""子模块三级回退测试"""

from __future__ import annotations

from pathlib import Path

from provisioner.core.models import StageStatus, SubmoduleEntry
from provisioner.services.submodules import GIT_SUBMODULE_UPDATE, SubmoduleProvisioner

ENTRIES = (
    SubmoduleEntry("third-party/moonlight-common-c", has_nested_submodules=True),
    SubmoduleEntry("third-party/Simple-Web-Server"),
    SubmoduleEntry("third-party/tray"),
)

BULK = GIT_SUBMODULE_UPDATE


def _is_bulk(cmd: tuple[str, ...], cwd: str, root: Path) -> bool:
    return cmd == BULK and cwd == str(root)


class TestBulkSync:
    def test_bulk_success_skips_per_entry(self, git_repo: Path, fake_runner_cls) -> None:
        runner = fake_runner_cls()
        result = SubmoduleProvisioner(runner, git_repo).provision(ENTRIES)

        assert result.status is StageStatus.OK
        assert runner.commands == [BULK]

    def test_nested_fixup_runs_after_bulk(self, git_repo: Path, fake_runner_cls) -> None:
        """声明了嵌套子模块且目录存在时，进入该目录再递归初始化一次"""
        nested_dir = git_repo / "third-party" / "moonlight-common-c"
        nested_dir.mkdir(parents=True)
        runner = fake_runner_cls()

        result = SubmoduleProvisioner(runner, git_repo).provision(ENTRIES)

        assert result.status is StageStatus.OK
        assert runner.calls == [(BULK, str(git_repo)), (BULK, str(nested_dir))]

    def test_nested_failure_degrades(self, git_repo: Path, fake_runner_cls) -> None:
        nested_dir = git_repo / "third-party" / "moonlight-common-c"
        nested_dir.mkdir(parents=True)
        runner = fake_runner_cls(fail=lambda cmd, cwd: cwd == str(nested_dir))

        result = SubmoduleProvisioner(runner, git_repo).provision(ENTRIES)

        assert result.status is StageStatus.DEGRADED
        assert "moonlight-common-c" in result.detail


class TestPerEntryFallback:
    def test_fallback_in_declaration_order(self, git_repo: Path, fake_runner_cls) -> None:
        runner = fake_runner_cls(fail=lambda cmd, cwd: _is_bulk(cmd, cwd, git_repo))

        result = SubmoduleProvisioner(runner, git_repo).provision(ENTRIES)

        assert runner.commands == [BULK] + [(*BULK, e.path) for e in ENTRIES]
        assert result.status is StageStatus.OK

    def test_partial_failure_is_degraded_and_continues(self, git_repo: Path, fake_runner_cls) -> None:
        """k < n 个子模块失败: degraded，且失败不会中断后续条目"""
        def fail(cmd: tuple[str, ...], cwd: str) -> bool:
            return _is_bulk(cmd, cwd, git_repo) or cmd[-1] == "third-party/Simple-Web-Server"

        runner = fake_runner_cls(fail=fail)
        result = SubmoduleProvisioner(runner, git_repo).provision(ENTRIES)

        assert result.status is StageStatus.DEGRADED
        assert "Simple-Web-Server" in result.detail
        assert (*BULK, "third-party/tray") in runner.commands

    def test_all_entries_fail_still_degraded(self, git_repo: Path, fake_runner_cls) -> None:
        runner = fake_runner_cls(fail=lambda cmd, cwd: True)
        result = SubmoduleProvisioner(runner, git_repo).provision(ENTRIES)
        assert result.status is StageStatus.DEGRADED
        assert result.detail.startswith("3 个子模块失败")


class TestMissingMetadata:
    def test_no_git_dir_fails_without_commands(self, tmp_path: Path, fake_runner_cls) -> None:
        runner = fake_runner_cls()
        result = SubmoduleProvisioner(runner, tmp_path).provision(ENTRIES)
        assert result.status is StageStatus.FAILED
        assert runner.calls == []
        assert result.advisories

    def test_gitfile_counts_as_metadata(self, tmp_path: Path, fake_runner_cls) -> None:
        """worktree 中 .git 是文件而非目录"""
        (tmp_path / ".git").write_text("gitdir: /elsewhere/.git/worktrees/x\n")
        result = SubmoduleProvisioner(fake_runner_cls(), tmp_path).provision(ENTRIES)
        assert result.status is StageStatus.OK


def test_rerun_issues_same_commands(git_repo: Path, fake_runner_cls) -> None:
    """重复执行下发相同命令序列"""
    runner = fake_runner_cls(fail=lambda cmd, cwd: _is_bulk(cmd, cwd, git_repo))
    prov = SubmoduleProvisioner(runner, git_repo)
    prov.provision(ENTRIES)
    first = list(runner.calls)
    runner.calls.clear()
    prov.provision(ENTRIES)
    assert runner.calls == first
