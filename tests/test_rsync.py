"""Tests for rsync volume data transfer."""

from unittest.mock import AsyncMock, patch

import pytest

from podman_migrate.core.exceptions import RuntimeCommandError, TransferError
from podman_migrate.core.subprocess_manager import SubprocessManager, SubprocessResult
from podman_migrate.core.transfer.rsync import RsyncTransfer

RSYNC_STATS = """
Number of files: 12 (reg: 10, dir: 2)
Number of regular files transferred: 1,210
Total file size: 4,096 bytes
Total transferred file size: 2,048 bytes
"""


@pytest.fixture
def manager():
    manager = AsyncMock(spec=SubprocessManager)
    manager.run_command.return_value = SubprocessResult(0, RSYNC_STATS, "", [])
    return manager


def _ids(uid: int, euid: int | None = None, gid: int = 1000):
    euid = uid if euid is None else euid
    return (
        patch("podman_migrate.core.transfer.rsync.os.getuid", return_value=uid),
        patch("podman_migrate.core.transfer.rsync.os.geteuid", return_value=euid),
        patch("podman_migrate.core.transfer.rsync.os.getgid", return_value=gid),
    )


class TestBuildCommand:
    def test_unprivileged_user_gets_chown_and_sudo(self):
        uid_patch, euid_patch, gid_patch = _ids(1000)
        with uid_patch, euid_patch, gid_patch:
            cmd = RsyncTransfer().build_command("/src/_data/", "/dst/_data")

        assert cmd == [
            "sudo",
            "rsync",
            "-a",
            "--stats",
            "--chown=1000:1000",
            "/src/_data/",
            "/dst/_data",
        ]

    def test_root_copies_without_chown_or_sudo(self):
        uid_patch, euid_patch, gid_patch = _ids(0, gid=0)
        with uid_patch, euid_patch, gid_patch:
            cmd = RsyncTransfer().build_command("/src/_data/", "/dst/_data")

        assert cmd == ["rsync", "-a", "--stats", "/src/_data/", "/dst/_data"]

    def test_sudo_disabled(self):
        uid_patch, euid_patch, gid_patch = _ids(1000)
        with uid_patch, euid_patch, gid_patch:
            cmd = RsyncTransfer(use_sudo=False).build_command("/a/", "/b")

        assert cmd[0] == "rsync"
        assert "--chown=1000:1000" in cmd


@pytest.mark.asyncio
class TestTransfer:
    async def test_success_returns_stats(self, manager):
        rsync = RsyncTransfer(subprocess_manager=manager)

        result = await rsync.transfer("/src/_data/", "/dst/_data")

        assert result["success"] is True
        assert result["stats"] == {"files_transferred": 1210, "total_size": 2048}

    async def test_nonzero_exit_raises_transfer_error(self, manager):
        manager.run_command.return_value = SubprocessResult(23, "", "Permission denied (13)", [])
        rsync = RsyncTransfer(subprocess_manager=manager)

        with pytest.raises(TransferError, match="exit 23"):
            await rsync.transfer("/src/_data/", "/dst/_data")

    async def test_timeout_raises_transfer_error(self, manager):
        manager.run_command.side_effect = RuntimeCommandError(
            "Command timed out after 3600 seconds"
        )
        rsync = RsyncTransfer(subprocess_manager=manager)

        with pytest.raises(TransferError, match="timed out"):
            await rsync.transfer("/src/_data/", "/dst/_data")
