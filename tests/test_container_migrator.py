"""Tests for the container migrator."""

import pytest

from podman_migrate.core.exceptions import RuntimeCommandError
from podman_migrate.models.inspect import ContainerInspect
from podman_migrate.services.containers import ContainerMigrator

WEB1_RUN_ARGS = [
    "-d",
    "--name",
    "Web1",
    "--restart=always",
    "-v",
    "data:/var/lib/app:rw,U",
    "-p",
    "8080:80/tcp",
    "--network=app-net",
    "--ip=10.0.0.5",
    "podman.local/web1-to-podman:latest",
]


@pytest.fixture
def migrator(source, target, archive):
    return ContainerMigrator(source, target, archive)


@pytest.fixture
def web1_source(source, web1_inspect):
    source.list_containers.return_value = ["Web1"]
    source.inspect_container.return_value = web1_inspect
    return source


@pytest.mark.asyncio
class TestContainerMigrator:
    async def test_running_container_round_trip(self, migrator, web1_source, target, tmp_path):
        report = await migrator.run()

        web1_source.commit.assert_awaited_once_with("Web1", "podman.local/web1-to-podman:latest")
        web1_source.save_image.assert_awaited_once_with(
            "podman.local/web1-to-podman:latest", str(tmp_path / "web1.tar")
        )
        target.load_image.assert_awaited_once_with(str(tmp_path / "web1.tar"))
        target.run_container.assert_awaited_once_with(WEB1_RUN_ARGS)
        target.stop_container.assert_not_awaited()
        assert report.items[0].status == "migrated"
        assert report.items[0].message == "running"

    async def test_stopped_container_is_stopped_after_creation(
        self, migrator, web1_source, target, web1_payload
    ):
        web1_payload["State"]["Running"] = False
        web1_source.inspect_container.return_value = ContainerInspect.model_validate(web1_payload)

        report = await migrator.run()

        target.run_container.assert_awaited_once_with(WEB1_RUN_ARGS)
        target.stop_container.assert_awaited_once_with("Web1")
        assert report.items[0].message == "stopped"

    async def test_stopped_container_keeps_ports_and_address(
        self, migrator, web1_source, target, web1_payload
    ):
        # What docker inspect reports once the container has exited
        web1_payload["State"] = {"Status": "exited", "Running": False}
        web1_payload["HostConfig"]["PortBindings"] = {
            "80/tcp": [{"HostIp": "", "HostPort": "8080"}]
        }
        web1_payload["NetworkSettings"] = {
            "Ports": {},
            "Networks": {
                "app-net": {"IPAddress": "", "IPAMConfig": {"IPv4Address": "10.0.0.5"}}
            },
        }
        web1_source.inspect_container.return_value = ContainerInspect.model_validate(web1_payload)

        report = await migrator.run()

        target.run_container.assert_awaited_once_with(WEB1_RUN_ARGS)
        target.stop_container.assert_awaited_once_with("Web1")
        assert report.items[0].message == "stopped"

    async def test_missing_bind_source_is_dropped(
        self, migrator, web1_source, web1_payload, tmp_path
    ):
        web1_payload["Mounts"].append(
            {
                "Type": "bind",
                "Source": str(tmp_path / "vanished"),
                "Destination": "/etc/app",
                "RW": True,
            }
        )
        web1_source.inspect_container.return_value = ContainerInspect.model_validate(web1_payload)

        report = await migrator.run()

        assert report.items[0].status == "migrated"
        run_args = migrator.target.run_container.await_args.args[0]
        assert not any("/etc/app" in arg for arg in run_args)
        assert run_args == WEB1_RUN_ARGS

    async def test_existing_bind_source_is_kept(
        self, migrator, web1_source, web1_payload, tmp_path
    ):
        web1_payload["Mounts"].append(
            {"Type": "bind", "Source": str(tmp_path), "Destination": "/etc/app", "RW": False}
        )
        web1_source.inspect_container.return_value = ContainerInspect.model_validate(web1_payload)

        await migrator.run()

        run_args = migrator.target.run_container.await_args.args[0]
        assert f"{tmp_path}:/etc/app:ro" in run_args

    async def test_container_without_options(self, migrator, source, target):
        source.list_containers.return_value = ["idle"]
        source.inspect_container.return_value = ContainerInspect.model_validate(
            {
                "Name": "/idle",
                "State": {"Running": True},
                "HostConfig": {"RestartPolicy": {"Name": ""}},
            }
        )

        report = await migrator.run()

        target.run_container.assert_awaited_once_with(
            ["-d", "--name", "idle", "podman.local/idle-to-podman:latest"]
        )
        assert report.items[0].status == "migrated"

    @pytest.mark.parametrize(
        ("stage", "error"),
        [
            ("commit", "Failed to commit container Web1"),
            ("save_image", "Failed to save"),
            ("load_image", "Failed to load"),
        ],
    )
    async def test_freeze_failure_aborts_container(
        self, migrator, web1_source, target, tmp_path, stage, error
    ):
        runtime = target if stage == "load_image" else web1_source
        getattr(runtime, stage).side_effect = RuntimeCommandError("boom")

        report = await migrator.run()

        assert report.items[0].status == "failed"
        assert error in report.items[0].message
        target.run_container.assert_not_awaited()
        assert list(tmp_path.iterdir()) == []

    async def test_creation_failure_leaves_container_absent(
        self, migrator, web1_source, target, web1_payload
    ):
        web1_payload["State"]["Running"] = False
        web1_source.inspect_container.return_value = ContainerInspect.model_validate(web1_payload)
        target.run_container.side_effect = RuntimeCommandError("port 8080 already in use")

        report = await migrator.run()

        assert report.items[0].status == "failed"
        assert "port 8080 already in use" in report.items[0].message
        target.run_container.assert_awaited_once()
        target.stop_container.assert_not_awaited()

    async def test_stop_failure_reported(self, migrator, web1_source, target, web1_payload):
        web1_payload["State"]["Running"] = False
        web1_source.inspect_container.return_value = ContainerInspect.model_validate(web1_payload)
        target.stop_container.side_effect = RuntimeCommandError("timed out")

        report = await migrator.run()

        assert report.items[0].status == "failed"
        assert "created but could not be stopped" in report.items[0].message

    async def test_existing_target_container_skipped(self, migrator, web1_source, target):
        target.container_exists.return_value = True

        report = await migrator.run()

        assert report.items[0].status == "skipped"
        web1_source.commit.assert_not_awaited()
        target.run_container.assert_not_awaited()

    async def test_failure_does_not_stop_other_containers(
        self, migrator, source, target, web1_inspect
    ):
        source.list_containers.return_value = ["gone", "Web1"]

        async def inspect(name):
            if name == "gone":
                raise RuntimeCommandError("No such container: gone")
            return web1_inspect

        source.inspect_container.side_effect = inspect

        report = await migrator.run()

        assert [(item.name, item.status) for item in report.items] == [
            ("gone", "failed"),
            ("Web1", "migrated"),
        ]

    async def test_capture_happens_before_any_mutation(
        self, migrator, web1_source, target, web1_inspect
    ):
        calls = []
        web1_source.inspect_container.side_effect = (
            lambda name: calls.append("inspect") or web1_inspect
        )
        web1_source.commit.side_effect = lambda *args: calls.append("commit")
        target.run_container.side_effect = lambda args: calls.append("run") or "id"

        await migrator.run()

        assert calls == ["inspect", "commit", "run"]

    async def test_custom_namespace(self, source, target, archive, web1_source):
        migrator = ContainerMigrator(source, target, archive, image_namespace="localhost")

        await migrator.run()

        source.commit.assert_awaited_once_with("Web1", "localhost/web1-to-podman:latest")
        assert target.run_container.await_args.args[0][-1] == "localhost/web1-to-podman:latest"
