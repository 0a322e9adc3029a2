"""Tests for the shell infrastructure provider."""

import json

import pytest

from testgrid.infrastructure import (
    InfrastructureError,
    InfrastructureProviderInitializationError,
    ShellInfrastructureProvider,
)
from testgrid.plan.models import Host, Port


@pytest.fixture
def provider(shell_runner, tmp_path):
    return ShellInfrastructureProvider(shell_runner, workspace_dir=tmp_path / "workspace")


class TestShellInfrastructureProvider:
    def test_output_dir(self, provider, test_plan, tmp_path):
        test_plan.test_run_number = 7

        assert provider.output_dir(test_plan) == tmp_path / "workspace" / "is-single-node" / "run-7"

    def test_init_requires_infra_repo(self, provider, test_plan, tmp_path):
        provider.init(test_plan)

        test_plan.infra_repo_dir = str(tmp_path / "missing")
        with pytest.raises(InfrastructureProviderInitializationError):
            provider.init(test_plan)

    def test_provision_runs_create_scripts(self, provider, shell_runner, test_plan):
        result = provider.provision(test_plan)

        assert [c[1] for c in shell_runner.calls] == ["bash create.sh"]
        work_dir, _, env = shell_runner.calls[0]
        assert work_dir == test_plan.infra_repo_dir
        assert env["DBEngine"] == "mysql"
        assert env["TESTGRID_OUTPUT_DIR"] == str(provider.output_dir(test_plan))
        assert result.success
        assert result.name == "single-node"
        assert result.outputs == {"output_dir": str(provider.output_dir(test_plan))}

    def test_provision_reads_outputs(self, provider, test_plan):
        output_dir = provider.output_dir(test_plan)
        output_dir.mkdir(parents=True)
        (output_dir / "infrastructure.json").write_text(
            json.dumps(
                {
                    "outputs": {"stack": "is-stack-1"},
                    "hosts": [{"ip": "10.0.0.9", "label": "wso2is", "ports": [{"protocol": "https", "portNumber": 9443}]}],
                }
            )
        )

        result = provider.provision(test_plan)

        assert result.outputs["stack"] == "is-stack-1"
        assert result.hosts == [Host(ip="10.0.0.9", label="wso2is", ports=[Port("https", 9443)])]

    def test_provision_invalid_outputs(self, provider, test_plan):
        output_dir = provider.output_dir(test_plan)
        output_dir.mkdir(parents=True)
        (output_dir / "infrastructure.json").write_text("{not json")

        with pytest.raises(InfrastructureError):
            provider.provision(test_plan)

    def test_provision_script_failure(self, provider, shell_runner, test_plan):
        shell_runner.exit_codes["create.sh"] = 1

        with pytest.raises(InfrastructureError) as exc_info:
            provider.provision(test_plan)

        assert "exited with status 1" in str(exc_info.value)

    def test_provision_launch_failure(self, provider, shell_runner, test_plan):
        shell_runner.failing.add("create.sh")

        with pytest.raises(InfrastructureError):
            provider.provision(test_plan)

    def test_provision_without_provisioner(self, provider, test_plan):
        test_plan.test_config.infrastructure_config.provisioners.clear()

        with pytest.raises(InfrastructureError):
            provider.provision(test_plan)

    def test_unsupported_script_type(self, provider, test_plan):
        script = test_plan.infrastructure_config.first_provisioner.scripts[0]
        script.type = "CLOUDFORMATION"

        with pytest.raises(InfrastructureError) as exc_info:
            provider.provision(test_plan)

        assert "CLOUDFORMATION" in str(exc_info.value)

    def test_release_runs_destroy_scripts(self, provider, shell_runner, test_plan):
        assert provider.release(test_plan.infrastructure_config, test_plan.infra_repo_dir)

        assert [c[1] for c in shell_runner.calls] == ["bash destroy.sh"]

    def test_release_failure(self, provider, shell_runner, test_plan):
        shell_runner.exit_codes["destroy.sh"] = 2

        with pytest.raises(InfrastructureError):
            provider.release(test_plan.infrastructure_config, test_plan.infra_repo_dir)

    def test_cleanup_removes_output_dir(self, provider, test_plan):
        output_dir = provider.output_dir(test_plan)
        output_dir.mkdir(parents=True)
        (output_dir / "infrastructure.json").write_text("{}")

        provider.cleanup(test_plan)

        assert not output_dir.exists()
        provider.cleanup(test_plan)

    def test_end_to_end_with_real_scripts(self, test_plan, tmp_path):
        infra = tmp_path / "infra"
        (infra / "create.sh").write_text(
            'echo \'{"outputs": {"db": "\'"$DBEngine"\'"}}\' > "$TESTGRID_OUTPUT_DIR/infrastructure.json"\n'
        )
        (infra / "destroy.sh").write_text("touch destroyed\n")
        provider = ShellInfrastructureProvider(workspace_dir=tmp_path / "workspace")

        result = provider.provision(test_plan)
        provider.release(test_plan.infrastructure_config, test_plan.infra_repo_dir)

        assert result.outputs["db"] == "mysql"
        assert (infra / "destroyed").exists()
