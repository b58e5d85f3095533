"""Tests for cli.py module."""

from pathlib import Path
from unittest.mock import patch

import yaml
from click.testing import CliRunner
from conftest import FakeCluster

from cluster_onboard import __version__
from cluster_onboard.cli import cli
from cluster_onboard.exceptions import ClusterConnectionError


class TestCliVersion:
    """Tests for version command."""

    def test_version_flag(self):
        """Test --version flag prints version."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_version_short_flag(self):
        """Test -v flag prints version."""
        runner = CliRunner()
        result = runner.invoke(cli, ["-v"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestCliCertificate:
    """Tests for the certificate command."""

    def _write_install(self, tmp_path: Path, osd: bool = False) -> Path:
        path = tmp_path / "cluster-install.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "clusterName": "build99",
                    "onboard": {"releaseRepo": str(tmp_path / "release"), "osd": osd},
                }
            )
        )
        return path

    def test_certificate_success(self, tmp_path, fake_cluster):
        """Test the step writes manifests into the release repo."""
        install = self._write_install(tmp_path)

        with patch("cluster_onboard.cli.Cluster", return_value=fake_cluster) as mock_cluster:
            result = CliRunner().invoke(cli, ["certificate", "-c", str(install), "--request-timeout", "10"])

        assert result.exit_code == 0, result.output
        mock_cluster.assert_called_once_with(select_context=False, context=None, kubeconfig=None, request_timeout=10.0)
        output = tmp_path / "release/clusters/build-clusters/build99/cert-manager/certificate.yaml"
        names = [doc["metadata"]["name"] for doc in yaml.safe_load_all(output.read_text())]
        assert names == ["apiserver-tls", "apps-tls", "registry-tls"]

    def test_certificate_release_repo_override(self, tmp_path, fake_cluster):
        """Test --release-repo wins over the config file."""
        install = self._write_install(tmp_path, osd=True)
        repo = tmp_path / "other"

        with patch("cluster_onboard.cli.Cluster", return_value=fake_cluster):
            result = CliRunner().invoke(cli, ["certificate", "-c", str(install), "--release-repo", str(repo)])

        assert result.exit_code == 0, result.output
        output = repo / "clusters/build-clusters/build99/cert-manager/certificate.yaml"
        names = [doc["metadata"]["name"] for doc in yaml.safe_load_all(output.read_text())]
        assert names == ["registry-tls"]

    def test_certificate_release_repo_with_brackets(self, tmp_path, fake_cluster):
        """Test bracketed paths are printed literally in the summary."""
        install = self._write_install(tmp_path)
        repo = tmp_path / "rel[/x]"

        with patch("cluster_onboard.cli.Cluster", return_value=fake_cluster):
            result = CliRunner().invoke(cli, ["certificate", "-c", str(install), "--release-repo", str(repo)])

        assert result.exit_code == 0, result.output
        assert (repo / "clusters/build-clusters/build99/cert-manager/certificate.yaml").is_file()

    def test_certificate_step_failure(self, tmp_path):
        """Test step errors are reported and exit with status 1."""
        install = self._write_install(tmp_path)

        with (
            patch("cluster_onboard.cli.Cluster", return_value=FakeCluster()),
            patch("cluster_onboard.console.error") as mock_error,
        ):
            result = CliRunner().invoke(cli, ["certificate", "-c", str(install)])

        assert result.exit_code == 1
        mock_error.assert_called_once_with("base domain: get cluster-config-v1 not found")

    def test_certificate_connection_failure(self, tmp_path):
        """Test client errors are reported with their stage."""
        install = self._write_install(tmp_path)

        with (
            patch("cluster_onboard.cli.Cluster", side_effect=ClusterConnectionError("Invalid or missing kubeconfig")),
            patch("cluster_onboard.console.error") as mock_error,
        ):
            result = CliRunner().invoke(cli, ["certificate", "-c", str(install)])

        assert result.exit_code == 1
        mock_error.assert_called_once_with("kube client: Invalid or missing kubeconfig")

    def test_certificate_missing_config(self, tmp_path):
        """Test a missing cluster install file."""
        with patch("cluster_onboard.console.error") as mock_error:
            result = CliRunner().invoke(cli, ["certificate", "-c", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "not found" in mock_error.call_args[0][0]

    def test_select_and_context_exclusive(self, tmp_path):
        """Test --select cannot be combined with --context."""
        install = self._write_install(tmp_path)

        result = CliRunner().invoke(cli, ["certificate", "-c", str(install), "--select", "--context", "build99"])

        assert result.exit_code == 2
        assert "mutually exclusive" in result.output


class TestCliGraphviz:
    """Tests for the graphviz command."""

    def test_dot_only(self):
        """Test the DOT source is printed."""
        result = CliRunner().invoke(cli, ["graphviz", "--dot-only"], input="a b\nINFO starting\nb c\n")

        assert result.exit_code == 0
        assert result.output == "digraph test {\n\trankdir=LR\n\tn0 [label=a]\n\tn1 [label=b]\n\tn0 -> n1\n\tn2 [label=c]\n\tn1 -> n2\n}\n"

    def test_render_forwards_args(self):
        """Test extra arguments are forwarded to dot."""
        with patch("cluster_onboard.cli.render", return_value=b"<svg/>") as mock_render:
            result = CliRunner().invoke(cli, ["graphviz", "-Tsvg"], input="a b\n")

        assert result.exit_code == 0
        assert result.stdout_bytes == b"<svg/>"
        mock_render.assert_called_once_with("digraph test {\n\trankdir=LR\n\tn0 [label=a]\n\tn1 [label=b]\n\tn0 -> n1\n}\n", args=["-Tsvg"])

    def test_render_default_args(self):
        """Test no arguments leaves the default to the renderer."""
        with patch("cluster_onboard.cli.render", return_value=b"PNG") as mock_render:
            CliRunner().invoke(cli, ["graphviz"], input="a b\n")

        assert mock_render.call_args.kwargs["args"] is None
