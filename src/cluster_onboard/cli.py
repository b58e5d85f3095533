#!/usr/bin/env python
"""Command-line interface for cluster-onboard.

This module provides the main CLI entry point, handling command-line
argument parsing and running the onboarding steps.
"""

import sys

import click
from icecream import ic
from rich.markup import escape

from cluster_onboard import __version__, console
from cluster_onboard.certificate import CertificateStep
from cluster_onboard.cluster import Cluster
from cluster_onboard.config import load_cluster_install
from cluster_onboard.exceptions import OnboardError
from cluster_onboard.graph import digraph_to_dot, render


@click.group(help="Tooling for onboarding OpenShift CI build clusters")
@click.version_option(__version__, "--version", "-v", message="%(version)s", help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
def cli(debug: bool) -> None:
    """Configure debug output for all subcommands."""
    if debug:
        ic.enable()
    else:
        ic.disable()


@cli.command(help="Generate cert-manager certificates for a build cluster")
@click.option(
    "--cluster-install",
    "-c",
    required=True,
    type=click.Path(dir_okay=False),
    help="cluster install configuration file",
)
@click.option("--release-repo", required=False, help="path to the release repository, overrides the config")
@click.option("--kubeconfig", required=False, help="path to the kubeconfig file")
@click.option("--context", required=False, help="kubeconfig context to use")
@click.option("--select", required=False, is_flag=True, default=False, help="prompt for context select")
@click.option("--request-timeout", required=False, type=float, help="timeout in seconds for each API call")
def certificate(
    cluster_install: str,
    release_repo: str | None,
    kubeconfig: str | None,
    context: str | None,
    select: bool,
    request_timeout: float | None,
) -> None:
    """Run the certificate step.

    Args:
        cluster_install: Path to the cluster install file.
        release_repo: Release repository path overriding the config.
        kubeconfig: Path to the kubeconfig file.
        context: Kubernetes context to use.
        select: Prompt for Kubernetes context selection.
        request_timeout: Timeout in seconds for each API call.

    """
    if select and context:
        raise click.UsageError("--select and --context are mutually exclusive")

    try:
        install = load_cluster_install(cluster_install, release_repo=release_repo)
        step = CertificateStep(
            cluster_install=install,
            kube_client=lambda: Cluster(
                select_context=select,
                context=context,
                kubeconfig=kubeconfig,
                request_timeout=request_timeout,
            ),
        )
        console.action(f"Running {console.highlight(step.name)} step for {console.highlight(install.cluster_name)}")
        output_path = step.run()
    except OnboardError as e:
        console.error(escape(str(e)))
        sys.exit(1)

    console.summary_panel(
        "Certificate step",
        {"Cluster": install.cluster_name, "Manifest": str(output_path)},
    )


@cli.command(
    help="Translate digraph text from stdin to Graphviz. DOT_ARGS are forwarded to dot (default: -T png).",
    context_settings={"ignore_unknown_options": True},
)
@click.option("--dot-only", is_flag=True, default=False, help="print the DOT source instead of rendering it")
@click.argument("dot_args", nargs=-1, type=click.UNPROCESSED)
def graphviz(dot_only: bool, dot_args: tuple[str, ...]) -> None:
    """Convert a digraph read from stdin and write the result to stdout.

    Args:
        dot_only: Skip rendering and print the DOT source.
        dot_args: Arguments forwarded to dot.

    """
    dot_source = digraph_to_dot(click.get_text_stream("stdin"))
    if dot_only:
        click.echo(dot_source, nl=False)
        return

    try:
        output = render(dot_source, args=list(dot_args) or None)
    except OnboardError as e:
        console.error(escape(str(e)))
        sys.exit(1)
    click.get_binary_stream("stdout").write(output)


if __name__ == "__main__":
    cli()
