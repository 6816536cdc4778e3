"""Invoke tasks for VenusCMS development."""

import sys

from invoke import task
from invoke.context import Context


@task
def start(ctx: Context, host: str = "0.0.0.0", port: int = 8000, reload: bool = False) -> None:
    """Start the VenusCMS API server.

    Args:
        ctx: Invoke context
        host: Host to bind to (default: 0.0.0.0)
        port: Port to bind to (default: 8000)
        reload: Enable auto-reload for development
    """
    cmd = f"venuscms serve --host {host} --port {port}"
    if reload:
        cmd += " --reload"

    try:
        ctx.run(cmd, pty=True)
    except KeyboardInterrupt:
        print("\nServer stopped")
        sys.exit(0)


@task(name="import")
def import_csv(ctx: Context, file: str, record_type: str = "documents", dry_run: bool = False) -> None:
    """Import a CSV file.

    Args:
        ctx: Invoke context
        file: CSV file to import
        record_type: documents or update-logs
        dry_run: Validate only
    """
    cmd = f"venuscms -v import {file} --type {record_type}"
    if dry_run:
        cmd += " --dry-run"
    ctx.run(cmd, pty=True)


@task
def test(ctx: Context, verbose: bool = False, coverage: bool = False) -> None:
    """Run the test suite.

    Args:
        ctx: Invoke context
        verbose: Enable verbose output
        coverage: Run with coverage report
    """
    cmd = "pytest"
    if verbose:
        cmd += " -v"
    if coverage:
        cmd += " --cov=venuscms --cov-report=term-missing"
    ctx.run(cmd, pty=True)


@task
def clean(ctx: Context) -> None:
    """Clean up temporary files."""
    for pattern in ["__pycache__", "*.pyc", "*.pyo", ".pytest_cache"]:
        ctx.run(f"find . -name '{pattern}' -exec rm -rf {{}} + 2>/dev/null || true", warn=True)

    for path in ["build", "dist", "*.egg-info", ".eggs"]:
        ctx.run(f"rm -rf {path} 2>/dev/null || true", warn=True)

    print("Cleanup complete")
