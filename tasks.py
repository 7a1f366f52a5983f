# type: ignore
from invoke import task


@task
def venv(ctx):
    """Initialize development environment with uv."""
    ctx.run("uv sync --all-extras")


@task
def lint(ctx):
    """
    Perform static analysis on the source code to check for syntax errors and enforce style consistency.
    """
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """
    Run tests with coverage information.
    """
    ctx.run("pytest --cov=src --cov-report=term-missing", pty=True)


@task
def build_package(ctx):
    """
    Build sdist and wheel into dist/.
    """
    ctx.run("rm -rf dist")
    ctx.run("uv build")


@task
def scan(ctx):
    """Run a single scan with the local config (needs root for arp-scan)."""
    ctx.run("sudo -E uv run lanotify scan", pty=True)
